"""
Reusable fakes and in-memory implementations for tests.
"""

from .fake_job_board import FakeControl, FakeJobBoardPage, FakePosting, wizard_steps
from .fake_notifier import RecordingNotifier
from .fake_runtime import (
    FixedClock,
    InMemoryLogger,
    RecordingPacer,
    SequentialIdGenerator,
)

__all__ = [
    "FakeControl",
    "FakeJobBoardPage",
    "FakePosting",
    "wizard_steps",
    "RecordingNotifier",
    "FixedClock",
    "InMemoryLogger",
    "RecordingPacer",
    "SequentialIdGenerator",
]
