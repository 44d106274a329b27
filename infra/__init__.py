"""Infrastructure adapters – concrete implementations of domain ports."""

from .browser import PlaywrightJobBoardSession
from .config import FileSystemConfigProvider
from .interaction import ConsoleNotifier
from .runtime import RandomPacer, StructuredLogger, SystemClock, UuidIdGenerator

__all__ = [
    "PlaywrightJobBoardSession",
    "FileSystemConfigProvider",
    "ConsoleNotifier",
    "RandomPacer",
    "StructuredLogger",
    "SystemClock",
    "UuidIdGenerator",
]
