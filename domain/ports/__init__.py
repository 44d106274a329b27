from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import Any, Protocol, Sequence, runtime_checkable

from domain.models import AccountCredential, Capability, PostingField


@runtime_checkable
class ControlPort(Protocol):
    """A single interactive element located by a capability probe."""

    async def click(self) -> None:
        ...

    async def hover(self) -> None:
        ...

    async def select_option(self, value: str) -> None:
        ...

    async def replace_text(self, value: str) -> None:
        """Select the current contents and type ``value`` over them."""
        ...


@runtime_checkable
class PostingHandlePort(Protocol):
    """One posting card in the rendered result list."""

    async def text(self) -> str:
        ...

    async def hover(self) -> None:
        ...

    async def click(self) -> None:
        ...

    async def read_field(self, field: PostingField) -> str:
        ...


@runtime_checkable
class JobBoardPagePort(Protocol):
    """
    Page-automation surface consumed by the application-flow core.

    ``probe`` performs a fresh lookup on every call; the wizard re-renders
    between steps, so returned controls must not be reused across steps.
    """

    async def open_search(self, search_term: str, location: str) -> None:
        ...

    async def wait_for_postings(self, timeout_ms: int) -> bool:
        ...

    async def list_postings(self) -> Sequence[PostingHandlePort]:
        ...

    async def wait_for_detail_pane(self, timeout_ms: int) -> bool:
        ...

    async def probe(self, capability: Capability) -> ControlPort | None:
        ...


@runtime_checkable
class JobBoardSessionPort(JobBoardPagePort, Protocol):
    """Browser-backed page that also owns its lifecycle and login."""

    async def launch(self) -> None:
        ...

    async def close(self) -> None:
        ...

    async def login(self, credential: AccountCredential) -> None:
        ...


@runtime_checkable
class PacerPort(Protocol):
    """Randomized delays that keep interactions at a human pace."""

    def delay_ms(self, min_ms: int, max_ms: int) -> int:
        ...

    async def sleep_ms(self, ms: int) -> None:
        ...

    async def pause(self, min_ms: int, max_ms: int | None = None) -> int:
        ...


@runtime_checkable
class ClockPort(Protocol):
    """Time source for deterministic and easily testable code."""

    def now(self) -> datetime:
        ...


@runtime_checkable
class IdGeneratorPort(Protocol):
    """Generation of identifiers for search runs."""

    def new_run_id(self) -> str:
        ...


@runtime_checkable
class LoggerPort(Protocol):
    """Structured, testable logging abstraction."""

    def info(self, message: str, **fields: Any) -> None:
        ...

    def warning(self, message: str, **fields: Any) -> None:
        ...

    def error(self, message: str, **fields: Any) -> None:
        ...


@runtime_checkable
class NotifierPort(Protocol):
    """Human-readable progress lines for whoever is watching the run."""

    @abstractmethod
    async def send_info(self, message: str) -> None:
        ...


__all__ = [
    "ControlPort",
    "PostingHandlePort",
    "JobBoardPagePort",
    "JobBoardSessionPort",
    "PacerPort",
    "ClockPort",
    "IdGeneratorPort",
    "LoggerPort",
    "NotifierPort",
]
