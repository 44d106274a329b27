from .playwright_session import (
    CAPABILITY_SELECTORS,
    PlaywrightControl,
    PlaywrightJobBoardSession,
    PlaywrightPostingHandle,
)

__all__ = [
    "PlaywrightJobBoardSession",
    "PlaywrightPostingHandle",
    "PlaywrightControl",
    "CAPABILITY_SELECTORS",
]
