from __future__ import annotations

import sys
from typing import TextIO


class ConsoleNotifier:
    """Prints human-readable progress lines to stdout."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    async def send_info(self, message: str) -> None:
        print(message, file=self._stream or sys.stdout, flush=True)
