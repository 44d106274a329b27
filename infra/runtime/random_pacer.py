from __future__ import annotations

import asyncio
import random


class RandomPacer:
    """Uniformly random, millisecond-granular delays backed by ``asyncio.sleep``."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def delay_ms(self, min_ms: int, max_ms: int) -> int:
        return self._rng.randint(min_ms, max_ms)

    async def sleep_ms(self, ms: int) -> None:
        await asyncio.sleep(ms / 1000)

    async def pause(self, min_ms: int, max_ms: int | None = None) -> int:
        ms = self.delay_ms(min_ms, min_ms if max_ms is None else max_ms)
        await self.sleep_ms(ms)
        return ms
