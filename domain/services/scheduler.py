from __future__ import annotations

import random
from typing import Callable, Sequence

from domain.models import OperatingWindow, RunSummary, SearchPlan
from domain.ports import ClockPort, JobBoardPagePort, LoggerPort, NotifierPort, PacerPort
from domain.services.application_flow import ApplicationFlowController

_MINUTE_MS = 60 * 1000


def is_operating_now(clock: ClockPort, window: OperatingWindow) -> bool:
    return window.contains(clock.now())


class RunScheduler:
    """
    Outer loop: one search cycle per call to ``run_cycle``.

    Inside the operating window a random search term is run and the
    scheduler then waits a random cycle delay. Outside it, the scheduler
    only waits for the off-hours recheck interval.
    """

    def __init__(
        self,
        *,
        controller: ApplicationFlowController,
        page: JobBoardPagePort,
        plan: SearchPlan,
        window: OperatingWindow,
        clock: ClockPort,
        pacer: PacerPort,
        logger: LoggerPort,
        notifier: NotifierPort,
        choose_term: Callable[[Sequence[str]], str] = random.choice,
    ) -> None:
        self._controller = controller
        self._page = page
        self._plan = plan
        self._window = window
        self._clock = clock
        self._pacer = pacer
        self._logger = logger
        self._notifier = notifier
        self._choose_term = choose_term

    def is_operating_now(self) -> bool:
        return is_operating_now(self._clock, self._window)

    async def run_cycle(self) -> RunSummary | None:
        if not self.is_operating_now():
            recheck = self._plan.off_hours_recheck_minutes
            self._logger.info("outside_operating_window", recheck_minutes=recheck)
            await self._notifier.send_info(
                f"⏰ Outside work hours ({self._window.describe()}), "
                f"checking again in {recheck} minutes...",
            )
            await self._pacer.sleep_ms(recheck * _MINUTE_MS)
            return None

        term = self._choose_term(self._plan.search_terms)
        await self._notifier.send_info(f"🔄 Running job search: \"{term}\"")
        summary = await self._controller.run(self._page, term, self._plan.location)

        delay = self._pacer.delay_ms(
            self._plan.cycle_delay_min_minutes * _MINUTE_MS,
            self._plan.cycle_delay_max_minutes * _MINUTE_MS,
        )
        await self._notifier.send_info(f"⏳ Waiting {delay / _MINUTE_MS:g} minutes...")
        await self._pacer.sleep_ms(delay)
        return summary

    async def run_forever(self, max_cycles: int | None = None) -> list[RunSummary]:
        """Run cycles until ``max_cycles`` is reached, or indefinitely when it is None."""
        summaries: list[RunSummary] = []
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            summary = await self.run_cycle()
            if summary is not None and max_cycles is not None:
                summaries.append(summary)
            cycles += 1
        return summaries
