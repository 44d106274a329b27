from __future__ import annotations

from domain.models import (
    Capability,
    FlowLimits,
    OverlayKind,
    PacingPolicy,
    PostingClassification,
    PostingDetail,
    PostingOutcome,
    PostingResult,
    PostingSummary,
    RunSummary,
    WizardOutcome,
    WizardSession,
)
from domain.ports import (
    IdGeneratorPort,
    JobBoardPagePort,
    LoggerPort,
    NotifierPort,
    PacerPort,
    PostingHandlePort,
)
from domain.services.detail_loader import PostingDetailLoader
from domain.services.distractions import DistractionHandler
from domain.services.eligibility import EligibilityFilter
from domain.services.wizard import WizardStepExecutor


_SKIP_BY_CLASSIFICATION = {
    PostingClassification.SKIP_PROMOTED: (
        PostingOutcome.SKIPPED_PROMOTED,
        "⏭️ Skipping promoted job #{index}",
    ),
    PostingClassification.SKIP_ALREADY_APPLIED: (
        PostingOutcome.SKIPPED_ALREADY_APPLIED,
        "⏭️ Skipping already applied job #{index}",
    ),
}


class ApplicationFlowController:
    """
    Walks one page of search results and applies to every eligible posting.

    Postings are processed strictly in rendered order, one at a time, and
    each posting is visited once. Everything that happens for a single
    posting runs inside one failure boundary: an exception there marks
    that posting as errored and the loop moves on to the next one.
    """

    def __init__(
        self,
        *,
        eligibility: EligibilityFilter,
        distractions: DistractionHandler,
        detail_loader: PostingDetailLoader,
        wizard: WizardStepExecutor,
        pacer: PacerPort,
        id_generator: IdGeneratorPort,
        logger: LoggerPort,
        notifier: NotifierPort,
        pacing: PacingPolicy | None = None,
        limits: FlowLimits | None = None,
    ) -> None:
        self._eligibility = eligibility
        self._distractions = distractions
        self._detail_loader = detail_loader
        self._wizard = wizard
        self._pacer = pacer
        self._id_generator = id_generator
        self._logger = logger
        self._notifier = notifier
        self._pacing = pacing or PacingPolicy()
        self._limits = limits or FlowLimits()

    async def run(
        self,
        page: JobBoardPagePort,
        search_term: str,
        location: str,
    ) -> RunSummary:
        run_id = self._id_generator.new_run_id()
        await page.open_search(search_term, location)

        if not await page.wait_for_postings(self._limits.results_timeout_ms):
            self._logger.info(
                "no_postings_rendered",
                run_id=run_id,
                search_term=search_term,
                location=location,
            )
            await self._notifier.send_info(f"📭 No jobs found for \"{search_term}\"")
            return RunSummary(run_id=run_id, search_term=search_term, location=location)

        postings = list(await page.list_postings())
        await self._notifier.send_info(f"📋 Found {len(postings)} jobs:")

        results: list[PostingResult] = []
        for index, posting in enumerate(postings, start=1):
            results.append(await self._process_posting(page, index, posting))

        summary = RunSummary(
            run_id=run_id,
            search_term=search_term,
            location=location,
            results=tuple(results),
        )
        self._logger.info(
            "run_completed",
            run_id=run_id,
            search_term=search_term,
            postings=len(results),
            attempted=summary.attempted,
            submitted=summary.submitted,
            skipped=summary.skipped,
            errored=summary.errored,
        )
        return summary

    async def _process_posting(
        self,
        page: JobBoardPagePort,
        index: int,
        posting: PostingHandlePort,
    ) -> PostingResult:
        session: WizardSession | None = None
        detail: PostingDetail | None = None
        try:
            summary = PostingSummary(index=index, text=await posting.text())
            skip = _SKIP_BY_CLASSIFICATION.get(self._eligibility.classify(summary))
            if skip is not None:
                outcome, message = skip
                return await self._skip(index, outcome, message.format(index=index))

            await self._distractions.dismiss_if_present(page, OverlayKind.LOGIN_OVERLAY)

            loaded = await self._detail_loader.load(page, posting)
            if not loaded.loaded:
                return await self._skip(
                    index,
                    PostingOutcome.SKIPPED_DETAIL_LOAD_FAILED,
                    f"⚠️ Skipping job #{index}: sidebar details failed to load",
                    reason=loaded.failure_reason,
                )
            detail = loaded.detail
            await self._notifier.send_info(
                f"🎯 Applying to {index}. {detail.title} @ {detail.employer} "
                f"({detail.locality}), {detail.recency}",
            )

            entry = await page.probe(Capability.QUICK_APPLY)
            if entry is None:
                return await self._skip(
                    index,
                    PostingOutcome.SKIPPED_NOT_QUICK_APPLY,
                    f"⏭️ Skipping job #{index}: not Easy Apply",
                    detail=detail,
                )
            await entry.click()
            await self._pacer.pause(self._pacing.think_min_ms, self._pacing.think_max_ms)

            session = WizardSession(posting_index=index)
            await self._drive_wizard(page, session)

            await self._distractions.dismiss_if_present(page, OverlayKind.POST_SUBMIT_UPSELL)

            outcome = (
                PostingOutcome.SUBMITTED
                if session.outcome is WizardOutcome.SUBMITTED
                else PostingOutcome.BLOCKED
            )
            self._logger.info(
                "posting_processed",
                posting_index=index,
                outcome=outcome.value,
                steps=session.step_counter,
                title=detail.title,
                employer=detail.employer,
            )
            return PostingResult(
                index=index,
                outcome=outcome,
                detail=detail,
                steps=session.step_counter,
                attempted=True,
            )
        except Exception as exc:
            if session is not None and not session.is_terminal:
                session.finish(WizardOutcome.ABANDONED)
            self._logger.error(
                "posting_failed",
                posting_index=index,
                title=detail.title if detail else None,
                employer=detail.employer if detail else None,
                error=str(exc),
            )
            await self._notifier.send_info(f"❌ Error on job #{index}: {exc}")
            return PostingResult(
                index=index,
                outcome=PostingOutcome.ERRORED,
                detail=detail,
                steps=session.step_counter if session else 0,
                attempted=session is not None,
                error=str(exc),
            )

    async def _drive_wizard(self, page: JobBoardPagePort, session: WizardSession) -> None:
        max_steps = self._limits.max_wizard_steps
        while not session.is_terminal:
            if session.iterations >= max_steps:
                session.finish(WizardOutcome.BLOCKED)
                self._logger.warning(
                    "wizard_step_limit_reached",
                    posting_index=session.posting_index,
                    max_steps=max_steps,
                )
                await self._notifier.send_info(
                    f"🛑 Gave up on job #{session.posting_index} after {max_steps} wizard steps",
                )
                return
            await self._wizard.advance(page, session)

    async def _skip(
        self,
        index: int,
        outcome: PostingOutcome,
        message: str,
        *,
        detail: PostingDetail | None = None,
        reason: str | None = None,
    ) -> PostingResult:
        self._logger.info(
            "posting_skipped",
            posting_index=index,
            outcome=outcome.value,
            reason=reason,
        )
        await self._notifier.send_info(message)
        return PostingResult(index=index, outcome=outcome, detail=detail)
