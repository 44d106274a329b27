from __future__ import annotations

from domain.models import (
    DetailLoadResult,
    FlowLimits,
    PacingPolicy,
    PostingDetail,
    PostingField,
)
from domain.ports import JobBoardPagePort, LoggerPort, PacerPort, PostingHandlePort


class PostingDetailLoader:
    """Selects a posting and waits for its detail pane to render."""

    def __init__(
        self,
        *,
        pacer: PacerPort,
        logger: LoggerPort,
        pacing: PacingPolicy | None = None,
        limits: FlowLimits | None = None,
    ) -> None:
        self._pacer = pacer
        self._logger = logger
        self._pacing = pacing or PacingPolicy()
        self._limits = limits or FlowLimits()

    async def load(
        self,
        page: JobBoardPagePort,
        posting: PostingHandlePort,
    ) -> DetailLoadResult:
        await posting.hover()
        await self._pacer.sleep_ms(self._pacing.hover_ms)
        await posting.click()
        await self._pacer.sleep_ms(self._pacing.select_ms)

        timeout_ms = self._limits.detail_timeout_ms
        if not await page.wait_for_detail_pane(timeout_ms):
            return DetailLoadResult(
                failure_reason=f"detail pane did not render within {timeout_ms}ms",
            )

        # Field lookups raise on missing elements; the controller owns that failure.
        detail = PostingDetail(
            title=await posting.read_field(PostingField.TITLE),
            employer=await posting.read_field(PostingField.EMPLOYER),
            locality=await posting.read_field(PostingField.LOCALITY),
            recency=await posting.read_field(PostingField.RECENCY),
        )
        await self._pacer.pause(self._pacing.think_min_ms, self._pacing.think_max_ms)
        return DetailLoadResult(detail=detail)
