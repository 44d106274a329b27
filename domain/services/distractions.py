from __future__ import annotations

from domain.models import Capability, DismissResult, OverlayKind, PacingPolicy
from domain.ports import JobBoardPagePort, LoggerPort, NotifierPort, PacerPort


_DISMISS_CAPABILITIES = {
    OverlayKind.LOGIN_OVERLAY: Capability.DISMISS_LOGIN_OVERLAY,
    OverlayKind.POST_SUBMIT_UPSELL: Capability.DISMISS_UPSELL,
}

_DISMISSED_MESSAGES = {
    OverlayKind.LOGIN_OVERLAY: "🧹 Closed login modal popup",
    OverlayKind.POST_SUBMIT_UPSELL: "👋 Dismissed app suggestion modal",
}


class DistractionHandler:
    """
    Closes transient overlays that can show up at any point in a run.

    The overlay may vanish between the probe and the click, so probe and
    click failures are reported as ``NOT_PRESENT`` instead of raised.
    """

    def __init__(
        self,
        *,
        pacer: PacerPort,
        logger: LoggerPort,
        notifier: NotifierPort,
        pacing: PacingPolicy | None = None,
    ) -> None:
        self._pacer = pacer
        self._logger = logger
        self._notifier = notifier
        self._pacing = pacing or PacingPolicy()

    async def dismiss_if_present(
        self,
        page: JobBoardPagePort,
        kind: OverlayKind,
    ) -> DismissResult:
        try:
            control = await page.probe(_DISMISS_CAPABILITIES[kind])
            if control is None:
                return DismissResult.NOT_PRESENT
            await control.click()
        except Exception as exc:
            self._logger.warning("overlay_dismiss_failed", overlay=kind.value, error=str(exc))
            return DismissResult.NOT_PRESENT

        self._logger.info("overlay_dismissed", overlay=kind.value)
        await self._notifier.send_info(_DISMISSED_MESSAGES[kind])
        await self._pacer.sleep_ms(self._pacing.dismiss_settle_ms)
        return DismissResult.DISMISSED
