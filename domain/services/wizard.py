"""Quick-apply wizard step executor.

The wizard has no fixed schema: the number of steps, the fields on each
step and the advance button all vary per posting. Each invocation of
``WizardStepExecutor.advance`` therefore re-probes the page for every
known capability, fills whatever optional fields are present, and takes
exactly one advance action in the priority order Submit > Review > Next.

Fields and advance actions are declared as descriptors below; adding a
new fillable field means adding a ``FieldFill`` and teaching the page
adapter how to locate its ``Capability``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from domain.models import (
    ApplicantProfile,
    Capability,
    PacingPolicy,
    StepResult,
    StepResultType,
    WizardOutcome,
    WizardSession,
    WizardStepKind,
)
from domain.ports import ControlPort, JobBoardPagePort, LoggerPort, NotifierPort, PacerPort


class FillKind(str, Enum):
    SELECT = "select"
    REPLACE_TEXT = "replace_text"


@dataclass(frozen=True)
class FieldFill:
    """An optional field: fill it with a profile value when it is on the step."""

    capability: Capability
    kind: FillKind
    value_of: Callable[[ApplicantProfile], str]
    message: str

    async def apply(self, control: ControlPort, value: str) -> None:
        if self.kind is FillKind.SELECT:
            await control.select_option(value)
        else:
            await control.replace_text(value)


@dataclass(frozen=True)
class AdvanceAction:
    capability: Capability
    result_type: StepResultType
    step_kind: WizardStepKind | None = None


FILLABLE_FIELDS: tuple[FieldFill, ...] = (
    FieldFill(
        capability=Capability.EMAIL_SELECT,
        kind=FillKind.SELECT,
        value_of=lambda profile: profile.email,
        message="📧 Selected email: {value}",
    ),
    FieldFill(
        capability=Capability.PHONE_COUNTRY_SELECT,
        kind=FillKind.SELECT,
        value_of=lambda profile: profile.phone_country,
        message="🌍 Selected country code",
    ),
    FieldFill(
        capability=Capability.PHONE_NUMBER_INPUT,
        kind=FillKind.REPLACE_TEXT,
        value_of=lambda profile: profile.phone,
        message="📱 Filled in phone number",
    ),
)

# Priority order matters: a Submit control must win over a stale Next.
ADVANCE_ACTIONS: tuple[AdvanceAction, ...] = (
    AdvanceAction(Capability.SUBMIT, StepResultType.SUBMITTED),
    AdvanceAction(Capability.REVIEW, StepResultType.ADVANCED, WizardStepKind.REVIEW),
    AdvanceAction(Capability.NEXT, StepResultType.ADVANCED, WizardStepKind.NEXT),
)


class WizardStepExecutor:
    """
    Performs one step of the quick-apply wizard per call.

    Exceptions raised by the page (a control detaching mid-click, say) are
    not caught here so the caller can tell "nothing to click" apart from
    "clicking failed".
    """

    def __init__(
        self,
        *,
        profile: ApplicantProfile,
        pacer: PacerPort,
        logger: LoggerPort,
        notifier: NotifierPort,
        pacing: PacingPolicy | None = None,
        fields: tuple[FieldFill, ...] = FILLABLE_FIELDS,
        actions: tuple[AdvanceAction, ...] = ADVANCE_ACTIONS,
    ) -> None:
        self._profile = profile
        self._pacer = pacer
        self._logger = logger
        self._notifier = notifier
        self._pacing = pacing or PacingPolicy()
        self._fields = fields
        self._actions = actions

    async def advance(self, page: JobBoardPagePort, session: WizardSession) -> StepResult:
        session.ensure_open()
        session.iterations += 1

        await self._fill_known_fields(page, session)

        for action in self._actions:
            control = await page.probe(action.capability)
            if control is None:
                continue
            await control.click()
            return await self._after_click(session, action)

        session.finish(WizardOutcome.BLOCKED)
        self._logger.warning(
            "wizard_no_action_available",
            posting_index=session.posting_index,
            step=session.step_counter,
        )
        await self._notifier.send_info(
            "⚠️ No Next, Review, or Submit button found (possibly manual step required)",
        )
        return StepResult.no_action_available()

    async def _fill_known_fields(self, page: JobBoardPagePort, session: WizardSession) -> None:
        for fill in self._fields:
            control = await page.probe(fill.capability)
            if control is None:
                continue
            value = fill.value_of(self._profile)
            await fill.apply(control, value)
            self._logger.info(
                "wizard_field_filled",
                posting_index=session.posting_index,
                field=fill.capability.value,
            )
            await self._notifier.send_info(fill.message.format(value=value))

    async def _after_click(self, session: WizardSession, action: AdvanceAction) -> StepResult:
        if action.result_type is StepResultType.SUBMITTED:
            session.finish(WizardOutcome.SUBMITTED)
            self._logger.info(
                "wizard_submitted",
                posting_index=session.posting_index,
                steps=session.step_counter,
            )
            await self._notifier.send_info(f"✅ Submitted job #{session.posting_index}")
            await self._pacer.sleep_ms(self._pacing.settle_ms)
            return StepResult.submitted()

        await self._pacer.sleep_ms(self._pacing.settle_ms)
        step_kind = action.step_kind or WizardStepKind.NEXT
        if step_kind is WizardStepKind.REVIEW:
            message = "📝 Clicked Review button"
        else:
            session.step_counter += 1
            message = f"➡️ Step {session.step_counter}: clicked Next"
        self._logger.info(
            "wizard_advanced",
            posting_index=session.posting_index,
            action=step_kind.value,
            step=session.step_counter,
        )
        await self._notifier.send_info(message)
        return StepResult.advanced(step_kind)
