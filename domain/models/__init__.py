from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Sequence
from zoneinfo import ZoneInfo


PROMOTED_MARKER = "Promoted"
APPLIED_MARKER = "Applied"


class WizardSessionClosedError(RuntimeError):
    """Raised when a wizard session is advanced or finished after its terminal outcome."""


@dataclass(frozen=True)
class PostingSummary:
    """One card in the search results, as rendered.

    ``index`` is 1-based and reflects the board's ranking order.
    """

    index: int
    text: str

    @property
    def is_promoted(self) -> bool:
        return PROMOTED_MARKER in self.text

    @property
    def is_already_applied(self) -> bool:
        return APPLIED_MARKER in self.text


class PostingClassification(str, Enum):
    ELIGIBLE = "eligible"
    SKIP_PROMOTED = "skip_promoted"
    SKIP_ALREADY_APPLIED = "skip_already_applied"


@dataclass(frozen=True)
class PostingDetail:
    """Identifying metadata of a selected posting, used for auditing only."""

    title: str
    employer: str
    locality: str
    recency: str


@dataclass(frozen=True)
class DetailLoadResult:
    detail: PostingDetail | None = None
    failure_reason: str | None = None

    @property
    def loaded(self) -> bool:
        return self.detail is not None


class OverlayKind(str, Enum):
    LOGIN_OVERLAY = "login_overlay"
    POST_SUBMIT_UPSELL = "post_submit_upsell"


class DismissResult(str, Enum):
    DISMISSED = "dismissed"
    NOT_PRESENT = "not_present"


class Capability(str, Enum):
    """Named control probes the page adapter knows how to locate."""

    QUICK_APPLY = "quick_apply"
    EMAIL_SELECT = "email_select"
    PHONE_COUNTRY_SELECT = "phone_country_select"
    PHONE_NUMBER_INPUT = "phone_number_input"
    SUBMIT = "submit"
    REVIEW = "review"
    NEXT = "next"
    DISMISS_LOGIN_OVERLAY = "dismiss_login_overlay"
    DISMISS_UPSELL = "dismiss_upsell"


class PostingField(str, Enum):
    TITLE = "title"
    EMPLOYER = "employer"
    LOCALITY = "locality"
    RECENCY = "recency"


class WizardStepKind(str, Enum):
    REVIEW = "review"
    NEXT = "next"


class StepResultType(str, Enum):
    ADVANCED = "advanced"
    SUBMITTED = "submitted"
    NO_ACTION_AVAILABLE = "no_action_available"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one wizard step executor invocation."""

    type: StepResultType
    step_kind: WizardStepKind | None = None

    @classmethod
    def advanced(cls, step_kind: WizardStepKind) -> "StepResult":
        return cls(type=StepResultType.ADVANCED, step_kind=step_kind)

    @classmethod
    def submitted(cls) -> "StepResult":
        return cls(type=StepResultType.SUBMITTED)

    @classmethod
    def no_action_available(cls) -> "StepResult":
        return cls(type=StepResultType.NO_ACTION_AVAILABLE)


class WizardOutcome(str, Enum):
    SUBMITTED = "submitted"
    ABANDONED = "abandoned"
    BLOCKED = "blocked"


@dataclass
class WizardSession:
    """
    Mutable state of one in-progress application.

    ``step_counter`` counts Next clicks only; ``iterations`` counts every
    executor invocation and is what the controller bounds.
    """

    posting_index: int
    step_counter: int = 0
    iterations: int = 0
    outcome: WizardOutcome | None = None

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not None

    def ensure_open(self) -> None:
        if self.outcome is not None:
            raise WizardSessionClosedError(
                f"Wizard session for posting #{self.posting_index} already ended: {self.outcome.value}",
            )

    def finish(self, outcome: WizardOutcome) -> None:
        self.ensure_open()
        self.outcome = outcome


class PostingOutcome(str, Enum):
    SUBMITTED = "submitted"
    BLOCKED = "blocked"
    SKIPPED_PROMOTED = "skipped_promoted"
    SKIPPED_ALREADY_APPLIED = "skipped_already_applied"
    SKIPPED_DETAIL_LOAD_FAILED = "skipped_detail_load_failed"
    SKIPPED_NOT_QUICK_APPLY = "skipped_not_quick_apply"
    ERRORED = "errored"

    @property
    def is_skip(self) -> bool:
        return self.value.startswith("skipped_")


@dataclass(frozen=True)
class PostingResult:
    index: int
    outcome: PostingOutcome
    detail: PostingDetail | None = None
    steps: int = 0
    attempted: bool = False
    error: str | None = None


@dataclass(frozen=True)
class RunSummary:
    """Aggregated result of one controller run for a single search term."""

    run_id: str
    search_term: str
    location: str
    results: Sequence[PostingResult] = field(default_factory=tuple)

    @property
    def attempted(self) -> int:
        return sum(1 for r in self.results if r.attempted)

    @property
    def submitted(self) -> int:
        return self.count(PostingOutcome.SUBMITTED)

    @property
    def blocked(self) -> int:
        return self.count(PostingOutcome.BLOCKED)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.outcome.is_skip)

    @property
    def errored(self) -> int:
        return self.count(PostingOutcome.ERRORED)

    @property
    def visited_indexes(self) -> list[int]:
        return [r.index for r in self.results]

    def count(self, outcome: PostingOutcome) -> int:
        return sum(1 for r in self.results if r.outcome is outcome)


@dataclass(frozen=True)
class ApplicantProfile:
    """Values typed into the quick-apply wizard. Treated as opaque strings."""

    email: str
    phone: str
    phone_country: str


@dataclass(frozen=True)
class AccountCredential:
    email: str
    password: str


@dataclass(frozen=True)
class PacingPolicy:
    """Human-like delays, all in milliseconds."""

    hover_ms: int = 500
    select_ms: int = 1_500
    think_min_ms: int = 2_000
    think_max_ms: int = 4_000
    settle_ms: int = 2_000
    dismiss_settle_ms: int = 1_000


@dataclass(frozen=True)
class FlowLimits:
    results_timeout_ms: int = 10_000
    detail_timeout_ms: int = 8_000
    max_wizard_steps: int = 25


@dataclass(frozen=True)
class OperatingWindow:
    """
    Weekday/hour policy in a named time zone.

    Weekdays are ISO numbers (Monday is 1). The hour range is half-open,
    so ``start_hour=8, end_hour=16`` admits 08:00 up to 15:59:59.
    """

    timezone: str = "Europe/London"
    first_weekday: int = 1
    last_weekday: int = 5
    start_hour: int = 8
    end_hour: int = 16

    def contains(self, moment: datetime) -> bool:
        local = moment.astimezone(ZoneInfo(self.timezone))
        if not self.first_weekday <= local.isoweekday() <= self.last_weekday:
            return False
        return self.start_hour <= local.hour < self.end_hour

    def describe(self) -> str:
        days = "Mon Tue Wed Thu Fri Sat Sun".split()
        return (
            f"{days[self.first_weekday - 1]}–{days[self.last_weekday - 1]}, "
            f"{self.start_hour:02d}:00–{self.end_hour:02d}:00 {self.timezone}"
        )


@dataclass(frozen=True)
class SearchPlan:
    search_terms: Sequence[str]
    location: str
    filters: Mapping[str, str] = field(default_factory=dict)
    cycle_delay_min_minutes: int = 30
    cycle_delay_max_minutes: int = 60
    off_hours_recheck_minutes: int = 30

    def __post_init__(self) -> None:
        object.__setattr__(self, "search_terms", tuple(self.search_terms))
        object.__setattr__(self, "filters", MappingProxyType(dict(self.filters)))


@dataclass(frozen=True)
class AppConfig:
    """Everything the runner needs, loaded from config.json and profile.json."""

    credential: AccountCredential
    profile: ApplicantProfile
    search: SearchPlan
    window: OperatingWindow = field(default_factory=OperatingWindow)
    limits: FlowLimits = field(default_factory=FlowLimits)
    pacing: PacingPolicy = field(default_factory=PacingPolicy)
    base_url: str = "https://www.linkedin.com"
    headless: bool = False


__all__ = [
    "PROMOTED_MARKER",
    "APPLIED_MARKER",
    "WizardSessionClosedError",
    "PostingSummary",
    "PostingClassification",
    "PostingDetail",
    "DetailLoadResult",
    "OverlayKind",
    "DismissResult",
    "Capability",
    "PostingField",
    "WizardStepKind",
    "StepResultType",
    "StepResult",
    "WizardOutcome",
    "WizardSession",
    "PostingOutcome",
    "PostingResult",
    "RunSummary",
    "ApplicantProfile",
    "AccountCredential",
    "PacingPolicy",
    "FlowLimits",
    "OperatingWindow",
    "SearchPlan",
    "AppConfig",
]
