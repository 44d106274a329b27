"""
Domain layer package.

This package contains the quick-apply decision logic, its models and the
ports it talks through. Nothing here imports a browser library.
"""

from .models import (  # noqa: F401
    AccountCredential,
    ApplicantProfile,
    AppConfig,
    Capability,
    FlowLimits,
    OperatingWindow,
    PacingPolicy,
    PostingDetail,
    PostingOutcome,
    PostingResult,
    PostingSummary,
    RunSummary,
    SearchPlan,
    WizardSession,
)
from .ports import (  # noqa: F401
    ClockPort,
    ControlPort,
    IdGeneratorPort,
    JobBoardPagePort,
    JobBoardSessionPort,
    LoggerPort,
    NotifierPort,
    PacerPort,
    PostingHandlePort,
)

__all__ = [
    # Models
    "AccountCredential",
    "ApplicantProfile",
    "AppConfig",
    "Capability",
    "FlowLimits",
    "OperatingWindow",
    "PacingPolicy",
    "PostingDetail",
    "PostingOutcome",
    "PostingResult",
    "PostingSummary",
    "RunSummary",
    "SearchPlan",
    "WizardSession",
    # Ports
    "ClockPort",
    "ControlPort",
    "IdGeneratorPort",
    "JobBoardPagePort",
    "JobBoardSessionPort",
    "LoggerPort",
    "NotifierPort",
    "PacerPort",
    "PostingHandlePort",
]
