"""
Domain services.

These services hold the quick-apply decision logic while depending only on
domain models and ports so that the browser adapter and CLI remain thin.
"""

from .application_flow import ApplicationFlowController
from .detail_loader import PostingDetailLoader
from .distractions import DistractionHandler
from .eligibility import EligibilityFilter, classify_posting
from .scheduler import RunScheduler, is_operating_now
from .wizard import (
    ADVANCE_ACTIONS,
    FILLABLE_FIELDS,
    AdvanceAction,
    FieldFill,
    FillKind,
    WizardStepExecutor,
)

__all__ = [
    "ApplicationFlowController",
    "PostingDetailLoader",
    "DistractionHandler",
    "EligibilityFilter",
    "classify_posting",
    "RunScheduler",
    "is_operating_now",
    "WizardStepExecutor",
    "FieldFill",
    "FillKind",
    "AdvanceAction",
    "FILLABLE_FIELDS",
    "ADVANCE_ACTIONS",
]
