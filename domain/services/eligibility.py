from __future__ import annotations

from domain.models import (
    APPLIED_MARKER,
    PROMOTED_MARKER,
    PostingClassification,
    PostingSummary,
)


def classify_posting(
    text: str,
    *,
    promoted_marker: str = PROMOTED_MARKER,
    applied_marker: str = APPLIED_MARKER,
) -> PostingClassification:
    """Classify a posting card by plain substring containment.

    The promoted check runs first, so a card carrying both markers is
    reported as promoted. Text with neither marker, including empty text,
    is eligible.
    """
    if promoted_marker in text:
        return PostingClassification.SKIP_PROMOTED
    if applied_marker in text:
        return PostingClassification.SKIP_ALREADY_APPLIED
    return PostingClassification.ELIGIBLE


class EligibilityFilter:
    def __init__(
        self,
        *,
        promoted_marker: str = PROMOTED_MARKER,
        applied_marker: str = APPLIED_MARKER,
    ) -> None:
        self._promoted_marker = promoted_marker
        self._applied_marker = applied_marker

    def classify(self, posting: PostingSummary | str) -> PostingClassification:
        text = posting.text if isinstance(posting, PostingSummary) else posting
        return classify_posting(
            text or "",
            promoted_marker=self._promoted_marker,
            applied_marker=self._applied_marker,
        )
