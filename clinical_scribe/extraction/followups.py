"""Follow-up / action-item detection over transcript segments."""

from __future__ import annotations

import re

from clinical_scribe.extraction.catalog import DEFAULT_CATALOG, KeywordCatalog
from clinical_scribe.models import FollowUpItem, FollowUpPriority, TranscriptSegment

DEFAULT_TIMING = "Not specified"

_TIMING_RE = re.compile(r"(next week|two weeks|in \d+ (days?|weeks?|months?))", re.IGNORECASE)
_URGENT_MARKERS = ("urgent", "immediately")


def extract_followups(
    segments: list[TranscriptSegment],
    catalog: KeywordCatalog = DEFAULT_CATALOG,
) -> list[FollowUpItem]:
    """Emit one item per segment that mentions a follow-up phrase.

    Items are not deduplicated; every qualifying segment produces its own.
    """
    items: list[FollowUpItem] = []
    for segment in segments:
        lowered = segment.text.lower()
        if not any(phrase in lowered for phrase in catalog.follow_up_phrases):
            continue

        timing_match = _TIMING_RE.search(segment.text)
        items.append(
            FollowUpItem(
                task=segment.text,
                timestamp_ms=segment.start_ms,
                priority=(
                    FollowUpPriority.HIGH
                    if any(marker in lowered for marker in _URGENT_MARKERS)
                    else FollowUpPriority.MEDIUM
                ),
                timing=timing_match.group(0) if timing_match else DEFAULT_TIMING,
            )
        )
    return items
