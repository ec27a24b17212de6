"""Blood-pressure reading extraction with range and keyword-window checks."""

from __future__ import annotations

import logging
import re
from typing import Iterable, NamedTuple

from clinical_scribe.config import settings
from clinical_scribe.models import (
    BloodPressurePoint,
    BloodPressureReading,
    ReadingSource,
    TranscriptSegment,
    VisitDocumentation,
)
from clinical_scribe.transcript.formatting import (
    compact_whitespace,
    format_transcript_for_prompt,
    transcript_text_from_json,
)

logger = logging.getLogger(__name__)

SYSTOLIC_RANGE = (70, 260)
DIASTOLIC_RANGE = (40, 160)
KEYWORD_WINDOW_CHARS = 30
EXCERPT_BEFORE_CHARS = 35
EXCERPT_AFTER_CHARS = 45

BP_LABELED_RE = re.compile(
    r"(?:blood pressure|\bbp\b)[^0-9]{0,20}(\d{2,3})\s*(?:/|over)\s*(\d{2,3})",
    re.IGNORECASE,
)
BP_GENERIC_RE = re.compile(r"(\d{2,3})\s*(?:/|over)\s*(\d{2,3})", re.IGNORECASE)
_NEARBY_KEYWORD_RE = re.compile(r"blood pressure|\bbp\b|pressure", re.IGNORECASE)
_LINE_MENTION_RE = re.compile(r"blood pressure|\bbp\b", re.IGNORECASE)
_LINE_TIMESTAMP_RE = re.compile(r"\[(\d{2}:\d{2})\]")


class _Match(NamedTuple):
    systolic: int
    diastolic: int
    excerpt: str


def is_valid_blood_pressure(systolic: int, diastolic: int) -> bool:
    return (
        SYSTOLIC_RANGE[0] <= systolic <= SYSTOLIC_RANGE[1]
        and DIASTOLIC_RANGE[0] <= diastolic <= DIASTOLIC_RANGE[1]
    )


def _has_keyword_near(text: str, start: int, end: int) -> bool:
    window = text[max(0, start - KEYWORD_WINDOW_CHARS) : end + KEYWORD_WINDOW_CHARS]
    return _NEARBY_KEYWORD_RE.search(window) is not None


def _first_valid_match(
    text: str,
    pattern: re.Pattern[str],
    require_keyword_near: bool = False,
) -> _Match | None:
    for match in pattern.finditer(text):
        systolic = int(match.group(1))
        diastolic = int(match.group(2))
        if not is_valid_blood_pressure(systolic, diastolic):
            continue
        if require_keyword_near and not _has_keyword_near(text, match.start(), match.end()):
            continue

        excerpt = text[
            max(0, match.start() - EXCERPT_BEFORE_CHARS) : match.end() + EXCERPT_AFTER_CHARS
        ]
        return _Match(systolic, diastolic, compact_whitespace(excerpt))
    return None


def extract_reading(
    text: str,
    source: ReadingSource = ReadingSource.SUMMARY,
    timestamp: str | None = None,
) -> BloodPressureReading | None:
    """Find the first physiologically valid blood-pressure reading in ``text``.

    A labeled reading ("BP 120/80", "blood pressure is 132 over 82") is
    preferred. A bare "120/80" only counts when a pressure keyword sits within
    30 characters of it.
    """
    if not text or not text.strip():
        return None

    match = _first_valid_match(text, BP_LABELED_RE)
    if match is None:
        match = _first_valid_match(text, BP_GENERIC_RE, require_keyword_near=True)
    if match is None:
        return None

    return BloodPressureReading(
        systolic=match.systolic,
        diastolic=match.diastolic,
        source=source,
        timestamp=timestamp if source == ReadingSource.TRANSCRIPT else None,
        excerpt=match.excerpt,
    )


def extract_reading_from_transcript(transcript_text: str) -> BloodPressureReading | None:
    """Scan ``[mm:ss] Speaker: text`` lines, most recent first."""
    if not transcript_text:
        return None

    for line in reversed(transcript_text.split("\n")):
        if not _LINE_MENTION_RE.search(line):
            continue
        match = _first_valid_match(line, BP_GENERIC_RE)
        if match is None:
            continue

        time_match = _LINE_TIMESTAMP_RE.search(line)
        return BloodPressureReading(
            systolic=match.systolic,
            diastolic=match.diastolic,
            source=ReadingSource.TRANSCRIPT,
            timestamp=time_match.group(1) if time_match else None,
            excerpt=match.excerpt,
        )
    return None


def extract_reading_from_segments(segments: list[TranscriptSegment]) -> BloodPressureReading | None:
    return extract_reading_from_transcript(format_transcript_for_prompt(segments))


def resolve_visit_reading(visit: VisitDocumentation) -> BloodPressureReading | None:
    """Pick one reading per visit: SOAP notes, then summary, then transcript."""
    return (
        extract_reading(visit.soap_notes, ReadingSource.SOAP)
        or extract_reading(visit.summary, ReadingSource.SUMMARY)
        or extract_reading_from_transcript(transcript_text_from_json(visit.transcript_json))
    )


def format_short_date(visit: VisitDocumentation) -> str:
    return f"{visit.visit_date:%b} {visit.visit_date.day}"


def build_bp_history(
    visits: Iterable[VisitDocumentation],
    limit: int | None = None,
) -> list[BloodPressurePoint]:
    """One reading per visit, oldest first, capped to the most recent ``limit``."""
    resolved_limit = settings.bp_history_limit if limit is None else limit
    points: list[BloodPressurePoint] = []
    for visit in visits:
        reading = resolve_visit_reading(visit)
        if reading is None:
            logger.debug("No blood pressure reading found for visit %s", visit.visit_id)
            continue
        points.append(
            BloodPressurePoint(
                visit_id=visit.visit_id,
                visit_date=visit.visit_date,
                label=format_short_date(visit),
                systolic=reading.systolic,
                diastolic=reading.diastolic,
                source=reading.source,
                timestamp=reading.timestamp,
                excerpt=reading.excerpt,
            )
        )

    points.sort(key=lambda point: point.visit_date)
    if resolved_limit <= 0:
        return []
    return points[-resolved_limit:]
