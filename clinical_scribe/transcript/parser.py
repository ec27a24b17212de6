"""Raw transcript text → ordered, speaker-attributed TranscriptSegments."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterable, NamedTuple

from clinical_scribe.llm.json_utils import iter_json_arrays
from clinical_scribe.models import Speaker, TranscriptSegment
from clinical_scribe.transcript.speaker import (
    DEFAULT_SPEAKER_HINTS,
    SpeakerHints,
    infer_speaker_from_text,
)

logger = logging.getLogger(__name__)

MIN_SEGMENT_MS = 500
MIN_ESTIMATED_MS = 1500
MAX_ESTIMATED_MS = 15000
MS_PER_WORD = 500

_TIMESTAMP_PREFIX_RE = re.compile(
    r"^(?:\[\d{1,2}:\d{2}(?::\d{2})?\]|\(\d{1,2}:\d{2}(?::\d{2})?\))\s*"
)
_SPEAKER_LABEL_RE = re.compile(
    r"^(doctor|dr\.?|clinician|provider|patient|pt)\s*:\s*",
    re.IGNORECASE,
)
_CLINICIAN_LABELS = {"doctor", "dr", "dr.", "clinician", "provider"}
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")


class _SegmentDraft(NamedTuple):
    speaker: Speaker
    text: str
    start_ms: int | None
    end_ms: int | None


def estimate_duration_ms(text: str) -> int:
    """Reading-speed estimate: 500 ms per word, clamped to 1.5-15 s."""
    words = len(text.split())
    return max(MIN_ESTIMATED_MS, min(MAX_ESTIMATED_MS, words * MS_PER_WORD))


def _coerce_ms(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return int(value)


def _sanitize(drafts: Iterable[_SegmentDraft]) -> list[TranscriptSegment]:
    segments: list[TranscriptSegment] = []
    cursor_ms = 0
    for draft in drafts:
        text = draft.text.strip()
        if not text:
            continue

        start = max(0, draft.start_ms) if draft.start_ms is not None else cursor_ms
        end = draft.end_ms if draft.end_ms is not None else 0
        if end < start + MIN_SEGMENT_MS:
            end = start + estimate_duration_ms(text)
        cursor_ms = end

        segments.append(
            TranscriptSegment(speaker=draft.speaker, start_ms=start, end_ms=end, text=text)
        )
    return segments


def _drafts_from_array(items: list) -> list[_SegmentDraft]:
    drafts: list[_SegmentDraft] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        text = item.get("text")
        if not isinstance(text, str) or not text.strip():
            continue
        speaker_value = item.get("speaker")
        speaker = (
            Speaker(speaker_value)
            if speaker_value in (Speaker.CLINICIAN.value, Speaker.PATIENT.value)
            else Speaker.PATIENT
        )
        drafts.append(
            _SegmentDraft(
                speaker=speaker,
                text=text,
                start_ms=_coerce_ms(item.get("start_ms")),
                end_ms=_coerce_ms(item.get("end_ms")),
            )
        )
    return drafts


def parse_structured_transcript(raw: str) -> list[TranscriptSegment] | None:
    """Parse a JSON array of segments embedded anywhere in ``raw``.

    Returns None when no JSON array is present at all, and a (possibly empty)
    list when one was found. Elements without usable text are dropped one by
    one; the remaining elements are still used.
    """
    found_array = False
    for items in iter_json_arrays(raw):
        found_array = True
        segments = _sanitize(_drafts_from_array(items))
        if segments:
            return segments
    return [] if found_array else None


def split_transcript_lines(raw: str) -> list[str]:
    """Split by newline, or by sentence when the text is a single line."""
    normalized = raw.replace("\r\n", "\n").strip()
    if not normalized:
        return []

    by_line = [line.strip() for line in normalized.split("\n") if line.strip()]
    if len(by_line) > 1:
        return by_line

    return [part.strip() for part in _SENTENCE_BOUNDARY_RE.split(normalized) if part.strip()]


def strip_speaker_label(line: str) -> tuple[Speaker | None, str]:
    """Remove a leading ``Doctor:``/``Patient:`` style label from ``line``."""
    match = _SPEAKER_LABEL_RE.match(line)
    if not match:
        return None, line
    label = match.group(1).lower()
    speaker = Speaker.CLINICIAN if label in _CLINICIAN_LABELS else Speaker.PATIENT
    return speaker, line[match.end() :].strip()


def _parse_lines(raw: str, hints: SpeakerHints) -> list[TranscriptSegment]:
    drafts: list[_SegmentDraft] = []
    previous_speaker = Speaker.PATIENT

    for original_line in split_transcript_lines(raw):
        line = _TIMESTAMP_PREFIX_RE.sub("", original_line, count=1).strip()
        if not line:
            continue

        speaker, line = strip_speaker_label(line)
        if not line:
            continue
        if speaker is None:
            speaker = infer_speaker_from_text(line, previous_speaker, hints)
        previous_speaker = speaker

        # Timing is left to _sanitize, which lays turns end to end.
        drafts.append(_SegmentDraft(speaker=speaker, text=line, start_ms=None, end_ms=None))

    return _sanitize(drafts)


def parse_transcript_text(
    raw: str,
    hints: SpeakerHints = DEFAULT_SPEAKER_HINTS,
) -> list[TranscriptSegment]:
    """Turn pasted, uploaded or model-produced transcript text into segments.

    A JSON array of segments anywhere in the text wins; otherwise the text is
    split into lines (or sentences) with speakers taken from labels or
    inferred. An empty list means there is no usable transcript.
    """
    if not raw or not raw.strip():
        return []

    structured = parse_structured_transcript(raw)
    if structured:
        return structured
    if structured is not None:
        logger.debug("Structured transcript array had no usable segments; parsing lines.")

    return _parse_lines(raw, hints)


def transcript_duration_ms(segments: list[TranscriptSegment]) -> int:
    return max((segment.end_ms for segment in segments), default=0)
