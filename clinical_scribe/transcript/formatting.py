"""Transcript serialization and display helpers for persistence and prompts."""

from __future__ import annotations

import json
import logging

from pydantic import TypeAdapter, ValidationError

from clinical_scribe.models import Speaker, TranscriptSegment

logger = logging.getLogger(__name__)

DEFAULT_CHIEF_COMPLAINT = "Follow-up consultation"
CHIEF_COMPLAINT_MAX_CHARS = 140

_segment_list_adapter = TypeAdapter(list[TranscriptSegment])


def compact_whitespace(text: str) -> str:
    return " ".join(text.split())


def format_timestamp(ms: int) -> str:
    """Milliseconds → ``mm:ss``."""
    total_seconds = max(0, ms) // 1000
    return f"{total_seconds // 60:02d}:{total_seconds % 60:02d}"


def speaker_label(speaker: Speaker) -> str:
    return "Doctor" if speaker == Speaker.CLINICIAN else "Patient"


def format_transcript_for_prompt(segments: list[TranscriptSegment]) -> str:
    """Render segments as ``[mm:ss] Doctor: text`` lines."""
    return "\n".join(
        f"[{format_timestamp(segment.start_ms)}] {speaker_label(segment.speaker)}: {segment.text}"
        for segment in segments
    )


def segments_to_json(segments: list[TranscriptSegment]) -> str:
    return _segment_list_adapter.dump_json(segments).decode("utf-8")


def segments_from_json(raw_json: str | None) -> list[TranscriptSegment]:
    """Load persisted segments, dropping invalid elements individually."""
    if not raw_json:
        return []
    try:
        items = json.loads(raw_json)
    except json.JSONDecodeError:
        logger.warning("Persisted transcript is not valid JSON; ignoring it.")
        return []
    if not isinstance(items, list):
        return []

    segments: list[TranscriptSegment] = []
    for item in items:
        try:
            segments.append(TranscriptSegment.model_validate(item))
        except ValidationError:
            continue
    return segments


def transcript_text_from_json(raw_json: str | None) -> str:
    return format_transcript_for_prompt(segments_from_json(raw_json))


def derive_chief_complaint(segments: list[TranscriptSegment]) -> str:
    """First patient turn, trimmed to a headline."""
    patient_segment = next(
        (segment for segment in segments if segment.speaker == Speaker.PATIENT),
        None,
    )
    if patient_segment is None:
        return DEFAULT_CHIEF_COMPLAINT
    return compact_whitespace(patient_segment.text)[:CHIEF_COMPLAINT_MAX_CHARS] or DEFAULT_CHIEF_COMPLAINT
