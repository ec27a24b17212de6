"""Summary, SOAP and transcript structuring with an optional LLM.

Every call degrades to the deterministic fallback when the LLM is disabled,
unreachable, or returns something unusable.
"""

import json
import logging

from clinical_scribe.config import settings
from clinical_scribe.llm.client import TRANSIENT_LLM_ERRORS, chat_completion
from clinical_scribe.llm.json_utils import clean_json_response
from clinical_scribe.models import SOAPNote, TranscriptSegment
from clinical_scribe.notes.fallback import (
    NO_TRANSCRIPT_SUMMARY,
    generate_fallback_soap,
    generate_fallback_summary,
)
from clinical_scribe.prompts import (
    SOAP_SYSTEM,
    SOAP_USER,
    SUMMARY_SYSTEM,
    SUMMARY_USER,
    TRANSCRIPT_STRUCTURE_SYSTEM,
    TRANSCRIPT_STRUCTURE_USER,
)
from clinical_scribe.transcript.formatting import format_transcript_for_prompt
from clinical_scribe.transcript.parser import parse_structured_transcript, parse_transcript_text

logger = logging.getLogger(__name__)

LLM_FAILURES = TRANSIENT_LLM_ERRORS + (RuntimeError,)


async def generate_conversation_summary(segments: list[TranscriptSegment]) -> str:
    if not segments:
        return NO_TRANSCRIPT_SUMMARY
    if not settings.llm_enabled:
        return generate_fallback_summary(segments)

    prompt = SUMMARY_USER.format(transcript=format_transcript_for_prompt(segments))
    try:
        raw = await chat_completion(
            system_prompt=SUMMARY_SYSTEM,
            user_prompt=prompt,
            max_tokens=512,
            call_type="conversation_summary",
        )
    except LLM_FAILURES as e:
        logger.warning("Summary generation failed, using fallback: %s", e)
        return generate_fallback_summary(segments)

    summary = raw.strip()
    return summary or generate_fallback_summary(segments)


def _parse_soap(raw: str) -> SOAPNote:
    data = json.loads(clean_json_response(raw))
    if not isinstance(data, dict):
        raise ValueError("SOAP response must be a JSON object.")
    return SOAPNote(**data)


async def generate_soap_note(segments: list[TranscriptSegment]) -> SOAPNote:
    """Generate a SOAP note for the visit."""
    if not segments or not settings.llm_enabled:
        return generate_fallback_soap(segments)

    prompt = SOAP_USER.format(transcript=format_transcript_for_prompt(segments))
    try:
        raw = await chat_completion(
            system_prompt=SOAP_SYSTEM,
            user_prompt=prompt,
            max_tokens=1024,
            call_type="soap_note",
        )
        try:
            return _parse_soap(raw)
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            if not settings.llm_parse_retry_enabled:
                raise
            logger.warning("Failed to parse SOAP note, retrying: %s", e)
            raw = await chat_completion(
                system_prompt=SOAP_SYSTEM,
                user_prompt=prompt + "\n\nIMPORTANT: Output ONLY valid JSON, no other text.",
                max_tokens=1024,
                call_type="soap_note",
            )
            return _parse_soap(raw)
    except (json.JSONDecodeError, TypeError, ValueError) as e:
        logger.error("SOAP note generation failed after retry, using fallback: %s", e)
        return generate_fallback_soap(segments)
    except LLM_FAILURES as e:
        logger.warning("SOAP note generation failed, using fallback: %s", e)
        return generate_fallback_soap(segments)


async def structure_transcript(raw_text: str) -> list[TranscriptSegment]:
    """Ask the LLM to split raw text into turns; parse deterministically otherwise."""
    if not raw_text.strip():
        return []
    if not settings.llm_enabled:
        return parse_transcript_text(raw_text)

    try:
        raw = await chat_completion(
            system_prompt=TRANSCRIPT_STRUCTURE_SYSTEM,
            user_prompt=TRANSCRIPT_STRUCTURE_USER.format(raw_text=raw_text),
            max_tokens=2048,
            temperature=0.0,
            call_type="transcript_structure",
        )
    except LLM_FAILURES as e:
        logger.warning("Transcript structuring failed, parsing raw text: %s", e)
        return parse_transcript_text(raw_text)

    structured = parse_structured_transcript(raw)
    if structured:
        return structured
    logger.warning("LLM transcript response had no usable segments; parsing raw text.")
    return parse_transcript_text(raw_text)
