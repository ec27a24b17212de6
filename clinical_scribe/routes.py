"""HTTP handlers wrapping the deterministic core."""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, status

from clinical_scribe.config import settings
from clinical_scribe.extraction.entities import extract_medical_entities
from clinical_scribe.extraction.followups import extract_followups
from clinical_scribe.extraction.vitals import build_bp_history
from clinical_scribe.models import (
    BPHistoryRequest,
    BPHistoryResponse,
    ExtractedEntities,
    FinalizeVisitRequest,
    FinalizeVisitResponse,
    FollowUpItem,
    FreeTextRequest,
    SegmentsRequest,
    TranscriptPreviewResponse,
    TranscriptResponse,
    TranscriptTextRequest,
)
from clinical_scribe.notes.artifacts import build_visit_artifacts
from clinical_scribe.notes.bp_trend import (
    build_bp_visualization,
    build_trend_source_details,
    describe_bp_trend,
    should_visualize_blood_pressure,
)
from clinical_scribe.notes.fallback import render_soap_markdown
from clinical_scribe.notes.generator import (
    generate_conversation_summary,
    generate_soap_note,
    structure_transcript,
)
from clinical_scribe.transcript.formatting import derive_chief_complaint
from clinical_scribe.transcript.parser import parse_transcript_text, transcript_duration_ms

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

NO_USABLE_TRANSCRIPT = "Could not parse usable transcript content from the provided input."
EMPTY_TRANSCRIPT = "Transcript is empty."


@router.post("/transcripts/parse", response_model=TranscriptResponse)
async def parse_transcript(payload: TranscriptTextRequest) -> TranscriptResponse:
    transcript = parse_transcript_text(payload.text)
    if not transcript:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=NO_USABLE_TRANSCRIPT)
    return TranscriptResponse(transcript=transcript, duration_ms=transcript_duration_ms(transcript))


@router.post("/transcripts/preview", response_model=TranscriptPreviewResponse)
async def preview_transcript(payload: TranscriptTextRequest) -> TranscriptPreviewResponse:
    """Parse a transcript and draft its summary and SOAP note."""
    transcript = await structure_transcript(payload.text)
    if not transcript:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=NO_USABLE_TRANSCRIPT)

    summary, soap_note = await asyncio.gather(
        generate_conversation_summary(transcript),
        generate_soap_note(transcript),
    )
    return TranscriptPreviewResponse(
        transcript=transcript,
        summary=summary,
        soap_notes=render_soap_markdown(soap_note),
        chief_complaint=derive_chief_complaint(transcript),
    )


@router.post("/entities/extract", response_model=ExtractedEntities)
async def extract_entities(payload: FreeTextRequest) -> ExtractedEntities:
    return extract_medical_entities(payload.text)


@router.post("/followups/extract", response_model=list[FollowUpItem])
async def extract_followup_items(payload: SegmentsRequest) -> list[FollowUpItem]:
    return extract_followups(payload.transcript)


@router.post("/visits/finalize", response_model=FinalizeVisitResponse)
async def finalize_visit(payload: FinalizeVisitRequest) -> FinalizeVisitResponse:
    if not payload.transcript:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EMPTY_TRANSCRIPT)

    artifacts = build_visit_artifacts(payload.transcript)
    logger.info(
        "Finalized visit %s: %d medications, %d symptoms, %d follow-ups",
        payload.visit_id,
        len(artifacts.medications),
        len(artifacts.symptoms),
        len(artifacts.followups),
    )
    return FinalizeVisitResponse(visit_id=payload.visit_id, artifacts=artifacts)


@router.post("/patients/bp-history", response_model=BPHistoryResponse)
async def bp_history(payload: BPHistoryRequest) -> BPHistoryResponse:
    """Blood-pressure readings across a patient's visits, oldest first."""
    recent_visits = sorted(payload.visits, key=lambda visit: visit.visit_date, reverse=True)
    history = build_bp_history(recent_visits[: settings.visit_history_lookback])

    question = payload.question or ""
    visualization = build_bp_visualization(question, history)
    answer = describe_bp_trend(history) if should_visualize_blood_pressure(question) else None
    return BPHistoryResponse(
        history=history,
        visualization=visualization,
        source_details=build_trend_source_details(history) if visualization else [],
        answer=answer,
    )
