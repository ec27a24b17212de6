"""Visit finalization: per-turn entity extraction rolled up into artifacts."""

from __future__ import annotations

import logging

from clinical_scribe.extraction.entities import EntityExtractor, extract_medical_entities
from clinical_scribe.extraction.followups import extract_followups
from clinical_scribe.models import (
    ExtractedEntities,
    MedicationSummary,
    TranscriptSegment,
    VisitArtifacts,
    VitalEntity,
)
from clinical_scribe.notes.fallback import generate_after_visit_summary, generate_soap_draft

logger = logging.getLogger(__name__)


def _unique(names: list[str]) -> list[str]:
    return list(dict.fromkeys(names))


def aggregate_medications(per_segment: list[ExtractedEntities]) -> list[MedicationSummary]:
    """Count mentions per medication; the first mention's dosage/frequency is kept."""
    by_name: dict[str, MedicationSummary] = {}
    for entities in per_segment:
        for medication in entities.medications:
            existing = by_name.get(medication.name)
            if existing is None:
                by_name[medication.name] = MedicationSummary(
                    name=medication.name,
                    dosage=medication.dosage,
                    frequency=medication.frequency,
                )
            else:
                by_name[medication.name] = existing.model_copy(
                    update={"mentions": existing.mentions + 1}
                )
    return list(by_name.values())


def build_visit_artifacts(
    segments: list[TranscriptSegment],
    extractor: EntityExtractor | None = None,
) -> VisitArtifacts:
    per_segment = [extract_medical_entities(segment.text, extractor) for segment in segments]

    medications = aggregate_medications(per_segment)
    symptoms = _unique([s.name for entities in per_segment for s in entities.symptoms])
    procedures = _unique([p.name for entities in per_segment for p in entities.procedures])
    vitals: list[VitalEntity] = [v for entities in per_segment for v in entities.vitals]
    red_flags = _unique([flag for entities in per_segment for flag in entities.red_flags])
    followups = extract_followups(segments)

    if red_flags:
        logger.info("Visit transcript mentions red flags: %s", ", ".join(red_flags))

    return VisitArtifacts(
        after_visit_summary=generate_after_visit_summary(segments, medications, symptoms),
        soap_draft=generate_soap_draft(segments, medications, symptoms, vitals),
        medications=medications,
        symptoms=symptoms,
        procedures=procedures,
        vitals=vitals,
        red_flags=red_flags,
        followups=followups,
    )
