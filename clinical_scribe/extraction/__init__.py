"""Deterministic clinical signal extraction.

Import any extractor directly:
    from clinical_scribe.extraction import extract_reading, extract_medical_entities
"""

from clinical_scribe.extraction.catalog import DEFAULT_CATALOG, KeywordCatalog
from clinical_scribe.extraction.entities import (
    EntityExtractor,
    KeywordEntityExtractor,
    extract_medical_entities,
)
from clinical_scribe.extraction.followups import extract_followups
from clinical_scribe.extraction.vitals import (
    build_bp_history,
    extract_reading,
    extract_reading_from_segments,
    extract_reading_from_transcript,
    is_valid_blood_pressure,
    resolve_visit_reading,
)

__all__ = [
    "DEFAULT_CATALOG",
    "KeywordCatalog",
    "EntityExtractor",
    "KeywordEntityExtractor",
    "extract_medical_entities",
    "extract_followups",
    "build_bp_history",
    "extract_reading",
    "extract_reading_from_segments",
    "extract_reading_from_transcript",
    "is_valid_blood_pressure",
    "resolve_visit_reading",
]
