"""Keyword-driven medical entity extraction.

Matching is regex over fixed keyword lists. Another strategy can be
injected through ``extract_medical_entities(text, extractor=...)``.
"""

from __future__ import annotations

import re
from typing import Protocol

from clinical_scribe.extraction.catalog import DEFAULT_CATALOG, KeywordCatalog
from clinical_scribe.models import (
    EntityPosition,
    ExtractedEntities,
    MedicationEntity,
    ProcedureEntity,
    SymptomEntity,
    VitalEntity,
)

# Heuristic display weights, fixed per kind.
MEDICATION_CONFIDENCE = 0.9
SYMPTOM_CONFIDENCE = 0.85
PROCEDURE_CONFIDENCE = 0.9
BLOOD_PRESSURE_CONFIDENCE = 0.95
HEART_RATE_CONFIDENCE = 0.95
TEMPERATURE_CONFIDENCE = 0.9

MEDICATION_WINDOW = 50
SYMPTOM_WINDOW = 30
PROCEDURE_WINDOW = 40

_DOSAGE_RE = re.compile(r"(\d+)\s*(mg|mcg|g|ml)", re.IGNORECASE)
_FREQUENCY_RE = re.compile(
    r"(once|twice|three times|daily|weekly|hourly|every \d+ hours)", re.IGNORECASE
)
_SEVERITY_RE = re.compile(r"(mild|moderate|severe|extreme)", re.IGNORECASE)
_DURATION_RE = re.compile(r"(\d+)\s*(days?|weeks?|months?|years?)", re.IGNORECASE)
_TIMING_RE = re.compile(r"(today|tomorrow|next week|in \d+ (days?|weeks?|months?))", re.IGNORECASE)

_VITAL_PATTERNS: tuple[tuple[str, re.Pattern[str], float], ...] = (
    (
        "blood_pressure",
        re.compile(r"(?:blood pressure|\bbp\b|\bb\.p\.)\s*:?\s*(\d{2,3}/\d{2,3})", re.IGNORECASE),
        BLOOD_PRESSURE_CONFIDENCE,
    ),
    (
        "heart_rate",
        re.compile(r"(?:heart rate|\bhr\b|\bpulse)\s*:?\s*(\d{2,3})\s*(?:bpm)?", re.IGNORECASE),
        HEART_RATE_CONFIDENCE,
    ),
    (
        "temperature",
        re.compile(r"(?:temperature|\btemp)\s*:?\s*(\d{2,3}\.?\d?)\s*(?:°?[fc]\b)?", re.IGNORECASE),
        TEMPERATURE_CONFIDENCE,
    ),
)


class EntityExtractor(Protocol):
    def extract(self, text: str) -> ExtractedEntities: ...


def extract_context(text: str, position: int, radius: int) -> str:
    """Characters within ``radius`` of ``position`` (clipped to the text)."""
    return text[max(0, position - radius) : position + radius]


def _search(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    return match.group(0) if match else None


def _keyword_pattern(term: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)


class KeywordEntityExtractor:
    """Default extractor: one word-boundary regex per catalog term."""

    def __init__(self, catalog: KeywordCatalog = DEFAULT_CATALOG) -> None:
        self.catalog = catalog
        self._medication_patterns = [(t, _keyword_pattern(t)) for t in catalog.medications]
        self._symptom_patterns = [(t, _keyword_pattern(t)) for t in catalog.symptoms]
        self._procedure_patterns = [(t, _keyword_pattern(t)) for t in catalog.procedures]

    def _medications(self, text: str) -> list[MedicationEntity]:
        found: list[MedicationEntity] = []
        for name, pattern in self._medication_patterns:
            for match in pattern.finditer(text):
                context = extract_context(text, match.start(), MEDICATION_WINDOW)
                found.append(
                    MedicationEntity(
                        name=name,
                        dosage=_search(_DOSAGE_RE, context),
                        frequency=_search(_FREQUENCY_RE, context),
                        confidence=MEDICATION_CONFIDENCE,
                        position=EntityPosition(start=match.start(), end=match.end()),
                    )
                )
        return found

    def _symptoms(self, text: str) -> list[SymptomEntity]:
        found: list[SymptomEntity] = []
        for name, pattern in self._symptom_patterns:
            for match in pattern.finditer(text):
                context = extract_context(text, match.start(), SYMPTOM_WINDOW)
                found.append(
                    SymptomEntity(
                        name=name,
                        severity=_search(_SEVERITY_RE, context),
                        duration=_search(_DURATION_RE, context),
                        confidence=SYMPTOM_CONFIDENCE,
                        position=EntityPosition(start=match.start(), end=match.end()),
                    )
                )
        return found

    def _procedures(self, text: str) -> list[ProcedureEntity]:
        found: list[ProcedureEntity] = []
        for name, pattern in self._procedure_patterns:
            for match in pattern.finditer(text):
                context = extract_context(text, match.start(), PROCEDURE_WINDOW)
                found.append(
                    ProcedureEntity(
                        name=name,
                        timing=_search(_TIMING_RE, context),
                        confidence=PROCEDURE_CONFIDENCE,
                        position=EntityPosition(start=match.start(), end=match.end()),
                    )
                )
        return found

    @staticmethod
    def _vitals(text: str) -> list[VitalEntity]:
        found: list[VitalEntity] = []
        for vital_type, pattern, confidence in _VITAL_PATTERNS:
            for match in pattern.finditer(text):
                found.append(
                    VitalEntity(
                        type=vital_type,
                        value=match.group(1),
                        confidence=confidence,
                        position=EntityPosition(start=match.start(), end=match.end()),
                    )
                )
        return found

    def _red_flags(self, text: str) -> list[str]:
        lowered = text.lower()
        return [flag for flag in self.catalog.red_flags if flag in lowered]

    def extract(self, text: str) -> ExtractedEntities:
        return ExtractedEntities(
            medications=self._medications(text),
            symptoms=self._symptoms(text),
            procedures=self._procedures(text),
            vitals=self._vitals(text),
            red_flags=self._red_flags(text),
        )


DEFAULT_EXTRACTOR = KeywordEntityExtractor()


def extract_medical_entities(
    text: str,
    extractor: EntityExtractor | None = None,
) -> ExtractedEntities:
    """Extract medications, symptoms, procedures, vitals and red flags from text."""
    if not text:
        return ExtractedEntities()
    return (extractor or DEFAULT_EXTRACTOR).extract(text)
