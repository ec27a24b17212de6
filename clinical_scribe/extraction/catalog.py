"""Fixed keyword catalogs used by the deterministic extractors."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


_MEDICATIONS = (
    "aspirin",
    "ibuprofen",
    "acetaminophen",
    "tylenol",
    "advil",
    "lisinopril",
    "metformin",
    "atorvastatin",
    "amlodipine",
    "simvastatin",
    "omeprazole",
    "albuterol",
    "levothyroxine",
    "losartan",
    "gabapentin",
    "metoprolol",
    "hydrochlorothiazide",
    "sertraline",
    "montelukast",
)

_SYMPTOMS = (
    "pain",
    "headache",
    "fever",
    "cough",
    "fatigue",
    "nausea",
    "dizziness",
    "shortness of breath",
    "chest pain",
    "abdominal pain",
    "back pain",
    "sore throat",
    "runny nose",
    "congestion",
    "vomiting",
    "diarrhea",
    "constipation",
    "insomnia",
    "anxiety",
)

_PROCEDURES = (
    "x-ray",
    "blood test",
    "mri",
    "ct scan",
    "ultrasound",
    "physical exam",
    "vaccination",
    "vaccine",
    "surgery",
    "biopsy",
    "ecg",
    "ekg",
    "colonoscopy",
    "endoscopy",
)

_RED_FLAGS = (
    "chest pain",
    "trouble breathing",
    "difficulty breathing",
    "severe headache",
    "suicidal",
    "allergic reaction",
    "severe bleeding",
    "stroke",
    "heart attack",
)

_FOLLOW_UP_PHRASES = (
    "follow up",
    "follow-up",
    "come back",
    "return",
    "schedule",
    "appointment",
    "blood test",
    "blood work",
    "next week",
    "two weeks",
    "next visit",
)


class KeywordCatalog(BaseModel):
    """Immutable keyword lists for entity, red-flag and follow-up matching."""

    model_config = ConfigDict(frozen=True)

    medications: tuple[str, ...] = _MEDICATIONS
    symptoms: tuple[str, ...] = _SYMPTOMS
    procedures: tuple[str, ...] = _PROCEDURES
    red_flags: tuple[str, ...] = _RED_FLAGS
    follow_up_phrases: tuple[str, ...] = _FOLLOW_UP_PHRASES


DEFAULT_CATALOG = KeywordCatalog()