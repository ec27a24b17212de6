"""Speaker attribution for unlabeled transcript lines.

This is a bag-of-phrases scorer, not NLP: each hint phrase found in the
case-folded line counts one point for its side. Lines that score evenly
alternate from the previous speaker so an ambiguous run does not collapse
onto a single participant.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from clinical_scribe.models import Speaker


_CLINICIAN_HINTS = (
    "i recommend",
    "i am going to",
    "i'm going to",
    "take this medication",
    "your blood pressure",
    "we should",
    "we will",
    "follow up",
    "prescribe",
    "let us",
    "let's",
)

_PATIENT_HINTS = (
    "i feel",
    "i've",
    "i have",
    "my pain",
    "my symptoms",
    "it hurts",
    "i noticed",
    "i am having",
    "i'm having",
)


class SpeakerHints(BaseModel):
    model_config = ConfigDict(frozen=True)

    clinician: tuple[str, ...] = _CLINICIAN_HINTS
    patient: tuple[str, ...] = _PATIENT_HINTS


DEFAULT_SPEAKER_HINTS = SpeakerHints()


def _score(text: str, hints: tuple[str, ...]) -> int:
    return sum(1 for hint in hints if hint in text)


def alternate_speaker(speaker: Speaker) -> Speaker:
    return Speaker.PATIENT if speaker == Speaker.CLINICIAN else Speaker.CLINICIAN


def infer_speaker_from_text(
    text: str,
    previous_speaker: Speaker,
    hints: SpeakerHints = DEFAULT_SPEAKER_HINTS,
) -> Speaker:
    """Guess who spoke ``text``; ties alternate from ``previous_speaker``."""
    normalized = text.casefold()
    clinician_score = _score(normalized, hints.clinician)
    patient_score = _score(normalized, hints.patient)

    if clinician_score > patient_score:
        return Speaker.CLINICIAN
    if patient_score > clinician_score:
        return Speaker.PATIENT
    return alternate_speaker(previous_speaker)
