"""Deterministic summary and SOAP generators used when no LLM is available."""

from __future__ import annotations

from clinical_scribe.models import (
    MedicationSummary,
    SOAPNote,
    Speaker,
    TranscriptSegment,
    VitalEntity,
)
from clinical_scribe.transcript.formatting import compact_whitespace, derive_chief_complaint

NO_TRANSCRIPT_SUMMARY = "No transcript segments available."


def _statements(segments: list[TranscriptSegment], speaker: Speaker, limit: int) -> list[str]:
    return [
        compact_whitespace(segment.text)
        for segment in segments
        if segment.speaker == speaker
    ][:limit]


def generate_fallback_summary(segments: list[TranscriptSegment]) -> str:
    if not segments:
        return NO_TRANSCRIPT_SUMMARY

    lines = ["Conversation summary:"]
    patient_statements = _statements(segments, Speaker.PATIENT, 4)
    if patient_statements:
        lines.extend(["", "Patient shared:"])
        lines.extend(f"- {line}" for line in patient_statements)

    clinician_statements = _statements(segments, Speaker.CLINICIAN, 4)
    if clinician_statements:
        lines.extend(["", "Clinician discussed:"])
        lines.extend(f"- {line}" for line in clinician_statements)

    return "\n".join(lines)


def generate_fallback_soap(segments: list[TranscriptSegment]) -> SOAPNote:
    """Build a skeleton SOAP note straight from the speaker turns."""
    subjective = " ".join(_statements(segments, Speaker.PATIENT, 6))
    objective_points = _statements(segments, Speaker.CLINICIAN, 4)

    return SOAPNote(
        subjective=subjective or "Patient-reported symptoms and concerns to be completed.",
        objective=(
            "\n".join(f"- {line}" for line in objective_points)
            if objective_points
            else "- Objective findings to be completed."
        ),
        assessment=(
            f"- Primary concern: {derive_chief_complaint(segments)}\n"
            "- Clinical impression: To be completed by clinician."
        ),
        plan=(
            "- Continue assessment and treatment based on clinical findings.\n"
            "- Review medications, follow-up schedule, and return precautions with patient."
        ),
    )


def render_soap_markdown(note: SOAPNote) -> str:
    return (
        "# SOAP Note\n\n"
        f"## S (Subjective)\n{note.subjective}\n\n"
        f"## O (Objective)\n{note.objective}\n\n"
        f"## A (Assessment)\n{note.assessment}\n\n"
        f"## P (Plan)\n{note.plan}\n"
    )


def _dose_text(medication: MedicationSummary) -> str:
    return " ".join(part for part in (medication.dosage, medication.frequency) if part)


def _medication_line(medication: MedicationSummary) -> str:
    return f"{medication.name} {_dose_text(medication)}".strip()


def generate_after_visit_summary(
    segments: list[TranscriptSegment],
    medications: list[MedicationSummary],
    symptoms: list[str],
) -> str:
    """Patient-facing markdown recap of the visit."""
    discussed = _statements(segments, Speaker.PATIENT, 3)
    sections = [
        "# Your Visit Summary",
        "## What We Discussed\n" + "\n".join(f"- {line}" for line in discussed),
        "## Medications Prescribed\n"
        + (
            "\n".join(f"- **{m.name}** {_dose_text(m)}".rstrip() for m in medications)
            if medications
            else "- No new medications prescribed"
        ),
        "## Symptoms Discussed\n"
        + (
            "\n".join(f"- {symptom}" for symptom in symptoms)
            if symptoms
            else "- No specific symptoms documented"
        ),
        "## Important Notes\n"
        "- Take all medications as prescribed\n"
        "- Monitor your symptoms\n"
        "- Contact the office if symptoms worsen or you have concerns",
        "## Next Steps\n"
        "- Follow up as scheduled\n"
        "- Complete any recommended tests\n"
        "- Keep track of your blood pressure/symptoms as discussed",
    ]
    return "\n\n".join(sections)


def generate_soap_draft(
    segments: list[TranscriptSegment],
    medications: list[MedicationSummary],
    symptoms: list[str],
    vitals: list[VitalEntity],
) -> str:
    """Clinician-facing markdown SOAP draft built from extracted entities."""
    subjective = " ".join(_statements(segments, Speaker.PATIENT, 5))
    objective_lines = []
    if vitals:
        objective_lines.append(
            "Vitals: " + ", ".join(f"{vital.type}: {vital.value}" for vital in vitals)
        )
    if symptoms:
        objective_lines.append("Symptoms: " + ", ".join(symptoms))

    assessment_lines = [f"Chief complaint: {symptoms[0] if symptoms else 'Follow-up visit'}"]
    if len(symptoms) > 1:
        assessment_lines.append("Additional concerns: " + ", ".join(symptoms[1:]))

    plan_lines = []
    if medications:
        plan_lines.append("**Medications:**")
        plan_lines.extend(f"- {_medication_line(m)}" for m in medications)
        plan_lines.append("")
    plan_lines.extend(
        [
            "**Follow-up:** As discussed with patient",
            "",
            "**Patient Education:** Medication instructions provided, warning signs reviewed",
        ]
    )

    return (
        "# SOAP Note (Draft)\n\n"
        f"## S (Subjective)\n{subjective}\n\n"
        "## O (Objective)\n"
        + ("\n".join(objective_lines) + "\n\n" if objective_lines else "")
        + "Physical examination findings: [To be completed by clinician]\n\n"
        "## A (Assessment)\n" + "\n".join(assessment_lines) + "\n\n"
        "## P (Plan)\n" + "\n".join(plan_lines) + "\n\n"
        "_Note: This is a draft. Please review and complete before finalizing._"
    )
