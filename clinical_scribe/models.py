from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# --- Transcript ---

class Speaker(str, Enum):
    CLINICIAN = "clinician"
    PATIENT = "patient"


class TranscriptSegment(BaseModel):
    """One speaker turn of a visit conversation."""

    model_config = ConfigDict(frozen=True)

    speaker: Speaker
    start_ms: int = Field(ge=0)
    end_ms: int
    text: str

    @field_validator("text")
    @classmethod
    def _text_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("segment text must not be empty")
        return value

    @model_validator(mode="after")
    def _end_after_start(self) -> TranscriptSegment:
        if self.end_ms <= self.start_ms:
            raise ValueError("end_ms must be greater than start_ms")
        return self


# --- Vitals ---

class ReadingSource(str, Enum):
    SUMMARY = "Summary"
    SOAP = "SOAP"
    TRANSCRIPT = "Transcript"


class BloodPressureReading(BaseModel):
    model_config = ConfigDict(frozen=True)

    systolic: int = Field(ge=70, le=260)
    diastolic: int = Field(ge=40, le=160)
    source: ReadingSource
    timestamp: str | None = None  # mm:ss, transcript readings only
    excerpt: str


class BloodPressurePoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    visit_id: str
    visit_date: datetime
    label: str
    systolic: int
    diastolic: int
    source: ReadingSource
    timestamp: str | None = None
    excerpt: str


class VisitDocumentation(BaseModel):
    visit_id: str
    visit_date: datetime
    summary: str = ""
    soap_notes: str = ""
    transcript_json: str | None = None

    @field_validator("visit_date")
    @classmethod
    def _naive_dates_are_utc(cls, value: datetime) -> datetime:
        # Naive and aware dates must sort together.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


# --- Keyword entities ---

class EntityPosition(BaseModel):
    start: int
    end: int


class MedicationEntity(BaseModel):
    name: str
    dosage: str | None = None
    frequency: str | None = None
    confidence: float
    position: EntityPosition


class SymptomEntity(BaseModel):
    name: str
    severity: str | None = None
    duration: str | None = None
    confidence: float
    position: EntityPosition


class ProcedureEntity(BaseModel):
    name: str
    timing: str | None = None
    confidence: float
    position: EntityPosition


class VitalEntity(BaseModel):
    type: str
    value: str
    confidence: float
    position: EntityPosition


class ExtractedEntities(BaseModel):
    medications: list[MedicationEntity] = Field(default_factory=list)
    symptoms: list[SymptomEntity] = Field(default_factory=list)
    procedures: list[ProcedureEntity] = Field(default_factory=list)
    vitals: list[VitalEntity] = Field(default_factory=list)
    red_flags: list[str] = Field(default_factory=list)


# --- Follow-ups ---

class FollowUpPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"


class FollowUpItem(BaseModel):
    task: str
    timestamp_ms: int
    priority: FollowUpPriority = FollowUpPriority.MEDIUM
    timing: str = "Not specified"


# --- Visit artifacts ---

class MedicationSummary(BaseModel):
    name: str
    dosage: str | None = None
    frequency: str | None = None
    mentions: int = 1


class VisitArtifacts(BaseModel):
    after_visit_summary: str
    soap_draft: str
    medications: list[MedicationSummary] = Field(default_factory=list)
    symptoms: list[str] = Field(default_factory=list)
    procedures: list[str] = Field(default_factory=list)
    vitals: list[VitalEntity] = Field(default_factory=list)
    red_flags: list[str] = Field(default_factory=list)
    followups: list[FollowUpItem] = Field(default_factory=list)


# --- Blood pressure trend ---

class BPTrendPoint(BaseModel):
    label: str
    visit_date: datetime
    systolic: int
    diastolic: int


class BPTrendVisualization(BaseModel):
    type: str = "bp_trend"
    title: str
    description: str | None = None
    data: list[BPTrendPoint] = Field(default_factory=list)


class SourceDetail(BaseModel):
    source: str
    visit_date: str | None = None
    timestamp: str | None = None
    excerpt: str


# --- SOAP note ---

class SOAPNote(BaseModel):
    subjective: str
    objective: str
    assessment: str
    plan: str


# --- HTTP payloads ---

class TranscriptTextRequest(BaseModel):
    text: str


class TranscriptResponse(BaseModel):
    transcript: list[TranscriptSegment]
    duration_ms: int


class TranscriptPreviewResponse(BaseModel):
    transcript: list[TranscriptSegment]
    summary: str
    soap_notes: str
    chief_complaint: str


class FreeTextRequest(BaseModel):
    text: str


class SegmentsRequest(BaseModel):
    transcript: list[TranscriptSegment] = Field(default_factory=list)


class FinalizeVisitRequest(BaseModel):
    visit_id: str
    transcript: list[TranscriptSegment] = Field(default_factory=list)


class FinalizeVisitResponse(BaseModel):
    visit_id: str
    artifacts: VisitArtifacts


class BPHistoryRequest(BaseModel):
    visits: list[VisitDocumentation] = Field(default_factory=list)
    question: str | None = None


class BPHistoryResponse(BaseModel):
    history: list[BloodPressurePoint] = Field(default_factory=list)
    visualization: BPTrendVisualization | None = None
    source_details: list[SourceDetail] = Field(default_factory=list)
    answer: str | None = None
