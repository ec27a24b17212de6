"""Blood-pressure trend answers for the patient chat, without an LLM."""

from __future__ import annotations

from clinical_scribe.config import settings
from clinical_scribe.models import (
    BloodPressurePoint,
    BPTrendPoint,
    BPTrendVisualization,
    SourceDetail,
)
from clinical_scribe.transcript.formatting import compact_whitespace

_BP_INTENT_TERMS = ("blood pressure", "systolic", "diastolic")
_COMPARISON_TERMS = (
    "compare",
    "trend",
    "last",
    "previous",
    "over time",
    "change",
    "history",
    "visits",
    "graph",
    "chart",
)

NOT_ENOUGH_HISTORY = (
    "I could not find enough blood pressure history to compare your recent visits yet."
)


def should_visualize_blood_pressure(question: str) -> bool:
    """True when the question asks to compare blood pressure across visits."""
    lower = question.lower()
    words = lower.replace("?", " ").replace(",", " ").split()
    has_bp_intent = any(term in lower for term in _BP_INTENT_TERMS) or "bp" in words
    if not has_bp_intent:
        return False
    return any(term in lower for term in _COMPARISON_TERMS)


def format_long_date(point: BloodPressurePoint) -> str:
    return f"{point.visit_date:%b} {point.visit_date.day}, {point.visit_date.year}"


def build_bp_visualization(
    question: str,
    history: list[BloodPressurePoint],
) -> BPTrendVisualization | None:
    if not should_visualize_blood_pressure(question) or len(history) < 2:
        return None

    points = history[-settings.bp_history_limit :]
    return BPTrendVisualization(
        title="Blood pressure across recent visits",
        description="Values extracted from your visit notes and transcript history.",
        data=[
            BPTrendPoint(
                label=point.label,
                visit_date=point.visit_date,
                systolic=point.systolic,
                diastolic=point.diastolic,
            )
            for point in points
        ],
    )


def build_trend_source_details(history: list[BloodPressurePoint]) -> list[SourceDetail]:
    """Citations backing each plotted point."""
    return [
        SourceDetail(
            source=point.source.value,
            visit_date=format_long_date(point),
            timestamp=point.timestamp,
            excerpt=f"BP {point.systolic}/{point.diastolic} mmHg. {compact_whitespace(point.excerpt)}",
        )
        for point in history[-settings.bp_history_limit :]
    ]


def _direction(delta: int) -> str:
    if delta == 0:
        return "unchanged"
    return "higher" if delta > 0 else "lower"


def describe_bp_trend(history: list[BloodPressurePoint]) -> str:
    """Compare the latest reading with the one before it."""
    if len(history) < 2:
        return NOT_ENOUGH_HISTORY

    previous, latest = history[-2], history[-1]
    systolic_delta = latest.systolic - previous.systolic
    diastolic_delta = latest.diastolic - previous.diastolic
    return " ".join(
        [
            f"From your recent visits, your latest blood pressure was "
            f"{latest.systolic}/{latest.diastolic} on {format_long_date(latest)}.",
            f"Compared with the previous visit ({previous.systolic}/{previous.diastolic}), "
            f"your systolic is {abs(systolic_delta)} mmHg {_direction(systolic_delta)} "
            f"and your diastolic is {abs(diastolic_delta)} mmHg {_direction(diastolic_delta)}.",
        ]
    )
