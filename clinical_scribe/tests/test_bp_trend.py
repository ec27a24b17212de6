from datetime import datetime
import unittest

from clinical_scribe.models import BloodPressurePoint, ReadingSource
from clinical_scribe.notes.bp_trend import (
    NOT_ENOUGH_HISTORY,
    build_bp_visualization,
    build_trend_source_details,
    describe_bp_trend,
    should_visualize_blood_pressure,
)

TREND_QUESTION = "How has my blood pressure changed over my last visits?"


def _point(month: int, day: int, systolic: int, diastolic: int) -> BloodPressurePoint:
    return BloodPressurePoint(
        visit_id=f"visit-{month}-{day}",
        visit_date=datetime(2024, month, day),
        label=f"{month}/{day}",
        systolic=systolic,
        diastolic=diastolic,
        source=ReadingSource.SOAP,
        excerpt=f"Objective:  BP {systolic}/{diastolic}",
    )


class BloodPressureTrendTests(unittest.TestCase):
    def test_question_intent(self) -> None:
        self.assertTrue(should_visualize_blood_pressure(TREND_QUESTION))
        self.assertTrue(should_visualize_blood_pressure("Show my BP trend"))
        self.assertFalse(should_visualize_blood_pressure("What is my blood pressure today?"))
        self.assertFalse(should_visualize_blood_pressure("What's the trend in my labs?"))

    def test_visualization_needs_two_points(self) -> None:
        self.assertIsNone(build_bp_visualization(TREND_QUESTION, [_point(1, 5, 130, 85)]))

    def test_visualization_requires_comparison_question(self) -> None:
        history = [_point(1, 5, 130, 85), _point(2, 5, 128, 82)]
        self.assertIsNone(build_bp_visualization("What is my blood pressure?", history))

    def test_visualization_is_capped_to_recent_points(self) -> None:
        history = [_point(month, 1, 120 + month, 80) for month in range(1, 9)]

        visualization = build_bp_visualization(TREND_QUESTION, history)

        self.assertEqual(visualization.type, "bp_trend")
        self.assertEqual([p.systolic for p in visualization.data], [123, 124, 125, 126, 127, 128])

    def test_describe_trend(self) -> None:
        answer = describe_bp_trend([_point(2, 1, 140, 90), _point(3, 5, 130, 85)])

        self.assertIn("latest blood pressure was 130/85 on Mar 5, 2024.", answer)
        self.assertIn("previous visit (140/90)", answer)
        self.assertIn("systolic is 10 mmHg lower and your diastolic is 5 mmHg lower", answer)

    def test_describe_trend_unchanged_and_higher(self) -> None:
        answer = describe_bp_trend([_point(2, 1, 120, 80), _point(3, 5, 120, 88)])

        self.assertIn("systolic is 0 mmHg unchanged", answer)
        self.assertIn("diastolic is 8 mmHg higher", answer)

    def test_describe_trend_without_history(self) -> None:
        self.assertEqual(describe_bp_trend([]), NOT_ENOUGH_HISTORY)
        self.assertEqual(describe_bp_trend([_point(1, 1, 120, 80)]), NOT_ENOUGH_HISTORY)

    def test_source_details(self) -> None:
        details = build_trend_source_details([_point(3, 5, 130, 85)])

        self.assertEqual(details[0].source, "SOAP")
        self.assertEqual(details[0].visit_date, "Mar 5, 2024")
        self.assertEqual(details[0].excerpt, "BP 130/85 mmHg. Objective: BP 130/85")


if __name__ == "__main__":
    unittest.main()
