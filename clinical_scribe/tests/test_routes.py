import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from clinical_scribe.config import settings
from clinical_scribe.main import app

TRANSCRIPT_TEXT = (
    "Doctor: Your blood pressure today is 132 over 82.\n"
    "Patient: I have a headache and I started lisinopril 10mg daily.\n"
    "Doctor: Let's follow up in 2 weeks."
)


class RouteTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)
        llm_patch = patch.object(settings, "llm_enabled", False)
        llm_patch.start()
        self.addCleanup(llm_patch.stop)

    def test_health(self) -> None:
        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")
        self.assertFalse(response.json()["llm_enabled"])

    def test_parse_transcript(self) -> None:
        response = self.client.post("/api/transcripts/parse", json={"text": TRANSCRIPT_TEXT})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(
            [segment["speaker"] for segment in body["transcript"]],
            ["clinician", "patient", "clinician"],
        )
        self.assertEqual(body["duration_ms"], body["transcript"][-1]["end_ms"])

    def test_parse_rejects_unusable_text(self) -> None:
        response = self.client.post("/api/transcripts/parse", json={"text": "  \n "})

        self.assertEqual(response.status_code, 400)

    def test_preview_without_llm(self) -> None:
        response = self.client.post("/api/transcripts/preview", json={"text": TRANSCRIPT_TEXT})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["summary"].startswith("Conversation summary:"))
        self.assertIn("## S (Subjective)", body["soap_notes"])
        self.assertEqual(
            body["chief_complaint"], "I have a headache and I started lisinopril 10mg daily."
        )

    def test_extract_entities(self) -> None:
        response = self.client.post(
            "/api/entities/extract",
            json={"text": "I have a headache and I started lisinopril 10mg daily"},
        )

        body = response.json()
        self.assertEqual(body["medications"][0]["name"], "lisinopril")
        self.assertEqual(body["symptoms"][0]["name"], "headache")

    def test_extract_followups(self) -> None:
        transcript = self.client.post(
            "/api/transcripts/parse", json={"text": TRANSCRIPT_TEXT}
        ).json()["transcript"]

        response = self.client.post("/api/followups/extract", json={"transcript": transcript})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["timing"] for item in response.json()], ["in 2 weeks"])

    def test_finalize_visit(self) -> None:
        transcript = self.client.post(
            "/api/transcripts/parse", json={"text": TRANSCRIPT_TEXT}
        ).json()["transcript"]

        response = self.client.post(
            "/api/visits/finalize", json={"visit_id": "visit-1", "transcript": transcript}
        )

        self.assertEqual(response.status_code, 200)
        artifacts = response.json()["artifacts"]
        self.assertEqual(artifacts["medications"][0]["name"], "lisinopril")
        self.assertEqual(artifacts["symptoms"], ["headache"])

    def test_finalize_rejects_empty_transcript(self) -> None:
        response = self.client.post("/api/visits/finalize", json={"visit_id": "visit-1"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Transcript is empty.")

    def test_bp_history(self) -> None:
        visits = [
            {"visit_id": "a", "visit_date": "2024-01-10T09:00:00", "soap_notes": "BP 142/92"},
            {"visit_id": "b", "visit_date": "2024-03-05T09:00:00", "summary": "Blood pressure 130/85."},
            {"visit_id": "c", "visit_date": "2024-02-01T09:00:00", "soap_notes": "No vitals."},
        ]

        response = self.client.post(
            "/api/patients/bp-history",
            json={"visits": visits, "question": "Compare my blood pressure over my last visits"},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual([point["visit_id"] for point in body["history"]], ["a", "b"])
        self.assertEqual(len(body["visualization"]["data"]), 2)
        self.assertEqual(len(body["source_details"]), 2)
        self.assertIn("130/85 on Mar 5, 2024", body["answer"])

    def test_bp_history_mixes_naive_and_aware_dates(self) -> None:
        visits = [
            {"visit_id": "aware", "visit_date": "2024-01-01T10:00:00Z", "soap_notes": "BP 140/90"},
            {"visit_id": "naive", "visit_date": "2024-02-01T10:00:00", "soap_notes": "BP 132/84"},
        ]

        response = self.client.post(
            "/api/patients/bp-history",
            json={"visits": visits, "question": "Show my blood pressure trend"},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual([point["visit_id"] for point in body["history"]], ["aware", "naive"])
        self.assertIn("132/84 on Feb 1, 2024", body["answer"])

    def test_bp_history_without_question(self) -> None:
        visits = [{"visit_id": "a", "visit_date": "2024-01-10T09:00:00", "soap_notes": "BP 142/92"}]

        body = self.client.post("/api/patients/bp-history", json={"visits": visits}).json()

        self.assertEqual(len(body["history"]), 1)
        self.assertIsNone(body["visualization"])
        self.assertIsNone(body["answer"])


if __name__ == "__main__":
    unittest.main()
