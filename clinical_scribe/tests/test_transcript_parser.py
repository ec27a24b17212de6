import json
import time
import unittest

from clinical_scribe.extraction.vitals import extract_reading
from clinical_scribe.models import ReadingSource, Speaker
from clinical_scribe.transcript.formatting import segments_to_json
from clinical_scribe.transcript.parser import (
    estimate_duration_ms,
    parse_structured_transcript,
    parse_transcript_text,
    split_transcript_lines,
    strip_speaker_label,
)
from clinical_scribe.transcript.speaker import infer_speaker_from_text


class TranscriptParserTests(unittest.TestCase):
    def test_labeled_sentences_in_single_line(self) -> None:
        raw = (
            "Doctor: Your blood pressure today is 132 over 82. "
            "Patient: Okay, that's better than last time."
        )

        segments = parse_transcript_text(raw)

        self.assertEqual(len(segments), 2)
        self.assertEqual(segments[0].speaker, Speaker.CLINICIAN)
        self.assertEqual(segments[0].text, "Your blood pressure today is 132 over 82.")
        self.assertEqual(segments[1].speaker, Speaker.PATIENT)
        self.assertEqual(segments[1].text, "Okay, that's better than last time.")
        self.assertEqual((segments[0].start_ms, segments[0].end_ms), (0, 4000))
        self.assertEqual((segments[1].start_ms, segments[1].end_ms), (4000, 7000))

        reading = extract_reading(segments[0].text, ReadingSource.TRANSCRIPT)
        self.assertIsNotNone(reading)
        self.assertEqual((reading.systolic, reading.diastolic), (132, 82))
        self.assertEqual(reading.source, ReadingSource.TRANSCRIPT)

    def test_unlabeled_line_infers_patient_from_hint(self) -> None:
        segments = parse_transcript_text("I have a headache and I started lisinopril 10mg daily")

        self.assertEqual(len(segments), 1)
        self.assertEqual(segments[0].speaker, Speaker.PATIENT)

    def test_single_unit_without_punctuation_becomes_one_segment(self) -> None:
        raw = "the cough started last night and kept me awake"

        segments = parse_transcript_text(raw)

        self.assertEqual(len(segments), 1)
        self.assertEqual(segments[0].text, raw)
        self.assertEqual(segments[0].start_ms, 0)

    def test_structured_array_inside_prose_takes_precedence(self) -> None:
        raw = (
            "Here is the transcript you asked for:\n"
            '[{"speaker": "clinician", "start_ms": 0, "end_ms": 2000, "text": " Hello there "},'
            ' {"speaker": "doctor", "text": "I feel sick"},'
            ' {"speaker": "patient", "text": "   "},'
            ' {"speaker": "clinician"}]\n'
            "Let me know if you need anything else."
        )

        segments = parse_transcript_text(raw)

        self.assertEqual(len(segments), 2)
        self.assertEqual(segments[0].speaker, Speaker.CLINICIAN)
        self.assertEqual(segments[0].text, "Hello there")
        self.assertEqual((segments[0].start_ms, segments[0].end_ms), (0, 2000))
        # Unknown speaker values default to patient; missing timing follows the cursor.
        self.assertEqual(segments[1].speaker, Speaker.PATIENT)
        self.assertEqual((segments[1].start_ms, segments[1].end_ms), (2000, 3500))

    def test_structured_short_end_is_recomputed(self) -> None:
        raw = json.dumps(
            [{"speaker": "patient", "start_ms": 1000, "end_ms": 1200, "text": "my pain is worse"}]
        )

        segments = parse_transcript_text(raw)

        self.assertEqual((segments[0].start_ms, segments[0].end_ms), (1000, 3000))

    def test_structured_negative_and_non_numeric_timing(self) -> None:
        raw = json.dumps(
            [
                {"speaker": "clinician", "start_ms": -50, "end_ms": 2000, "text": "Hi"},
                {"speaker": "patient", "start_ms": "soon", "end_ms": None, "text": "Hello"},
            ]
        )

        segments = parse_transcript_text(raw)

        self.assertEqual((segments[0].start_ms, segments[0].end_ms), (0, 2000))
        self.assertEqual((segments[1].start_ms, segments[1].end_ms), (2000, 3500))

    def test_array_without_usable_elements_falls_through_to_lines(self) -> None:
        self.assertEqual(parse_structured_transcript("Scores [1, 2, 3] today"), [])

        segments = parse_transcript_text("Scores [1, 2, 3] today")

        self.assertEqual(len(segments), 1)
        self.assertEqual(segments[0].text, "Scores [1, 2, 3] today")

    def test_malformed_json_falls_through_to_lines(self) -> None:
        raw = 'Doctor: [{"speaker": "clinician", "text": "broken"\nPatient: I feel fine'

        self.assertIsNone(parse_structured_transcript(raw))
        segments = parse_transcript_text(raw)

        self.assertEqual([s.speaker for s in segments], [Speaker.CLINICIAN, Speaker.PATIENT])
        self.assertEqual(segments[1].text, "I feel fine")

    def test_timestamps_and_labels_are_stripped(self) -> None:
        raw = (
            "[00:05] Doctor: How are you feeling?\n"
            "(00:12) Patient: I feel dizzy.\n"
            "[1:02:33] Dr.: We should check your blood pressure.\n"
            "PT: Sure."
        )

        segments = parse_transcript_text(raw)

        self.assertEqual(
            [s.speaker for s in segments],
            [Speaker.CLINICIAN, Speaker.PATIENT, Speaker.CLINICIAN, Speaker.PATIENT],
        )
        self.assertEqual(
            [s.text for s in segments],
            [
                "How are you feeling?",
                "I feel dizzy.",
                "We should check your blood pressure.",
                "Sure.",
            ],
        )

    def test_label_only_lines_are_skipped(self) -> None:
        segments = parse_transcript_text("Doctor:\n[00:10]\nPatient: I have a cough")

        self.assertEqual(len(segments), 1)
        self.assertEqual(segments[0].speaker, Speaker.PATIENT)
        self.assertEqual(segments[0].text, "I have a cough")

    def test_ambiguous_lines_alternate_speakers(self) -> None:
        segments = parse_transcript_text("Okay.\nSure.\nAlright then.")

        self.assertEqual(
            [s.speaker for s in segments],
            [Speaker.CLINICIAN, Speaker.PATIENT, Speaker.CLINICIAN],
        )

    def test_empty_input_yields_no_segments(self) -> None:
        self.assertEqual(parse_transcript_text(""), [])
        self.assertEqual(parse_transcript_text("   \n\t  "), [])
        self.assertEqual(parse_transcript_text("Doctor:\nPatient:"), [])

    def test_synthesized_timing_is_ordered(self) -> None:
        raw = "\n".join(
            [
                "Doctor: What brings you in?",
                "Patient: " + " ".join(["word"] * 40),
                "Doctor: Ok.",
                "Patient: I have had a cough for two weeks and it hurts when I breathe.",
            ]
        )

        segments = parse_transcript_text(raw)

        for segment in segments:
            self.assertGreater(segment.end_ms, segment.start_ms)
        for previous, current in zip(segments, segments[1:]):
            self.assertGreaterEqual(current.start_ms, previous.end_ms)
        self.assertEqual(segments[1].end_ms - segments[1].start_ms, 15000)
        self.assertEqual(segments[2].end_ms - segments[2].start_ms, 1500)

    def test_parsing_sanitized_output_is_idempotent(self) -> None:
        raw = (
            "[00:00] Doctor: Your blood pressure is 140/90.\n"
            "[00:04] Patient: I have been taking my lisinopril.\n"
            "[00:09] Doctor: Let's follow up in 2 weeks."
        )
        first = parse_transcript_text(raw)

        second = parse_transcript_text(segments_to_json(first))

        self.assertEqual(first, second)

    def test_line_turns_are_laid_end_to_end(self) -> None:
        segments = parse_transcript_text("Doctor: Hello there.\nPatient: Hi.\nDoctor: Any pain today?")

        self.assertEqual(segments[0].start_ms, 0)
        for previous, current in zip(segments, segments[1:]):
            self.assertEqual(current.start_ms, previous.end_ms)

    def test_many_unclosed_brackets_parse_quickly(self) -> None:
        raw = "Patient: note [ " * 20000

        started = time.perf_counter()
        segments = parse_transcript_text(raw)
        elapsed = time.perf_counter() - started

        self.assertEqual(len(segments), 1)
        self.assertEqual(segments[0].speaker, Speaker.PATIENT)
        self.assertLess(elapsed, 2.0)


class TranscriptLineSplitTests(unittest.TestCase):
    def test_multiline_text_splits_on_newlines_only(self) -> None:
        lines = split_transcript_lines("First. Still first.\r\n\r\nSecond line!")
        self.assertEqual(lines, ["First. Still first.", "Second line!"])

    def test_single_line_splits_on_sentences(self) -> None:
        lines = split_transcript_lines("How are you? Not great! My temp is 98.6 today.")
        self.assertEqual(lines, ["How are you?", "Not great!", "My temp is 98.6 today."])

    def test_duration_estimate_is_clamped(self) -> None:
        self.assertEqual(estimate_duration_ms("yes"), 1500)
        self.assertEqual(estimate_duration_ms("one two three four five"), 2500)
        self.assertEqual(estimate_duration_ms(" ".join(["word"] * 100)), 15000)

    def test_strip_speaker_label(self) -> None:
        self.assertEqual(strip_speaker_label("Provider: hello"), (Speaker.CLINICIAN, "hello"))
        self.assertEqual(strip_speaker_label("pt : ok"), (Speaker.PATIENT, "ok"))
        self.assertEqual(strip_speaker_label("Doctors say hi"), (None, "Doctors say hi"))


class SpeakerInferenceTests(unittest.TestCase):
    def test_clinician_hints_win(self) -> None:
        self.assertEqual(
            infer_speaker_from_text("I recommend we should prescribe rest", Speaker.CLINICIAN),
            Speaker.CLINICIAN,
        )

    def test_patient_hints_win(self) -> None:
        self.assertEqual(
            infer_speaker_from_text("It hurts and I feel tired", Speaker.PATIENT),
            Speaker.PATIENT,
        )

    def test_tie_alternates_from_previous(self) -> None:
        self.assertEqual(infer_speaker_from_text("Okay", Speaker.CLINICIAN), Speaker.PATIENT)
        self.assertEqual(infer_speaker_from_text("Okay", Speaker.PATIENT), Speaker.CLINICIAN)
        # One hint on each side is still a tie.
        self.assertEqual(
            infer_speaker_from_text("I have to say we should wait", Speaker.PATIENT),
            Speaker.CLINICIAN,
        )


if __name__ == "__main__":
    unittest.main()
