"""Run each gold vignette through the transcript parser and extractors and collect outputs."""

import json
import sys
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from clinical_scribe.extraction.entities import extract_medical_entities
from clinical_scribe.extraction.followups import extract_followups
from clinical_scribe.extraction.vitals import extract_reading_from_segments
from clinical_scribe.transcript.parser import parse_transcript_text

VIGNETTES_DIR = Path(__file__).parent / "vignettes"
RESULTS_DIR = Path(__file__).parent / "results"


def load_vignettes() -> list[dict]:
    """Load all vignette JSON files."""
    vignettes = []
    for f in sorted(VIGNETTES_DIR.glob("*.json")):
        with open(f) as fh:
            v = json.load(fh)
            v["_file"] = f.name
            vignettes.append(v)
    return vignettes


def evaluate_vignette(vignette: dict) -> dict:
    """Parse one vignette transcript and extract its clinical signals."""
    start = time.perf_counter()

    segments = parse_transcript_text(vignette["transcript"])
    entities = [extract_medical_entities(segment.text) for segment in segments]
    reading = extract_reading_from_segments(segments)
    followups = extract_followups(segments)

    elapsed = time.perf_counter() - start

    return {
        "vignette_id": vignette["id"],
        "vignette_file": vignette["_file"],
        "specialty": vignette["specialty"],
        "title": vignette["title"],
        "segments": [segment.model_dump(mode="json") for segment in segments],
        "entities": {
            "medications": sorted({m.name for e in entities for m in e.medications}),
            "symptoms": sorted({s.name for e in entities for s in e.symptoms}),
            "procedures": sorted({p.name for e in entities for p in e.procedures}),
        },
        "blood_pressure": (
            {"systolic": reading.systolic, "diastolic": reading.diastolic} if reading else None
        ),
        "followup_count": len(followups),
        "gold_speakers": vignette["gold_speakers"],
        "gold_entities": vignette["gold_entities"],
        "gold_blood_pressure": vignette["gold_blood_pressure"],
        "gold_followup_count": vignette["gold_followup_count"],
        "latency_seconds": elapsed,
    }


def main():
    vignettes = load_vignettes()
    if not vignettes:
        print("No vignettes found in", VIGNETTES_DIR)
        return

    RESULTS_DIR.mkdir(exist_ok=True)
    results = []

    print(f"Running evaluation on {len(vignettes)} vignettes...")
    for i, v in enumerate(vignettes):
        print(f"  [{i+1}/{len(vignettes)}] {v['title']}...", end=" ", flush=True)
        try:
            result = evaluate_vignette(v)
        except (KeyError, ValueError) as e:
            print(f"FAILED: {e}")
            results.append({
                "vignette_id": v.get("id"),
                "vignette_file": v["_file"],
                "error": str(e),
            })
            continue
        results.append(result)
        print(f"done ({len(result['segments'])} segments)")

    output_path = RESULTS_DIR / "evaluation_results.json"
    with open(output_path, "w") as f:
        json.dump(results, f, indent=2)
    print(f"\nResults saved to {output_path}")

    successful = [r for r in results if "error" not in r]
    print(f"  Successful: {len(successful)}/{len(results)}")


if __name__ == "__main__":
    main()
