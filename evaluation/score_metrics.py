"""Compute evaluation metrics from extraction results."""

import json
import sys
from pathlib import Path

import numpy as np

RESULTS_DIR = Path(__file__).parent / "results"
ENTITY_KINDS = ("medications", "symptoms", "procedures")


def score_speaker_accuracy(result: dict) -> float:
    """SpeakerAccuracy = turns attributed to the gold speaker / gold turns.

    Turns are aligned by position; missing or extra segments count as misses.
    """
    gold = result.get("gold_speakers", [])
    if not gold:
        return 1.0
    predicted = [segment["speaker"] for segment in result.get("segments", [])]
    matched = sum(1 for p, g in zip(predicted, gold) if p == g)
    return matched / max(len(gold), len(predicted))


def score_entities(result: dict) -> tuple[float, float]:
    """Micro precision and recall over entity names of every kind."""
    predicted = {(kind, name) for kind in ENTITY_KINDS for name in result["entities"].get(kind, [])}
    gold = {(kind, name) for kind in ENTITY_KINDS for name in result["gold_entities"].get(kind, [])}

    true_positives = len(predicted & gold)
    precision = true_positives / len(predicted) if predicted else 1.0
    recall = true_positives / len(gold) if gold else 1.0
    return precision, recall


def score_blood_pressure(result: dict) -> float:
    """1.0 when the reading (or its absence) matches gold exactly."""
    return 1.0 if result.get("blood_pressure") == result.get("gold_blood_pressure") else 0.0


def score_followups(result: dict) -> float:
    """Absolute error in the number of follow-up items."""
    return float(abs(result.get("followup_count", 0) - result.get("gold_followup_count", 0)))


def _summary(scores: list[float], target: float | None = None) -> dict:
    data = {
        "mean": round(float(np.mean(scores)), 3),
        "std": round(float(np.std(scores)), 3),
        "min": round(float(np.min(scores)), 3),
    }
    if target is not None:
        data["target"] = target
        data["met"] = float(np.mean(scores)) >= target
    return data


def compute_all_metrics(results: list[dict]) -> dict:
    """Compute all metrics across all vignettes."""
    successful = [r for r in results if "error" not in r]
    if not successful:
        return {"error": "No successful results to score."}

    metrics = {
        "n_vignettes": len(successful),
        "n_failed": len(results) - len(successful),
    }

    speaker_scores = []
    precision_scores = []
    recall_scores = []
    bp_scores = []
    followup_errors = []
    latencies = []

    per_vignette = []
    for r in successful:
        sa = score_speaker_accuracy(r)
        precision, recall = score_entities(r)
        bp = score_blood_pressure(r)
        fu = score_followups(r)
        lat = r.get("latency_seconds", 0)

        speaker_scores.append(sa)
        precision_scores.append(precision)
        recall_scores.append(recall)
        bp_scores.append(bp)
        followup_errors.append(fu)
        latencies.append(lat)

        per_vignette.append({
            "id": r["vignette_id"],
            "specialty": r["specialty"],
            "speaker_accuracy": round(sa, 3),
            "entity_precision": round(precision, 3),
            "entity_recall": round(recall, 3),
            "bp_exact_match": bp,
            "followup_count_error": fu,
            "latency_ms": round(lat * 1000, 2),
        })

    metrics["aggregate"] = {
        "speaker_accuracy": _summary(speaker_scores, target=0.80),
        "entity_precision": _summary(precision_scores, target=0.90),
        "entity_recall": _summary(recall_scores, target=0.70),
        "bp_exact_match": _summary(bp_scores, target=1.0),
        "followup_count_error": _summary(followup_errors),
        "latency_ms": {
            "p50": round(float(np.percentile(latencies, 50)) * 1000, 2),
            "p95": round(float(np.percentile(latencies, 95)) * 1000, 2),
        },
    }

    metrics["per_vignette"] = per_vignette

    return metrics


def main():
    results_path = RESULTS_DIR / "evaluation_results.json"
    if not results_path.exists():
        print(f"No results file found at {results_path}")
        print("Run run_evaluation.py first.")
        sys.exit(1)

    with open(results_path) as f:
        results = json.load(f)

    metrics = compute_all_metrics(results)

    metrics_path = RESULTS_DIR / "metrics.json"
    with open(metrics_path, "w") as f:
        json.dump(metrics, f, indent=2)

    print("=" * 60)
    print("Clinical Scribe - Extraction Metrics")
    print("=" * 60)
    agg = metrics.get("aggregate", {})

    for name, data in agg.items():
        if name == "latency_ms":
            print("\n  Latency:")
            print(f"    p50: {data['p50']}ms  |  p95: {data['p95']}ms")
            continue
        print(f"\n  {name}:")
        print(f"    mean: {data['mean']}  (std: {data['std']}, min: {data['min']})")
        if "target" in data:
            status = "PASS" if data["met"] else "FAIL"
            print(f"    target: {data['target']}  -> {status}")

    print("\n" + "-" * 60)
    print("Per-vignette breakdown:")
    for pv in metrics.get("per_vignette", []):
        print(f"  [{pv['specialty']:15s}] SA={pv['speaker_accuracy']:.2f}  "
              f"P={pv['entity_precision']:.2f}  R={pv['entity_recall']:.2f}  "
              f"BP={pv['bp_exact_match']:.0f}  FU={pv['followup_count_error']:.0f}")

    print(f"\nMetrics saved to {metrics_path}")


if __name__ == "__main__":
    main()
