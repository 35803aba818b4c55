"""
Batch evaluation of the recognizer on synthetic strokes.

Draws ``samples_per_class`` jittered strokes for every shape class, runs the
recognizer on each and reports overall / per-class accuracy, a confusion
matrix (with an extra ``unrecognized`` column) and how often each decision
path fired.

Usage (CLI):
    python -m sketchsnap.evaluate [--samples-per-class 50] [--jitter 1.0]
                                  [--preset default] [--report outputs/eval.json]

Or from a notebook:
    from sketchsnap.evaluate import evaluate
    report = evaluate(samples_per_class=20, seed=0)
"""

import argparse
import json
import logging
import os
from collections import Counter
from datetime import datetime

import numpy as np
from tqdm import tqdm

from sketchsnap.config import CONFIG_PRESETS, SHAPE_CLASSES, SHAPE_MAP
from sketchsnap.recognizer import ShapeRecognizer
from sketchsnap.strokes import STROKE_GENERATORS

UNRECOGNIZED = "unrecognized"


class _NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types (bool_, int64, float64, etc.)."""

    def default(self, obj):
        if isinstance(obj, (np.bool_,)):
            return bool(obj)
        if isinstance(obj, (np.integer,)):
            return int(obj)
        if isinstance(obj, (np.floating,)):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        return super().default(obj)


def evaluate(recognizer=None, samples_per_class=50, canvas_size=512, jitter=1.0,
             seed=0, progress=True):
    """Run *recognizer* over generated strokes.

    Returns
    -------
    dict with keys:
        accuracy : float: fraction of strokes labelled with their true class
        per_class : dict: accuracy per true class
        confusion : ndarray [NUM_SHAPES, NUM_SHAPES + 1]: rows true, columns
                    predicted, last column unrecognized
        columns : list: column labels of ``confusion``
        sources : dict: counts of ``classifier`` / ``heuristic`` / ``none``
        reasons : dict: counts of outcome reason codes
        num_samples : int
    """
    recognizer = recognizer or ShapeRecognizer()
    rng = np.random.default_rng(seed)
    n_cls = len(SHAPE_CLASSES)
    confusion = np.zeros((n_cls, n_cls + 1), dtype=np.int64)
    sources = Counter()
    reasons = Counter()

    jobs = [label for label in SHAPE_CLASSES for _ in range(samples_per_class)]
    for label in tqdm(jobs, desc="Evaluating", disable=not progress):
        sample = STROKE_GENERATORS[label](canvas_size, rng, jitter)
        result = recognizer.recognize(sample.points)
        col = SHAPE_MAP[result.label] if result.recognized else n_cls
        confusion[SHAPE_MAP[label], col] += 1
        sources[result.source or "none"] += 1
        if result.reason:
            reasons[result.reason] += 1

    totals = confusion.sum(axis=1)
    correct = np.diag(confusion[:, :n_cls])
    return {
        "accuracy": float(correct.sum() / max(totals.sum(), 1)),
        "per_class": {name: float(correct[i] / max(totals[i], 1))
                      for i, name in enumerate(SHAPE_CLASSES)},
        "confusion": confusion,
        "columns": SHAPE_CLASSES + [UNRECOGNIZED],
        "sources": dict(sources),
        "reasons": dict(reasons),
        "num_samples": int(totals.sum()),
    }


def save_report(report, path, metadata=None):
    """Write *report* (plus *metadata* and a timestamp) as JSON."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    payload = {"timestamp": datetime.now().isoformat(), **(metadata or {}), **report}
    with open(path, "w") as f:
        json.dump(payload, f, indent=2, cls=_NumpyEncoder)


def load_report(path):
    with open(path) as f:
        report = json.load(f)
    report["confusion"] = np.asarray(report["confusion"], dtype=np.int64)
    return report


def main():
    p = argparse.ArgumentParser(description="Evaluate the stroke recognizer on synthetic strokes")
    p.add_argument("--samples-per-class", type=int, default=50)
    p.add_argument("--canvas-size", type=int, default=512)
    p.add_argument("--jitter", type=float, default=1.0)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--preset", choices=sorted(CONFIG_PRESETS), default="default")
    p.add_argument("--heuristic-only", action="store_true",
                   help="Run without the classifier (fallback rules only)")
    p.add_argument("--report", default="outputs/eval_report.json")
    p.add_argument("--verbose", action="store_true")
    args = p.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    config = CONFIG_PRESETS[args.preset]
    recognizer = (ShapeRecognizer(config, classifier=None) if args.heuristic_only
                  else ShapeRecognizer(config))
    report = evaluate(recognizer, args.samples_per_class, args.canvas_size,
                      args.jitter, args.seed)

    print(f"Accuracy: {report['accuracy']:.3f} over {report['num_samples']} strokes")
    for name, acc in report["per_class"].items():
        print(f"  {name:<10} {acc:.3f}")
    print(f"  sources: {report['sources']}")
    save_report(report, args.report, metadata={
        "preset": args.preset,
        "heuristic_only": args.heuristic_only,
        "jitter": args.jitter,
        "seed": args.seed,
    })
    print(f"Report saved to {args.report}")


if __name__ == "__main__":
    main()
