"""Tests for batch evaluation and report files."""

import json

import numpy as np
import pytest

from sketchsnap.config import NUM_SHAPES, SHAPE_CLASSES
from sketchsnap.evaluate import evaluate, load_report, save_report
from sketchsnap.recognizer import ShapeRecognizer


@pytest.fixture(scope="module")
def report():
    return evaluate(samples_per_class=3, seed=0, progress=False)


class TestEvaluate:
    def test_keys(self, report):
        for key in ("accuracy", "per_class", "confusion", "columns",
                    "sources", "reasons", "num_samples"):
            assert key in report

    def test_counts(self, report):
        assert report["num_samples"] == 3 * NUM_SHAPES
        assert report["confusion"].shape == (NUM_SHAPES, NUM_SHAPES + 1)
        np.testing.assert_array_equal(report["confusion"].sum(axis=1), 3)
        assert sum(report["sources"].values()) == 3 * NUM_SHAPES

    def test_columns(self, report):
        assert report["columns"] == SHAPE_CLASSES + ["unrecognized"]
        assert set(report["per_class"]) == set(SHAPE_CLASSES)

    def test_accuracy_range(self, report):
        assert 0.0 <= report["accuracy"] <= 1.0

    def test_seeded(self, report):
        again = evaluate(samples_per_class=3, seed=0, progress=False)
        np.testing.assert_array_equal(again["confusion"], report["confusion"])

    def test_heuristic_only(self):
        rep = evaluate(ShapeRecognizer(classifier=None), samples_per_class=1, progress=False)
        assert "classifier" not in rep["sources"]


class TestReportFiles:
    def test_round_trip(self, report, tmp_path):
        path = tmp_path / "out" / "eval.json"
        save_report(report, str(path), metadata={"preset": "default"})
        loaded = load_report(str(path))
        np.testing.assert_array_equal(loaded["confusion"], report["confusion"])
        assert loaded["preset"] == "default"
        assert "timestamp" in loaded

    def test_plain_json(self, report, tmp_path):
        path = tmp_path / "eval.json"
        save_report(report, str(path))
        with open(path) as f:
            data = json.load(f)
        assert isinstance(data["confusion"], list)
