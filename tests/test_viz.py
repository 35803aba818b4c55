"""Smoke tests for the visualization helpers."""

import os

import matplotlib.pyplot as plt
from PIL import Image

from sketchsnap.evaluate import evaluate
from sketchsnap.recognizer import ShapeRecognizer
from sketchsnap.viz import (
    plot_confusion_matrix, plot_recognition, render_preview, visualize_stroke_samples,
)


class TestRenderPreview:
    def test_recognized(self, square_stroke):
        result = ShapeRecognizer().recognize(square_stroke)
        img = render_preview(square_stroke, result, size=128)
        assert isinstance(img, Image.Image)
        assert img.size == (128, 128)
        assert img.mode == "RGB"

    def test_unrecognized(self):
        pts = [(x, (x % 7) * 3) for x in range(0, 60, 3)]
        result = ShapeRecognizer(classifier=None).recognize(pts)
        img = render_preview(pts, result, size=64)
        assert img.size == (64, 64)


class TestFigures:
    def test_samples(self, tmp_path):
        path = tmp_path / "samples.png"
        visualize_stroke_samples(num_samples=2, save_path=str(path))
        assert os.path.exists(path)

    def test_confusion(self, tmp_path):
        path = tmp_path / "confusion.png"
        plot_confusion_matrix(evaluate(samples_per_class=1, progress=False), str(path))
        assert os.path.exists(path)


class TestPlotRecognition:
    def test_new_figure_returned_to_caller(self, circle_stroke):
        result = ShapeRecognizer().recognize(circle_stroke)
        before = len(plt.get_fignums())
        ax = plot_recognition(circle_stroke, result)
        assert ax.figure.number in plt.get_fignums()
        plt.close(ax.figure)
        assert len(plt.get_fignums()) == before

    def test_draws_on_given_axes(self, square_stroke):
        result = ShapeRecognizer().recognize(square_stroke)
        fig, ax = plt.subplots()
        try:
            assert plot_recognition(square_stroke, result, ax) is ax
            # stroke, corners and canonical outline
            assert len(ax.lines) == 3
        finally:
            plt.close(fig)
