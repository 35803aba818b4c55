"""
Visualization and diagnostics toolkit.

Provides functions for looking at what the recognizer sees and decides:
stroke / canonical-shape overlays, a grid of synthetic samples, the
evaluation confusion matrix, and a raster preview of a single stroke.

Usage (CLI):
    python -m sketchsnap.viz samples   [--num-samples 16] [--save-path ...]
    python -m sketchsnap.viz confusion --report PATH      [--save-path ...]
    python -m sketchsnap.viz preview   --stroke PATH      [--save-path ...]

Or from a notebook:
    from sketchsnap.viz import visualize_stroke_samples
    visualize_stroke_samples()
"""

import argparse
import logging
import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from PIL import Image

from sketchsnap.config import CONFIG_PRESETS
from sketchsnap.raster import fit_to_canvas, rasterize_circle, rasterize_shape, rasterize_stroke
from sketchsnap.recognizer import ShapeRecognizer


# -----------------------------------------------------------------------
# Overlay helper
# -----------------------------------------------------------------------

def _result_title(result):
    if not result.recognized:
        return f"freehand ({result.reason})"
    return f"{result.label} {result.confidence:.2f} [{result.source}]"


def plot_recognition(points, result, ax=None):
    """Draw the raw stroke, detected corners and the canonical shape on *ax*.

    Returns the axes.  When *ax* is None a new figure is opened; the caller
    owns it and should ``plt.close(ax.figure)`` when done.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(4, 4))
    pts = np.asarray(points, dtype=np.float64)
    ax.plot(pts[:, 0], pts[:, 1], color="0.6", linewidth=1.0, marker=".", markersize=2)

    if result.features is not None and result.features.corner_points:
        cx, cy = zip(*result.features.corner_points)
        ax.plot(cx, cy, "o", color="tab:blue", markersize=5)

    if result.shape is not None:
        verts = np.asarray(result.shape.vertices(), dtype=np.float64)
        if result.shape.kind != "line":
            verts = np.vstack([verts, verts[:1]])
        ax.plot(verts[:, 0], verts[:, 1], color="tab:red", linewidth=1.5)

    ax.set_aspect("equal")
    ax.invert_yaxis()  # screen coordinates: y grows downwards
    ax.set_title(_result_title(result), fontsize=9)
    return ax


# -----------------------------------------------------------------------
# 1. Synthetic sample grid
# -----------------------------------------------------------------------

def visualize_stroke_samples(recognizer=None, num_samples=16, seed=0, jitter=1.0,
                             save_path="outputs/stroke_samples.png"):
    """Render a grid of random synthetic strokes with their recognition.

    Each tile is titled with the recognized label, confidence and decision
    path; the x-label shows the class the stroke was drawn as.
    """
    from sketchsnap.strokes import random_stroke
    recognizer = recognizer or ShapeRecognizer()
    rng = np.random.default_rng(seed)

    cols = min(num_samples, 4)
    rows = (num_samples + cols - 1) // cols
    fig, axes = plt.subplots(rows, cols, figsize=(4 * cols, 4 * rows), squeeze=False)
    axes = [ax for row in axes for ax in row]

    for i in range(num_samples):
        sample = random_stroke(rng=rng, jitter=jitter)
        result = recognizer.recognize(sample.points)
        ax = plot_recognition(sample.points, result, axes[i])
        ax.set_xlabel(f"drawn: {sample.label}", fontsize=8)
        ax.set_xticks([])
        ax.set_yticks([])

    for j in range(num_samples, len(axes)):
        axes[j].axis("off")

    plt.tight_layout()
    os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
    fig.savefig(save_path, dpi=120, bbox_inches="tight")
    plt.close(fig)
    print(f"Stroke samples saved to {save_path}")


# -----------------------------------------------------------------------
# 2. Confusion matrix
# -----------------------------------------------------------------------

def plot_confusion_matrix(report, save_path="outputs/confusion.png"):
    """Heat-map of an ``evaluate()`` report (rows true, columns predicted)."""
    confusion = np.asarray(report["confusion"])
    columns = report["columns"]
    rows = columns[:confusion.shape[0]]

    fig, ax = plt.subplots(figsize=(1.1 * len(columns) + 2, 0.9 * len(rows) + 2))
    ax.imshow(confusion, cmap="Blues")
    ax.set_xticks(range(len(columns)))
    ax.set_xticklabels(columns, rotation=45, ha="right")
    ax.set_yticks(range(len(rows)))
    ax.set_yticklabels(rows)
    ax.set_xlabel("predicted")
    ax.set_ylabel("drawn")
    peak = confusion.max() if confusion.size else 0
    for r in range(confusion.shape[0]):
        for c in range(confusion.shape[1]):
            ax.text(c, r, str(confusion[r, c]), ha="center", va="center", fontsize=8,
                    color="white" if confusion[r, c] > peak / 2 else "black")
    ax.set_title(f"accuracy {report['accuracy']:.3f}")

    plt.tight_layout()
    os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
    fig.savefig(save_path, dpi=120, bbox_inches="tight")
    plt.close(fig)
    print(f"Confusion matrix saved to {save_path}")


# -----------------------------------------------------------------------
# 3. Raster preview
# -----------------------------------------------------------------------

def render_preview(points, result, size=256, thickness=2):
    """RGB ``PIL.Image``: stroke in grey, canonical shape in red, corners in blue."""
    pts = np.asarray(points, dtype=np.float64)
    transform = fit_to_canvas(pts, size)

    stroke = np.zeros((size, size), dtype=np.float32)
    rasterize_stroke(stroke, pts, 1.0, thickness, transform)

    shape = np.zeros((size, size), dtype=np.float32)
    if result.shape is not None:
        rasterize_shape(shape, result.shape, 1.0, thickness, transform)

    corners = np.zeros((size, size), dtype=np.float32)
    if result.features is not None:
        for p in result.features.corner_points:
            rasterize_circle(corners, transform(p), 3, 1.0, -1)

    display = np.ones((size, size, 3), dtype=np.float32)
    display -= stroke[..., None] * 0.4
    display[..., 1] -= shape
    display[..., 2] -= shape
    display[..., 0] -= corners
    display[..., 1] -= corners * 0.6
    display = np.clip(display, 0, 1)
    return Image.fromarray((display * 255).astype(np.uint8))


# -----------------------------------------------------------------------
# CLI
# -----------------------------------------------------------------------

def main():
    p = argparse.ArgumentParser(description="sketchsnap visualization toolkit")
    p.add_argument("--preset", choices=sorted(CONFIG_PRESETS), default="default")
    p.add_argument("--verbose", action="store_true")
    sub = p.add_subparsers(dest="command")

    sm = sub.add_parser("samples", help="Grid of synthetic strokes and their recognition")
    sm.add_argument("--num-samples", type=int, default=16)
    sm.add_argument("--seed", type=int, default=0)
    sm.add_argument("--jitter", type=float, default=1.0)
    sm.add_argument("--save-path", default="outputs/stroke_samples.png")

    cf = sub.add_parser("confusion", help="Plot an evaluation report")
    cf.add_argument("--report", required=True)
    cf.add_argument("--save-path", default="outputs/confusion.png")

    pv = sub.add_parser("preview", help="Recognize one stroke file and render it")
    pv.add_argument("--stroke", required=True, help="JSON file of [[x, y], ...]")
    pv.add_argument("--size", type=int, default=256)
    pv.add_argument("--save-path", default="outputs/preview.png")

    args = p.parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    recognizer = ShapeRecognizer(CONFIG_PRESETS[args.preset])

    if args.command == "samples":
        visualize_stroke_samples(recognizer, num_samples=args.num_samples, seed=args.seed,
                                 jitter=args.jitter, save_path=args.save_path)

    elif args.command == "confusion":
        from sketchsnap.evaluate import load_report
        plot_confusion_matrix(load_report(args.report), save_path=args.save_path)

    elif args.command == "preview":
        from sketchsnap.strokes import load_stroke
        points = load_stroke(args.stroke)
        result = recognizer.recognize(points)
        print(_result_title(result))
        os.makedirs(os.path.dirname(args.save_path) or ".", exist_ok=True)
        render_preview(points, result, size=args.size).save(args.save_path)
        print(f"Preview saved to {args.save_path}")

    else:
        p.print_help()


if __name__ == "__main__":
    main()
