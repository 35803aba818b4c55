"""
Synthetic strokes for evaluation and diagnostics.

Tracing helpers turn ideal geometry into an ordered sample sequence the way a
pointer would report it (evenly spaced along each edge, optional Gaussian
jitter).  One generator per shape class draws a random instance on an
``S x S`` canvas and returns a ``StrokeSample`` carrying the expected label.

Usage::

    from sketchsnap.strokes import random_stroke
    sample = random_stroke(S=512, rng=np.random.default_rng(0))
"""

import json
from dataclasses import dataclass, field

import numpy as np

from sketchsnap.config import SHAPE_CLASSES
from sketchsnap.features import as_points
from sketchsnap.shapes.polygons import regular_polygon_vertices


@dataclass
class StrokeSample:
    """One synthetic stroke and the class it was drawn as."""
    points: np.ndarray                 # float64 [n, 2]
    label: str
    metadata: dict = field(default_factory=dict)


def _rng(rng):
    return rng if rng is not None else np.random.default_rng()


def _jitter(pts, jitter, rng):
    if jitter <= 0:
        return pts
    return pts + _rng(rng).normal(0.0, jitter, pts.shape)


# ---------------------------------------------------------------------------
# Tracing helpers
# ---------------------------------------------------------------------------

def trace_line(p0, p1, num_points=20, jitter=0.0, rng=None):
    """Evenly spaced samples from *p0* to *p1*, both included."""
    t = np.linspace(0.0, 1.0, num_points)[:, None]
    pts = (1 - t) * np.asarray(p0, dtype=np.float64) + t * np.asarray(p1, dtype=np.float64)
    return _jitter(pts, jitter, rng)


def trace_polyline(vertices, points_per_segment=20, closed=False, jitter=0.0, rng=None):
    """Sample each edge of a polyline.

    A closed trace runs back towards the first vertex and stops one step
    short of it, the way a pen lifts just before meeting its start.
    """
    verts = np.asarray(vertices, dtype=np.float64)
    n = len(verts)
    segs = n if closed else n - 1
    t = np.arange(points_per_segment)[:, None] / points_per_segment
    parts = []
    for i in range(segs):
        a, b = verts[i], verts[(i + 1) % n]
        parts.append((1 - t) * a + t * b)
    if not closed:
        parts.append(verts[-1:])
    return _jitter(np.vstack(parts), jitter, rng)


def trace_polygon(vertices, points_per_side=20, jitter=0.0, rng=None):
    return trace_polyline(vertices, points_per_side, closed=True, jitter=jitter, rng=rng)


def trace_rectangle(x, y, width, height, points_per_side=20, jitter=0.0, rng=None):
    verts = [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
    return trace_polygon(verts, points_per_side, jitter, rng)


def trace_circle(center, radius, num_points=64, start_angle=0.0, jitter=0.0, rng=None):
    """Samples on a full turn, last sample one step short of the first."""
    angles = start_angle + 2 * np.pi * np.arange(num_points) / num_points
    cx, cy = center
    pts = np.stack([cx + radius * np.cos(angles), cy + radius * np.sin(angles)], axis=1)
    return _jitter(pts, jitter, rng)


# ---------------------------------------------------------------------------
# Random generators (one per class)
# ---------------------------------------------------------------------------

def _rand_center(margin, S, rng):
    return rng.uniform(margin, S - margin, 2)


def gen_line(S: int, rng=None, jitter=1.0) -> StrokeSample:
    rng = _rng(rng)
    m = 30
    p0 = rng.uniform(m, S - m, 2)
    for _ in range(100):
        p1 = rng.uniform(m, S - m, 2)
        if np.linalg.norm(p1 - p0) >= S / 3:
            break
    n = int(rng.integers(20, 41))
    pts = trace_line(p0, p1, n, jitter, rng)
    return StrokeSample(pts, "line", {"start": p0, "end": p1})


def gen_circle(S: int, rng=None, jitter=1.0) -> StrokeSample:
    rng = _rng(rng)
    radius = rng.uniform(40, S / 3)
    center = _rand_center(radius + 10, S, rng)
    n = int(rng.integers(48, 97))
    pts = trace_circle(center, radius, n, rng.uniform(0, 2 * np.pi), jitter, rng)
    return StrokeSample(pts, "circle", {"center": center, "radius": radius})


def gen_rectangle(S: int, rng=None, jitter=1.0) -> StrokeSample:
    rng = _rng(rng)
    long_side = rng.uniform(S / 4, S * 0.8)
    short_side = long_side / rng.uniform(1.6, 3.0)
    w, h = (long_side, short_side) if rng.random() < 0.5 else (short_side, long_side)
    x = rng.uniform(10, max(11, S - w - 10))
    y = rng.uniform(10, max(11, S - h - 10))
    pts = trace_rectangle(x, y, w, h, 20, jitter, rng)
    return StrokeSample(pts, "rectangle", {"x": x, "y": y, "width": w, "height": h})


def gen_square(S: int, rng=None, jitter=1.0) -> StrokeSample:
    rng = _rng(rng)
    side = rng.uniform(S / 5, S * 0.7)
    x = rng.uniform(10, max(11, S - side - 10))
    y = rng.uniform(10, max(11, S - side - 10))
    pts = trace_rectangle(x, y, side, side, 20, jitter, rng)
    return StrokeSample(pts, "square", {"x": x, "y": y, "side": side})


def gen_triangle(S: int, rng=None, jitter=1.0) -> StrokeSample:
    rng = _rng(rng)
    base = rng.uniform(S / 4, S * 0.7)
    height = base * np.sqrt(3) / 2
    x = rng.uniform(10, max(11, S - base - 10))
    y = rng.uniform(10, max(11, S - height - 10))
    verts = [(x + base / 2, y), (x + base, y + height), (x, y + height)]
    pts = trace_polygon(verts, 20, jitter, rng)
    return StrokeSample(pts, "triangle", {"vertices": verts})


def _gen_regular(S, rng, jitter, sides, label):
    rng = _rng(rng)
    radius = rng.uniform(S / 8, S / 3)
    center = _rand_center(radius + 10, S, rng)
    verts = regular_polygon_vertices(center, radius, sides, rng.uniform(0, 2 * np.pi))
    pts = trace_polygon(verts, 20, jitter, rng)
    return StrokeSample(pts, label, {"center": center, "radius": radius})


def gen_pentagon(S: int, rng=None, jitter=1.0) -> StrokeSample:
    return _gen_regular(S, rng, jitter, 5, "pentagon")


def gen_hexagon(S: int, rng=None, jitter=1.0) -> StrokeSample:
    return _gen_regular(S, rng, jitter, 6, "hexagon")


STROKE_GENERATORS = {
    "line": gen_line,
    "circle": gen_circle,
    "rectangle": gen_rectangle,
    "square": gen_square,
    "triangle": gen_triangle,
    "hexagon": gen_hexagon,
    "pentagon": gen_pentagon,
}


def random_stroke(S: int = 512, rng=None, jitter=1.0) -> StrokeSample:
    """Pick a random class and draw one stroke of it."""
    rng = _rng(rng)
    label = SHAPE_CLASSES[int(rng.integers(len(SHAPE_CLASSES)))]
    return STROKE_GENERATORS[label](S, rng, jitter)


# ---------------------------------------------------------------------------
# Stroke files
# ---------------------------------------------------------------------------

def load_stroke(path) -> np.ndarray:
    """Read a stroke saved as ``[[x, y], ...]`` or ``{"points": [[x, y], ...]}``."""
    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("points", [])
    return as_points(data)
