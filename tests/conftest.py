"""Shared fixtures: traced strokes and a feature-record factory."""

import numpy as np
import pytest

from sketchsnap.features import FeatureRecord
from sketchsnap.shapes.polygons import regular_polygon_vertices
from sketchsnap.strokes import trace_circle, trace_line, trace_polygon, trace_rectangle


@pytest.fixture
def square_stroke():
    return trace_rectangle(0, 0, 200, 200, points_per_side=20)


@pytest.fixture
def rectangle_stroke():
    return trace_rectangle(0, 0, 200, 80, points_per_side=20)


@pytest.fixture
def circle_stroke():
    return trace_circle((200, 200), 100, num_points=64)


@pytest.fixture
def line_stroke():
    return trace_line((0, 0), (300, 5), num_points=20, jitter=0.5,
                      rng=np.random.default_rng(0))


@pytest.fixture
def triangle_stroke():
    h = 240 * np.sqrt(3) / 2
    return trace_polygon([(120, 0), (240, h), (0, h)], points_per_side=20)


@pytest.fixture
def pentagon_stroke():
    verts = regular_polygon_vertices((200, 200), 120, 5, -np.pi / 2)
    return trace_polygon(verts, points_per_side=20)


@pytest.fixture
def hexagon_stroke():
    return trace_polygon(regular_polygon_vertices((200, 200), 120, 6), points_per_side=20)


_BASE_FEATURES = dict(
    width=200.0, height=200.0, diagonal=float(np.hypot(200, 200)),
    aspect=1.0, is_closed=True, straightness=1.0, squareness=1.0,
    corners=4, corner_angles=(), corner_indices=(), corner_points=(),
    circularity=0.86, is_convex=True, right_angle_score=1.0,
    start_x=0.0, start_y=0.0, end_x=0.0, end_y=0.0,
    min_x=0.0, min_y=0.0, max_x=200.0, max_y=200.0, num_points=80,
)


@pytest.fixture
def make_features():
    """Factory for ``FeatureRecord``; defaults describe a clean 200x200 square."""
    def _make(**overrides):
        return FeatureRecord(**{**_BASE_FEATURES, **overrides})
    return _make
