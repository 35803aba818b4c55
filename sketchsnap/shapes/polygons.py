"""
Canonical builders for triangle, pentagon and hexagon.

The triangle is isoceles and fills the bounding box; pentagon and hexagon
are regular polygons inscribed at ``min(width, height) / 2`` around the
bounding-box centre.
"""

import numpy as np

from sketchsnap.features import FeatureRecord
from sketchsnap.shapes._types import Hexagon, Pentagon, Triangle


def regular_polygon_vertices(center, radius, num_sides, angle_offset=0.0):
    """Return vertices of a regular polygon as a list of (x, y) tuples."""
    cx, cy = center
    angles = np.linspace(0, 2 * np.pi, num_sides, endpoint=False) + angle_offset
    return [(float(cx + radius * np.cos(a)), float(cy + radius * np.sin(a)))
            for a in angles]


# ---------------------------------------------------------------------------
# Triangle (apex centred on top, base along the bottom edge)
# ---------------------------------------------------------------------------

def build_triangle(f: FeatureRecord) -> Triangle:
    cx, _ = f.center
    return Triangle((
        (cx, f.min_y),
        (f.max_x, f.max_y),
        (f.min_x, f.max_y),
    ))


# ---------------------------------------------------------------------------
# Pentagon (first vertex at the top)
# ---------------------------------------------------------------------------

def build_pentagon(f: FeatureRecord) -> Pentagon:
    radius = min(f.width, f.height) / 2
    return Pentagon(tuple(regular_polygon_vertices(f.center, radius, 5, -np.pi / 2)))


# ---------------------------------------------------------------------------
# Hexagon (first vertex at angle 0)
# ---------------------------------------------------------------------------

def build_hexagon(f: FeatureRecord) -> Hexagon:
    radius = min(f.width, f.height) / 2
    return Hexagon(tuple(regular_polygon_vertices(f.center, radius, 6)))


POLYGON_BUILDERS = {
    "triangle": build_triangle,
    "pentagon": build_pentagon,
    "hexagon": build_hexagon,
}
