"""
Canonical builders for line, circle, rectangle and square.

Geometry comes from the feature record's bounding box (and, for lines, the
smoothed endpoints), never from the detected corners.
"""

from sketchsnap.features import FeatureRecord
from sketchsnap.shapes._types import Circle, Line, Rectangle, Square


# ---------------------------------------------------------------------------
# Line
# ---------------------------------------------------------------------------

def build_line(f: FeatureRecord) -> Line:
    return Line((f.start_x, f.start_y), (f.end_x, f.end_y))


# ---------------------------------------------------------------------------
# Circle
# ---------------------------------------------------------------------------

def build_circle(f: FeatureRecord) -> Circle:
    return Circle(f.center, min(f.width, f.height) / 2)


# ---------------------------------------------------------------------------
# Rectangle (exact bounding box)
# ---------------------------------------------------------------------------

def build_rectangle(f: FeatureRecord) -> Rectangle:
    return Rectangle(f.min_x, f.min_y, f.width, f.height)


# ---------------------------------------------------------------------------
# Square (shorter side, centred in the bounding box)
# ---------------------------------------------------------------------------

def build_square(f: FeatureRecord) -> Square:
    side = min(f.width, f.height)
    cx, cy = f.center
    return Square(cx - side / 2, cy - side / 2, side)


PRIMITIVE_BUILDERS = {
    "line": build_line,
    "circle": build_circle,
    "rectangle": build_rectangle,
    "square": build_square,
}
