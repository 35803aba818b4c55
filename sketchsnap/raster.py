"""
Low-level rasterization utilities backed by OpenCV.

All drawing functions operate on float32 numpy arrays in [0, 1] range.
Anti-aliased rendering (LINE_AA) is used throughout.  Strokes and canonical
shapes live in drawing-surface coordinates, so ``fit_to_canvas`` maps them
onto the raster before drawing.
"""

import cv2
import numpy as np


# ---------------------------------------------------------------------------
# Core primitives
# ---------------------------------------------------------------------------

def rasterize_line(img, p1, p2, color=1.0, thickness=1):
    """Draw an anti-aliased line segment on a float32 numpy image."""
    cv2.line(
        img,
        (int(round(p1[0])), int(round(p1[1]))),
        (int(round(p2[0])), int(round(p2[1]))),
        float(color),
        thickness,
        lineType=cv2.LINE_AA,
    )
    return img


def rasterize_circle(img, center, radius, color=1.0, thickness=1):
    """Draw an anti-aliased circle on a float32 numpy image."""
    cv2.circle(
        img,
        (int(round(center[0])), int(round(center[1]))),
        int(max(round(radius), 1)),
        float(color),
        thickness,
        lineType=cv2.LINE_AA,
    )
    return img


def rasterize_polyline(img, points, color=1.0, thickness=1, closed=False):
    """Draw connected line segments through a list of points."""
    n = len(points)
    segs = n if closed else n - 1
    for i in range(segs):
        rasterize_line(img, points[i], points[(i + 1) % n], color, thickness)
    return img


# ---------------------------------------------------------------------------
# Coordinate mapping
# ---------------------------------------------------------------------------

def fit_to_canvas(points, size, margin=16):
    """Return ``transform(xy)`` mapping *points*' bounding box into a
    ``size x size`` canvas with *margin* pixels on every side, aspect kept.
    """
    pts = np.asarray(points, dtype=np.float64)
    lo = pts.min(axis=0)
    extent = float(max((pts.max(axis=0) - lo).max(), 1e-6))
    scale = (size - 2 * margin) / extent

    def transform(xy):
        arr = np.asarray(xy, dtype=np.float64)
        return (arr - lo) * scale + margin

    transform.scale = scale
    return transform


# ---------------------------------------------------------------------------
# Strokes and canonical shapes
# ---------------------------------------------------------------------------

def rasterize_stroke(img, points, color=1.0, thickness=1, transform=None):
    """Draw a raw stroke as an open polyline."""
    pts = np.asarray(points, dtype=np.float64)
    if transform is not None:
        pts = transform(pts)
    return rasterize_polyline(img, pts, color, thickness, closed=False)


def rasterize_shape(img, shape, color=1.0, thickness=1, transform=None):
    """Draw a canonical shape (anything with ``kind`` and ``vertices()``)."""
    if shape.kind == "circle":
        center = shape.center
        radius = shape.radius
        if transform is not None:
            center = transform(center)
            radius = radius * transform.scale
        return rasterize_circle(img, center, radius, color, thickness)

    verts = np.asarray(shape.vertices(), dtype=np.float64)
    if transform is not None:
        verts = transform(verts)
    return rasterize_polyline(img, verts, color, thickness, closed=shape.kind != "line")
