"""
Stroke feature extraction.

Turns the raw samples of one completed stroke into a ``FeatureRecord``:

    clean_points -> summarize_geometry -> smooth_points
                 -> detect_corners -> circularity / convexity_and_right_angles

The bounding box is measured on the cleaned points; everything angular
(path length, straightness, corners, circularity) runs on the smoothed
sequence.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from sketchsnap.config import DEFAULT_CONFIG, RecognizerConfig
from sketchsnap.errors import (
    DegenerateGeometry, InsufficientPoints, InsufficientSignal, InvalidStroke,
)

logger = logging.getLogger(__name__)

# Order of FeatureRecord.to_vector()
FEATURE_NAMES = [
    "closed",
    "corners",
    "circularity",
    "squareness",
    "aspect",
    "convex",
    "right_angle_score",
    "straightness",
]


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GeometrySummary:
    """Bounding box and closure of a cleaned stroke."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float
    width: float
    height: float
    diagonal: float
    aspect: float
    squareness: float
    is_closed: bool

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)


@dataclass(frozen=True)
class FeatureRecord:
    """Everything the classifier, the fallback and the shape builder need."""
    width: float
    height: float
    diagonal: float
    aspect: float
    is_closed: bool
    straightness: float
    squareness: float
    corners: int
    corner_angles: Tuple[float, ...]
    corner_indices: Tuple[int, ...]
    corner_points: Tuple[Tuple[float, float], ...]
    circularity: float
    is_convex: bool
    right_angle_score: float
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    min_x: float
    min_y: float
    max_x: float
    max_y: float
    num_points: int

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def to_vector(self) -> np.ndarray:
        """Numeric features in ``FEATURE_NAMES`` order."""
        return np.array([
            1.0 if self.is_closed else 0.0,
            float(self.corners),
            self.circularity,
            self.squareness,
            self.aspect,
            1.0 if self.is_convex else 0.0,
            self.right_angle_score,
            self.straightness,
        ], dtype=np.float64)


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

def as_points(points) -> np.ndarray:
    """Return *points* as a float64 ``(n, 2)`` array or raise ``InvalidStroke``."""
    try:
        pts = np.asarray(points, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidStroke(f"stroke is not a numeric (n, 2) sequence: {exc}") from exc
    if pts.size == 0:
        return pts.reshape(0, 2)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise InvalidStroke(f"expected (n, 2) points, got shape {pts.shape}")
    if not np.all(np.isfinite(pts)):
        raise InvalidStroke("stroke contains non-finite coordinates")
    return pts


# ---------------------------------------------------------------------------
# Point cleaner
# ---------------------------------------------------------------------------

def clean_points(points, config: RecognizerConfig = DEFAULT_CONFIG) -> np.ndarray:
    """Drop samples closer than ``noise_floor`` to the last kept sample."""
    pts = as_points(points)
    if len(pts) < config.min_points:
        raise InsufficientPoints(
            f"stroke has {len(pts)} points, need {config.min_points}")

    kept = [pts[0]]
    for p in pts[1:]:
        if math.hypot(p[0] - kept[-1][0], p[1] - kept[-1][1]) > config.noise_floor:
            kept.append(p)

    if len(kept) < config.min_clean_points:
        raise InsufficientSignal(
            f"{len(kept)} points left after noise filtering, "
            f"need {config.min_clean_points}")
    return np.array(kept)


# ---------------------------------------------------------------------------
# Geometry summarizer
# ---------------------------------------------------------------------------

def summarize_geometry(cleaned, config: RecognizerConfig = DEFAULT_CONFIG) -> GeometrySummary:
    pts = np.asarray(cleaned, dtype=np.float64)
    min_x, min_y = (float(v) for v in pts.min(axis=0))
    max_x, max_y = (float(v) for v in pts.max(axis=0))
    width = max_x - min_x
    height = max_y - min_y
    short_side = min(width, height)
    long_side = max(width, height)

    gap = float(np.linalg.norm(pts[-1] - pts[0]))
    is_closed = gap < short_side * config.closure_tolerance
    if is_closed and (width < config.min_closed_size or height < config.min_closed_size):
        raise DegenerateGeometry(
            f"closed stroke of {width:.1f}x{height:.1f} is below "
            f"{config.min_closed_size:g}x{config.min_closed_size:g}")

    return GeometrySummary(
        min_x=min_x, min_y=min_y, max_x=max_x, max_y=max_y,
        width=width,
        height=height,
        diagonal=math.hypot(width, height),
        aspect=long_side / max(1.0, short_side),
        squareness=1.0 - abs(width - height) / max(1.0, long_side),
        is_closed=bool(is_closed),
    )


# ---------------------------------------------------------------------------
# Smoother and path measures
# ---------------------------------------------------------------------------

def smooth_points(points, is_closed: bool,
                  config: RecognizerConfig = DEFAULT_CONFIG) -> np.ndarray:
    """Repeated 3-tap weighted average against the neighbours at ±offset.

    Neighbour indices wrap for closed strokes and clamp for open ones.
    """
    pts = np.asarray(points, dtype=np.float64)
    n = len(pts)
    idx = np.arange(n)
    off = config.smoothing_offset
    if is_closed:
        prev_idx = (idx - off) % n
        next_idx = (idx + off) % n
    else:
        prev_idx = np.clip(idx - off, 0, n - 1)
        next_idx = np.clip(idx + off, 0, n - 1)

    w_prev, w_self, w_next = config.smoothing_weights
    out = pts
    for _ in range(config.smoothing_passes):
        out = w_prev * out[prev_idx] + w_self * out + w_next * out[next_idx]
    return out


def path_length(points) -> float:
    pts = np.asarray(points, dtype=np.float64)
    if len(pts) < 2:
        return 0.0
    return float(np.linalg.norm(np.diff(pts, axis=0), axis=1).sum())


def straightness(points) -> float:
    """Path length over endpoint distance; 1.0 when the endpoints coincide."""
    pts = np.asarray(points, dtype=np.float64)
    if len(pts) < 2:
        return 1.0
    chord = float(np.linalg.norm(pts[-1] - pts[0]))
    if chord <= 1e-9:
        return 1.0
    return path_length(pts) / chord


# ---------------------------------------------------------------------------
# Corner detector
# ---------------------------------------------------------------------------

def lookahead_window(n: int, config: RecognizerConfig = DEFAULT_CONFIG) -> int:
    return max(config.min_lookahead, n // config.lookahead_divisor)


def _wrap_angle(a):
    """Normalize an angle difference to (-pi, pi]."""
    while a <= -math.pi:
        a += 2 * math.pi
    while a > math.pi:
        a -= 2 * math.pi
    return a


def detect_corners(points, is_closed: bool, width: float, height: float,
                   config: RecognizerConfig = DEFAULT_CONFIG) -> Tuple[List[int], List[float]]:
    """Find sharp turns over a lookahead window scaled to the stroke length.

    Parameters
    ----------
    points : array (n, 2)
        Smoothed stroke.
    is_closed : bool
        Wrap indices around the ends instead of skipping the margins.
    width, height : float
        Bounding box extents; ``min(width, height) * corner_dedup_fraction``
        is the spatial radius inside which later candidates are dropped.

    Returns
    -------
    (indices, angles) : accepted corner indices in scan order and their
    absolute turn angles in radians.
    """
    pts = np.asarray(points, dtype=np.float64)
    n = len(pts)
    step = lookahead_window(n, config)
    candidates = range(n) if is_closed else range(step, n - step)
    min_sep = min(width, height) * config.corner_dedup_fraction

    indices: List[int] = []
    angles: List[float] = []
    for i in candidates:
        incoming = pts[i] - pts[(i - step) % n]
        outgoing = pts[(i + step) % n] - pts[i]
        if (math.hypot(incoming[0], incoming[1]) < config.min_segment_length
                or math.hypot(outgoing[0], outgoing[1]) < config.min_segment_length):
            continue

        turn = abs(_wrap_angle(math.atan2(outgoing[1], outgoing[0])
                               - math.atan2(incoming[1], incoming[0])))
        if not config.min_corner_angle < turn < config.max_corner_angle:
            continue

        p = pts[i]
        if any(math.hypot(p[0] - pts[j][0], p[1] - pts[j][1]) < min_sep for j in indices):
            continue
        indices.append(i)
        angles.append(turn)
    return indices, angles


# ---------------------------------------------------------------------------
# Shape descriptors
# ---------------------------------------------------------------------------

def circularity(points, summary: GeometrySummary) -> float:
    """1 minus the mean radial deviation from ``(w + h) / 4``, normalized.

    Open strokes score 0.
    """
    if not summary.is_closed:
        return 0.0
    radius = (summary.width + summary.height) / 4
    if radius <= 0:
        return 0.0
    pts = np.asarray(points, dtype=np.float64)
    cx, cy = summary.center
    dist = np.hypot(pts[:, 0] - cx, pts[:, 1] - cy)
    return float(1.0 - np.mean(np.abs(dist - radius)) / radius)


def convexity_and_right_angles(vertices,
                               config: RecognizerConfig = DEFAULT_CONFIG) -> Tuple[bool, float]:
    """Walk the corner polygon and report (is_convex, right_angle_score).

    Zero cross products (collinear corners) neither set nor flip the
    turning sign, so a polygon of collinear corners comes out convex with a
    right-angle score of 0.
    """
    verts = np.asarray(vertices, dtype=np.float64)
    k = len(verts)
    if k < 3:
        return False, 0.0

    sign = 0
    convex = True
    right = 0
    for j in range(k):
        a, b, c = verts[j], verts[(j + 1) % k], verts[(j + 2) % k]
        e1 = b - a
        e2 = c - b
        cross = e1[0] * e2[1] - e1[1] * e2[0]
        s = int(np.sign(cross))
        if s != 0:
            if sign == 0:
                sign = s
            elif s != sign:
                convex = False

        norms = math.hypot(e1[0], e1[1]) * math.hypot(e2[0], e2[1])
        if norms > 0 and abs(float(np.dot(e1, e2))) / norms < config.right_angle_cosine:
            right += 1
    return convex, right / k


# ---------------------------------------------------------------------------
# Full extraction
# ---------------------------------------------------------------------------

def extract_features(points, config: RecognizerConfig = DEFAULT_CONFIG) -> FeatureRecord:
    """Build the feature record for one stroke.

    Raises ``InsufficientPoints``, ``InsufficientSignal`` or
    ``DegenerateGeometry`` when the stroke cannot be described, and
    ``InvalidStroke`` for malformed input.
    """
    cleaned = clean_points(points, config)
    summary = summarize_geometry(cleaned, config)
    smoothed = smooth_points(cleaned, summary.is_closed, config)

    indices, angles = detect_corners(
        smoothed, summary.is_closed, summary.width, summary.height, config)
    corner_pts = smoothed[indices] if indices else np.zeros((0, 2))
    is_convex, right_score = convexity_and_right_angles(corner_pts, config)

    record = FeatureRecord(
        width=summary.width,
        height=summary.height,
        diagonal=summary.diagonal,
        aspect=summary.aspect,
        is_closed=summary.is_closed,
        straightness=straightness(smoothed),
        squareness=summary.squareness,
        corners=len(indices),
        corner_angles=tuple(float(a) for a in angles),
        corner_indices=tuple(int(i) for i in indices),
        corner_points=tuple((float(x), float(y)) for x, y in corner_pts),
        circularity=circularity(smoothed, summary),
        is_convex=bool(is_convex),
        right_angle_score=float(right_score),
        start_x=float(smoothed[0, 0]),
        start_y=float(smoothed[0, 1]),
        end_x=float(smoothed[-1, 0]),
        end_y=float(smoothed[-1, 1]),
        min_x=summary.min_x,
        min_y=summary.min_y,
        max_x=summary.max_x,
        max_y=summary.max_y,
        num_points=len(smoothed),
    )
    logger.debug(
        "features: n=%d closed=%s corners=%d circ=%.3f sq=%.3f aspect=%.2f ra=%.2f",
        record.num_points, record.is_closed, record.corners, record.circularity,
        record.squareness, record.aspect, record.right_angle_score)
    return record
