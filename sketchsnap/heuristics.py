"""
Rule-based fallback used when the classifier is missing or declines.

Rules run in a fixed order and are mutually exclusive; each is gated by hard
geometric thresholds from ``RecognizerConfig``.
"""

import logging
from typing import Optional

from sketchsnap.config import DEFAULT_CONFIG, RecognizerConfig
from sketchsnap.errors import RecognitionError
from sketchsnap.features import FeatureRecord, extract_features

logger = logging.getLogger(__name__)


def _match_line(f: FeatureRecord, cfg: RecognizerConfig) -> Optional[str]:
    if (not f.is_closed and f.aspect > cfg.line_min_aspect
            and f.straightness < cfg.line_max_straightness and f.corners < 2):
        return "line"
    return None


def _match_triangle(f, cfg):
    if (f.is_closed and f.corners == 3
            and f.circularity < cfg.triangle_max_circularity and f.is_convex):
        return "triangle"
    return None


def _match_quadrilateral(f, cfg):
    if not (f.is_closed and f.corners == 4
            and f.circularity < cfg.quad_max_circularity
            and f.right_angle_score >= cfg.quad_min_right_angle):
        return None
    if f.aspect <= cfg.square_max_aspect and f.squareness > cfg.square_min_squareness:
        return "square"
    if f.aspect > cfg.rectangle_min_aspect or f.squareness < cfg.rectangle_max_squareness:
        return "rectangle"
    return None


def _match_regular_polygon(f, cfg):
    if not (f.is_closed and f.is_convex
            and f.circularity >= cfg.polygon_min_circularity):
        return None
    return {5: "pentagon", 6: "hexagon"}.get(f.corners)


def _match_circle(f, cfg):
    if f.is_closed and f.circularity > cfg.circle_min_circularity and f.corners < 2:
        return "circle"
    return None


RULES = [
    _match_line,
    _match_triangle,
    _match_quadrilateral,
    _match_regular_polygon,
    _match_circle,
]


def heuristic_classify(features: FeatureRecord,
                       config: RecognizerConfig = DEFAULT_CONFIG) -> Optional[str]:
    """Label of the first matching rule, or ``None`` (keep the freehand stroke)."""
    for rule in RULES:
        label = rule(features, config)
        if label is not None:
            logger.debug("heuristic %s matched %s", rule.__name__, label)
            return label
    return None


def heuristic_recognize(points, config: RecognizerConfig = DEFAULT_CONFIG) -> Optional[str]:
    """Extract features from *points* and apply the rules.

    Returns ``None`` when the stroke cannot be described.
    """
    try:
        features = extract_features(points, config)
    except RecognitionError as exc:
        logger.debug("heuristic extraction failed: %s", exc.reason)
        return None
    return heuristic_classify(features, config)
