"""
Linear-discriminant shape classifier.

Each class score is a fixed weighted sum over a small basis expanded from the
feature vector (``FeatureRecord.to_vector``).  Scores go through a
max-shifted softmax; the top class is only accepted when its probability
clears ``confidence_threshold``.  Nothing here is trained or random: the same
feature record always yields the same probabilities.

Usage::

    from sketchsnap.classifier import LinearShapeClassifier
    clf = LinearShapeClassifier()
    decision = clf.classify(features)   # Classification or None
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from sketchsnap.config import DEFAULT_CONFIG, EXPECTED_CORNERS, SHAPE_CLASSES, RecognizerConfig
from sketchsnap.features import FeatureRecord

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Basis
# ---------------------------------------------------------------------------

# Polygon corner counts with their own miss / match terms (3, 4, 5, 6)
CORNER_COUNTS = sorted({k for k in EXPECTED_CORNERS.values() if k > 0})

BASIS_NAMES = [
    "bias",
    "closed",
    "open",
    "circularity",
    "squareness",
    "flatness",           # 1 - squareness
    "long_aspect",        # aspect - 1, capped at 10
    "aspect_deviation",   # aspect - 1, capped at 3
    "elongated",          # +1 when aspect > 1.3, else -1
    "convex",
    "right_angle",
    "straight",           # 2 - min(straightness, 3)
    "corners",            # mismatch against an expected count of 0
]
BASIS_NAMES += [f"miss_{k}" for k in CORNER_COUNTS]
BASIS_NAMES += [f"match_{k}" for k in CORNER_COUNTS]
BASIS_INDEX = {name: i for i, name in enumerate(BASIS_NAMES)}


def basis(vector) -> np.ndarray:
    """Expand a ``FEATURE_NAMES`` vector into the scoring basis."""
    closed, corners, circ, squareness, aspect, convex, right, straight = (
        float(v) for v in vector)
    c = int(round(corners))
    aspect_dev = aspect - 1.0
    terms = [
        1.0,
        closed,
        1.0 - closed,
        circ,
        squareness,
        1.0 - squareness,
        min(aspect_dev, 10.0),
        min(aspect_dev, 3.0),
        1.0 if aspect > 1.3 else -1.0,
        convex,
        right,
        2.0 - min(straight, 3.0),
        float(c),
    ]
    terms += [float(abs(c - k)) for k in CORNER_COUNTS]
    terms += [1.0 if c == k else 0.0 for k in CORNER_COUNTS]
    return np.array(terms, dtype=np.float64)


# ---------------------------------------------------------------------------
# Weights (hand-tuned priors per class; unlisted basis terms weigh 0)
# ---------------------------------------------------------------------------

CLASS_WEIGHTS = {
    "line": {
        "open": 1.5, "closed": -3.0, "long_aspect": 0.4, "straight": 2.0,
        "corners": -2.5, "circularity": -3.0,
    },
    "circle": {
        "bias": -3.0, "closed": 3.0, "circularity": 6.0, "corners": -2.5,
        "aspect_deviation": -1.0,
    },
    "rectangle": {
        "closed": 2.0, "match_4": 4.0, "miss_4": -2.5, "elongated": 1.5,
        "flatness": 1.5, "right_angle": 2.0, "circularity": -2.0,
    },
    "square": {
        "closed": 2.0, "match_4": 4.0, "miss_4": -2.5, "squareness": 2.0,
        "aspect_deviation": -2.0, "right_angle": 2.0, "circularity": -2.0,
    },
    "triangle": {
        "closed": 2.0, "match_3": 5.0, "miss_3": -2.5, "convex": 1.0,
        "circularity": -2.0,
    },
    "hexagon": {
        "closed": 2.0, "match_6": 5.0, "miss_6": -2.5, "circularity": 1.0,
        "convex": 0.5,
    },
    "pentagon": {
        "closed": 2.0, "match_5": 5.0, "miss_5": -2.5, "circularity": 1.0,
        "convex": 0.5,
    },
}


def weight_matrix(weights: Dict[str, Dict[str, float]]) -> np.ndarray:
    """Lay a per-class weight table out as a ``[NUM_SHAPES, len(BASIS_NAMES)]`` matrix."""
    W = np.zeros((len(SHAPE_CLASSES), len(BASIS_NAMES)), dtype=np.float64)
    for row, name in enumerate(SHAPE_CLASSES):
        for term, value in weights.get(name, {}).items():
            if term not in BASIS_INDEX:
                raise ValueError(f"unknown basis term {term!r} for class {name!r}")
            W[row, BASIS_INDEX[term]] = value
    return W


def softmax(scores, epsilon: float = 1e-8) -> np.ndarray:
    z = np.asarray(scores, dtype=np.float64)
    exps = np.exp(z - z.max())
    return exps / max(epsilon, float(exps.sum()))


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Classification:
    label: str
    confidence: float
    probabilities: Tuple[float, ...]


class LinearShapeClassifier:
    """Fixed scoring function + softmax + confidence gate.

    Parameters
    ----------
    weights : dict or None
        Per-class ``{basis_term: weight}`` table; defaults to ``CLASS_WEIGHTS``.
    config : RecognizerConfig
        Supplies ``confidence_threshold`` and ``softmax_epsilon``.
    scorer : callable or None
        Replacement scoring function ``FeatureRecord -> scores`` (one score
        per ``SHAPE_CLASSES`` entry).  When given, ``weights`` is unused.
    """

    def __init__(self, weights=None, config: RecognizerConfig = DEFAULT_CONFIG,
                 scorer: Optional[Callable[[FeatureRecord], np.ndarray]] = None):
        self.config = config
        self.weights = weight_matrix(CLASS_WEIGHTS if weights is None else weights)
        self.scorer = scorer

    def class_scores(self, features: FeatureRecord) -> np.ndarray:
        if self.scorer is not None:
            scores = np.asarray(self.scorer(features), dtype=np.float64)
            if scores.shape != (len(SHAPE_CLASSES),):
                raise ValueError(
                    f"scorer returned shape {scores.shape}, "
                    f"expected ({len(SHAPE_CLASSES)},)")
            return scores
        return self.weights @ basis(features.to_vector())

    def predict_proba(self, features: FeatureRecord) -> np.ndarray:
        return softmax(self.class_scores(features), self.config.softmax_epsilon)

    def best(self, features: FeatureRecord) -> Classification:
        """Top class regardless of the confidence gate."""
        probs = self.predict_proba(features)
        idx = int(np.argmax(probs))
        return Classification(
            label=SHAPE_CLASSES[idx],
            confidence=float(probs[idx]),
            probabilities=tuple(float(p) for p in probs),
        )

    def classify(self, features: FeatureRecord) -> Optional[Classification]:
        """Top class, or ``None`` when it falls below ``confidence_threshold``."""
        decision = self.best(features)
        if decision.confidence < self.config.confidence_threshold:
            logger.debug("classifier declined: %s at %.3f < %.2f",
                         decision.label, decision.confidence,
                         self.config.confidence_threshold)
            return None
        return decision
