"""
Stroke recognition pipeline.

``ShapeRecognizer`` chains feature extraction, the linear classifier, the
heuristic fallback and the canonical shape builder:

    points -> FeatureRecord -> classifier (gated) -> fallback -> shape

It holds only its configuration and classifier, so one instance can serve
any number of strokes, concurrently or not.  Every recognition failure ends
in an unrecognized ``RecognitionResult``; only malformed input
(``InvalidStroke``) raises.

Usage::

    from sketchsnap import ShapeRecognizer
    result = ShapeRecognizer().recognize(points)
    if result.recognized:
        element = result.to_element()
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from sketchsnap.classifier import LinearShapeClassifier
from sketchsnap.config import DEFAULT_CONFIG, RecognizerConfig
from sketchsnap.errors import (
    CLASSIFIER_UNAVAILABLE, LOW_CONFIDENCE, NO_HEURISTIC_MATCH,
    InsufficientPoints, RecognitionError,
)
from sketchsnap.features import FeatureRecord, as_points, extract_features
from sketchsnap.heuristics import heuristic_classify
from sketchsnap.shapes import CanonicalShape, build_canonical_shape

logger = logging.getLogger(__name__)

_DEFAULT = object()


@dataclass(frozen=True)
class RecognitionResult:
    """Outcome of one recognition attempt.

    ``source`` is ``"classifier"``, ``"heuristic"`` or ``None``.  ``reason``
    names why the classifier path was skipped or why nothing was recognized.
    """
    shape: Optional[CanonicalShape] = None
    label: Optional[str] = None
    confidence: float = 0.0
    source: Optional[str] = None
    reason: Optional[str] = None
    probabilities: Optional[Tuple[float, ...]] = None
    features: Optional[FeatureRecord] = None

    @property
    def recognized(self) -> bool:
        return self.shape is not None

    def to_element(self) -> Optional[dict]:
        """Drawing-surface element for the shape, or ``None`` (keep freehand)."""
        return self.shape.to_element() if self.shape is not None else None


class ShapeRecognizer:
    """Stateless recognizer built from an explicit configuration.

    Parameters
    ----------
    config : RecognizerConfig
    classifier : LinearShapeClassifier or None
        Defaults to a ``LinearShapeClassifier`` sharing *config*.  Pass
        ``None`` to run the heuristic fallback only.
    """

    def __init__(self, config: RecognizerConfig = DEFAULT_CONFIG, classifier=_DEFAULT):
        self.config = config
        if classifier is _DEFAULT:
            classifier = LinearShapeClassifier(config=config)
        self.classifier = classifier

    # ------------------------------------------------------------------
    # Main entry
    # ------------------------------------------------------------------

    def recognize(self, points) -> RecognitionResult:
        pts = as_points(points)
        if len(pts) < self.config.min_points:
            logger.debug("stroke too short: %d points", len(pts))
            return RecognitionResult(reason=InsufficientPoints.reason)

        try:
            features = extract_features(pts, self.config)
        except RecognitionError as exc:
            logger.debug("feature extraction failed: %s (%s)", exc.reason, exc)
            return RecognitionResult(reason=exc.reason)

        probabilities = None
        if self.classifier is None:
            reason = CLASSIFIER_UNAVAILABLE
        else:
            decision = self.classifier.best(features)
            probabilities = decision.probabilities
            if decision.confidence >= self.classifier.config.confidence_threshold:
                return self._finish(features, decision.label, decision.confidence,
                                    "classifier", None, probabilities)
            reason = LOW_CONFIDENCE
            logger.debug("classifier low confidence: %s at %.3f",
                         decision.label, decision.confidence)

        label = heuristic_classify(features, self.config)
        if label is None:
            logger.debug("no heuristic match; keeping freehand stroke")
            return RecognitionResult(reason=NO_HEURISTIC_MATCH,
                                     probabilities=probabilities, features=features)
        return self._finish(features, label, self.config.heuristic_confidence,
                            "heuristic", reason, probabilities)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _finish(self, features, label, confidence, source, reason, probabilities):
        shape = build_canonical_shape(features, label)
        logger.debug("recognized %s via %s (%.3f)", label, source, confidence)
        return RecognitionResult(
            shape=shape,
            label=label,
            confidence=float(confidence),
            source=source,
            reason=reason,
            probabilities=probabilities,
            features=features,
        )


def recognize(points, config: Optional[RecognizerConfig] = None) -> RecognitionResult:
    """One-shot convenience: build a recognizer for *config* and run it."""
    return ShapeRecognizer(config or DEFAULT_CONFIG).recognize(points)
