"""
Error taxonomy for the recognition pipeline.

Every ``RecognitionError`` is recovered inside ``ShapeRecognizer`` and turned
into an unrecognized result carrying its ``reason`` code.  ``InvalidStroke``
is the one caller defect that propagates.
"""

# Outcome codes that are not exceptions
LOW_CONFIDENCE = "low_confidence"
NO_HEURISTIC_MATCH = "no_heuristic_match"
CLASSIFIER_UNAVAILABLE = "classifier_unavailable"


class RecognitionError(Exception):
    """A stroke that cannot produce a feature record."""
    reason = "recognition_error"


class InsufficientPoints(RecognitionError):
    """Raw stroke shorter than ``min_points``."""
    reason = "insufficient_points"


class InsufficientSignal(RecognitionError):
    """Too few points survive noise filtering."""
    reason = "insufficient_signal"


class DegenerateGeometry(RecognitionError):
    """Closed stroke smaller than the minimum footprint."""
    reason = "degenerate_geometry"


class InvalidStroke(ValueError):
    """Malformed point data (wrong shape or non-finite coordinates)."""
