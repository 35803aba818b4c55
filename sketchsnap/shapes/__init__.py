"""
Canonical shape package for sketchsnap.

Each sub-module exposes builder functions that turn a ``FeatureRecord`` into
an idealized primitive.  Every canonical shape is a frozen dataclass with a
``kind`` tag, ``vertices()`` and ``to_element()``.

Usage::

    from sketchsnap.shapes import build_canonical_shape
    shape = build_canonical_shape(features, "square")
"""

import logging

from sketchsnap.config import DEFAULT_CONFIG
from sketchsnap.errors import RecognitionError
from sketchsnap.features import extract_features
from sketchsnap.shapes._types import (  # noqa: F401
    CanonicalShape, Circle, Hexagon, Line, Pentagon, Rectangle, Square, Triangle,
)
from sketchsnap.shapes.primitives import PRIMITIVE_BUILDERS
from sketchsnap.shapes.polygons import POLYGON_BUILDERS, regular_polygon_vertices  # noqa: F401

logger = logging.getLogger(__name__)

ALL_BUILDERS = {**PRIMITIVE_BUILDERS, **POLYGON_BUILDERS}


def build_canonical_shape(features, label: str) -> CanonicalShape:
    """Idealized primitive for *label*; raises ``KeyError`` on unknown labels."""
    return ALL_BUILDERS[label](features)


def canonical_shape_for_points(points, label: str, config=DEFAULT_CONFIG):
    """Extract features from *points* and build; ``None`` if extraction fails."""
    try:
        features = extract_features(points, config)
    except RecognitionError as exc:
        logger.debug("no canonical %s: %s", label, exc.reason)
        return None
    return build_canonical_shape(features, label)
