"""
Global configuration: shape-class registry, recognizer thresholds, presets.

The class list order is the order of every probability vector the classifier
emits.  Thresholds live in one frozen dataclass so a recognizer can be built
from an explicit configuration value instead of module-level state.
"""

import math
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Shape registry (7 classes)
# ---------------------------------------------------------------------------

SHAPE_CLASSES = [
    "line",         # 0  two endpoints
    "circle",       # 1  center + radius
    "rectangle",    # 2  axis-aligned bounding box
    "square",       # 3  side centred in the bounding box
    "triangle",     # 4  isoceles, apex on top
    "hexagon",      # 5  regular, 6 vertices
    "pentagon",     # 6  regular, 5 vertices, starts at the top
]

SHAPE_MAP = {name: i for i, name in enumerate(SHAPE_CLASSES)}
NUM_SHAPES = len(SHAPE_CLASSES)            # 7

# Expected corner count per class; the classifier derives its miss_k / match_k
# basis terms from the nonzero counts here
EXPECTED_CORNERS = {
    "line": 0,
    "circle": 0,
    "rectangle": 4,
    "square": 4,
    "triangle": 3,
    "hexagon": 6,
    "pentagon": 5,
}

# ---------------------------------------------------------------------------
# Recognizer configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RecognizerConfig:
    # point cleaner
    min_points: int = 15
    min_clean_points: int = 10
    noise_floor: float = 2.0
    # geometry summarizer
    closure_tolerance: float = 0.15
    min_closed_size: float = 15.0
    # smoother
    smoothing_passes: int = 2
    smoothing_offset: int = 2
    smoothing_weights: tuple = (0.25, 0.5, 0.25)
    # corner detector
    lookahead_divisor: int = 20
    min_lookahead: int = 2
    min_segment_length: float = 5.0
    min_corner_angle: float = math.pi / 4
    max_corner_angle: float = 3 * math.pi / 4
    corner_dedup_fraction: float = 1.0 / 6.0
    # shape descriptors
    right_angle_cosine: float = 0.2
    # classifier
    confidence_threshold: float = 0.6
    softmax_epsilon: float = 1e-8
    # heuristic fallback
    heuristic_confidence: float = 0.5
    line_min_aspect: float = 3.0
    line_max_straightness: float = 1.5
    triangle_max_circularity: float = 0.8
    quad_max_circularity: float = 0.9
    quad_min_right_angle: float = 0.75
    square_max_aspect: float = 1.2
    square_min_squareness: float = 0.9
    rectangle_min_aspect: float = 1.3
    rectangle_max_squareness: float = 0.8
    polygon_min_circularity: float = 0.7
    circle_min_circularity: float = 0.85


DEFAULT_CONFIG = RecognizerConfig()

STRICT_CONFIG = RecognizerConfig(
    confidence_threshold=0.8,
    closure_tolerance=0.1,
)

LENIENT_CONFIG = RecognizerConfig(
    confidence_threshold=0.5,
    closure_tolerance=0.25,
)

CONFIG_PRESETS = {
    "default": DEFAULT_CONFIG,
    "strict": STRICT_CONFIG,
    "lenient": LENIENT_CONFIG,
}
