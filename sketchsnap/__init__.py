"""sketchsnap - snap freehand strokes to canonical shapes."""

from sketchsnap.config import SHAPE_CLASSES, SHAPE_MAP, NUM_SHAPES, RecognizerConfig, CONFIG_PRESETS
from sketchsnap.recognizer import RecognitionResult, ShapeRecognizer, recognize
