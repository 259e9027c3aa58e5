"""
Domain Services

Stateless heuristics applied to vision output and catalog records.
"""

from .color_classifier import classify_color, name_rgb
from .shape_classifier import classify_shape, shape_from_outline
from .imprint_extractor import extract_imprint
from .label_normalizer import format_medication_data, parse_ingredient

__all__ = [
    "classify_color",
    "name_rgb",
    "classify_shape",
    "shape_from_outline",
    "extract_imprint",
    "format_medication_data",
    "parse_ingredient",
]
