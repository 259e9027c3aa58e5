"""
Pill Shape Classifier

Derives a pill shape from object localization results.
"""

from typing import Optional, Sequence, Tuple, Union
import logging

from ..value_objects.vision_annotations import LocalizedObject, Vertex
from ...cross_cutting.error_handling import handle_exception


logger = logging.getLogger(__name__)

SHAPE_KEYWORDS = (
    "circle", "oval", "rectangle", "square", "triangle", "pill", "capsule", "tablet",
)

# Checked in order against the winning detection's name
SHAPE_BY_KEYWORD: Tuple[Tuple[str, str], ...] = (
    ("circle", "round"),
    ("oval", "oval"),
    ("rectangle", "rectangle"),
    ("square", "square"),
    ("triangle", "triangle"),
    ("capsule", "capsule"),
)

GENERIC_PILL_KEYWORDS = ("pill", "tablet")

OVAL_MIN_RATIO = 1.5
ROUND_RATIO_RANGE = (0.8, 1.2)  # inclusive


def shape_from_outline(vertices: Sequence[Vertex]) -> Optional[str]:
    """
    Guess a shape from a 4-vertex bounding quad.

    Width is measured along vertices 0-1 and height along vertices 1-2.

    Returns:
        "oval", "round", "rectangle", or None for malformed geometry
    """
    if len(vertices) != 4:
        return None

    width = abs(vertices[1].x - vertices[0].x)
    height = abs(vertices[2].y - vertices[1].y)
    if height == 0:
        return None

    ratio = width / height
    if ratio > OVAL_MIN_RATIO:
        return "oval"
    low, high = ROUND_RATIO_RANGE
    if low <= ratio <= high:
        return "round"
    return "rectangle"


@handle_exception(default_return=None, log_level=logging.WARNING)
def classify_shape(objects: Optional[Sequence[Union[LocalizedObject, dict]]]) -> Optional[str]:
    """
    Name the pill shape from detected objects.

    Only detections whose name mentions a shape word are considered. The
    highest-scoring one wins (earliest on ties). Generic "pill"/"tablet"
    detections are resolved from their bounding quad.

    Args:
        objects: LocalizedObject instances or raw vision-service dicts

    Returns:
        Shape name or None
    """
    if not objects:
        return None

    detections = [
        o if isinstance(o, LocalizedObject) else LocalizedObject.from_dict(o)
        for o in objects
    ]
    candidates = [
        d for d in detections
        if any(keyword in d.name.lower() for keyword in SHAPE_KEYWORDS)
    ]
    if not candidates:
        return None

    best = max(candidates, key=lambda d: d.score)
    name = best.name.lower()
    logger.debug(f"Shape detection: '{best.name}' ({best.score:.2f})")

    for keyword, shape in SHAPE_BY_KEYWORD:
        if keyword in name:
            return shape

    if any(keyword in name for keyword in GENERIC_PILL_KEYWORDS):
        return shape_from_outline(best.vertices)

    return None
