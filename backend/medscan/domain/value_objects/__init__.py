"""
Value Objects

Immutable objects that represent domain concepts with no identity.
"""

from .call_outcome import CallOutcome, OutcomeStatus
from .image_data import ImageData
from .scan_type import ScanType, MatchConfidence
from .vision_annotations import DominantColor, Vertex, LocalizedObject, LabelAnnotation

__all__ = [
    "CallOutcome",
    "OutcomeStatus",
    "ImageData",
    "ScanType",
    "MatchConfidence",
    "DominantColor",
    "Vertex",
    "LocalizedObject",
    "LabelAnnotation",
]
