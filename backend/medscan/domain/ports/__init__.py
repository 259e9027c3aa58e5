"""
Ports (Interfaces)

Abstract interfaces defining the contracts for infrastructure adapters.
Following Hexagonal Architecture / Ports & Adapters pattern.
"""

from .vision_service import VisionServicePort
from .label_search import LabelSearchPort, LabelRecord
from .repository import RecordRepositoryPort
from .identity import IdentityProviderPort

__all__ = [
    "VisionServicePort",
    "LabelSearchPort",
    "LabelRecord",
    "RecordRepositoryPort",
    "IdentityProviderPort",
]
