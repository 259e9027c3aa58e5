"""
Vision Service Adapters

Implementations of VisionServicePort.
"""

from .google_vision import GoogleVisionService, DummyVisionService
from .factory import VisionServiceFactory, VisionServiceType

__all__ = [
    "GoogleVisionService",
    "DummyVisionService",
    "VisionServiceFactory",
    "VisionServiceType",
]
