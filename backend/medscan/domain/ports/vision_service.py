"""
Vision Service Port

Abstract interface for image recognition providers.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..value_objects.call_outcome import CallOutcome
from ..value_objects.image_data import ImageData
from ..value_objects.vision_annotations import DominantColor, LocalizedObject


class VisionServicePort(ABC):
    """
    Port (interface) for image recognition.

    One method per recognition feature. Each is a single request to the
    provider and never raises for provider failures: transport errors,
    error payloads and empty answers come back as a CallOutcome.

    Implementations:
    - Google Cloud Vision ``images:annotate``
    - Dummy adapter with canned annotations (tests, offline development)
    """

    @abstractmethod
    def detect_text(self, image: ImageData) -> CallOutcome[str]:
        """
        Run document text detection.

        Returns:
            SUCCESS with the full detected text, EMPTY when no text was found
        """
        pass

    @abstractmethod
    def detect_labels(self, image: ImageData) -> CallOutcome[List[str]]:
        """
        Describe the image with labels.

        Returns:
            SUCCESS with label descriptions, most relevant first
        """
        pass

    @abstractmethod
    def detect_colors(self, image: ImageData) -> CallOutcome[List[DominantColor]]:
        """
        Find the dominant colors.

        Returns:
            SUCCESS with colors, most prominent first
        """
        pass

    @abstractmethod
    def detect_objects(self, image: ImageData) -> CallOutcome[List[LocalizedObject]]:
        """
        Localize objects in the image.

        Returns:
            SUCCESS with detected objects and their normalized bounding polygons
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the name of the underlying provider."""
        pass

    def is_available(self) -> Optional[bool]:
        """Whether the adapter is configured to make calls (None if unknown)."""
        return None
