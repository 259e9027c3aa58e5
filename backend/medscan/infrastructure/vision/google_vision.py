"""
Google Cloud Vision Adapter

Image recognition through the ``images:annotate`` REST endpoint.
Each detection is its own request with a single feature.
"""

from typing import Optional, Dict, Any, List, Callable, TypeVar
import logging
import time

import requests

from ...domain.ports.vision_service import VisionServicePort
from ...domain.value_objects.call_outcome import CallOutcome
from ...domain.value_objects.image_data import ImageData
from ...domain.value_objects.vision_annotations import (
    DominantColor,
    LocalizedObject,
    LabelAnnotation,
)
from ..utils.http import create_session


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ENDPOINT = "https://vision.googleapis.com/v1/images:annotate"

# Feature -> maxResults
TEXT_DETECTION = ("DOCUMENT_TEXT_DETECTION", 10)
LABEL_DETECTION = ("LABEL_DETECTION", 15)
IMAGE_PROPERTIES = ("IMAGE_PROPERTIES", 10)
OBJECT_LOCALIZATION = ("OBJECT_LOCALIZATION", 10)


class GoogleVisionService(VisionServicePort):
    """
    VisionServicePort implementation for Google Cloud Vision.

    The API key is sent as the ``key`` query parameter and never logged.

    Attributes:
        endpoint: annotate URL (global or EU)
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        api_key: Optional[str],
        endpoint: str = DEFAULT_ENDPOINT,
        language_hints: tuple = ("en",),
        timeout: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the adapter.

        Args:
            api_key: Google Cloud API key
            endpoint: annotate endpoint URL
            language_hints: OCR language hints
            timeout: Request timeout in seconds
            session: Optional requests session (shared or fake)
        """
        self._api_key = api_key
        self._endpoint = endpoint
        self._language_hints = list(language_hints)
        self._timeout = timeout
        self._session = session or create_session()
        self._session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
        })

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _annotate(
        self,
        image: ImageData,
        feature: tuple,
        parse: Callable[[Dict[str, Any]], CallOutcome[T]],
        image_context: Optional[Dict[str, Any]] = None
    ) -> CallOutcome[T]:
        """Send one annotate request and hand the first response to ``parse``."""
        feature_type, max_results = feature

        if not self._api_key:
            return CallOutcome.error("vision API key is not configured")

        request: Dict[str, Any] = {
            "image": {"content": image.base64_string},
            "features": [{"type": feature_type, "maxResults": max_results}],
        }
        if image_context:
            request["imageContext"] = image_context

        start_time = time.time()
        try:
            response = self._session.post(
                self._endpoint,
                params={"key": self._api_key},
                json={"requests": [request]},
                timeout=self._timeout,
            )
            data = response.json()
        except requests.RequestException as e:
            self.logger.error(f"{feature_type} request failed: {type(e).__name__}")
            return CallOutcome.error(f"transport error: {type(e).__name__}")
        except ValueError as e:
            self.logger.error(f"{feature_type} returned invalid JSON: {e}")
            return CallOutcome.error("malformed response")

        if not isinstance(data, dict):
            return CallOutcome.error("malformed response")

        if data.get("error"):
            self.logger.error(f"Google Vision API error: {data['error']}")
            return CallOutcome.error(f"API error: {data['error']}")

        if not response.ok:
            return CallOutcome.error(f"HTTP {response.status_code}")

        responses = data.get("responses")
        if not isinstance(responses, list):
            responses = []
        first = responses[0] if responses and isinstance(responses[0], dict) else {}
        if first.get("error"):
            self.logger.error(f"Google Vision API error: {first['error']}")
            return CallOutcome.error(f"API error: {first['error']}")

        try:
            outcome = parse(first)
        except (AttributeError, TypeError, ValueError, KeyError) as e:
            self.logger.error(f"{feature_type} response could not be parsed: {e}")
            return CallOutcome.error("malformed response")

        elapsed = (time.time() - start_time) * 1000
        self.logger.info(f"{feature_type}: {outcome.status.value} in {elapsed:.0f}ms")
        return outcome

    def detect_text(self, image: ImageData) -> CallOutcome[str]:
        def parse(response: Dict[str, Any]) -> CallOutcome[str]:
            annotations = response.get("textAnnotations") or []
            if not annotations:
                return CallOutcome.empty("no text detected")
            # The first annotation holds the whole text
            text = annotations[0].get("description")
            return CallOutcome.success(text) if text else CallOutcome.empty("no text detected")

        return self._annotate(
            image,
            TEXT_DETECTION,
            parse,
            image_context={"languageHints": self._language_hints},
        )

    def detect_labels(self, image: ImageData) -> CallOutcome[List[str]]:
        def parse(response: Dict[str, Any]) -> CallOutcome[List[str]]:
            labels = [
                label.description
                for label in (
                    LabelAnnotation.from_dict(item)
                    for item in response.get("labelAnnotations") or []
                )
                if label is not None
            ]
            return CallOutcome.success(labels) if labels else CallOutcome.empty("no labels detected")

        return self._annotate(image, LABEL_DETECTION, parse)

    def detect_colors(self, image: ImageData) -> CallOutcome[List[DominantColor]]:
        def parse(response: Dict[str, Any]) -> CallOutcome[List[DominantColor]]:
            properties = response.get("imagePropertiesAnnotation") or {}
            colors = (properties.get("dominantColors") or {}).get("colors") or []
            if not colors:
                return CallOutcome.empty("no colors detected")
            return CallOutcome.success([DominantColor.from_dict(c) for c in colors])

        return self._annotate(image, IMAGE_PROPERTIES, parse)

    def detect_objects(self, image: ImageData) -> CallOutcome[List[LocalizedObject]]:
        def parse(response: Dict[str, Any]) -> CallOutcome[List[LocalizedObject]]:
            objects = response.get("localizedObjectAnnotations") or []
            if not objects:
                return CallOutcome.empty("no objects detected")
            return CallOutcome.success([LocalizedObject.from_dict(o) for o in objects])

        return self._annotate(image, OBJECT_LOCALIZATION, parse)

    @property
    def provider_name(self) -> str:
        return "google-cloud-vision"

    def is_available(self) -> Optional[bool]:
        return bool(self._api_key)


class DummyVisionService(VisionServicePort):
    """
    Dummy vision service for testing without network access.

    Returns the canned annotations it was built with. Anything left
    unset comes back EMPTY.
    """

    def __init__(
        self,
        text: Optional[str] = None,
        labels: Optional[List[str]] = None,
        colors: Optional[List[DominantColor]] = None,
        objects: Optional[List[LocalizedObject]] = None
    ):
        self.text = text
        self.labels = labels or []
        self.colors = colors or []
        self.objects = objects or []
        self.calls: List[str] = []

    @staticmethod
    def _outcome(value, what: str) -> CallOutcome:
        return CallOutcome.success(value) if value else CallOutcome.empty(f"no {what}")

    def detect_text(self, image: ImageData) -> CallOutcome[str]:
        self.calls.append("text")
        return self._outcome(self.text, "text")

    def detect_labels(self, image: ImageData) -> CallOutcome[List[str]]:
        self.calls.append("labels")
        return self._outcome(list(self.labels), "labels")

    def detect_colors(self, image: ImageData) -> CallOutcome[List[DominantColor]]:
        self.calls.append("colors")
        return self._outcome(list(self.colors), "colors")

    def detect_objects(self, image: ImageData) -> CallOutcome[List[LocalizedObject]]:
        self.calls.append("objects")
        return self._outcome(list(self.objects), "objects")

    @property
    def provider_name(self) -> str:
        return "DummyVisionService"

    def is_available(self) -> Optional[bool]:
        return True
