"""
Vision Service Factory

Factory for creating vision service instances.
"""

from typing import Dict, Any
from enum import Enum

from ...domain.ports.vision_service import VisionServicePort
from ...config.settings import VisionConfig
from .google_vision import GoogleVisionService, DummyVisionService


class VisionServiceType(Enum):
    """Available vision service implementations."""

    GOOGLE = "google"
    DUMMY = "dummy"


class VisionServiceFactory:
    """
    Factory for creating vision service instances.

    Usage:
        vision = VisionServiceFactory.create(VisionServiceType.GOOGLE, api_key="...")
        vision = VisionServiceFactory.create(VisionServiceType.DUMMY, text="M367")
    """

    @staticmethod
    def create(
        service_type: VisionServiceType,
        **kwargs
    ) -> VisionServicePort:
        """
        Create a vision service instance.

        Args:
            service_type: Type of service to create
            **kwargs: Additional configuration options
                For GOOGLE:
                - api_key: Google Cloud API key
                - endpoint: annotate URL
                - timeout: Request timeout in seconds
                - session: requests session
                For DUMMY:
                - text, labels, colors, objects: canned annotations

        Returns:
            VisionServicePort implementation
        """
        if service_type == VisionServiceType.GOOGLE:
            google_options = {
                k: kwargs[k]
                for k in ("endpoint", "language_hints", "timeout", "session")
                if k in kwargs
            }
            return GoogleVisionService(api_key=kwargs.get("api_key"), **google_options)

        elif service_type == VisionServiceType.DUMMY:
            return DummyVisionService(
                text=kwargs.get("text"),
                labels=kwargs.get("labels"),
                colors=kwargs.get("colors"),
                objects=kwargs.get("objects"),
            )

        else:
            raise ValueError(f"Unknown vision service type: {service_type}")

    @staticmethod
    def create_from_config(config: VisionConfig, timeout: float = 30.0, **kwargs: Any) -> VisionServicePort:
        """
        Create a vision service from VisionConfig.

        Args:
            config: Vision section of AppConfig
            timeout: Request timeout in seconds
        """
        options: Dict[str, Any] = {
            "api_key": config.api_key,
            "endpoint": config.endpoint,
            "language_hints": config.language_hints,
            "timeout": timeout,
        }
        options.update(kwargs)
        return VisionServiceFactory.create(VisionServiceType(config.type), **options)
