"""
Configuration Module

Application settings and configuration management.
"""

from .settings import (
    AppConfig,
    VisionConfig,
    LabelSearchConfig,
    StorageConfig,
    HttpConfig,
    ImageConfig,
    LoggingConfig,
    get_default_config,
)

__all__ = [
    "AppConfig",
    "VisionConfig",
    "LabelSearchConfig",
    "StorageConfig",
    "HttpConfig",
    "ImageConfig",
    "LoggingConfig",
    "get_default_config",
]
