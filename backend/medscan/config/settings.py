"""
Application Configuration

Settings and configuration management for the medication scanner.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import os

from dotenv import load_dotenv


@dataclass
class VisionConfig:
    """Vision recognition service configuration."""

    type: str = "google"  # google, dummy
    api_key: Optional[str] = None
    base_url: str = "https://vision.googleapis.com/v1/images:annotate"
    eu_base_url: str = "https://eu-vision.googleapis.com/v1/images:annotate"
    use_eu_endpoint: bool = False
    language_hints: tuple = ("en",)

    @property
    def endpoint(self) -> str:
        """Get the annotate endpoint for the configured region."""
        return self.eu_base_url if self.use_eu_endpoint else self.base_url


@dataclass
class LabelSearchConfig:
    """Drug label/catalog search configuration."""

    type: str = "openfda"  # openfda, dummy
    api_key: Optional[str] = None
    base_url: str = "https://api.fda.gov/drug"
    default_limit: int = 10


@dataclass
class StorageConfig:
    """Storage and identity backend configuration."""

    type: str = "sql"  # supabase, sql
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    database_url: str = "sqlite:///./data/medscan.db"


@dataclass
class HttpConfig:
    """Outbound HTTP configuration."""

    timeout: float = 30.0  # requests has no default timeout
    user_agent: str = "medscan/1.0"


@dataclass
class ImageConfig:
    """Captured image preparation."""

    resize_width: int = 800
    jpeg_quality: int = 70


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    log_file: Optional[str] = None
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _env(*names: str) -> Optional[str]:
    """Return the first non-empty environment variable among names."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def _mask(secret: Optional[str]) -> Optional[str]:
    return "***" if secret else None


@dataclass
class AppConfig:
    """
    Main application configuration.

    Aggregates all component configurations.
    """

    vision: VisionConfig = field(default_factory=VisionConfig)
    label_search: LabelSearchConfig = field(default_factory=LabelSearchConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    image: ImageConfig = field(default_factory=ImageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    cors_origins: tuple = ("*",)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Create configuration from environment variables.

        A .env file in the working directory is loaded first.
        The EXPO_PUBLIC_* names of the mobile client are accepted as fallbacks.

        Environment variables:
            MEDSCAN_VISION_TYPE: Vision adapter (google/dummy)
            MEDSCAN_VISION_API_KEY: Google Cloud Vision API key
            MEDSCAN_VISION_USE_EU: Use the EU vision endpoint (true/false)
            MEDSCAN_OPENFDA_API_KEY: openFDA API key
            MEDSCAN_LABEL_SEARCH_TYPE: Label search adapter (openfda/dummy)
            MEDSCAN_STORAGE_TYPE: Storage adapter (supabase/sql)
            MEDSCAN_SUPABASE_URL: Supabase project URL
            MEDSCAN_SUPABASE_ANON_KEY: Supabase anon key
            MEDSCAN_DATABASE_URL: SQLAlchemy URL for the sql adapter
            MEDSCAN_HTTP_TIMEOUT: Outbound request timeout in seconds
            MEDSCAN_LOG_LEVEL: Logging level
            MEDSCAN_LOG_FILE: Optional log file path
        """
        load_dotenv()
        config = cls()

        # Vision
        if vision_type := os.getenv("MEDSCAN_VISION_TYPE"):
            config.vision.type = vision_type
        config.vision.api_key = _env(
            "MEDSCAN_VISION_API_KEY", "EXPO_PUBLIC_GOOGLE_CLOUD_VISION_API_KEY"
        )
        if use_eu := os.getenv("MEDSCAN_VISION_USE_EU"):
            config.vision.use_eu_endpoint = use_eu.lower() == "true"

        # Label search
        if search_type := os.getenv("MEDSCAN_LABEL_SEARCH_TYPE"):
            config.label_search.type = search_type
        config.label_search.api_key = _env(
            "MEDSCAN_OPENFDA_API_KEY", "EXPO_PUBLIC_OPENFDA_API_KEY"
        )

        # Storage
        config.storage.supabase_url = _env(
            "MEDSCAN_SUPABASE_URL", "EXPO_PUBLIC_SUPABASE_URL"
        )
        config.storage.supabase_anon_key = _env(
            "MEDSCAN_SUPABASE_ANON_KEY", "EXPO_PUBLIC_SUPABASE_ANON_KEY"
        )
        if storage_type := os.getenv("MEDSCAN_STORAGE_TYPE"):
            config.storage.type = storage_type
        elif config.storage.supabase_url and config.storage.supabase_anon_key:
            config.storage.type = "supabase"
        if database_url := os.getenv("MEDSCAN_DATABASE_URL"):
            config.storage.database_url = database_url

        # HTTP
        if timeout := os.getenv("MEDSCAN_HTTP_TIMEOUT"):
            config.http.timeout = float(timeout)

        # Logging
        if log_level := os.getenv("MEDSCAN_LOG_LEVEL"):
            config.logging.level = log_level
        if log_file := os.getenv("MEDSCAN_LOG_FILE"):
            config.logging.log_file = log_file

        return config

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Create configuration from dictionary."""
        config = cls()

        sections = {
            "vision": config.vision,
            "label_search": config.label_search,
            "storage": config.storage,
            "http": config.http,
            "image": config.image,
            "logging": config.logging,
        }
        for section_name, section in sections.items():
            for key, value in data.get(section_name, {}).items():
                if hasattr(section, key):
                    setattr(section, key, value)

        if "cors_origins" in data:
            config.cors_origins = tuple(data["cors_origins"])

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary. Secrets are masked."""
        return {
            "vision": {
                "type": self.vision.type,
                "api_key": _mask(self.vision.api_key),
                "endpoint": self.vision.endpoint,
            },
            "label_search": {
                "type": self.label_search.type,
                "api_key": _mask(self.label_search.api_key),
                "base_url": self.label_search.base_url,
                "default_limit": self.label_search.default_limit,
            },
            "storage": {
                "type": self.storage.type,
                "supabase_url": self.storage.supabase_url,
                "supabase_anon_key": _mask(self.storage.supabase_anon_key),
                "database_url": self.storage.database_url,
            },
            "http": {
                "timeout": self.http.timeout,
            },
            "image": {
                "resize_width": self.image.resize_width,
                "jpeg_quality": self.image.jpeg_quality,
            },
            "logging": {
                "level": self.logging.level,
                "log_file": self.logging.log_file,
            },
        }


def get_default_config() -> AppConfig:
    """Get default application configuration."""
    return AppConfig.from_env()
