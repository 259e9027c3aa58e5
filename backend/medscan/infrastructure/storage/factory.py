"""
Record Repository Factory

Factory for creating record repository instances.
"""

from typing import Any
from enum import Enum

from ...domain.ports.repository import RecordRepositoryPort
from ...domain.exceptions import ConfigurationError
from ...config.settings import StorageConfig
from .supabase_repository import SupabaseRecordRepository
from .sql_repository import SQLRecordRepository


class StorageType(Enum):
    """Available storage backends."""

    SUPABASE = "supabase"
    SQL = "sql"


class RecordRepositoryFactory:
    """
    Factory for creating record repositories.

    Usage:
        repo = RecordRepositoryFactory.create(StorageType.SQL, database_url="sqlite://")
        repo = RecordRepositoryFactory.create(
            StorageType.SUPABASE, url="https://xyz.supabase.co", anon_key="..."
        )
    """

    @staticmethod
    def create(storage_type: StorageType, **kwargs) -> RecordRepositoryPort:
        """
        Create a record repository.

        Args:
            storage_type: Backend to use
            **kwargs: Additional configuration options
                For SUPABASE: url, anon_key, timeout, session
                For SQL: database_url or engine

        Returns:
            RecordRepositoryPort implementation
        """
        if storage_type == StorageType.SUPABASE:
            url = kwargs.get("url")
            anon_key = kwargs.get("anon_key")
            if not url or not anon_key:
                raise ConfigurationError(
                    "Supabase URL and anon key are required for the supabase backend",
                    setting="MEDSCAN_SUPABASE_URL",
                )
            return SupabaseRecordRepository(
                url,
                anon_key,
                timeout=kwargs.get("timeout", 30.0),
                session=kwargs.get("session"),
            )

        elif storage_type == StorageType.SQL:
            return SQLRecordRepository(
                database_url=kwargs.get("database_url", "sqlite://"),
                engine=kwargs.get("engine"),
            )

        else:
            raise ValueError(f"Unknown storage type: {storage_type}")

    @staticmethod
    def create_from_config(config: StorageConfig, timeout: float = 30.0, **kwargs: Any) -> RecordRepositoryPort:
        """Create a record repository from StorageConfig."""
        options = {
            "url": config.supabase_url,
            "anon_key": config.supabase_anon_key,
            "database_url": config.database_url,
            "timeout": timeout,
        }
        options.update(kwargs)
        return RecordRepositoryFactory.create(StorageType(config.type), **options)
