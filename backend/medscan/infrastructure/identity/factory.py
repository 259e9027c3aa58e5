"""
Identity Provider Factory

Factory for creating identity provider instances.
"""

from typing import Any
from enum import Enum

from ...domain.ports.identity import IdentityProviderPort
from ...domain.exceptions import ConfigurationError
from ...config.settings import StorageConfig
from .supabase_auth import SupabaseIdentityProvider
from .local_identity import LocalIdentityProvider


class IdentityProviderType(Enum):
    """Available identity providers."""

    SUPABASE = "supabase"
    LOCAL = "local"


class IdentityProviderFactory:
    """
    Factory for creating identity providers.

    The identity provider follows the storage backend: hosted records use
    hosted auth, the SQL backend uses local accounts in the same database.
    """

    @staticmethod
    def create(provider_type: IdentityProviderType, **kwargs) -> IdentityProviderPort:
        """
        Create an identity provider.

        Args:
            provider_type: Provider to use
            **kwargs: Additional configuration options
                For SUPABASE: url, anon_key, timeout, session
                For LOCAL: database_url or engine

        Returns:
            IdentityProviderPort implementation
        """
        if provider_type == IdentityProviderType.SUPABASE:
            url = kwargs.get("url")
            anon_key = kwargs.get("anon_key")
            if not url or not anon_key:
                raise ConfigurationError(
                    "Supabase URL and anon key are required for hosted auth",
                    setting="MEDSCAN_SUPABASE_URL",
                )
            return SupabaseIdentityProvider(
                url,
                anon_key,
                timeout=kwargs.get("timeout", 30.0),
                session=kwargs.get("session"),
            )

        elif provider_type == IdentityProviderType.LOCAL:
            return LocalIdentityProvider(
                database_url=kwargs.get("database_url", "sqlite://"),
                engine=kwargs.get("engine"),
            )

        else:
            raise ValueError(f"Unknown identity provider type: {provider_type}")

    @staticmethod
    def create_from_config(config: StorageConfig, timeout: float = 30.0, **kwargs: Any) -> IdentityProviderPort:
        """Create the identity provider matching a StorageConfig."""
        provider_type = (
            IdentityProviderType.SUPABASE if config.type == "supabase" else IdentityProviderType.LOCAL
        )
        options = {
            "url": config.supabase_url,
            "anon_key": config.supabase_anon_key,
            "database_url": config.database_url,
            "timeout": timeout,
        }
        options.update(kwargs)
        return IdentityProviderFactory.create(provider_type, **options)
