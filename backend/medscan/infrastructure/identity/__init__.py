"""
Identity Adapters

Implementations of IdentityProviderPort.
"""

from .supabase_auth import SupabaseIdentityProvider
from .local_identity import LocalIdentityProvider
from .factory import IdentityProviderFactory, IdentityProviderType

__all__ = [
    "SupabaseIdentityProvider",
    "LocalIdentityProvider",
    "IdentityProviderFactory",
    "IdentityProviderType",
]
