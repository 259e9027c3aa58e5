"""
Identity Provider Port

Abstract interface for sign-up, sign-in and token resolution.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities.auth import AuthOutcome, AuthUser


class IdentityProviderPort(ABC):
    """
    Port (interface) for the auth backend.

    Operations never raise for backend failures. Sign-up, sign-in and
    sign-out report through AuthOutcome; token lookups return None.
    """

    @abstractmethod
    def sign_up(self, email: str, password: str) -> AuthOutcome:
        """
        Register a new identity.

        Returns:
            AuthOutcome with the created user on success
        """
        pass

    @abstractmethod
    def sign_in(self, email: str, password: str) -> AuthOutcome:
        """
        Password sign-in.

        Returns:
            AuthOutcome with the issued session on success
        """
        pass

    @abstractmethod
    def sign_out(self, access_token: str) -> AuthOutcome:
        """Revoke the session behind an access token."""
        pass

    @abstractmethod
    def get_user(self, access_token: str) -> Optional[AuthUser]:
        """Resolve the user behind an access token (None if invalid)."""
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        pass
