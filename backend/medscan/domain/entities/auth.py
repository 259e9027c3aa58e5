"""
Identity Entities

Authenticated user, session and the result of an auth operation.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass
class AuthUser:
    """An identity known to the auth backend."""

    id: str
    email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthUser":
        return cls(id=str(data["id"]), email=data.get("email"))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email}


@dataclass
class AuthSession:
    """Tokens issued on sign-in."""

    access_token: str
    user: AuthUser
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_in": self.expires_in,
            "token_type": self.token_type,
            "user": self.user.to_dict(),
        }


@dataclass
class AuthOutcome:
    """
    Result of sign-up, sign-in or sign-out.

    Auth operations never raise to the caller; failures come back with
    ``success=False`` and the backend's message.
    """

    success: bool
    message: str
    user: Optional[AuthUser] = None
    session: Optional[AuthSession] = None

    UNEXPECTED_ERROR = "An unexpected error occurred. Please try again."

    @classmethod
    def failed(cls, message: str) -> "AuthOutcome":
        return cls(success=False, message=message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "user": self.user.to_dict() if self.user else None,
            "session": self.session.to_dict() if self.session else None,
        }
