"""
Local Identity Provider

IdentityProviderPort implementation on the local SQL database, for
development and tests. Sign-up also creates the user's empty profile row,
as the hosted backend's signup trigger does.
"""

from typing import Optional
import logging
import secrets

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash, check_password_hash

from ...domain.ports.identity import IdentityProviderPort
from ...domain.entities.auth import AuthOutcome, AuthUser, AuthSession
from ..storage.database import create_database_engine, create_session_factory
from ..storage.models import AuthUserModel, AuthTokenModel, UserProfileModel
from .supabase_auth import SIGN_UP_MESSAGE, SIGN_IN_MESSAGE, SIGN_OUT_MESSAGE


logger = logging.getLogger(__name__)

# Same wording as the hosted auth service
ALREADY_REGISTERED = "User already registered"
INVALID_CREDENTIALS = "Invalid login credentials"
INVALID_TOKEN = "Invalid or expired token"


class LocalIdentityProvider(IdentityProviderPort):
    """
    Email/password identity stored next to the records.

    Passwords are hashed with werkzeug; access tokens are random opaque
    strings stored in ``auth_tokens`` until sign-out.
    """

    def __init__(self, database_url: str = "sqlite://", engine: Optional[Engine] = None):
        self._engine = engine or create_database_engine(database_url)
        self._session_factory = create_session_factory(self._engine)

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def sign_up(self, email: str, password: str) -> AuthOutcome:
        email = email.strip().lower()
        try:
            with self._session_factory() as session:
                existing = session.query(AuthUserModel).filter(AuthUserModel.email == email).first()
                if existing is not None:
                    return AuthOutcome.failed(ALREADY_REGISTERED)

                user = AuthUserModel(email=email, password_hash=generate_password_hash(password))
                session.add(user)
                session.flush()
                session.add(UserProfileModel(user_id=user.id, email=email))
                session.commit()

                self.logger.info(f"Registered user {user.id}")
                return AuthOutcome(
                    success=True,
                    message=SIGN_UP_MESSAGE,
                    user=AuthUser(id=user.id, email=user.email),
                )
        except SQLAlchemyError as e:
            self.logger.error(f"Error signing up: {e}")
            return AuthOutcome.failed(AuthOutcome.UNEXPECTED_ERROR)

    def sign_in(self, email: str, password: str) -> AuthOutcome:
        email = email.strip().lower()
        try:
            with self._session_factory() as session:
                user = session.query(AuthUserModel).filter(AuthUserModel.email == email).first()
                if user is None or not check_password_hash(user.password_hash, password):
                    return AuthOutcome.failed(INVALID_CREDENTIALS)

                token = secrets.token_hex(32)
                session.add(AuthTokenModel(token=token, user_id=user.id))
                session.commit()

                auth_user = AuthUser(id=user.id, email=user.email)
                return AuthOutcome(
                    success=True,
                    message=SIGN_IN_MESSAGE,
                    user=auth_user,
                    session=AuthSession(access_token=token, user=auth_user),
                )
        except SQLAlchemyError as e:
            self.logger.error(f"Error signing in: {e}")
            return AuthOutcome.failed(AuthOutcome.UNEXPECTED_ERROR)

    def sign_out(self, access_token: str) -> AuthOutcome:
        try:
            with self._session_factory() as session:
                token = session.get(AuthTokenModel, access_token)
                if token is None or token.revoked:
                    return AuthOutcome.failed(INVALID_TOKEN)
                token.revoked = True
                session.commit()
                return AuthOutcome(success=True, message=SIGN_OUT_MESSAGE)
        except SQLAlchemyError as e:
            self.logger.error(f"Error signing out: {e}")
            return AuthOutcome.failed(AuthOutcome.UNEXPECTED_ERROR)

    def get_user(self, access_token: str) -> Optional[AuthUser]:
        if not access_token:
            return None
        try:
            with self._session_factory() as session:
                token = session.get(AuthTokenModel, access_token)
                if token is None or token.revoked:
                    return None
                return AuthUser(id=token.user.id, email=token.user.email)
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting current user: {e}")
            return None

    @property
    def provider_name(self) -> str:
        return "local"
