"""
Supabase Auth Adapter

IdentityProviderPort implementation on the hosted backend's auth API
(``{SUPABASE_URL}/auth/v1``).
"""

from typing import Optional, Dict, Any
import logging

import requests

from ...domain.ports.identity import IdentityProviderPort
from ...domain.entities.auth import AuthOutcome, AuthUser, AuthSession
from ..utils.http import create_session, supabase_headers, error_message


logger = logging.getLogger(__name__)

SIGN_UP_MESSAGE = "Sign up successful. Please check your email for verification."
SIGN_IN_MESSAGE = "Sign in successful."
SIGN_OUT_MESSAGE = "Signed out successfully."


class SupabaseIdentityProvider(IdentityProviderPort):
    """
    Identity provider backed by Supabase auth.

    Endpoints:
        POST /auth/v1/signup
        POST /auth/v1/token?grant_type=password
        POST /auth/v1/logout
        GET  /auth/v1/user
    """

    def __init__(
        self,
        url: str,
        anon_key: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        self._auth_url = f"{url.rstrip('/')}/auth/v1"
        self._anon_key = anon_key
        self._timeout = timeout
        self._session = session or create_session()

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _post(
        self,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
        access_token: Optional[str] = None
    ) -> requests.Response:
        return self._session.post(
            f"{self._auth_url}/{path}",
            params=params,
            json=body or {},
            headers=supabase_headers(self._anon_key, access_token),
            timeout=self._timeout,
        )

    @staticmethod
    def _user_from(body: Dict[str, Any]) -> Optional[AuthUser]:
        # signup returns the user itself, or a session holding it when
        # email confirmation is disabled
        user = body.get("user") if isinstance(body.get("user"), dict) else body
        if isinstance(user, dict) and user.get("id"):
            return AuthUser.from_dict(user)
        return None

    def sign_up(self, email: str, password: str) -> AuthOutcome:
        self.logger.info(f"Sign up attempt for {email}")
        try:
            response = self._post("signup", {"email": email, "password": password})
            if not response.ok:
                message = error_message(response)
                self.logger.error(f"Supabase auth error: {message}")
                return AuthOutcome.failed(message)
            return AuthOutcome(
                success=True,
                message=SIGN_UP_MESSAGE,
                user=self._user_from(response.json()),
            )
        except (requests.RequestException, ValueError) as e:
            self.logger.error(f"Error signing up: {e}")
            return AuthOutcome.failed(AuthOutcome.UNEXPECTED_ERROR)

    def sign_in(self, email: str, password: str) -> AuthOutcome:
        self.logger.info(f"Sign in attempt for {email}")
        try:
            response = self._post(
                "token",
                {"email": email, "password": password},
                params={"grant_type": "password"},
            )
            if not response.ok:
                message = error_message(response)
                self.logger.error(f"Supabase auth error: {message}")
                return AuthOutcome.failed(message)

            body = response.json()
            user = self._user_from(body)
            if not body.get("access_token") or user is None:
                return AuthOutcome.failed(AuthOutcome.UNEXPECTED_ERROR)

            session = AuthSession(
                access_token=body["access_token"],
                refresh_token=body.get("refresh_token"),
                expires_in=body.get("expires_in"),
                token_type=body.get("token_type", "bearer"),
                user=user,
            )
            return AuthOutcome(success=True, message=SIGN_IN_MESSAGE, user=user, session=session)
        except (requests.RequestException, ValueError) as e:
            self.logger.error(f"Error signing in: {e}")
            return AuthOutcome.failed(AuthOutcome.UNEXPECTED_ERROR)

    def sign_out(self, access_token: str) -> AuthOutcome:
        try:
            response = self._post("logout", access_token=access_token)
            if not response.ok:
                return AuthOutcome.failed(error_message(response))
            return AuthOutcome(success=True, message=SIGN_OUT_MESSAGE)
        except requests.RequestException as e:
            self.logger.error(f"Error signing out: {e}")
            return AuthOutcome.failed(AuthOutcome.UNEXPECTED_ERROR)

    def get_user(self, access_token: str) -> Optional[AuthUser]:
        if not access_token:
            return None
        try:
            response = self._session.get(
                f"{self._auth_url}/user",
                headers=supabase_headers(self._anon_key, access_token),
                timeout=self._timeout,
            )
            if not response.ok:
                self.logger.warning(f"Error getting current user: {error_message(response)}")
                return None
            return self._user_from(response.json())
        except (requests.RequestException, ValueError) as e:
            self.logger.error(f"Error getting current user: {e}")
            return None

    @property
    def provider_name(self) -> str:
        return "supabase"
