"""Supabase Auth identity provider."""
from dataclasses import dataclass
from typing import Callable, Optional

from supabase import AuthError, Client

from storefront.errors import ERROR_PASSWORDS_MISMATCH, ERROR_AUTH_UNKNOWN
from storefront.logging import get_logger, sanitize_string_for_logging

logger = get_logger(__name__)


class AuthenticationError(Exception):
    """Sign-in or sign-up was rejected; the message is shown to the user."""


@dataclass
class AuthSession:
    """Logged-in user as seen by the storefront."""
    user_id: str
    email: Optional[str]
    access_token: str


class IdentityProvider:
    """
    Login, sign-up and session lookup backed by Supabase Auth.

    Args:
        client: shared Supabase client, used for token verification and
            sign-out (neither stores a session on the client)
        auth_client_factory: creates a throwaway client for each sign-in
            or sign-up
    """

    def __init__(self, client: Client, auth_client_factory: Callable[[], Client]):
        self.client = client
        self.auth_client_factory = auth_client_factory

    def sign_in(self, email: str, password: str) -> AuthSession:
        """
        Sign in with email and password.

        Raises:
            AuthenticationError: with the provider's message
        """
        auth_client = self.auth_client_factory()
        try:
            response = auth_client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            logger.info(f"Login rejected for {sanitize_string_for_logging(email)}: {e.message}")
            raise AuthenticationError(e.message or ERROR_AUTH_UNKNOWN) from e

        if response.session is None or response.user is None:
            raise AuthenticationError(ERROR_AUTH_UNKNOWN)

        return AuthSession(
            user_id=str(response.user.id),
            email=response.user.email,
            access_token=response.session.access_token,
        )

    def sign_up(self, email: str, password: str, confirm_password: str) -> None:
        """
        Register a new account.

        Raises:
            AuthenticationError: passwords differ or the provider refused
        """
        if password != confirm_password:
            raise AuthenticationError(ERROR_PASSWORDS_MISMATCH)

        auth_client = self.auth_client_factory()
        try:
            auth_client.auth.sign_up({"email": email, "password": password})
        except AuthError as e:
            logger.info(f"Signup rejected for {sanitize_string_for_logging(email)}: {e.message}")
            raise AuthenticationError(e.message or ERROR_AUTH_UNKNOWN) from e

    def sign_out(self, access_token: str) -> None:
        """Revoke the session's refresh tokens; failures are only logged."""
        try:
            self.client.auth.admin.sign_out(access_token)
        except AuthError as e:
            logger.warning(f"Sign-out failed: {e.message}")

    def get_current_session(self, access_token: Optional[str]) -> Optional[AuthSession]:
        """Session for the token, or None if missing, invalid or expired."""
        if not access_token:
            return None
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError as e:
            logger.debug(f"Session lookup failed: {e.message}")
            return None

        if response is None or response.user is None:
            return None

        return AuthSession(
            user_id=str(response.user.id),
            email=response.user.email,
            access_token=access_token,
        )
