"""Authentication package."""
from .session import AuthSession, AuthenticationError, IdentityProvider
from .dependencies import ACCESS_TOKEN_COOKIE, get_access_token, get_current_session, get_identity_provider

__all__ = [
    "AuthSession",
    "AuthenticationError",
    "IdentityProvider",
    "ACCESS_TOKEN_COOKIE",
    "get_access_token",
    "get_current_session",
    "get_identity_provider",
]
