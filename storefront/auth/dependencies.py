"""FastAPI dependencies for the logged-in user."""
from typing import Optional

from fastapi import Cookie, Depends, Header
from .session import AuthSession, IdentityProvider

ACCESS_TOKEN_COOKIE = "sb_access_token"

_identity_provider: Optional[IdentityProvider] = None


def get_identity_provider() -> IdentityProvider:
    """Get or create IdentityProvider singleton (lazy loaded)"""
    global _identity_provider
    if _identity_provider is None:
        from storefront.db import get_supabase_sync, create_supabase_auth_client
        _identity_provider = IdentityProvider(get_supabase_sync(), create_supabase_auth_client)
    return _identity_provider


def get_access_token(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    sb_access_token: Optional[str] = Cookie(None, alias=ACCESS_TOKEN_COOKIE),
) -> Optional[str]:
    """
    Access token from the request.

    Accepts either:
    - Authorization: Bearer <access_token>
    - the sb_access_token cookie set by /api/auth/login
    """
    if authorization:
        parts = authorization.split(" ")
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return sb_access_token


def get_current_session(
    access_token: Optional[str] = Depends(get_access_token),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> Optional[AuthSession]:
    """Current session, or None for guests."""
    return identity.get_current_session(access_token)
