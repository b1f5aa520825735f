"""
Backing service clients.

The Supabase client (auth and the checkout table) and the Upstash Redis
client (cart snapshots) are created on first use and reused afterwards.
Both read their credentials from the environment at import time.
"""

import os
from typing import Optional

from supabase import create_client, Client, ClientOptions
from upstash_redis import Redis


SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")

# Upstash REST credentials, not a redis:// URL
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

_supabase: Optional[Client] = None
_redis: Optional[Redis] = None


def _require_supabase_env() -> None:
    if not (SUPABASE_URL and SUPABASE_ANON_KEY):
        raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")


def get_supabase_sync() -> Client:
    """
    Shared Supabase client.

    Built with the anon key, so token checks and checkout inserts are
    subject to row level security exactly as a browser client would be.
    """
    global _supabase
    if _supabase is None:
        _require_supabase_env()
        _supabase = create_client(SUPABASE_URL, SUPABASE_ANON_KEY)
    return _supabase


def create_supabase_auth_client() -> Client:
    """
    New Supabase client for one sign-in or sign-up call.

    A signed-in client holds that user's session; it is never shared
    between requests.
    """
    _require_supabase_env()
    options = ClientOptions(persist_session=False, auto_refresh_token=False)
    return create_client(SUPABASE_URL, SUPABASE_ANON_KEY, options=options)


def is_redis_configured() -> bool:
    return bool(UPSTASH_REDIS_REST_URL) and bool(UPSTASH_REDIS_REST_TOKEN)


def get_redis_sync() -> Redis:
    """Shared Upstash Redis client; ValueError when credentials are missing."""
    global _redis
    if _redis is None:
        if not is_redis_configured():
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis = Redis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)
    return _redis


class RedisKeys:
    """Key layout in Redis."""

    CART = "cart:"  # cart:{cart_session_id} -> JSON list of cart lines

    @staticmethod
    def cart_key(cart_session_id: str) -> str:
        return RedisKeys.CART + cart_session_id


class TTL:
    """Key lifetimes in seconds."""

    CART = 30 * 24 * 60 * 60  # reset by every snapshot write
