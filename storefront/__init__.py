"""
Storefront Core Module

This package contains the storefront backend components:
- db: Supabase and Upstash Redis clients
- cart: cart store with write-through persistence
- services: product catalog client, money helpers
- auth: Supabase Auth identity provider
- checkout: checkout form, record and sink
- routers: FastAPI endpoints

Note: Imports are lazy so that importing a submodule does not pull in
the HTTP clients of the others.
"""

__all__ = [
    "get_supabase_sync",
    "get_redis_sync",
]


def __getattr__(name):
    """Lazy attribute access for clean serverless loading."""
    if name == "get_supabase_sync":
        from storefront.db import get_supabase_sync
        return get_supabase_sync
    if name == "get_redis_sync":
        from storefront.db import get_redis_sync
        return get_redis_sync
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
