"""
Supabase client initialization.

This module contains *only* the database connection setup. `get_supabase()`
returns a lazily created, process-wide client; its HTTP connection pool is
shared by every request. Repositories never import a client at module level:
they receive one through their constructor.

Environment variables required (see config.py):
- SUPABASE_URL: Your Supabase project URL
- SUPABASE_KEY: Your Supabase API key (use a server-side key only on the backend)
"""

from __future__ import annotations

import threading
from typing import Optional

# The dependency is `supabase` (supabase-py). If your editor can't resolve it,
# install it in your environment: `pip install supabase`.
from supabase import Client, create_client  # type: ignore[import-not-found]

from config import Settings, get_settings

_client: Optional[Client] = None
_client_lock = threading.Lock()


def create_supabase_client(settings: Settings) -> Client:
    """Create a new Supabase client from settings, validating credentials first."""

    if not settings.supabase_url:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )

    if not settings.supabase_key:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase() -> Client:
    """Return the singleton Supabase client, creating it on first call."""

    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                _client = create_supabase_client(get_settings())
    return _client


__all__ = ["create_supabase_client", "get_supabase"]
