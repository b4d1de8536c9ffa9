"""
Authentication module for Family Hub.

Provides cookie-backed server-side sessions. The identity provider that
vouches for a user sits in front of the login endpoint.
"""

from src.auth.session_store import (
    create_session,
    get_active_session,
    delete_session,
    purge_expired_sessions,
)

__all__ = [
    "create_session",
    "get_active_session",
    "delete_session",
    "purge_expired_sessions",
]
