"""
Session handling for the field-operations sync layer.

The session (token + user profile) lives in the local key-value store and is
passed explicitly to every component that needs it.
"""

from .session_store import SessionStore, TOKEN_KEY, USER_KEY
from .session_guard import SessionGuard
from .navigation import (
    redirect_to_sign_in,
    consume_nav_intent,
    consume_notice,
    SIGN_IN_PAGE,
)

__all__ = [
    "SessionStore",
    "SessionGuard",
    "TOKEN_KEY",
    "USER_KEY",
    "redirect_to_sign_in",
    "consume_nav_intent",
    "consume_notice",
    "SIGN_IN_PAGE",
]
