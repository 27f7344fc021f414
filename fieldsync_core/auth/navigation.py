"""
Navigation intents raised by the sync layer.

Session loss is detected on whatever thread made the failing call, so the
guard only records where the app should go next. Page scripts call
consume_nav_intent() at the top of each run and switch pages themselves.
"""

from typing import Optional

import streamlit as st

SIGN_IN_PAGE = "pages/SignIn.py"
NAV_INTENT_KEY = "_nav_intent"
NOTICE_KEY = "_auth_notice"

# Auth keys mirrored into session_state for display
AUTH_STATE_KEYS = ["authenticated", "username", "name", "email"]


def redirect_to_sign_in(notice: str = "Your session expired. Please sign in again.") -> None:
    """Default session-lost callback: clear auth display state and ask for sign-in."""
    for key in AUTH_STATE_KEYS:
        if key in st.session_state:
            del st.session_state[key]
    st.session_state[NAV_INTENT_KEY] = SIGN_IN_PAGE
    st.session_state[NOTICE_KEY] = notice


def consume_nav_intent() -> Optional[str]:
    """Pop the pending navigation target, if any."""
    return st.session_state.pop(NAV_INTENT_KEY, None)


def consume_notice() -> Optional[str]:
    return st.session_state.pop(NOTICE_KEY, None)
