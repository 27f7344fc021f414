# =============================================================================
# fieldsync_core/errors/handlers.py
# Error reporting for FieldSync
# =============================================================================

from __future__ import annotations
from typing import Optional
import streamlit as st

from fieldsync_core.logging import get_logger
from .exceptions import AuthExpiredError, FieldSyncError, ValidationError

logger = get_logger(__name__)


def handle_error(
    error: Exception,
    show_user_message: bool = True,
    user_message: Optional[str] = None,
) -> None:
    """
    Log an error and optionally report it on the current page.

    Rejected input and expired sessions are something the user can act on,
    so they are logged as warnings and shown with st.warning. Everything
    else is logged as an error and shown with st.error.

    Args:
        error: The exception to handle
        show_user_message: Whether to display the error on the page
        user_message: Custom message to show (uses the error message if None)
    """
    if isinstance(error, FieldSyncError):
        message = user_message or error.message
        code = error.code
        details = error.details
        recoverable = error.recoverable
    else:
        message = user_message or str(error)
        code = "UNKNOWN"
        details = {}
        recoverable = True

    user_fixable = isinstance(error, (ValidationError, AuthExpiredError))
    if user_fixable:
        logger.warning(f"[{code}] {message}", extra={"details": details})
    else:
        logger.error(
            f"[{code}] {message}",
            extra={"details": details},
            exc_info=not isinstance(error, FieldSyncError),
        )

    if not show_user_message:
        return
    if user_fixable:
        st.warning(message)
    elif recoverable:
        st.error(f"Error: {message}")
    else:
        st.error(message)
