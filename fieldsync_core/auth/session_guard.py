# =============================================================================
# fieldsync_core/auth/session_guard.py
# Central handling of session expiry
# =============================================================================

import threading
from typing import Callable, Optional

from fieldsync_core.errors import AuthExpiredError
from fieldsync_core.logging import get_logger
from .session_store import SessionStore

logger = get_logger(__name__)


class SessionGuard:
    """
    Reacts to AuthExpiredError raised by any remote call.

    Clears the session store and fires the session-lost callback once per
    expiry, however many in-flight calls fail with the same token. The
    caller still receives the original error.

    Usage:
        guard = SessionGuard(session_store, on_session_lost=redirect_to_sign_in)
        client = RemoteClient(settings, session_store, guard=guard)
    """

    def __init__(
        self,
        session_store: SessionStore,
        on_session_lost: Optional[Callable[[], None]] = None,
    ):
        self._session_store = session_store
        self._on_session_lost = on_session_lost
        self._lock = threading.Lock()
        self._handling = False

    def set_callback(self, callback: Optional[Callable[[], None]]) -> None:
        self._on_session_lost = callback

    def handle(self, error: AuthExpiredError) -> bool:
        """
        Process one expiry signal.

        Returns True when this call cleared the session and fired the
        callback, False when the expiry was already handled.
        """
        with self._lock:
            if self._handling:
                return False
            current = self._session_store.get()
            # A request sent with a token that is no longer stored belongs to
            # an expiry that has already been processed.
            if error.token is not None and current.token != error.token:
                return False
            self._handling = True
            self._session_store.clear()

        logger.warning("Session expired; signing out")
        try:
            if self._on_session_lost is not None:
                self._on_session_lost()
        except Exception as e:
            logger.error(f"Session-lost callback failed: {e}", exc_info=True)
        finally:
            with self._lock:
                self._handling = False
        return True
