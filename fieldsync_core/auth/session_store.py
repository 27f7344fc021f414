# =============================================================================
# fieldsync_core/auth/session_store.py
# Persisted authentication session
# =============================================================================

import json
from typing import Optional

from fieldsync_core.logging import get_logger
from fieldsync_core.models import Session, UserProfile
from fieldsync_core.storage import KeyValueStore

logger = get_logger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class SessionStore:
    """
    Source of truth for whether the caller is signed in.

    Token and user always move together: both are written in one
    transaction and read in one statement. Missing keys mean signed out.
    """

    def __init__(self, store: KeyValueStore):
        self._store = store

    def get(self) -> Session:
        values = self._store.get_many([TOKEN_KEY, USER_KEY])
        token, raw_user = values[TOKEN_KEY], values[USER_KEY]

        if token is None and raw_user is None:
            return Session.signed_out()
        if token is None or raw_user is None:
            logger.warning("Half-populated session found in store; treating as signed out")
            return Session.signed_out()

        user = self._decode_user(raw_user)
        if user is None:
            return Session.signed_out()
        return Session(token=token, user=user)

    def set(self, session: Session) -> None:
        if not session.is_authenticated:
            raise ValueError("Only a signed-in session can be stored; use clear() to sign out")
        self._store.set_many({
            TOKEN_KEY: session.token,
            USER_KEY: json.dumps(session.user.to_dict()),
        })
        logger.info(f"Session stored for {session.user.display_name}")

    def clear(self) -> None:
        self._store.remove_many([TOKEN_KEY, USER_KEY])
        logger.info("Session cleared")

    @property
    def token(self) -> Optional[str]:
        return self.get().token

    @staticmethod
    def _decode_user(raw: str) -> Optional[UserProfile]:
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Stored user profile is not valid JSON; treating as signed out")
            return None
        if not isinstance(data, dict):
            return None
        return UserProfile.from_dict(data)
