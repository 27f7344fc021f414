# =============================================================================
# fieldsync_core/services/auth_service.py
# Sign-in, sign-up and sign-out
# =============================================================================

from typing import Optional

from fieldsync_core.api import RemoteClient
from fieldsync_core.auth import SessionStore
from fieldsync_core.errors import ServerError
from fieldsync_core.models import Session
from fieldsync_core.models.validation import validate_sign_in, validate_sign_up
from fieldsync_core.sync import ServiceResult
from .base_service import BaseService

# Registration can be slow on cold servers; matches the sign-up screen
SIGN_UP_TIMEOUT = 12.0


class AuthService(BaseService):
    """Creates and destroys the stored session."""

    def __init__(self, client: RemoteClient, session_store: SessionStore):
        super().__init__()
        self.client = client
        self.session_store = session_store

    def current_session(self) -> Session:
        return self.session_store.get()

    def ping(self) -> bool:
        return self.client.ping()

    def sign_in(self, email: str, password: str) -> ServiceResult:
        problems = validate_sign_in(email, password)
        if problems:
            return self.rejected(problems, prefix="Sign-in")

        return self.safe_execute(
            "Signing in",
            self._authenticate,
            "/login",
            {"email": email.strip(), "password": password},
            None,
        )

    def sign_up(
        self,
        username: str,
        govt_id: str,
        email: str,
        password: str,
        confirm: str,
    ) -> ServiceResult:
        problems = validate_sign_up(username, govt_id, email, password, confirm)
        if problems:
            return self.rejected(problems, prefix="Sign-up")

        body = {
            "username": username.strip(),
            "email": email.strip(),
            "password": password,
            "govt_id": govt_id.strip(),
        }
        return self.safe_execute("Registering", self._authenticate, "/register", body, SIGN_UP_TIMEOUT)

    def sign_out(self) -> ServiceResult:
        self.session_store.clear()
        return ServiceResult.ok()

    def _authenticate(self, path: str, body: dict, timeout: Optional[float]) -> Session:
        payload = self.client.call("POST", path, body=body, requires_auth=False, timeout=timeout)
        session = Session.from_auth_response(payload)
        if session is None:
            raise ServerError("The server did not return a session token", path=path)
        self.session_store.set(session)
        return session
