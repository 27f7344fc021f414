"""
Authenticated HTTP client for the field-operations API
Classifies every response into success, validation error, expired session
or server error
"""
import json
import time
from typing import Any, Dict, Optional

import requests

from fieldsync_core.errors import (
    AuthExpiredError,
    ClientError,
    ServerError,
    ValidationError,
)
from fieldsync_core.logging import get_logger
from .config_manager import ClientSettings

logger = get_logger(__name__)


class RemoteClient:
    """
    Thin wrapper around requests.Session.

    Every call is sent at most once. Failures are raised as ClientError
    subclasses; a 401 on an authenticated call is first handed to the
    session guard.

    Usage:
        client = RemoteClient(settings, session_store, guard=guard)
        payload = client.call("GET", "/dashboard/last20")
    """

    def __init__(self, settings: ClientSettings, session_store, guard=None, http: Optional[requests.Session] = None):
        self.settings = settings
        self.session_store = session_store
        self.guard = guard
        self.http = http or requests.Session()
        self.http.headers.update({"Content-Type": "application/json", "Accept": "application/json"})
        if settings.headers:
            self.http.headers.update(settings.headers)

    def call(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        requires_auth: bool = True,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Issue one HTTP request and classify the response.

        Args:
            method: HTTP method (GET, POST, PATCH, ...)
            path: API path, joined onto the configured base URL
            body: JSON-serializable request body
            requires_auth: Attach the bearer token when one is stored
            params: Query parameters
            timeout: Seconds before the request is aborted (default from settings)

        Returns:
            Parsed JSON object ({} for an empty or unparsable body)

        Raises:
            AuthExpiredError: 401 on an authenticated call
            ValidationError: any other 4xx
            ServerError: 5xx, timeout or transport failure
        """
        method = method.upper()
        timeout = timeout if timeout is not None else self.settings.timeout
        url = self.settings.url_for(path)

        headers = {}
        token = None
        if requires_auth:
            token = self.session_store.token
            if token:
                headers["Authorization"] = f"Bearer {token}"

        started = time.time()
        try:
            response = self.http.request(
                method=method,
                url=url,
                params=params,
                data=json.dumps(body) if body is not None else None,
                headers=headers,
                timeout=timeout,
            )
        except requests.exceptions.Timeout:
            logger.warning(f"{method} {path} aborted after {timeout}s")
            raise ServerError(
                f"Request aborted: no response within {timeout:g}s. Check your network or server.",
                aborted=True,
                method=method,
                path=path,
            )
        except requests.exceptions.RequestException as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ServerError(
                f"Network error: {e}",
                method=method,
                path=path,
            )

        elapsed = time.time() - started
        logger.debug(f"{method} {path} -> {response.status_code} ({elapsed:.2f}s)")
        payload = self._parse_body(response)

        if 200 <= response.status_code < 300:
            return payload

        error = self._classify(response.status_code, payload, method, path, requires_auth, token)
        if isinstance(error, AuthExpiredError) and self.guard is not None:
            self.guard.handle(error)
        raise error

    def get(self, path: str, **kwargs) -> Dict[str, Any]:
        return self.call("GET", path, **kwargs)

    def post(self, path: str, body: Optional[Any] = None, **kwargs) -> Dict[str, Any]:
        return self.call("POST", path, body=body, **kwargs)

    def patch(self, path: str, body: Optional[Any] = None, **kwargs) -> Dict[str, Any]:
        return self.call("PATCH", path, body=body, **kwargs)

    def ping(self) -> bool:
        """Check the API root answers; never raises."""
        try:
            self.call("GET", "/", requires_auth=False)
            return True
        except ClientError as e:
            logger.info(f"Ping failed: {e.message}")
            return False

    @staticmethod
    def _parse_body(response: requests.Response) -> Dict[str, Any]:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            return {}
        if isinstance(data, dict):
            return data
        return {"data": data}

    @staticmethod
    def _server_message(payload: Dict[str, Any]) -> Optional[str]:
        for key in ("error", "detail", "message"):
            value = payload.get(key)
            if value:
                return value if isinstance(value, str) else json.dumps(value)
        return None

    def _classify(
        self,
        status: int,
        payload: Dict[str, Any],
        method: str,
        path: str,
        requires_auth: bool,
        token: Optional[str],
    ) -> ClientError:
        message = self._server_message(payload)

        if status == 401 and requires_auth:
            return AuthExpiredError(token=token, method=method, path=path)
        if 400 <= status < 500:
            return ValidationError(message or f"HTTP {status}", status=status, method=method, path=path)
        detail = f": {message}" if message else ""
        return ServerError(f"HTTP {status}{detail}", status=status, method=method, path=path)
