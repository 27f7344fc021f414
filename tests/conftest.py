# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import json
import threading
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import MagicMock
from urllib.parse import urlparse

import pytest
import requests


# =============================================================================
# HTTP HELPERS
# =============================================================================

def make_response(status: int = 200, body: Any = None, raw: Optional[bytes] = None) -> requests.Response:
    """Build a real requests.Response with a JSON (or raw) body"""
    response = requests.Response()
    response.status_code = status
    if raw is not None:
        response._content = raw
    elif body is None:
        response._content = b""
    else:
        response._content = json.dumps(body).encode()
    response.headers["Content-Type"] = "application/json"
    return response


class FakeHttp:
    """
    Stand-in for requests.Session routed by (method, path).

    A route is either a Response, an exception instance, or a callable
    taking the call kwargs and returning one of those.
    """

    def __init__(self):
        self.headers: Dict[str, str] = {}
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def route(self, method: str, path: str, outcome: Any) -> None:
        self.routes[(method.upper(), path)] = outcome

    def request(self, method, url, **kwargs):
        path = urlparse(url).path or "/"
        call = {"method": method, "url": url, "path": path, **kwargs}
        with self._lock:
            self.calls.append(call)
        outcome = self.routes.get((method.upper(), path))
        if outcome is None:
            return make_response(404, {"error": f"No route for {method} {path}"})
        if callable(outcome) and not isinstance(outcome, requests.Response):
            outcome = outcome(call)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def calls_to(self, method: str, path: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method and c["path"] == path]


# =============================================================================
# CORE FIXTURES
# =============================================================================

@pytest.fixture
def settings(tmp_path):
    from fieldsync_core.api import ClientSettings
    return ClientSettings(
        api_base="http://api.test",
        timeout=12.0,
        page_size=25,
        store_path=tmp_path / "fieldsync.db",
    )


@pytest.fixture
def kv_store(settings):
    from fieldsync_core.storage import KeyValueStore
    store = KeyValueStore(settings.store_path)
    yield store
    store.close()


@pytest.fixture
def session_store(kv_store):
    from fieldsync_core.auth import SessionStore
    return SessionStore(kv_store)


@pytest.fixture
def signed_in(session_store):
    """Store a signed-in session and return it"""
    from fieldsync_core.models import Session, UserProfile
    session = Session(
        token="tok-123",
        user=UserProfile(id=7, name="Meera", email="meera@example.org"),
    )
    session_store.set(session)
    return session


@pytest.fixture
def session_lost():
    """Counting session-lost callback"""
    callback = MagicMock()
    return callback


@pytest.fixture
def guard(session_store, session_lost):
    from fieldsync_core.auth import SessionGuard
    return SessionGuard(session_store, on_session_lost=session_lost)


@pytest.fixture
def fake_http():
    return FakeHttp()


@pytest.fixture
def client(settings, session_store, guard, fake_http):
    from fieldsync_core.api import RemoteClient
    return RemoteClient(settings, session_store, guard=guard, http=fake_http)


@pytest.fixture
def cache(kv_store):
    from fieldsync_core.cache import LastResultCache
    return LastResultCache(kv_store)


# =============================================================================
# MOCK FIXTURES
# =============================================================================

@pytest.fixture
def mock_streamlit(monkeypatch):
    """Mock Streamlit for modules that talk to st directly"""
    mock_st = MagicMock()
    mock_st.session_state = {}

    import fieldsync_core.auth.navigation as navigation
    import fieldsync_core.errors.handlers as handlers
    monkeypatch.setattr(navigation, "st", mock_st)
    monkeypatch.setattr(handlers, "st", mock_st)

    yield mock_st


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def screening_rows():
    return [
        {"id": 12, "name": "Lakshmi", "age": 24, "surveyed": False, "blood_group_mother": "O+"},
        {"id": 13, "name": "Kavya", "age": 31, "surveyed": True, "blood_group_mother": "A-"},
        {"id": 14, "name": "Roshni", "age": 27, "surveyed": False, "blood_group_mother": "B+"},
    ]


@pytest.fixture
def make_post_delivery_rows():
    """Factory for rows of a /post-delivery page"""
    def _rows(start: int, count: int) -> List[Dict[str, Any]]:
        return [
            {
                "id": start + i,
                "mother_name": f"Mother {start + i}",
                "delivery_date": "2024-01-20",
                "child_weight_kg": 2.9,
                "complications": None,
                "child_diseases": ["Jaundice"] if i % 2 else [],
                "submitted_at": "2024-01-21T08:00:00Z",
            }
            for i in range(count)
        ]
    return _rows


@pytest.fixture
def prediction_envelope():
    return {
        "ok": True,
        "id": 88,
        "record": {"name": "Lakshmi", "age": 24},
        "prediction": {
            "probabilities": [{"flag_0": 0.12, "flag_6": 0.71, "flag_13": 0.4}],
            "risk": [42.5],
        },
        "prediction_file": "prediction_88.json",
    }
