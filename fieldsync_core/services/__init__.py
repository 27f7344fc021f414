# =============================================================================
# fieldsync_core/services/__init__.py
# Service Layer for FieldSync
# Separates sync logic from page scripts
# =============================================================================
"""
Service Layer for FieldSync

Every service receives its collaborators explicitly. get_services() wires
one shared object graph for a Streamlit process.

Usage Example:
-------------
    from fieldsync_core.services import get_services

    services = get_services()
    services.auth.sign_in("asha@example.org", "secret1")

    services.post_delivery.loader.load(1)
    page = services.post_delivery.loader.state

    result = services.supervisor.add_field_worker({"name": "Asha", "area": "Sector 9"})
    if not result:
        st.error(result.error)
"""

from __future__ import annotations
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from fieldsync_core.api import ClientSettings, RemoteClient, load_settings
from fieldsync_core.auth import SessionGuard, SessionStore, redirect_to_sign_in
from fieldsync_core.cache import LastResultCache
from fieldsync_core.logging import setup_logging
from fieldsync_core.storage import KeyValueStore, get_key_value_store

from .base_service import BaseService, ServiceResult
from .auth_service import AuthService
from .screening_service import ScreeningService
from .post_delivery_service import PostDeliveryService
from .maternal_health_service import MaternalHealthService
from .supervisor_service import SupervisorService


@dataclass
class Services:
    """Wired object graph for one app process."""
    settings: ClientSettings
    store: KeyValueStore
    session_store: SessionStore
    guard: SessionGuard
    client: RemoteClient
    cache: LastResultCache
    auth: AuthService
    screenings: ScreeningService
    post_delivery: PostDeliveryService
    maternal_health: MaternalHealthService
    supervisor: SupervisorService


def build_services(
    settings: ClientSettings,
    store: Optional[KeyValueStore] = None,
    on_session_lost: Optional[Callable[[], None]] = redirect_to_sign_in,
    http=None,
) -> Services:
    """Build the full service graph from settings."""
    store = store or get_key_value_store(settings.store_path)
    session_store = SessionStore(store)
    guard = SessionGuard(session_store, on_session_lost=on_session_lost)
    client = RemoteClient(settings, session_store, guard=guard, http=http)
    cache = LastResultCache(store)

    return Services(
        settings=settings,
        store=store,
        session_store=session_store,
        guard=guard,
        client=client,
        cache=cache,
        auth=AuthService(client, session_store),
        screenings=ScreeningService(client),
        post_delivery=PostDeliveryService(client, cache, page_size=settings.page_size),
        maternal_health=MaternalHealthService(client, cache),
        supervisor=SupervisorService(client),
    )


_services: Optional[Services] = None
_services_lock = threading.Lock()


def get_services(settings: Optional[ClientSettings] = None) -> Services:
    """Get the shared service graph, configuring logging and building it on first use."""
    global _services
    if _services is None:
        with _services_lock:
            if _services is None:
                settings = settings or load_settings()
                setup_logging(log_dir=settings.log_dir)
                _services = build_services(settings)
    return _services


__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    # View-model services
    "AuthService",
    "ScreeningService",
    "PostDeliveryService",
    "MaternalHealthService",
    "SupervisorService",
    # Wiring
    "Services",
    "build_services",
    "get_services",
]
