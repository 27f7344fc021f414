"""
Remote API access for the field-operations app.

Usage:
    from fieldsync_core.api import RemoteClient, load_settings

    settings = load_settings()
    client = RemoteClient(settings, session_store, guard=guard)
    data = client.call("GET", "/dashboard/last20")
"""

from .config_manager import ClientSettings, load_settings
from .remote_client import RemoteClient

__all__ = [
    "ClientSettings",
    "load_settings",
    "RemoteClient",
]
