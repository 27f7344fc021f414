"""
Client Configuration Manager
Resolves remote API and local storage settings for the sync layer
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import streamlit as st

from fieldsync_core.errors import ConfigurationError
from fieldsync_core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_API_BASE = "http://localhost:3000"
DEFAULT_TIMEOUT = 12.0
DEFAULT_PAGE_SIZE = 25
DEFAULT_STORE_PATH = Path(__file__).parent.parent.parent / "local_data" / "fieldsync.db"

# Environment variable -> settings field
ENV_OVERRIDES = {
    "FIELDSYNC_API_BASE": "api_base",
    "FIELDSYNC_TIMEOUT": "timeout",
    "FIELDSYNC_PAGE_SIZE": "page_size",
    "FIELDSYNC_STORE_PATH": "store_path",
    "FIELDSYNC_LOG_DIR": "log_dir",
}


@dataclass
class ClientSettings:
    """Configuration for the remote API and the local store"""
    api_base: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE
    store_path: Path = DEFAULT_STORE_PATH
    log_dir: Optional[Path] = None
    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.api_base = str(self.api_base).rstrip("/")
        self.store_path = Path(self.store_path)
        if self.log_dir is not None:
            self.log_dir = Path(self.log_dir)
        self.timeout = _coerce(self.timeout, float, "timeout")
        self.page_size = _coerce(self.page_size, int, "page_size")

        if not self.api_base:
            raise ConfigurationError("API base URL is empty", config_key="api_base")
        if self.timeout <= 0:
            raise ConfigurationError("Timeout must be positive", config_key="timeout")
        if self.page_size <= 0:
            raise ConfigurationError("Page size must be positive", config_key="page_size")

    def url_for(self, path: str) -> str:
        """Join a remote path onto the API base"""
        return f"{self.api_base}/{path.lstrip('/')}"


def _coerce(value: Any, to_type: type, key: str):
    try:
        return to_type(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Invalid value for {key}: {value!r}",
            config_key=key,
            expected_type=to_type.__name__,
        )


def _load_from_secrets() -> Dict[str, Any]:
    """
    Read the [api] table from Streamlit secrets

    Expected secrets.toml format:
    [api]
    api_base = "https://fieldsync.example.org"
    timeout = 12
    page_size = 25
    store_path = "local_data/fieldsync.db"
    log_dir = "logs"
    """
    try:
        if hasattr(st, "secrets") and "api" in st.secrets:
            return dict(st.secrets["api"])
    except Exception:
        # No secrets.toml present
        pass
    return {}


def _load_from_env() -> Dict[str, Any]:
    values = {}
    for env_key, field_name in ENV_OVERRIDES.items():
        raw = os.getenv(env_key)
        if raw:
            values[field_name] = raw.strip()
    return values


def load_settings(**overrides) -> ClientSettings:
    """
    Resolve settings: Streamlit secrets, then environment, then defaults.

    Keyword overrides win over every source.
    """
    values: Dict[str, Any] = {}
    values.update(_load_from_env())
    for key, value in _load_from_secrets().items():
        if key in ClientSettings.__dataclass_fields__:
            values[key] = value
    values.update({k: v for k, v in overrides.items() if v is not None})

    settings = ClientSettings(**values)
    logger.debug(f"Using API base {settings.api_base} (timeout {settings.timeout}s)")
    return settings

