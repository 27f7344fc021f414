# =============================================================================
# fieldsync_core/models/session.py
# Signed-in session and user profile
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class UserProfile:
    """Signed-in user as returned by /login and /register"""
    id: Optional[Any] = None
    name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def display_name(self) -> str:
        return self.name or self.username or self.email or "User"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> UserProfile:
        known = {"id", "name", "username", "email"}
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            username=data.get("username"),
            email=data.get("email"),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        for key in ("id", "name", "username", "email"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class Session:
    """
    Authentication state.

    token and user are either both present (signed in) or both absent
    (signed out).
    """
    token: Optional[str] = None
    user: Optional[UserProfile] = None

    def __post_init__(self):
        if (self.token is None) != (self.user is None):
            raise ValueError("Session token and user must be set together")

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    @classmethod
    def signed_out(cls) -> Session:
        return cls()

    @classmethod
    def from_auth_response(cls, data: Dict[str, Any]) -> Optional[Session]:
        """Build a session from a {token, user} payload; None if incomplete."""
        token = data.get("token")
        user = data.get("user")
        if not token or not isinstance(user, dict):
            return None
        return cls(token=str(token), user=UserProfile.from_dict(user))
