# app/auth/identity.py
"""
Request-scoped session context.

Built once per request by ``app.dependencies.session.get_session_context`` and
passed explicitly to the handlers that need it. Nothing about the caller's
session is kept in module state.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.user import User


@dataclass(frozen=True)
class SessionContext:
    """
    Attributes:
        raw_token: Session token from the request cookie, if any was sent.
        user: The signed-in user, or None when the token is missing, unknown or expired.
    """

    raw_token: str | None = None
    user: User | None = None

    @classmethod
    def anonymous(cls, raw_token: str | None = None) -> SessionContext:
        return cls(raw_token=raw_token, user=None)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def to_debug_dict(self) -> dict:
        """Safe subset for logs; never includes the token."""
        return {
            "user_id": str(self.user.id) if self.user else None,
            "username": self.user.username if self.user else None,
            "is_authenticated": self.is_authenticated,
        }
