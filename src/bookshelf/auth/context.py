"""Authentication context for request handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from ..dbmodels import Users


@dataclass
class AuthContext:
    """Runtime authentication context for a request."""

    user: Users | None
    claims: dict[str, Any] | None
    token: str | None

    @classmethod
    def anonymous(cls) -> AuthContext:
        return cls(user=None, claims=None, token=None)

    @property
    def is_authenticated(self) -> bool:
        """Check if the request is authenticated."""
        return self.user is not None

    @property
    def user_id(self) -> UUID | None:
        return self.user.id if self.user else None
