"""JWT token service for self-issued identity tokens."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from ..errors import InvalidTokenError
from ..logging import get_logger

logger = get_logger(__name__)

REQUIRED_CLAIMS = ("id", "username")


class TokenService:
    """Issues and verifies signed identity tokens.

    Tokens are stateless: validity is signature validity, plus expiry when
    `token_expiry_hours` is set. There is no revocation list.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "bookshelf",
        audience: str = "bookshelf-api",
        token_expiry_hours: int | None = None,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.token_expiry_hours = token_expiry_hours

    def issue(self, claims: dict[str, Any]) -> str:
        """Sign `claims` into a new token.

        Issuer, audience, issue time and expiry are always set by the service;
        values for them in `claims` are replaced.
        """
        now = datetime.now(UTC)

        payload: dict[str, Any] = {
            **claims,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
        }
        payload.pop("exp", None)
        if self.token_expiry_hours:
            payload["exp"] = now + timedelta(hours=self.token_expiry_hours)

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        """Verify a token and return its claims.

        Raises:
            InvalidTokenError: If the signature, structure or claims are invalid
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={
                    "require": ["iss", "aud", *REQUIRED_CLAIMS],
                    "verify_exp": True,
                    "verify_iat": True,
                },
            )
        except jwt.InvalidTokenError as e:
            logger.warning("JWT token validation failed", error=str(e))
            raise InvalidTokenError() from e

        return payload
