"""Resolve the request identity from the Authorization header."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..database.repository import get_user_by_id
from ..errors import InvalidTokenError
from ..logging import bind_user_id, get_logger
from .context import AuthContext
from .tokens import TokenService

logger = get_logger(__name__)

BEARER_PREFIX = "bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of a `Bearer <token>` header, or None.

    The scheme is matched case-insensitively.
    """
    if not authorization:
        return None

    if not authorization.lower().startswith(BEARER_PREFIX):
        logger.warning("Unsupported authorization scheme received")
        return None

    token = authorization[len(BEARER_PREFIX) :].strip()
    return token or None


async def build_auth_context(
    authorization: str | None,
    tokens: TokenService,
    session: AsyncSession,
) -> AuthContext:
    """
    Build the authentication context for a request.

    This function:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies it with the token service
    3. Loads the user named by the token's `id` claim

    Any failure along the way yields an anonymous context. Garbled or forged
    tokens never fail the request itself; resolvers that need an identity
    reject the call instead.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        return AuthContext.anonymous()

    try:
        claims = tokens.verify(token)
    except InvalidTokenError:
        logger.warning("Ignoring invalid bearer token")
        return AuthContext.anonymous()

    try:
        user_id = UUID(str(claims["id"]))
    except ValueError:
        logger.warning("Token carries a malformed user id")
        return AuthContext.anonymous()

    user = await get_user_by_id(session, user_id)
    if user is None:
        logger.warning("Token refers to an unknown user", user_id=str(user_id))
        return AuthContext.anonymous()

    bind_user_id(str(user.id))
    logger.debug("Request authenticated", username=user.username)

    return AuthContext(user=user, claims=claims, token=token)
