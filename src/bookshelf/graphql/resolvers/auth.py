from __future__ import annotations

import strawberry

from ...auth.passwords import dummy_hash, verify_password
from ...database.repository import get_user_by_username
from ...errors import InvalidCredentialsError
from ...logging import get_logger
from ..types.user import Token

logger = get_logger(__name__)


async def login(info: strawberry.Info, username: str, password: str) -> Token:
    """
    Exchange a username and password for a signed token.

    Unknown users and wrong passwords fail with the same error, and both
    paths run one hash comparison.
    """
    config = info.context["settings"]

    async with info.context["db"].session() as session:
        user = await get_user_by_username(session, username)

    stored_hash = user.password_hash if user else dummy_hash(config.password_hash_iterations)
    password_ok = verify_password(password, stored_hash)

    if user is None or not password_ok:
        logger.info("Login failed")
        raise InvalidCredentialsError()

    value = info.context["tokens"].issue({"username": user.username, "id": str(user.id)})

    logger.info("Login succeeded", user_id=str(user.id))
    return Token(value=value)
