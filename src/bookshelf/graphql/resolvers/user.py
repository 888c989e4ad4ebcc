from __future__ import annotations

import strawberry

from ...auth.passwords import hash_password
from ...database.repository import ConstraintViolation, create_user as insert_user
from ...dbmodels import Users
from ...errors import InvalidInputError, ValidationError
from ...logging import get_logger
from ..access_control import get_auth_context_from_info
from ..types.user import User
from .validation import require_text

logger = get_logger(__name__)


def to_user_type(user: Users) -> User:
    return User(
        id=strawberry.ID(str(user.id)),
        username=user.username,
        favorite_genre=user.favorite_genre,
    )


async def resolve_current_user(info: strawberry.Info) -> User | None:
    auth_context = get_auth_context_from_info(info)
    if not auth_context.is_authenticated or auth_context.user is None:
        return None
    return to_user_type(auth_context.user)


async def create_user(
    info: strawberry.Info,
    username: str,
    favorite_genre: str,
    password: str | None = None,
) -> User:
    """
    Sign up a new user. No authentication required.

    Without an explicit password the configured shared signup password is
    used. Either way only a salted hash is stored.
    """
    config = info.context["settings"]
    arguments = {"username": username, "favoriteGenre": favorite_genre, "password": password}

    require_text(username, "username")
    require_text(favorite_genre, "favoriteGenre")

    secret = password if password is not None else config.default_password
    if not secret:
        raise ValidationError("password must not be empty", field="password")

    password_hash = hash_password(secret, config.password_hash_iterations)

    try:
        async with info.context["db"].session() as session:
            user = await insert_user(
                session,
                username=username,
                favorite_genre=favorite_genre,
                password_hash=password_hash,
            )
            result = to_user_type(user)
    except ConstraintViolation as e:
        logger.info("createUser rejected by store", username=username, error=str(e))
        raise InvalidInputError(str(e), invalid_args=arguments) from e

    logger.info("User created", user_id=result.id, username=username)
    return result
