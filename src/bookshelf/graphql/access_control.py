"""
Shared access control logic for GraphQL resolvers
"""

from typing import TYPE_CHECKING

import strawberry

from ..auth.context import AuthContext
from ..errors import UnauthenticatedError
from ..logging import get_logger

if TYPE_CHECKING:
    from ..dbmodels import Users

logger = get_logger(__name__)


def get_auth_context_from_info(info: strawberry.Info) -> AuthContext:
    """
    Extract the auth context resolved for this request.

    Returns an anonymous context if none was attached.
    """
    auth_context = info.context.get("auth")
    if auth_context is None:
        logger.error("Auth context not found in GraphQL context")
        return AuthContext.anonymous()
    return auth_context


def require_authenticated(info: strawberry.Info, operation: str) -> "Users":
    """
    Return the current user or reject the operation.

    Raises:
        UnauthenticatedError: If the request carries no valid identity
    """
    auth_context = get_auth_context_from_info(info)
    if not auth_context.is_authenticated or auth_context.user is None:
        logger.info("Unauthenticated call rejected", operation=operation)
        raise UnauthenticatedError()
    return auth_context.user
