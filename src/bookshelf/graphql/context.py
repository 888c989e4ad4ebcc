"""
Per-request GraphQL context construction
"""

from typing import Any

from ..auth.middleware import build_auth_context
from ..auth.tokens import TokenService
from ..config import Settings, settings
from ..database.connection import Database
from .loaders import Loaders


async def build_graphql_context(
    db: Database,
    tokens: TokenService,
    authorization: str | None,
    request: Any = None,
    config: Settings | None = None,
) -> dict[str, Any]:
    """Resolve the request identity and assemble the resolver context."""
    async with db.session() as session:
        auth_context = await build_auth_context(authorization, tokens, session)

    return {
        "request": request,
        "settings": config or settings,
        "db": db,
        "tokens": tokens,
        "auth": auth_context,
        "loaders": Loaders(db),
    }
