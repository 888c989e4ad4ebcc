"""
Author GraphQL type definitions
"""

from uuid import UUID

import strawberry


@strawberry.type
class Author:
    """Author type for GraphQL API."""

    id: strawberry.ID
    name: str
    born: int | None

    @strawberry.field
    async def book_count(self, info: strawberry.Info) -> int:
        """Number of books written by this author, computed at read time."""
        return await info.context["loaders"].book_count_loader.load(UUID(self.id))
