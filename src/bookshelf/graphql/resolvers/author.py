from __future__ import annotations

import strawberry

from ...database.repository import (
    ConstraintViolation,
    count_authors,
    get_author_by_name,
    list_authors,
    set_author_born,
)
from ...dbmodels import Authors
from ...errors import InvalidInputError
from ...logging import get_logger
from ..access_control import require_authenticated
from ..types.author import Author

logger = get_logger(__name__)


def to_author_type(author: Authors) -> Author:
    """Convert an ORM author to its GraphQL type. bookCount resolves lazily."""
    return Author(
        id=strawberry.ID(str(author.id)),
        name=author.name,
        born=author.born,
    )


# Query resolvers
async def resolve_author_count(info: strawberry.Info) -> int:
    async with info.context["db"].session() as session:
        return await count_authors(session)


async def resolve_all_authors(info: strawberry.Info) -> list[Author]:
    async with info.context["db"].session() as session:
        authors = await list_authors(session)
    return [to_author_type(author) for author in authors]


# Mutation resolvers
async def edit_author(info: strawberry.Info, name: str, born: int) -> Author | None:
    """
    Set an author's birth year.

    An unknown name is not an error: the mutation returns null and the store
    is left untouched.
    """
    require_authenticated(info, "editAuthor")

    async with info.context["db"].session() as session:
        author = await get_author_by_name(session, name)
        if author is None:
            logger.info("editAuthor: author not found", name=name)
            return None

        try:
            await set_author_born(session, author, born)
        except ConstraintViolation as e:
            logger.info("editAuthor rejected by store", name=name, error=str(e))
            raise InvalidInputError(str(e), invalid_args={"name": name, "born": born}) from e

        logger.info("Author updated", author_id=str(author.id), born=born)
        return to_author_type(author)
