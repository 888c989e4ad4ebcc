from __future__ import annotations

import strawberry

from ...database.repository import (
    ConstraintViolation,
    count_books,
    create_book,
    get_or_create_author,
    list_books,
)
from ...dbmodels import Books
from ...errors import InvalidInputError
from ...logging import get_logger
from ..access_control import require_authenticated
from ..types.book import Book
from .author import to_author_type
from .validation import normalize_genres, require_text

logger = get_logger(__name__)


def to_book_type(book: Books) -> Book:
    """Convert an ORM book (author and genres loaded) to its GraphQL type."""
    return Book(
        id=strawberry.ID(str(book.id)),
        title=book.title,
        published=book.published,
        genres=book.genres,
        author=to_author_type(book.author),
    )


# Query resolvers
async def resolve_book_count(info: strawberry.Info) -> int:
    async with info.context["db"].session() as session:
        return await count_books(session)


async def resolve_all_books(
    info: strawberry.Info,
    author: str | None = None,
    genre: str | None = None,
) -> list[Book]:
    """
    List books, optionally filtered.

    Args:
        author: Exact author name the books must belong to
        genre: Genre the books must be tagged with
    """
    async with info.context["db"].session() as session:
        books = await list_books(session, author_name=author, genre=genre)
    return [to_book_type(book) for book in books]


# Mutation resolvers
async def add_book(
    info: strawberry.Info,
    title: str,
    author: str,
    published: int,
    genres: list[str],
) -> Book:
    """
    Create a book, creating its author first when the name is new.

    The author is committed before the book is inserted. If the book insert
    then fails the new author stays in the store.
    """
    require_authenticated(info, "addBook")

    arguments = {"title": title, "author": author, "published": published, "genres": genres}
    require_text(title, "title")
    require_text(author, "author")
    unique_genres = normalize_genres(genres)

    try:
        async with info.context["db"].session() as session:
            author_row, created = await get_or_create_author(session, author)
            if created:
                await session.commit()
                logger.info("Author created", author_id=str(author_row.id), name=author)

            book = await create_book(
                session,
                title=title,
                published=published,
                author=author_row,
                genres=unique_genres,
            )
            result = to_book_type(book)
    except ConstraintViolation as e:
        logger.info("addBook rejected by store", error=str(e))
        raise InvalidInputError(str(e), invalid_args=arguments) from e

    # Later fields of the same request must see the new count
    info.context["loaders"].book_count_loader.clear(author_row.id)

    logger.info("Book created", book_id=result.id, author=author)
    return result
