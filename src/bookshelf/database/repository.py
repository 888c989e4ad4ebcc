"""Repository helpers for authors, books and users.

All functions take the caller's session; committing is left to the caller
(`Database.session()` commits on exit). Constraint failures are raised as
`ConstraintViolation` so callers never see driver-specific exceptions.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..dbmodels import Authors, BookGenres, Books, Users
from ..logging import get_logger

logger = get_logger(__name__)


class ConstraintViolation(Exception):
    """Raised when the store rejects a write (unique key, not-null, check, value too long)."""


async def _flush(session: AsyncSession) -> None:
    try:
        await session.flush()
    except (IntegrityError, DataError) as e:
        raise ConstraintViolation(str(e.orig)) from e


# Authors


async def count_authors(session: AsyncSession) -> int:
    result = await session.execute(select(func.count(Authors.id)))
    return result.scalar() or 0


async def list_authors(session: AsyncSession) -> Sequence[Authors]:
    result = await session.execute(select(Authors))
    return result.scalars().all()


async def get_author_by_name(session: AsyncSession, name: str) -> Authors | None:
    result = await session.execute(select(Authors).where(Authors.name == name))
    return result.scalar_one_or_none()


async def get_or_create_author(session: AsyncSession, name: str) -> tuple[Authors, bool]:
    """Find an author by exact name, creating it with only the name set if absent.

    Two requests may race to create the same new name. The unique constraint
    on `authors.name` lets exactly one insert win; the loser rolls back to a
    savepoint taken just before its insert and reads the winner's row. Earlier
    work in the caller's transaction is kept.

    Returns:
        (author, created)
    """
    author = await get_author_by_name(session, name)
    if author is not None:
        return author, False

    author = Authors(name=name)
    try:
        async with session.begin_nested():
            session.add(author)
            await session.flush()
        return author, True
    except DataError as e:
        raise ConstraintViolation(str(e.orig)) from e
    except IntegrityError as e:
        existing = await get_author_by_name(session, name)
        if existing is None:
            raise ConstraintViolation(str(e.orig)) from e
        logger.info("Author created concurrently, reusing existing row", name=name)
        return existing, False


async def set_author_born(session: AsyncSession, author: Authors, born: int) -> Authors:
    author.born = born
    await _flush(session)
    return author


# Books


async def count_books(session: AsyncSession) -> int:
    result = await session.execute(select(func.count(Books.id)))
    return result.scalar() or 0


async def list_books(
    session: AsyncSession,
    *,
    author_name: str | None = None,
    genre: str | None = None,
) -> Sequence[Books]:
    """List books with their author and genres loaded, optionally filtered."""
    stmt = select(Books).options(selectinload(Books.author), selectinload(Books.genre_rows))

    if author_name is not None:
        stmt = stmt.join(Authors, Books.author_id == Authors.id).where(Authors.name == author_name)

    if genre is not None:
        stmt = stmt.where(Books.id.in_(select(BookGenres.book_id).where(BookGenres.genre == genre)))

    result = await session.execute(stmt)
    return result.scalars().all()


async def count_books_by_author(session: AsyncSession, author_ids: Sequence[UUID]) -> dict[UUID, int]:
    """Count books per author in one grouped query. Authors without books are absent."""
    if not author_ids:
        return {}

    stmt = (
        select(Books.author_id, func.count(Books.id))
        .where(Books.author_id.in_(author_ids))
        .group_by(Books.author_id)
    )
    result = await session.execute(stmt)
    return {author_id: count for author_id, count in result.all()}


async def create_book(
    session: AsyncSession,
    *,
    title: str,
    published: int,
    author: Authors,
    genres: Sequence[str],
) -> Books:
    book = Books()
    book.title = title
    book.published = published
    book.author = author
    book.genre_rows = [
        BookGenres(position=position, genre=genre) for position, genre in enumerate(genres)
    ]
    session.add(book)
    await _flush(session)
    return book


# Users


async def get_user_by_id(session: AsyncSession, user_id: UUID) -> Users | None:
    result = await session.execute(select(Users).where(Users.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_username(session: AsyncSession, username: str) -> Users | None:
    result = await session.execute(select(Users).where(Users.username == username))
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    *,
    username: str,
    favorite_genre: str,
    password_hash: str,
) -> Users:
    user = Users()
    user.username = username
    user.favorite_genre = favorite_genre
    user.password_hash = password_hash
    session.add(user)
    await _flush(session)
    return user
