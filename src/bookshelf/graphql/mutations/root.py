"""
Root GraphQL mutation definitions
"""

import strawberry

from ..types.author import Author
from ..types.book import Book
from ..types.user import Token, User


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Catalog mutations
    @strawberry.mutation(name="addBook")
    async def add_book(
        self,
        info: strawberry.Info,
        title: str,
        author: str,
        published: int,
        genres: list[str],
    ) -> Book:
        """Add a book, creating its author if needed. Requires authentication."""
        from ..resolvers.book import add_book

        return await add_book(info, title, author, published, genres)

    @strawberry.mutation(name="editAuthor")
    async def edit_author(self, info: strawberry.Info, name: str, born: int) -> Author | None:
        """Set an author's birth year. Requires authentication."""
        from ..resolvers.author import edit_author

        return await edit_author(info, name, born)

    # User mutations
    @strawberry.mutation(name="createUser")
    async def create_user(
        self,
        info: strawberry.Info,
        username: str,
        favorite_genre: str,
        password: str | None = None,
    ) -> User:
        """Sign up a new user."""
        from ..resolvers.user import create_user

        return await create_user(info, username, favorite_genre, password)

    @strawberry.mutation
    async def login(self, info: strawberry.Info, username: str, password: str) -> Token:
        """Exchange credentials for a bearer token."""
        from ..resolvers.auth import login

        return await login(info, username, password)
