"""
Tests for error tagging and schema validation
"""

from unittest.mock import AsyncMock, patch

import pytest

from bookshelf.graphql.schema import schema, validate_schema


def test_schema_is_valid():
    validate_schema()


def test_schema_contract():
    """Test the public field names of the schema."""
    sdl = schema.as_str()

    for fragment in (
        "bookCount: Int!",
        "authorCount: Int!",
        "allBooks(author: String = null, genre: String = null): [Book!]!",
        "allAuthors: [Author!]!",
        "me: User",
        "addBook(title: String!, author: String!, published: Int!, genres: [String!]!): Book!",
        "editAuthor(name: String!, born: Int!): Author",
        "createUser(username: String!, favoriteGenre: String!, password: String = null): User!",
        "login(username: String!, password: String!): Token!",
    ):
        assert fragment in sdl


class TestErrorCodes:
    @pytest.mark.asyncio
    async def test_missing_argument_is_validation_error(self, execute):
        result = await execute('mutation { editAuthor(name: "Tolkien") { name } }')

        assert result.data is None
        assert result.errors[0].extensions == {"code": "VALIDATION_ERROR"}

    @pytest.mark.asyncio
    async def test_wrong_argument_type_is_validation_error(self, execute, user_token):
        result = await execute(
            'mutation { addBook(title: "LOTR", author: "Tolkien", published: "1954", '
            'genres: ["fantasy"]) { title } }',
            token=user_token,
        )

        assert result.errors[0].extensions == {"code": "VALIDATION_ERROR"}

    @pytest.mark.asyncio
    async def test_bad_variable_is_validation_error(self, execute):
        result = await execute(
            "query Books($genre: String) { allBooks(genre: $genre) { title } }",
            {"genre": 42},
        )

        assert result.errors[0].extensions == {"code": "VALIDATION_ERROR"}

    @pytest.mark.asyncio
    async def test_unknown_field_is_validation_error(self, execute):
        result = await execute("query { allPublishers { name } }")

        assert result.errors[0].extensions == {"code": "VALIDATION_ERROR"}

    @pytest.mark.asyncio
    async def test_unexpected_failure_is_internal_error(self, execute):
        with patch(
            "bookshelf.graphql.resolvers.book.count_books",
            new=AsyncMock(side_effect=RuntimeError("database went away")),
        ):
            result = await execute("query { bookCount }")

        assert result.errors[0].extensions == {"code": "INTERNAL_SERVER_ERROR"}
        assert result.errors[0].path == ["bookCount"]
