"""
Shared pytest fixtures and configuration for all tests.
"""

import os

# Settings are read once at import; make the global instance usable in tests.
os.environ.setdefault("BOOKSHELF_JWT_SECRET", "test-secret-key-for-testing-only-0123456789")
os.environ.setdefault("BOOKSHELF_PASSWORD_HASH_ITERATIONS", "1000")
os.environ.setdefault("BOOKSHELF_DEBUG", "false")

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

from bookshelf.auth.factory import get_token_service
from bookshelf.auth.tokens import TokenService
from bookshelf.config import Settings
from bookshelf.database.connection import Database
from bookshelf.graphql.context import build_graphql_context
from bookshelf.graphql.schema import schema

TEST_SECRET = "test-secret-key-for-testing-only-0123456789"

CREATE_USER = """
mutation CreateUser($username: String!, $favoriteGenre: String!, $password: String) {
  createUser(username: $username, favoriteGenre: $favoriteGenre, password: $password) {
    id
    username
    favoriteGenre
  }
}
"""

LOGIN = """
mutation Login($username: String!, $password: String!) {
  login(username: $username, password: $password) { value }
}
"""


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite database."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'bookshelf.db'}",
        jwt_secret=TEST_SECRET,
        password_hash_iterations=1000,
        default_password="secret",
        debug=False,
    )


@pytest_asyncio.fixture
async def db(test_settings: Settings) -> AsyncGenerator[Database, None]:
    """Provide a database with all tables created."""
    database = Database.from_settings(test_settings)
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
def tokens(test_settings: Settings) -> TokenService:
    return get_token_service(test_settings)


@pytest.fixture
def execute(
    db: Database, tokens: TokenService, test_settings: Settings
) -> Callable[..., Awaitable[Any]]:
    """Run a GraphQL operation the way the HTTP router does, with an optional token."""

    async def _execute(
        query: str,
        variables: dict[str, Any] | None = None,
        token: str | None = None,
        authorization: str | None = None,
    ) -> Any:
        if token is not None:
            authorization = f"Bearer {token}"
        context = await build_graphql_context(db, tokens, authorization, config=test_settings)
        return await schema.execute(query, variable_values=variables, context_value=context)

    return _execute


@pytest_asyncio.fixture
async def user_token(execute: Callable[..., Awaitable[Any]]) -> str:
    """Sign up a user and return a bearer token for it."""
    created = await execute(
        CREATE_USER,
        {"username": "reader", "favoriteGenre": "fantasy", "password": "hunter2"},
    )
    assert created.errors is None

    result = await execute(LOGIN, {"username": "reader", "password": "hunter2"})
    assert result.errors is None
    return result.data["login"]["value"]


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
