"""
Database connection management
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import Settings
from ..dbmodels import Base
from ..logging import get_logger

logger = get_logger(__name__)


def to_async_url(database_url: str) -> str:
    """Map a plain database URL onto its asyncio driver."""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


def _use_explicit_sqlite_transactions(engine: AsyncEngine) -> None:
    """Let SQLAlchemy emit BEGIN itself so SAVEPOINTs nest inside the transaction.

    The sqlite3 driver otherwise starts transactions lazily on its own.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):  # pyright: ignore [reportUnusedFunction]
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):  # pyright: ignore [reportUnusedFunction]
        conn.exec_driver_sql("BEGIN")


class Database:
    """Engine and session factory shared by every request of one application.

    Created once at startup and handed to the GraphQL context; nothing else
    holds a connection.
    """

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        echo: bool = False,
    ):
        self.database_url = to_async_url(database_url)

        engine_kwargs: dict = {"echo": echo}
        if self.database_url.startswith("postgresql"):
            engine_kwargs.update(pool_size=pool_size, max_overflow=max_overflow)

        self.engine: AsyncEngine = create_async_engine(self.database_url, **engine_kwargs)
        if self.database_url.startswith("sqlite"):
            _use_explicit_sqlite_transactions(self.engine)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info("Database engine created", database_url=self.engine.url.render_as_string())

    @classmethod
    def from_settings(cls, config: Settings) -> "Database":
        return cls(
            config.database_url,
            pool_size=config.database_pool_size,
            max_overflow=config.database_max_overflow,
            echo=config.sql_echo,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a session that commits on success and rolls back on error."""
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create any missing tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def check_connection(self) -> tuple[bool, str | None]:
        """
        Test the database connection and return a helpful error message.

        Returns:
            tuple: (success: bool, error_message: str | None)
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                return True, None
        except Exception as e:
            error_str = str(e)
            if "Connection refused" in error_str or "could not connect" in error_str:
                return False, (
                    f"Cannot connect to database server: {error_str}\n"
                    f"The database server appears to be down or unreachable."
                )
            if "password authentication failed" in error_str:
                return False, (
                    f"Database authentication failed: {error_str}\n"
                    f"Please check your database credentials."
                )
            return False, f"Database connection error ({type(e).__name__}): {error_str}"

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")
