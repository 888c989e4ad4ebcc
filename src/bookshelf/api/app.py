"""
Main FastAPI application for the Bookshelf service
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..auth.factory import get_token_service
from ..config import Settings, is_production, settings
from ..database.connection import Database
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    config: Settings = app.state.settings
    db: Database = app.state.db

    logger.info("Starting Bookshelf API...")
    await db.create_all()

    from ..validation import StartupValidationError, validate_startup_configuration

    validation_results = await validate_startup_configuration(db, config)
    if not validation_results["overall_valid"]:
        logger.error(
            "Application configuration validation failed - some features may not work properly",
            database_errors=validation_results["database"]["errors"],
            auth_errors=validation_results["auth"]["errors"],
        )
        if is_production(config):
            raise StartupValidationError("Critical configuration validation failed in production")

    yield

    logger.info("Shutting down Bookshelf API...")
    await db.dispose()


def create_app(config: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The database handle and token service are built here once and shared by
    every request. A missing signing secret fails app creation.
    """
    config = config or settings
    configure_logging(debug=config.debug, level=config.log_level)

    tokens = get_token_service(config)
    db = Database.from_settings(config)

    app = FastAPI(
        title="Bookshelf API",
        description="Book and author catalog with a token-authenticated GraphQL API",
        version=__version__,
        lifespan=lifespan,
        debug=config.debug,
    )
    app.state.settings = config
    app.state.db = db
    app.state.tokens = tokens

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    from ..graphql.schema import create_graphql_router, validate_schema

    # Fail fast: the server should not start with a broken schema
    logger.info("Validating GraphQL schema...")
    validate_schema()

    app.include_router(create_graphql_router(db, tokens, config), prefix="")
    logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")

    return app
