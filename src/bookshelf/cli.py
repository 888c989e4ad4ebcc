#!/usr/bin/env python3
"""
Main CLI entry point for the Bookshelf server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from bookshelf import __version__
from bookshelf.config import settings
from bookshelf.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="bookshelf")
def cli() -> None:
    """Bookshelf CLI - run the server and manage the database."""
    pass


@cli.command()
@click.option("--host", default=settings.api_host, help="Host to bind to")
@click.option("--port", default=settings.api_port, type=int, help="Port to bind to")
@click.option(
    "--reload",
    is_flag=True,
    default=settings.api_reload,
    help="Enable auto-reload for development",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the Bookshelf API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info("Starting Bookshelf API server", host=host, port=port, reload=reload)

    # Reloaded workers re-read settings from the environment
    if log_level == "debug":
        os.environ["BOOKSHELF_DEBUG"] = "true"
        os.environ["BOOKSHELF_LOG_LEVEL"] = "debug"

    uvicorn.run(
        "bookshelf.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


@cli.command("init-db")
def init_db() -> None:
    """Create any missing database tables."""
    from bookshelf.database.connection import Database

    configure_logging(debug=settings.debug)

    async def _create() -> None:
        db = Database.from_settings(settings)
        try:
            await db.create_all()
        finally:
            await db.dispose()

    try:
        asyncio.run(_create())
    except Exception as e:
        logger.error("Database initialization failed", error=str(e))
        sys.exit(1)

    click.echo("Database tables created")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
