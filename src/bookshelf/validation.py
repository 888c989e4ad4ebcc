"""
Configuration validation for the Bookshelf service.

This module checks that the application is properly configured before it
starts serving requests.
"""

from __future__ import annotations

from typing import Any

from .config import Settings
from .database.connection import Database
from .logging import get_logger

logger = get_logger(__name__)

MIN_SECRET_LENGTH = 32


class StartupValidationError(Exception):
    """Raised when application validation fails."""


async def validate_database_connection(db: Database) -> dict[str, Any]:
    """Validate that the database is accessible and responsive."""
    results: dict[str, Any] = {"valid": True, "warnings": [], "errors": []}

    success, error_message = await db.check_connection()
    if success:
        logger.info("Database connection validation successful")
    else:
        results["valid"] = False
        results["errors"].append(error_message)
        logger.error("Database connection validation failed", error=error_message)

    return results


def validate_auth_configuration(config: Settings) -> dict[str, Any]:
    """Validate token signing and signup password configuration."""
    results: dict[str, Any] = {"valid": True, "warnings": [], "errors": []}

    if not config.jwt_secret:
        results["valid"] = False
        results["errors"].append("BOOKSHELF_JWT_SECRET is not set")
    elif len(config.jwt_secret) < MIN_SECRET_LENGTH:
        results["warnings"].append(
            f"BOOKSHELF_JWT_SECRET is shorter than {MIN_SECRET_LENGTH} characters"
        )

    if not config.token_expiry_hours:
        results["warnings"].append(
            "Tokens never expire; set BOOKSHELF_TOKEN_EXPIRY_HOURS to bound their lifetime"
        )

    if not config.default_password:
        results["warnings"].append(
            "BOOKSHELF_DEFAULT_PASSWORD is not set; createUser requires an explicit password"
        )

    return results


async def validate_startup_configuration(db: Database, config: Settings) -> dict[str, Any]:
    """Run all startup checks.

    Returns:
        Dictionary with per-area results and an `overall_valid` flag
    """
    database = await validate_database_connection(db)
    auth = validate_auth_configuration(config)

    results = {
        "database": database,
        "auth": auth,
        "overall_valid": database["valid"] and auth["valid"],
    }

    for warning in auth["warnings"]:
        logger.warning("Configuration warning", warning=warning)

    return results
