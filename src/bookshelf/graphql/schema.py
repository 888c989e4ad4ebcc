"""
Main GraphQL schema definition using Strawberry
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import GraphQLError
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter
from strawberry.types import ExecutionContext

from ..auth.tokens import TokenService
from ..config import Settings, settings
from ..database.connection import Database
from ..errors import CatalogError, ValidationError
from ..logging import get_logger
from .context import build_graphql_context
from .mutations.root import Mutation
from .queries.root import Query

logger = get_logger(__name__)


class CatalogSchema(strawberry.Schema):
    """Schema that logs errors with structlog and guarantees every error has a code."""

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        for error in errors:
            original = error.original_error

            if isinstance(original, CatalogError):
                logger.info(
                    "GraphQL request rejected",
                    code=original.code,
                    error=error.message,
                    path=error.path,
                )
                continue

            extensions = dict(error.extensions or {})
            if "code" not in extensions:
                # Errors without a path never reached a resolver: the document or
                # its arguments did not fit the schema.
                extensions["code"] = (
                    "INTERNAL_SERVER_ERROR" if error.path else ValidationError.code
                )
                error.extensions = extensions

            if extensions["code"] == ValidationError.code:
                logger.info("GraphQL validation failed", error=error.message)
            else:
                logger.error(
                    "GraphQL resolver failed",
                    error=error.message,
                    path=error.path,
                    exc_info=original,
                )


# Create the GraphQL schema
schema = CatalogSchema(query=Query, mutation=Mutation)


def validate_schema() -> None:
    """Validate the GraphQL schema at startup.

    Raises:
        Exception: If the schema is invalid or has unresolved types
    """
    try:
        graphql_schema = schema._schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise Exception(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        from graphql import get_introspection_query, graphql_sync

        result = graphql_sync(graphql_schema, get_introspection_query())

        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise Exception(f"GraphQL introspection failed: {'; '.join(error_messages)}")

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


def create_graphql_router(
    db: Database,
    tokens: TokenService,
    config: Settings | None = None,
) -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI."""
    config = config or settings

    async def get_context(request: Request) -> dict[str, Any]:
        """Get the context for GraphQL resolvers."""
        return await build_graphql_context(
            db,
            tokens,
            request.headers.get("authorization"),
            request=request,
            config=config,
        )

    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql" if config.debug else None,
        context_getter=get_context,
    )
