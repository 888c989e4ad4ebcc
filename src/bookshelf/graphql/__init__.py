"""GraphQL API: schema, resolvers and request context."""
