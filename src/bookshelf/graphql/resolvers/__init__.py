"""Resolver package for the GraphQL schema.

Root query and mutation types import these functions lazily; each module
covers one entity.
"""

# Intentionally empty; functions are defined in sibling modules.
