"""Authentication for the Bookshelf API."""

from .context import AuthContext
from .factory import get_token_service
from .middleware import build_auth_context, extract_bearer_token
from .passwords import hash_password, verify_password
from .tokens import TokenService

__all__ = [
    "AuthContext",
    "TokenService",
    "build_auth_context",
    "extract_bearer_token",
    "get_token_service",
    "hash_password",
    "verify_password",
]
