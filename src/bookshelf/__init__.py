"""
Bookshelf
Book and author catalog service with a token-authenticated GraphQL API
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
