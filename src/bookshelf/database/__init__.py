"""
Database module for the Bookshelf service
"""

from .connection import Database
from .repository import ConstraintViolation

__all__ = ["Database", "ConstraintViolation"]
