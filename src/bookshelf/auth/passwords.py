"""Salted one-way password hashing (PBKDF2-HMAC-SHA256)."""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
from functools import lru_cache

ALGORITHM = "pbkdf2_sha256"
SALT_BYTES = 16


def _b64encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def hash_password(password: str, iterations: int) -> str:
    """Hash a password with a fresh random salt.

    Format: ``pbkdf2_sha256$<iterations>$<salt b64>$<digest b64>``
    """
    salt = secrets.token_bytes(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{ALGORITHM}${iterations}${_b64encode(salt)}${_b64encode(digest)}"


def verify_password(password: str, encoded: str) -> bool:
    """Check a password against an encoded hash. Malformed hashes never match."""
    try:
        algorithm, iterations_str, salt_b64, digest_b64 = encoded.split("$")
        iterations = int(iterations_str)
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(digest_b64)
    except ValueError:
        return False

    if algorithm != ALGORITHM:
        return False

    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(digest, expected)


@lru_cache(maxsize=4)
def dummy_hash(iterations: int) -> str:
    """A throwaway hash to compare against when no user exists, equalizing login cost."""
    return hash_password(secrets.token_urlsafe(16), iterations)
