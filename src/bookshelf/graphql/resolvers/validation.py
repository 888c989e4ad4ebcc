"""Argument checks shared by mutation resolvers."""

from __future__ import annotations

from ...errors import ValidationError


def require_text(value: str, field: str) -> str:
    """Reject empty or whitespace-only strings."""
    if not value or not value.strip():
        raise ValidationError(f"{field} must not be empty", field=field)
    return value


def normalize_genres(genres: list[str]) -> list[str]:
    """Validate a genre list and drop repeats, keeping first-seen order."""
    if not genres:
        raise ValidationError("genres must contain at least one genre", field="genres")

    seen: list[str] = []
    for genre in genres:
        require_text(genre, "genres")
        if genre not in seen:
            seen.append(genre)
    return seen
