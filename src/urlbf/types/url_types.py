"""URL key typing.

The filter hashes the exact string it is given. Canonicalising URLs (case,
trailing slashes, tracking parameters) is left to the caller.
"""
from __future__ import annotations

from typing import NewType

UrlKey = NewType("UrlKey", str)


def normalize_key(value: str | UrlKey) -> UrlKey:
    """Ensure the value is a str and tag it as UrlKey."""
    if not isinstance(value, str):
        raise TypeError(f"URL key must be str, got {type(value).__name__}")
    return UrlKey(value)
