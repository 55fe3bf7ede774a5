"""Exceptions raised by urlbf."""
from __future__ import annotations


class FilterFormatError(ValueError):
    """Serialized filter bytes are malformed."""


class FilterStoreError(OSError):
    """The persisted filter state could not be read or written."""
