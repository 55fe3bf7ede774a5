"""Absolute link extraction from fetched pages."""
from __future__ import annotations

import re

from urlbf.config import PAGE_EXCERPT_LIMIT

HREF_PATTERN = re.compile(r"""href\s*=\s*["'](http[@\w\s%#/.+;=?&:_-]*)["']""")


def extract_links(page: str) -> list[str]:
    """Return http(s) href targets in page order, duplicates included."""
    return [m.group(1) for m in HREF_PATTERN.finditer(page)]


def truncate_page(page: str, limit: int = PAGE_EXCERPT_LIMIT) -> str:
    return page[:limit]
