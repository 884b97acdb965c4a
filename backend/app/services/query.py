"""List-endpoint parameter handling shared by employees and items."""

from __future__ import annotations

import re

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
DEFAULT_SORT = "-createdAt"

SORT_PATTERN = re.compile(r"^-?[A-Za-z0-9_.]+$")


def clamp_page(page: int | None) -> int:
    if not page or page < 1:
        return 1
    return page


def clamp_limit(limit: int | None) -> int:
    if not limit:
        return DEFAULT_LIMIT
    return min(MAX_LIMIT, max(1, limit))


def sanitize_sort(sort: str | None) -> str:
    if sort and SORT_PATTERN.match(sort):
        return sort
    return DEFAULT_SORT


def parse_sort(sort: str) -> tuple[str, bool]:
    """Split ``-field`` into ``("field", True)`` (descending)."""
    if sort.startswith("-"):
        return sort[1:], True
    return sort, False


def order_by_clause(sort: str) -> str:
    """Render a sanitized sort expression as a Cosmos SQL ORDER BY clause."""
    field, descending = parse_sort(sanitize_sort(sort))
    parts = [part for part in field.split(".") if part]
    if not parts:
        field, descending = parse_sort(DEFAULT_SORT)
        parts = [field]
    path = "c" + "".join(f'["{part}"]' for part in parts)
    return f"ORDER BY {path} {'DESC' if descending else 'ASC'}"
