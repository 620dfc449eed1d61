"""Pagination Engine — fixed-size, 1-based pages over an ordered sequence.

Invariants:
    - page defaults to 1 and is clamped to >= 1
    - limit defaults to 10 and is clamped to [1, 100]
    - total_pages == ceil(total_items / limit), 0 for an empty collection
    - An out-of-range page yields empty items, never an error
"""

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class Page:
    items: list[Any]
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int

    def to_response(self, items_key: str = "items") -> dict:
        return {
            items_key: self.items,
            "pagination": {
                "currentPage": self.current_page,
                "totalPages": self.total_pages,
                "totalItems": self.total_items,
                "itemsPerPage": self.items_per_page,
            },
        }


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_int(value: Any, default: int) -> int:
    """Leading-integer parse of a query value ("12abc" → 12); `default` when unusable or zero."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value or default
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and int(value) else default
    match = _LEADING_INT.match(str(value))
    if match is None:
        return default
    try:
        parsed = int(match.group(1))
    except ValueError:
        return default
    return parsed or default


def clamp_page(page: Any) -> int:
    return max(1, _parse_int(page, DEFAULT_PAGE))


def clamp_limit(limit: Any) -> int:
    return min(MAX_LIMIT, max(1, _parse_int(limit, DEFAULT_LIMIT)))


def paginate(items: Sequence[Any], page: Any = None, limit: Any = None) -> Page:
    page_num = clamp_page(page)
    limit_num = clamp_limit(limit)
    total = len(items)
    start = (page_num - 1) * limit_num
    return Page(
        items=list(items[start:start + limit_num]),
        current_page=page_num,
        total_pages=math.ceil(total / limit_num),
        total_items=total,
        items_per_page=limit_num,
    )
