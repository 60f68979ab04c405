"""Pagination over an already ordered candidate sequence.

Two strategies share one entry point, :func:`paginate`:

* ``PageNumberStrategy`` returns a 1-based page and clamps out-of-range pages.
* ``CursorStrategy`` resumes after the item whose id is the cursor. A cursor
  that is not in the sequence (deleted item, changed filter) restarts from
  the first item instead of failing.

Both slice a fully materialized list, which is fine for the low thousands of
prompts a single user has. Past that the listing query should page in SQL.
If the order changes between cursor fetches (a prompt created in between) a
page boundary item can be skipped or repeated once.
"""
import math
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, Union

DEFAULT_PAGE_SIZE = 12

# Sentinel returned as ``next_cursor`` when the sequence is exhausted
END_OF_SEQUENCE = None


def _default_key(item: Any):
    return item.id


@dataclass
class PageNumberStrategy:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class CursorStrategy:
    cursor: Optional[str] = None
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class PageNumberPage:
    items: List[Any] = field(default_factory=list)
    total: int = 0
    total_pages: int = 0
    current_page: int = 1


@dataclass
class CursorPage:
    items: List[Any] = field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = END_OF_SEQUENCE


Strategy = Union[PageNumberStrategy, CursorStrategy]
Page = Union[PageNumberPage, CursorPage]


def clamp_page_size(page_size: Optional[int], max_page_size: int, default: int = DEFAULT_PAGE_SIZE) -> int:
    if not page_size:
        return default
    return max(1, min(page_size, max_page_size))


def paginate_by_page(candidates: Sequence[Any], strategy: PageNumberStrategy) -> PageNumberPage:
    size = max(1, strategy.page_size)
    total = len(candidates)
    total_pages = math.ceil(total / size) if total else 0
    current = min(max(strategy.page or 1, 1), max(total_pages, 1))
    start = (current - 1) * size
    return PageNumberPage(
        items=list(candidates[start:start + size]),
        total=total,
        total_pages=total_pages,
        current_page=current,
    )


def _normalize_cursor(value) -> str:
    """Canonical text form of an id, so UUIDs match regardless of case or hyphens."""
    text = str(value)
    try:
        return str(uuid.UUID(text))
    except ValueError:
        return text


def paginate_by_cursor(
    candidates: Sequence[Any],
    strategy: CursorStrategy,
    key: Callable[[Any], Any] = _default_key,
) -> CursorPage:
    size = max(1, strategy.page_size)
    start = 0
    if strategy.cursor:
        target = _normalize_cursor(strategy.cursor)
        # unknown cursor falls through to the first page
        for idx, item in enumerate(candidates):
            if _normalize_cursor(key(item)) == target:
                start = idx + 1
                break

    items = list(candidates[start:start + size])
    has_more = start + size < len(candidates)
    next_cursor = str(key(items[-1])) if has_more and items else END_OF_SEQUENCE
    return CursorPage(items=items, has_more=has_more, next_cursor=next_cursor)


def paginate(
    candidates: Sequence[Any],
    strategy: Strategy,
    key: Callable[[Any], Any] = _default_key,
) -> Page:
    """Slice ``candidates`` with the given strategy."""
    if isinstance(strategy, CursorStrategy):
        return paginate_by_cursor(candidates, strategy, key=key)
    if isinstance(strategy, PageNumberStrategy):
        return paginate_by_page(candidates, strategy)
    raise TypeError(f"Unsupported pagination strategy: {type(strategy).__name__}")
