"""Generic provider pagination: continue while a cursor is produced, advance per stream.

Every provider stream is walked by :func:`paginate`.  Streams differ only in
where their items live (:func:`items_at`) and in how the next cursor is derived
(:func:`make_advance`):

- token-based streams stop when the response carries no continuation token;
- count-based streams stop when the page index reaches the reported ceiling;
- some streams combine both rules.

Stop rules, in priority order:

1. The fetch raises: the exception propagates, no retry.
2. Unsuccessful response or empty/absent item array: stop quietly.
3. Continuation token required but absent: stop quietly.
4. Page index reached the page ceiling: stop quietly.

``paginate`` is a generator, so a consumer that stops iterating (e.g. on a date
cutoff) prevents any further page from being requested.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from backend.app.core.logging import log_event

logger = logging.getLogger(__name__)

Response = dict[str, Any]


@dataclass(frozen=True)
class Cursor:
    """Position in a stream: a page index (or offset) and an optional token."""

    index: int
    token: str | None = None


ItemsExtractor = Callable[[Response], list[Any] | None]
Advance = Callable[[Response, Cursor], Cursor | None]


def paginate(
    fetch: Callable[[Cursor], Response],
    extract_items: ItemsExtractor,
    advance: Advance,
    *,
    first: Cursor,
    stream: str,
) -> Iterator[Any]:
    """Yield every item of a stream, fetching pages lazily."""
    cursor: Cursor | None = first
    pages = 0
    while cursor is not None:
        response = fetch(cursor)
        pages += 1

        items = extract_items(response)
        if not items:
            log_event(
                logger, "debug", "stream_page_fetched",
                stream=stream, page=pages, index=cursor.index, items=0, stop="empty",
            )
            return

        log_event(
            logger, "debug", "stream_page_fetched",
            stream=stream, page=pages, index=cursor.index, items=len(items),
        )
        yield from items

        cursor = advance(response, cursor)


def _dig(response: Response, path: tuple[str, ...]) -> Any:
    value: Any = response
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def items_at(*path: str) -> ItemsExtractor:
    """Extract the item list found at *path* of a successful response."""

    def extract(response: Response) -> list[Any] | None:
        if not isinstance(response, dict) or not response.get("success"):
            return None
        items = _dig(response, path)
        return items if isinstance(items, list) else None

    return extract


def value_at(*path: str) -> Callable[[Response], Any]:
    """Read the (possibly missing) value found at *path* of a response."""
    return lambda response: _dig(response, path)


def _as_number(value: Any) -> float | None:
    """Coerce a reported count to a finite number; numeric strings are accepted."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, int | float) or not math.isfinite(value):
        return None
    return value


def pages_from_total(
    total_of: Callable[[Response], Any], page_size: int,
) -> Callable[[Response], int | None]:
    """Derive a page ceiling from a reported total item count."""

    def total_pages(response: Response) -> int | None:
        total = _as_number(total_of(response))
        if total is None:
            return None
        return math.ceil(total / page_size)

    return total_pages


def make_advance(
    *,
    token_of: Callable[[Response], Any] | None = None,
    total_pages_of: Callable[[Response], Any] | None = None,
    step: int = 1,
) -> Advance:
    """Build a stream's advance rule.

    With *token_of*, a missing continuation token ends the stream.  With
    *total_pages_of*, reaching the reported page ceiling ends the stream; an
    unreported ceiling never does.
    """

    def advance(response: Response, cursor: Cursor) -> Cursor | None:
        token = cursor.token
        if token_of is not None:
            token = token_of(response)
            if not token:
                return None
        if total_pages_of is not None:
            total_pages = _as_number(total_pages_of(response))
            if total_pages is not None and cursor.index >= total_pages:
                return None
        return Cursor(index=cursor.index + step, token=token)

    return advance
