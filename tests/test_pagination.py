"""Tests for the shared pagination loop and its stop rules."""

import pytest
from backend.app.core.errors import ProviderError
from backend.app.services.pagination import (
    Cursor,
    items_at,
    make_advance,
    pages_from_total,
    paginate,
    value_at,
)


class _Pages:
    """Serves canned responses in order and records each cursor requested."""

    def __init__(self, *responses: object) -> None:
        self._responses = list(responses)
        self.cursors: list[Cursor] = []

    def __call__(self, cursor: Cursor) -> dict:
        self.cursors.append(cursor)
        response = self._responses[len(self.cursors) - 1]
        if isinstance(response, Exception):
            raise response
        return response  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Token-based
# ---------------------------------------------------------------------------


class TestTokenBased:
    advance = staticmethod(make_advance(token_of=value_at("paginationToken")))

    def test_follows_tokens_until_absent(self) -> None:
        fetch = _Pages(
            {"success": True, "data": [1, 2], "paginationToken": "t1"},
            {"success": True, "data": [3], "paginationToken": "t2"},
            {"success": True, "data": [4]},
        )
        items = list(
            paginate(fetch, items_at("data"), self.advance, first=Cursor(1), stream="t")
        )
        assert items == [1, 2, 3, 4]
        assert fetch.cursors == [Cursor(1), Cursor(2, "t1"), Cursor(3, "t2")]

    def test_last_page_items_consumed_without_token(self) -> None:
        fetch = _Pages({"success": True, "data": ["only"]})
        items = list(
            paginate(fetch, items_at("data"), self.advance, first=Cursor(1), stream="t")
        )
        assert items == ["only"]
        assert len(fetch.cursors) == 1

    def test_custom_step(self) -> None:
        advance = make_advance(token_of=value_at("paginationToken"), step=50)
        fetch = _Pages(
            {"success": True, "data": [1], "paginationToken": "t"},
            {"success": True, "data": []},
        )
        list(paginate(fetch, items_at("data"), advance, first=Cursor(0), stream="t"))
        assert [c.index for c in fetch.cursors] == [0, 50]


# ---------------------------------------------------------------------------
# Count-based
# ---------------------------------------------------------------------------


class TestCountBased:
    def test_stops_at_ceiling_from_total(self) -> None:
        advance = make_advance(
            total_pages_of=pages_from_total(value_at("data", "total"), 10),
        )
        fetch = _Pages(
            {"success": True, "data": {"items": list(range(10)), "total": 15}},
            {"success": True, "data": {"items": list(range(5)), "total": 15}},
        )
        items = list(
            paginate(fetch, items_at("data", "items"), advance, first=Cursor(1), stream="c")
        )
        assert len(items) == 15
        assert [c.index for c in fetch.cursors] == [1, 2]

    @pytest.mark.parametrize("total", ["12", " 12 ", 12.0])
    def test_numeric_string_total_applies_ceiling(self, total: object) -> None:
        advance = make_advance(
            total_pages_of=pages_from_total(value_at("data", "total"), 10),
        )
        fetch = _Pages(
            {"success": True, "data": {"items": list(range(10)), "total": total}},
            {"success": True, "data": {"items": [10, 11], "total": total}},
            {"success": True, "data": {"items": ["never"], "total": total}},
        )
        items = list(
            paginate(fetch, items_at("data", "items"), advance, first=Cursor(1), stream="c")
        )
        assert len(items) == 12
        assert [c.index for c in fetch.cursors] == [1, 2]

    @pytest.mark.parametrize("ceiling", ["1", "1.0"])
    def test_numeric_string_page_ceiling_applies(self, ceiling: str) -> None:
        advance = make_advance(
            token_of=value_at("paginationToken"),
            total_pages_of=value_at("totalPage"),
        )
        fetch = _Pages(
            {"success": True, "data": [1], "paginationToken": "t", "totalPage": ceiling},
            {"success": True, "data": ["never"]},
        )
        items = list(paginate(fetch, items_at("data"), advance, first=Cursor(1), stream="c"))
        assert items == [1]
        assert len(fetch.cursors) == 1

    @pytest.mark.parametrize("total", ["many", "nan", "inf", True])
    def test_unusable_total_ignored(self, total: object) -> None:
        advance = make_advance(
            total_pages_of=pages_from_total(value_at("data", "total"), 10),
        )
        fetch = _Pages(
            {"success": True, "data": {"items": [1], "total": total}},
            {"success": True, "data": {"items": []}},
        )
        items = list(
            paginate(fetch, items_at("data", "items"), advance, first=Cursor(1), stream="c")
        )
        assert items == [1]
        assert len(fetch.cursors) == 2

    def test_missing_total_continues_until_empty(self) -> None:
        advance = make_advance(
            total_pages_of=pages_from_total(value_at("data", "total"), 10),
        )
        fetch = _Pages(
            {"success": True, "data": {"items": [1]}},
            {"success": True, "data": {"items": [2]}},
            {"success": True, "data": {"items": []}},
        )
        items = list(
            paginate(fetch, items_at("data", "items"), advance, first=Cursor(1), stream="c")
        )
        assert items == [1, 2]
        assert len(fetch.cursors) == 3

    def test_token_and_ceiling_combined(self) -> None:
        advance = make_advance(
            token_of=value_at("data", "paginationToken"),
            total_pages_of=value_at("data", "totalPages"),
        )
        fetch = _Pages(
            {"success": True, "data": {"items": [1], "paginationToken": "a", "totalPages": 2}},
            {"success": True, "data": {"items": [2], "paginationToken": "b", "totalPages": 2}},
        )
        items = list(
            paginate(fetch, items_at("data", "items"), advance, first=Cursor(1), stream="r")
        )
        assert items == [1, 2]
        assert len(fetch.cursors) == 2

    def test_empty_token_stops_before_ceiling(self) -> None:
        advance = make_advance(
            token_of=value_at("data", "paginationToken"),
            total_pages_of=value_at("data", "totalPages"),
        )
        fetch = _Pages(
            {"success": True, "data": {"items": [1], "paginationToken": "", "totalPages": 9}},
        )
        items = list(
            paginate(fetch, items_at("data", "items"), advance, first=Cursor(1), stream="r")
        )
        assert items == [1]


# ---------------------------------------------------------------------------
# Stop rules shared by every stream
# ---------------------------------------------------------------------------


class TestStopRules:
    advance = staticmethod(make_advance(token_of=value_at("paginationToken")))

    @pytest.mark.parametrize(
        "response",
        [
            {"success": True, "data": []},
            {"success": True},
            {"success": False, "data": [1, 2]},
            {"success": True, "data": None},
            {"success": True, "data": "not-a-list"},
        ],
    )
    def test_empty_or_unsuccessful_page_stops_quietly(self, response: dict) -> None:
        fetch = _Pages(response)
        items = list(
            paginate(fetch, items_at("data"), self.advance, first=Cursor(1), stream="s")
        )
        assert items == []

    def test_fetch_error_propagates(self) -> None:
        fetch = _Pages(
            {"success": True, "data": [1], "paginationToken": "t"},
            ProviderError("boom", status_code=500),
        )
        stream = paginate(fetch, items_at("data"), self.advance, first=Cursor(1), stream="s")
        with pytest.raises(ProviderError):
            list(stream)

    def test_consumer_break_prevents_further_fetches(self) -> None:
        fetch = _Pages(
            {"success": True, "data": [1, 2, 3], "paginationToken": "t"},
            {"success": True, "data": [4]},
        )
        for item in paginate(
            fetch, items_at("data"), self.advance, first=Cursor(1), stream="s",
        ):
            if item == 2:
                break
        assert len(fetch.cursors) == 1
