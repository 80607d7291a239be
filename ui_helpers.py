"""Shared UI helper functions for the Streamlit frontend."""

import logging

import httpx
import streamlit as st

from backend.app.core.settings import settings

logger = logging.getLogger(__name__)

API_BASE = f"http://{settings.api_host}:{settings.api_port}"

# Display order and column headers for the leaderboard table.
LEADERBOARD_COLUMNS: list[tuple[str, str]] = [
    ("rank", "Rank"),
    ("display pic", "Picture"),
    ("name", "Name"),
    ("reactions", "Reactions"),
    ("comments", "Comments"),
    ("reposts", "Reposts"),
    ("total engagement", "Total engagement"),
    ("total score", "Total score"),
    ("profile url", "Profile"),
]


def _safe_error_detail(resp: httpx.Response) -> str:
    """Extract a user-friendly error message from an API response.

    Never exposes raw stack traces or secrets.
    """
    try:
        body = resp.json()
        detail = body.get("detail", "")
        if isinstance(detail, list):
            return "; ".join(
                str(d.get("msg", d)) if isinstance(d, dict) else str(d) for d in detail
            )
        return str(detail)
    except Exception:
        return f"Unexpected error (HTTP {resp.status_code}). Please try again."


def leaderboard_rows(payload: dict) -> list[dict[str, object]]:
    """Flatten the API payload into table rows with display headers."""
    entries = payload.get("data", {}).get("leaderboard", []) or []
    return [
        {header: entry.get(key) for key, header in LEADERBOARD_COLUMNS}
        for entry in entries
    ]


def summary_metrics(payload: dict) -> dict[str, int]:
    """Return headline totals from the payload metadata."""
    metadata = payload.get("data", {}).get("metadata", {}) or {}
    aggregates = metadata.get("aggregates", {}) or {}
    return {
        "People": metadata.get("totalPeople", 0),
        "Posts analyzed": metadata.get("postsAnalyzed", 0),
        "Reactions": aggregates.get("totalReactions", 0),
        "Comments": aggregates.get("totalComments", 0),
        "Reposts": aggregates.get("totalReposts", 0),
    }


def _reset_session() -> None:
    """Clear all leaderboard-related session state for a fresh start."""
    st.session_state.leaderboard_payload = None
    st.session_state.loading = False
    st.session_state.last_error = None
