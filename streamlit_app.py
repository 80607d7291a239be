"""Streamlit UI for the LinkedIn engagement leaderboard."""

import logging

import httpx
import streamlit as st

from backend.app.core.settings import settings
from backend.app.services.validation import check_profile_url
from ui_helpers import (
    API_BASE,
    _reset_session,
    _safe_error_detail,
    leaderboard_rows,
    summary_metrics,
)

logger = logging.getLogger(__name__)

st.set_page_config(page_title="LinkedIn Leaderboard", layout="wide")
st.title("LinkedIn Engagement Leaderboard")

if not settings.is_provider_configured:
    st.warning(
        "The data provider is not configured. Set RAPIDAPI_KEY "
        "in your environment or .env file to enable collection."
    )

# --- Session state defaults ---
if "leaderboard_payload" not in st.session_state:
    st.session_state.leaderboard_payload = None
if "loading" not in st.session_state:
    st.session_state.loading = False
if "last_error" not in st.session_state:
    st.session_state.last_error = None

# --- API connectivity check ---
with st.sidebar:
    st.subheader("API Status")
    if st.button("Check API health"):
        try:
            resp = httpx.get(f"{API_BASE}/health", timeout=5)
            resp.raise_for_status()
            st.success(f"API is reachable: {resp.json()}")
        except Exception:
            st.error(
                "Cannot reach API. Ensure the API is running "
                f"at {API_BASE} (run `make run-api`)."
            )
    if st.button("Clear results"):
        _reset_session()
        st.rerun()

# --- Request form ---
with st.form("leaderboard_form"):
    linkedin_url = st.text_input(
        "LinkedIn profile URL",
        placeholder="https://www.linkedin.com/in/username",
    )
    days = st.number_input(
        "Days to look back",
        min_value=1,
        value=7,
        step=1,
        help="Only posts published within this many days are analyzed.",
    )
    submitted = st.form_submit_button(
        "Build leaderboard",
        type="primary",
        disabled=st.session_state.loading,
    )

if submitted:
    st.session_state.leaderboard_payload = None
    st.session_state.last_error = None

    url_error = check_profile_url(linkedin_url)
    if url_error:
        st.error(url_error)
        st.stop()

    st.session_state.loading = True
    # Collection is sequential and can take minutes for active profiles.
    with st.spinner("Collecting engagement data..."):
        try:
            resp = httpx.post(
                f"{API_BASE}/api/leaderboard",
                json={"LinkedinURL": linkedin_url.strip(), "days": int(days)},
                timeout=600,
            )
        except Exception:
            st.session_state.loading = False
            st.session_state.last_error = (
                "Could not reach API. Ensure the API is running "
                f"at {API_BASE} (run `make run-api`)."
            )
            st.error(st.session_state.last_error)
            st.stop()

    st.session_state.loading = False

    if resp.status_code != 200:
        st.session_state.last_error = f"Leaderboard failed: {_safe_error_detail(resp)}"
        st.error(st.session_state.last_error)
        if resp.status_code >= 500:
            st.info("This error may be temporary. Try again in a moment.")
        st.stop()

    st.session_state.leaderboard_payload = resp.json()

# --- Results ---
payload = st.session_state.leaderboard_payload
if payload:
    metadata = payload.get("data", {}).get("metadata", {})

    cols = st.columns(5)
    for col, (label, value) in zip(cols, summary_metrics(payload).items(), strict=True):
        col.metric(label, value)

    if metadata.get("message"):
        st.info(metadata["message"])

    weights = metadata.get("scoringConfig") or {}
    st.caption(
        "Scoring: reaction × {reaction}, comment × {comment}, repost × {repost}".format(
            reaction=weights.get("reaction", 1),
            comment=weights.get("comment", 1),
            repost=weights.get("repost", 1),
        )
    )

    rows = leaderboard_rows(payload)
    if rows:
        st.dataframe(
            rows,
            use_container_width=True,
            hide_index=True,
            column_config={
                "Picture": st.column_config.ImageColumn("Picture", width="small"),
                "Profile": st.column_config.LinkColumn("Profile"),
            },
        )

    if metadata.get("errors"):
        with st.expander(f"Errors encountered ({len(metadata['errors'])})"):
            for err in metadata["errors"]:
                st.write(f"- {err}")
