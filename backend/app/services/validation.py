"""Shared validation logic for leaderboard requests.

Used by both the FastAPI route and the Streamlit UI so that validation
rules live in one place and are testable without framework dependencies.
"""

import re

from backend.app.models.leaderboard import LeaderboardRequest

_PROFILE_URL_RE = re.compile(r"https?://(?:www\.)?linkedin\.com/in/[^/?]+")

PROFILE_URL_HINT = "https://www.linkedin.com/in/username"


def check_profile_url(url: str | None) -> str | None:
    """Return an error string if *url* is not a LinkedIn profile URL, else ``None``."""
    if not url or not url.strip():
        return f"Missing LinkedIn profile URL. Use the format {PROFILE_URL_HINT}"
    if not _PROFILE_URL_RE.search(url.strip()):
        return f"Invalid LinkedIn URL format: {url}. Use the format {PROFILE_URL_HINT}"
    return None


def validate_request(request: LeaderboardRequest) -> list[str]:
    """Return validation errors for *request*; empty when it is acceptable.

    Field-level constraints (positive ``days``) are enforced by the model.
    """
    errors: list[str] = []
    msg = check_profile_url(request.linkedin_url)
    if msg:
        errors.append(msg)
    return errors
