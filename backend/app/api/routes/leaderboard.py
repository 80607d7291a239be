"""POST /api/leaderboard: collect engagement for a profile and return the ranking."""

import logging
import uuid
from collections.abc import Iterator
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException

from backend.app.core.errors import (
    InvalidProfileUrlError,
    ProviderError,
    normalize_provider_error,
    normalize_validation_error,
)
from backend.app.core.settings import settings
from backend.app.models.leaderboard import (
    LeaderboardRequest,
    LeaderboardResponse,
    RequestInfo,
    ScoringWeights,
)
from backend.app.services.collector import collect_engagement
from backend.app.services.leaderboard import generate_leaderboard
from backend.app.services.linkedin_client import EngagementProvider, LinkedInClient
from backend.app.services.scoring_config import load_scoring_weights
from backend.app.services.validation import validate_request

logger = logging.getLogger(__name__)

router = APIRouter()


def get_valid_request(body: LeaderboardRequest) -> LeaderboardRequest:
    """Parse and validate the request body; 422 on a malformed profile URL."""
    errors = validate_request(body)
    if errors:
        error = normalize_validation_error(errors)
        raise HTTPException(status_code=error.http_status, detail=errors)
    return body


def get_provider(
    _request: LeaderboardRequest = Depends(get_valid_request),
) -> Iterator[EngagementProvider]:
    """Yield a provider client for one request; 503 when no key is configured.

    Depends on the validated request so input errors are reported before a
    missing key.
    """
    if not settings.is_provider_configured:
        raise HTTPException(
            status_code=503,
            detail="API key not configured. Set RAPIDAPI_KEY to enable data collection.",
        )
    client = LinkedInClient()
    try:
        yield client
    finally:
        client.close()


def get_scoring_weights() -> ScoringWeights:
    return load_scoring_weights()


@router.post(
    "/leaderboard",
    response_model=LeaderboardResponse,
    response_model_by_alias=True,
)
def create_leaderboard(
    body: LeaderboardRequest = Depends(get_valid_request),
    provider: EngagementProvider = Depends(get_provider),
    weights: ScoringWeights = Depends(get_scoring_weights),
) -> LeaderboardResponse:
    """Collect engagement for a validated request, rank people, return the payload."""
    correlation_id = str(uuid.uuid4())

    logger.info(
        "leaderboard_request: correlation_id=%s linkedin_url=%s days=%d",
        correlation_id,
        body.linkedin_url,
        body.days,
    )

    try:
        run = collect_engagement(body.linkedin_url, body.days, provider=provider)
    except (InvalidProfileUrlError, ProviderError) as exc:
        error = normalize_provider_error(
            exc, operation="collect_engagement", correlation_id=correlation_id,
        )
        raise HTTPException(status_code=error.http_status, detail=error.user_message) from exc

    result = generate_leaderboard(run, weights)

    metadata = result.data.metadata
    if run.aggregates.posts_analyzed == 0:
        metadata.message = f"No posts found within the last {body.days} days for this profile."
    metadata.request_info = RequestInfo(
        linkedin_url=body.linkedin_url,
        days_analyzed=body.days,
        processed_at=datetime.now(UTC).isoformat(),
    )

    logger.info(
        "leaderboard_response: correlation_id=%s people=%d posts=%d errors=%d",
        correlation_id,
        metadata.total_people,
        metadata.posts_analyzed,
        len(run.errors),
    )
    return result
