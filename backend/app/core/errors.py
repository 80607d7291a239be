"""Error types and centralized normalization for user-facing messages.

Every error surfaced to an API client must pass through this module to ensure:
- Consistent structure (user_message, error_category, retryable)
- No stack traces or secrets in user-facing output
- Detailed info logged for debugging
"""

import logging
from dataclasses import dataclass

from backend.app.core.logging import log_event

logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """A request to the engagement data provider failed.

    Raised for transport errors and non-2xx responses.  ``status_code`` is
    ``None`` when no HTTP response was received.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidProfileUrlError(ValueError):
    """No profile username could be derived from the given URL."""


@dataclass(frozen=True)
class NormalizedError:
    """Standardized error representation for API responses."""

    user_message: str
    error_category: str
    retryable: bool
    http_status: int = 500


def normalize_provider_error(
    exc: Exception,
    *,
    operation: str,
    correlation_id: str | None = None,
) -> NormalizedError:
    """Normalize a fatal collection failure into a user-friendly message."""
    status_code = getattr(exc, "status_code", None)

    if isinstance(exc, InvalidProfileUrlError):
        error = NormalizedError(
            user_message=(
                "Invalid LinkedIn URL format. Use "
                "https://www.linkedin.com/in/username"
            ),
            error_category="validation",
            retryable=False,
            http_status=422,
        )
    elif status_code in (401, 403):
        error = NormalizedError(
            user_message=(
                "The LinkedIn data provider rejected our credentials. "
                "Check RAPIDAPI_KEY."
            ),
            error_category="auth",
            retryable=False,
            http_status=502,
        )
    elif status_code == 429:
        error = NormalizedError(
            user_message=(
                "The LinkedIn data provider rate limit was reached. "
                "Please wait and retry."
            ),
            error_category="rate_limit",
            retryable=True,
            http_status=503,
        )
    else:
        error = NormalizedError(
            user_message=(
                "Failed to fetch LinkedIn data. Please check the LinkedIn URL "
                "and try again."
            ),
            error_category="provider",
            retryable=True,
            http_status=502,
        )

    log_event(
        logger, "error", "provider_call_failed",
        operation=operation,
        error_category=error.error_category,
        retryable=error.retryable,
        status_code=status_code if status_code is not None else "N/A",
        correlation_id=correlation_id or "N/A",
        detail=str(exc),
    )
    return error


def normalize_validation_error(
    messages: list[str],
) -> NormalizedError:
    """Normalize validation errors into a single user-friendly message."""
    joined = "; ".join(messages)
    return NormalizedError(
        user_message=f"Validation failed: {joined}",
        error_category="validation",
        retryable=False,
        http_status=422,
    )


def normalize_unknown_error(
    exc: Exception,
    *,
    operation: str,
    correlation_id: str | None = None,
) -> NormalizedError:
    """Normalize an unexpected error into a safe generic message."""
    log_event(
        logger, "exception", "unknown_error",
        operation=operation,
        error_category="unknown",
        correlation_id=correlation_id or "N/A",
        detail=f"{type(exc).__name__}: {exc}",
    )
    return NormalizedError(
        user_message="An unexpected error occurred. Please try again.",
        error_category="unknown",
        retryable=False,
        http_status=500,
    )
