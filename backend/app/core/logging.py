"""Structured logging baseline and event taxonomy.

Event taxonomy (minimum set)::

    app_start               : application process starting
    config_loaded           : settings resolved successfully
    scoring_config_loaded   : scoring weights read from disk
    scoring_config_fallback : scoring file unusable, default weights applied
    collection_started      : engagement collection for a profile beginning
    posts_listed            : post listing finished (count of posts kept)
    posts_cutoff_reached    : a post older than the date window stopped listing
    post_item_skipped       : a post listing item was not an object
    stream_page_fetched     : one page of any provider stream consumed
    stream_failed           : a per-post engagement stream failed (isolated)
    post_processed          : all three streams of one post collected
    provider_call_failed    : fatal provider failure mapped to a user message
    collection_completed    : all posts and streams processed
    leaderboard_generated   : ranked leaderboard produced

Rules:
    - Never log API keys or secrets.
    - Log URNs, usernames and counts, not full provider payloads.

Usage::

    from backend.app.core.logging import log_event
    log_event(logger, "warning", "stream_failed",
              post_urn=urn, stream="reactions", detail=str(exc))
"""

import logging
import sys

# Canonical event names for grep-ability and observability.
EVENT_APP_START = "app_start"
EVENT_CONFIG_LOADED = "config_loaded"
EVENT_SCORING_CONFIG_LOADED = "scoring_config_loaded"
EVENT_SCORING_CONFIG_FALLBACK = "scoring_config_fallback"
EVENT_COLLECTION_STARTED = "collection_started"
EVENT_POSTS_LISTED = "posts_listed"
EVENT_POSTS_CUTOFF_REACHED = "posts_cutoff_reached"
EVENT_POST_ITEM_SKIPPED = "post_item_skipped"
EVENT_STREAM_PAGE_FETCHED = "stream_page_fetched"
EVENT_STREAM_FAILED = "stream_failed"
EVENT_POST_PROCESSED = "post_processed"
EVENT_PROVIDER_CALL_FAILED = "provider_call_failed"
EVENT_COLLECTION_COMPLETED = "collection_completed"
EVENT_LEADERBOARD_GENERATED = "leaderboard_generated"


_HANDLER_ATTR = "_li_leaderboard"


def setup_logging(level: int = logging.INFO) -> None:
    """Configure root logger with a simple structured format.

    Safe to call multiple times: only adds the handler once.
    """
    root = logging.getLogger()
    root.setLevel(level)

    # Check if our handler is already attached
    for h in root.handlers:
        if getattr(h, _HANDLER_ATTR, False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    setattr(handler, _HANDLER_ATTR, True)
    root.addHandler(handler)


def log_event(
    logger: logging.Logger,
    level: str,
    event_name: str,
    **kwargs: object,
) -> None:
    """Emit a structured log line with consistent ``event_name: key=value`` format.

    Parameters
    ----------
    logger:
        The logger instance (provides the component via ``logger.name``).
    level:
        Log level name, one of ``"debug"``, ``"info"``, ``"warning"``, ``"error"``,
        or ``"exception"``.
    event_name:
        Canonical event name (e.g. ``"stream_failed"``).
    **kwargs:
        Arbitrary key-value pairs appended as ``key=value``.
    """
    parts = " ".join(f"{k}={v}" for k, v in kwargs.items())
    message = f"{event_name}: {parts}" if parts else event_name
    log_fn = getattr(logger, level, logger.info)
    log_fn(message)
