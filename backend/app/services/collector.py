"""Engagement collection for one profile: posts, then each post's three streams.

Flow::

    extract_username ─► fetch_profile_posts (date cutoff, mid-page)
                     └► for each post: reactions ─► comments ─► reposts

Failure policy
--------------
- No username in the profile URL, or the post listing failing before any post
  was obtained, is fatal and propagates to the caller.
- A post listing failure after some posts were obtained keeps those posts and
  records an error.
- Each per-post stream is isolated: a failure is recorded in
  ``CollectionRun.errors``, the stream counts as empty, and collection moves on.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from functools import partial

from backend.app.core.errors import InvalidProfileUrlError, ProviderError
from backend.app.core.logging import log_event
from backend.app.models.engagement import CollectionRun, PostEngagement, RawPost, RawRecord
from backend.app.services.linkedin_client import EngagementProvider
from backend.app.services.pagination import (
    Cursor,
    items_at,
    make_advance,
    pages_from_total,
    paginate,
    value_at,
)

logger = logging.getLogger(__name__)

_USERNAME_RE = re.compile(r"/in/([^/?#]+)")

POSTS_PAGE_SIZE = 50
REACTIONS_PAGE_SIZE = 10


def extract_username(profile_url: str) -> str | None:
    """Return the ``/in/<username>`` segment of a profile URL, or ``None``."""
    match = _USERNAME_RE.search(profile_url or "")
    return match.group(1) if match else None


# ---------------------------------------------------------------------------
# Streams
# ---------------------------------------------------------------------------


def fetch_profile_posts(
    provider: EngagementProvider,
    username: str,
    days: int,
    *,
    now: datetime | None = None,
    errors: list[str] | None = None,
) -> list[RawPost]:
    """List the profile's posts newer than ``now - days``, newest first.

    The first post strictly older than the cutoff ends the listing, even in
    the middle of a page.  Posts without a parseable timestamp are kept.
    """
    cutoff = (now or datetime.now(UTC)) - timedelta(days=days)
    posts: list[RawPost] = []

    items = paginate(
        lambda c: provider.get_profile_posts(username, c.index, c.token),
        items_at("data"),
        make_advance(token_of=value_at("paginationToken"), step=POSTS_PAGE_SIZE),
        first=Cursor(index=0),
        stream="posts",
    )
    try:
        for item in items:
            if not isinstance(item, Mapping):
                log_event(logger, "warning", "post_item_skipped", username=username)
                continue
            post = RawPost.from_provider(item)
            if post.posted_at is not None and post.posted_at < cutoff:
                log_event(
                    logger, "info", "posts_cutoff_reached",
                    username=username, cutoff=cutoff.isoformat(), kept=len(posts),
                )
                break
            posts.append(post)
    except ProviderError as exc:
        if not posts or errors is None:
            raise
        message = f"Failed to get posts for {username} after {len(posts)} posts: {exc}"
        log_event(logger, "warning", "stream_failed", stream="posts", detail=str(exc))
        errors.append(message)

    log_event(
        logger, "info", "posts_listed",
        username=username, total_posts=len(posts),
    )
    return posts


def fetch_post_reactions(provider: EngagementProvider, post_url: str) -> list[RawRecord]:
    """All reactions of a post; count-based (``data.total``, 10 per page)."""
    return list(
        paginate(
            lambda c: provider.get_post_reactions(post_url, c.index),
            items_at("data", "items"),
            make_advance(
                total_pages_of=pages_from_total(
                    value_at("data", "total"), REACTIONS_PAGE_SIZE,
                ),
            ),
            first=Cursor(index=1),
            stream="reactions",
        )
    )


def fetch_post_comments(provider: EngagementProvider, urn: str) -> list[RawRecord]:
    """All comments of a post; token-based with an optional ``totalPage`` ceiling."""
    return list(
        paginate(
            lambda c: provider.get_post_comments(urn, c.index, c.token),
            items_at("data"),
            make_advance(
                token_of=value_at("paginationToken"),
                total_pages_of=value_at("totalPage"),
            ),
            first=Cursor(index=1),
            stream="comments",
        )
    )


def fetch_post_reposts(provider: EngagementProvider, urn: str) -> list[RawRecord]:
    """All reposts of a post; ``data.totalPages`` ceiling plus empty-token stop."""
    return list(
        paginate(
            lambda c: provider.get_post_reposts(urn, c.index, c.token),
            items_at("data", "items"),
            make_advance(
                token_of=value_at("data", "paginationToken"),
                total_pages_of=value_at("data", "totalPages"),
            ),
            first=Cursor(index=1, token=""),
            stream="reposts",
        )
    )


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


def _collect_stream(
    fetch: Callable[[], list[RawRecord]],
    *,
    kind: str,
    post: RawPost,
    errors: list[str],
) -> list[RawRecord]:
    try:
        return fetch()
    except Exception as exc:
        log_event(
            logger, "warning", "stream_failed",
            post_urn=post.urn, stream=kind, detail=str(exc),
        )
        errors.append(f"Failed to get {kind} for post {post.urn}: {exc}")
        return []


def collect_engagement(
    profile_url: str,
    days: int,
    *,
    provider: EngagementProvider,
    now: datetime | None = None,
) -> CollectionRun:
    """Collect reactions, comments and reposts for a profile's recent posts.

    Raises :class:`InvalidProfileUrlError` when no username can be derived
    and :class:`ProviderError` when the post listing fails outright.
    """
    username = extract_username(profile_url)
    if not username:
        raise InvalidProfileUrlError(f"Invalid LinkedIn URL format: {profile_url}")

    log_event(logger, "info", "collection_started", username=username, days=days)

    run = CollectionRun()
    posts = fetch_profile_posts(provider, username, days, now=now, errors=run.errors)
    run.aggregates.posts_analyzed = len(posts)

    for position, post in enumerate(posts, start=1):
        engagement = PostEngagement(urn=post.urn, url=post.url)

        engagement.reactions = _collect_stream(
            partial(fetch_post_reactions, provider, post.url or post.urn),
            kind="reactions", post=post, errors=run.errors,
        )
        engagement.comments = _collect_stream(
            partial(fetch_post_comments, provider, post.urn),
            kind="comments", post=post, errors=run.errors,
        )
        engagement.reposts = _collect_stream(
            partial(fetch_post_reposts, provider, post.urn),
            kind="reposts", post=post, errors=run.errors,
        )

        run.aggregates.total_reactions += len(engagement.reactions)
        run.aggregates.total_comments += len(engagement.comments)
        run.aggregates.total_reposts += len(engagement.reposts)
        run.posts.append(engagement)

        log_event(
            logger, "info", "post_processed",
            position=f"{position}/{len(posts)}",
            post_urn=post.urn,
            reactions=len(engagement.reactions),
            comments=len(engagement.comments),
            reposts=len(engagement.reposts),
        )

    log_event(
        logger, "info", "collection_completed",
        username=username,
        posts_analyzed=run.aggregates.posts_analyzed,
        total_reactions=run.aggregates.total_reactions,
        total_comments=run.aggregates.total_comments,
        total_reposts=run.aggregates.total_reposts,
        errors=len(run.errors),
    )
    return run
