"""Pydantic models for collected LinkedIn engagement and per-person aggregates."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

RawRecord = dict[str, Any]
"""One engagement record exactly as returned by the provider."""


class EngagementKind(StrEnum):
    """Categories of actor interaction with a post."""

    reaction = "reaction"
    comment = "comment"
    repost = "repost"


def _from_epoch_ms(value: int | float) -> datetime | None:
    try:
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    except (ValueError, OverflowError, OSError):
        return None


def _parse_timestamp(value: object) -> datetime | None:
    """Parse a provider timestamp (epoch milliseconds or ISO 8601) to UTC.

    Unparseable or out-of-range values yield ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return _from_epoch_ms(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        if stripped.isdigit():
            return _from_epoch_ms(int(stripped))
        try:
            parsed = datetime.fromisoformat(stripped.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return None


class RawPost(BaseModel):
    """A post returned by the profile post listing."""

    urn: str
    url: str | None = None
    posted_at: datetime | None = None

    @classmethod
    def from_provider(cls, item: Mapping[str, Any]) -> RawPost:
        """Build from a provider post item.

        The canonical URL prefers ``shareUrl`` over ``postUrl``; the timestamp
        prefers ``postedDateTimestamp`` over ``postedDate``.
        """
        posted_at = _parse_timestamp(item.get("postedDateTimestamp"))
        if posted_at is None:
            posted_at = _parse_timestamp(item.get("postedDate"))
        return cls(
            urn=str(item.get("urn", "")),
            url=next(
                (u for u in (item.get("shareUrl"), item.get("postUrl")) if isinstance(u, str) and u),
                None,
            ),
            posted_at=posted_at,
        )


class PostEngagement(BaseModel):
    """Raw engagement records collected for a single post."""

    urn: str
    url: str | None = None
    reactions: list[RawRecord] = Field(default_factory=list)
    comments: list[RawRecord] = Field(default_factory=list)
    reposts: list[RawRecord] = Field(default_factory=list)


class CollectionAggregates(BaseModel):
    total_reactions: int = 0
    total_comments: int = 0
    total_reposts: int = 0
    posts_analyzed: int = 0

    @property
    def total_engagement(self) -> int:
        return self.total_reactions + self.total_comments + self.total_reposts


class CollectionRun(BaseModel):
    """Everything gathered for one profile, handed to the aggregator.

    ``errors`` holds human-readable descriptions of isolated stream failures.
    """

    posts: list[PostEngagement] = Field(default_factory=list)
    aggregates: CollectionAggregates = Field(default_factory=CollectionAggregates)
    errors: list[str] = Field(default_factory=list)


class PersonIdentity(BaseModel):
    """Normalized actor identity, unified across engagement kinds.

    ``id`` is ``None`` when the record carried no actor URN; such records
    are dropped by the aggregator.
    """

    id: str | None = None
    name: str | None = None
    profile_url: str | None = None
    display_picture: str | None = None


class PersonAggregate(BaseModel):
    """Accumulated engagement for one unique person across a run."""

    identity: PersonIdentity
    reaction_count: int = 0
    comment_count: int = 0
    repost_count: int = 0
    total_engagement: int = 0
    total_score: int | float = 0
