"""Pydantic models for leaderboard requests, scoring weights and the response payload.

Field aliases reproduce the public payload exactly (camelCase metadata keys,
space-separated leaderboard entry keys).  Serialize with ``by_alias=True``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Number = int | float


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScoringWeights(BaseModel):
    """Per-kind weight applied to each engagement count."""

    reaction: Number = 1
    comment: Number = 1
    repost: Number = 1


class ScoringConfig(BaseModel):
    """Shape of the on-disk scoring configuration file."""

    scoring: ScoringWeights = Field(default_factory=ScoringWeights)


class LeaderboardRequest(BaseModel):
    """Incoming request to build a leaderboard for one profile."""

    model_config = ConfigDict(populate_by_name=True)

    linkedin_url: str = Field(..., alias="LinkedinURL", min_length=1, max_length=2_000)
    days: int = Field(..., gt=0)


class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rank: int
    name: str | None = None
    profile_url: str | None = Field(default=None, alias="profile url")
    display_pic: str | None = Field(default=None, alias="display pic")
    reactions: int = 0
    comments: int = 0
    reposts: int = 0
    total_engagement: int = Field(default=0, alias="total engagement")
    total_score: Number = Field(default=0, alias="total score")


class LeaderboardAggregates(_CamelModel):
    total_reactions: int = 0
    total_comments: int = 0
    total_reposts: int = 0
    total_engagement: int = 0


class RequestInfo(_CamelModel):
    linkedin_url: str
    days_analyzed: int
    processed_at: str


class LeaderboardMetadata(_CamelModel):
    total_people: int = 0
    posts_analyzed: int = 0
    aggregates: LeaderboardAggregates = Field(default_factory=LeaderboardAggregates)
    scoring_config: ScoringWeights = Field(default_factory=ScoringWeights)
    errors: list[str] | None = None
    message: str | None = None
    request_info: RequestInfo | None = None


class LeaderboardData(BaseModel):
    leaderboard: list[LeaderboardEntry] = Field(default_factory=list)
    metadata: LeaderboardMetadata = Field(default_factory=LeaderboardMetadata)


class LeaderboardResponse(BaseModel):
    """API response envelope for a generated leaderboard."""

    success: bool = True
    data: LeaderboardData = Field(default_factory=LeaderboardData)
