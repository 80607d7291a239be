"""Weighted scoring, ranking and leaderboard payload assembly.

Formula
-------
For each person with counts *r*, *c*, *s* and weights *W*::

    total_score = r * W.reaction + c * W.comment + s * W.repost

Ordering: ``total_score`` descending, then ``total_engagement`` descending,
then identity id ascending so equal entries rank deterministically.  Ranks are
consecutive positions starting at 1 and are never shared.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from backend.app.core.logging import log_event
from backend.app.models.engagement import CollectionRun, PersonAggregate
from backend.app.models.leaderboard import (
    LeaderboardAggregates,
    LeaderboardData,
    LeaderboardEntry,
    LeaderboardMetadata,
    LeaderboardResponse,
    ScoringWeights,
)
from backend.app.services.aggregation import aggregate_engagement_by_person

logger = logging.getLogger(__name__)


def calculate_scores(
    people: Mapping[str, PersonAggregate], weights: ScoringWeights,
) -> list[PersonAggregate]:
    """Return every aggregate with ``total_score`` filled in."""
    return [
        person.model_copy(
            update={
                "total_score": (
                    person.reaction_count * weights.reaction
                    + person.comment_count * weights.comment
                    + person.repost_count * weights.repost
                )
            }
        )
        for person in people.values()
    ]


def _sort_key(person: PersonAggregate) -> tuple[float, int, str]:
    return (-person.total_score, -person.total_engagement, person.identity.id or "")


def rank_people(people: Iterable[PersonAggregate]) -> list[LeaderboardEntry]:
    """Sort scored aggregates and assign ranks 1..n."""
    ranked = sorted(people, key=_sort_key)
    return [
        LeaderboardEntry(
            rank=position,
            name=person.identity.name,
            profile_url=person.identity.profile_url,
            display_pic=person.identity.display_picture,
            reactions=person.reaction_count,
            comments=person.comment_count,
            reposts=person.repost_count,
            total_engagement=person.total_engagement,
            total_score=person.total_score,
        )
        for position, person in enumerate(ranked, start=1)
    ]


def generate_leaderboard(
    run: CollectionRun, weights: ScoringWeights,
) -> LeaderboardResponse:
    """Aggregate, score and rank a collection run into the response payload."""
    people = aggregate_engagement_by_person(run)
    leaderboard = rank_people(calculate_scores(people, weights))

    totals = run.aggregates
    metadata = LeaderboardMetadata(
        total_people=len(leaderboard),
        posts_analyzed=totals.posts_analyzed,
        aggregates=LeaderboardAggregates(
            total_reactions=totals.total_reactions,
            total_comments=totals.total_comments,
            total_reposts=totals.total_reposts,
            total_engagement=totals.total_engagement,
        ),
        scoring_config=weights,
        errors=list(run.errors) if run.errors else None,
    )

    log_event(
        logger, "info", "leaderboard_generated",
        total_people=metadata.total_people,
        posts_analyzed=metadata.posts_analyzed,
        total_engagement=totals.total_engagement,
        errors=len(run.errors),
    )
    return LeaderboardResponse(
        success=True,
        data=LeaderboardData(leaderboard=leaderboard, metadata=metadata),
    )
