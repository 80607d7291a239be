"""Fold normalized engagement records into one aggregate per person.

Merge rule (single place, see :func:`merge_or_create`):

- first sighting creates a zeroed aggregate carrying the identity as given;
- every sighting increments the kind's count and ``total_engagement``;
- name and profile URL are first-writer-wins;
- the display picture is backfilled only while still absent.

Counts are order-independent.  Which record's name/profile URL wins depends on
traversal order (posts in provider order; reactions, comments, reposts).
"""

from __future__ import annotations

from backend.app.models.engagement import (
    CollectionRun,
    EngagementKind,
    PersonAggregate,
    PersonIdentity,
)
from backend.app.services.identity import normalize_person

_COUNT_FIELD: dict[EngagementKind, str] = {
    EngagementKind.reaction: "reaction_count",
    EngagementKind.comment: "comment_count",
    EngagementKind.repost: "repost_count",
}


def merge_or_create(
    existing: PersonAggregate | None,
    incoming: PersonIdentity,
    kind: EngagementKind,
) -> PersonAggregate:
    """Return *existing* updated with one *kind* engagement from *incoming*.

    Pure: *existing* is never mutated.  When *existing* is ``None`` a fresh
    aggregate is created from *incoming*.
    """
    if existing is None:
        existing = PersonAggregate(identity=incoming)

    identity = existing.identity
    if identity.display_picture is None and incoming.display_picture is not None:
        identity = identity.model_copy(update={"display_picture": incoming.display_picture})

    field = _COUNT_FIELD[kind]
    return existing.model_copy(
        update={
            "identity": identity,
            field: getattr(existing, field) + 1,
            "total_engagement": existing.total_engagement + 1,
        }
    )


def aggregate_engagement_by_person(run: CollectionRun) -> dict[str, PersonAggregate]:
    """Build the ``identity id -> PersonAggregate`` mapping for a whole run.

    Records whose identity has no id are skipped.
    """
    people: dict[str, PersonAggregate] = {}

    for post in run.posts:
        for kind, records in (
            (EngagementKind.reaction, post.reactions),
            (EngagementKind.comment, post.comments),
            (EngagementKind.repost, post.reposts),
        ):
            for record in records:
                person = normalize_person(record, kind)
                if person.id is None:
                    continue
                people[person.id] = merge_or_create(people.get(person.id), person, kind)

    return people
