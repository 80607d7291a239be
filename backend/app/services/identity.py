"""Normalize raw reaction / comment / repost records into a person identity.

Reaction and repost records carry the actor at the top level::

    {"urn": ..., "fullName": ..., "profileUrl": ...,
     "profilePicture": [{"url": ..., "width": 100, "height": 100}, ...]}

Comment records nest the actor and never include a picture::

    {"author": {"urn": ..., "name": ..., "linkedinUrl": ...}, ...}
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import reduce
from typing import Any

from backend.app.models.engagement import EngagementKind, PersonIdentity


def _width(picture: Mapping[str, Any]) -> float | None:
    width = picture.get("width")
    if isinstance(width, int | float) and not isinstance(width, bool):
        return width
    return None


def _wider(current: Mapping[str, Any], best: Mapping[str, Any]) -> bool:
    # Any comparison involving a missing width is false.
    current_width, best_width = _width(current), _width(best)
    if current_width is None or best_width is None:
        return False
    return current_width > best_width


def largest_profile_picture(pictures: object) -> str | None:
    """Return the URL of the widest picture variant, or ``None``.

    Left-to-right running-max fold: the running best is only replaced on a
    strictly greater width, so ties keep the earliest maximal variant and a
    leading variant without a width is kept.
    """
    if not isinstance(pictures, list):
        return None
    candidates = [p for p in pictures if isinstance(p, Mapping)]
    if not candidates:
        return None
    largest = reduce(
        lambda best, current: current if _wider(current, best) else best,
        candidates,
    )
    return _text(largest.get("url"))


def _str_or_none(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _text(value: object) -> str | None:
    return value if isinstance(value, str) else None


def normalize_person(record: Mapping[str, Any], kind: EngagementKind | str) -> PersonIdentity:
    """Project a raw engagement record of *kind* onto a :class:`PersonIdentity`.

    Never raises on malformed input; a record without an actor URN yields
    ``identity.id is None``.
    """
    kind = EngagementKind(kind)
    if not isinstance(record, Mapping):
        return PersonIdentity()

    if kind is EngagementKind.comment:
        author = record.get("author")
        if not isinstance(author, Mapping):
            author = {}
        return PersonIdentity(
            id=_str_or_none(author.get("urn")),
            name=_text(author.get("name")),
            profile_url=_text(author.get("linkedinUrl")),
            display_picture=None,
        )

    return PersonIdentity(
        id=_str_or_none(record.get("urn")),
        name=_text(record.get("fullName")),
        profile_url=_text(record.get("profileUrl")),
        display_picture=largest_profile_picture(record.get("profilePicture")),
    )
