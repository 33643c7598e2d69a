"""Vote operations consumed by the HTTP layer.

Request payloads are validated here, before any store is touched: size
values must satisfy the size grammar and only size keys are accepted. A
`name` key in a payload is ignored in favour of the voter named by the
caller. The remaining functions are the four core operations; "not found"
is reported as None, never as an error.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from spacing.errors import ValidationError
from spacing.logic.repository_votes import VoteStore
from spacing.logic.validation import invalid_fields
from spacing.models.vote import SIZES, AggregatedValueGroup, UpsertResult, Vote

logger = logging.getLogger(__name__)


def build_vote(voter: str, payload: Mapping[str, Any], *, full: bool) -> Vote:
    """Validate `payload` and return the vote of `voter` it describes.

    With `full=True` sizes missing from the payload are set to None (replace
    semantics); otherwise only the supplied sizes are set (patch semantics).
    Raises ValidationError for invalid size values or unknown keys.
    """
    invalid = invalid_fields(payload)
    if invalid:
        logger.info("votes.payload.invalid voter=%s fields=%s", voter, invalid)
        raise ValidationError(invalid)
    unknown = [key for key in payload if key != "name" and key not in SIZES]
    if unknown:
        logger.info("votes.payload.unknown voter=%s fields=%s", voter, unknown)
        raise ValidationError([], unknown_fields=unknown, message="Unknown fields")
    sizes = {key: value for key, value in payload.items() if key in SIZES}
    if full:
        return Vote.full(voter, sizes)
    return Vote(name=voter, **sizes)


def read_one(store: VoteStore, name: str) -> Optional[Vote]:
    return store.get(name)


def read_aggregate(store: VoteStore) -> List[AggregatedValueGroup]:
    return store.aggregate()


def create_or_replace(store: VoteStore, vote: Vote) -> UpsertResult:
    result = store.replace(vote)
    logger.info(
        "votes.replace name=%s table=%s created=%s", result.name, store.table_name, result.created
    )
    return result


def patch(store: VoteStore, name: str, partial: Vote) -> Optional[Vote]:
    """Update the supplied sizes of `name`'s vote and return the stored vote.

    Returns None when `name` has no vote; nothing is written in that case.
    """
    sizes = partial.to_row(partial=True)
    sizes.pop("name", None)
    result = store.update(Vote(name=name, **sizes))
    if result.matched == 0:
        return None
    return store.get(name)


__all__ = ["build_vote", "read_one", "read_aggregate", "create_or_replace", "patch"]
