"""Pydantic models for votes and their derived projections.

A `Vote` distinguishes fields that were supplied from fields that were left
out: pydantic records the supplied ones in `model_fields_set`, and writes use
that set to decide which columns to touch.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict


# Size field names, smallest first.
SIZES: Tuple[str, ...] = ("tiny", "small", "medium", "large", "huge")

# Voting context -> table holding its votes.
VOTE_TABLES: Dict[str, str] = {
    "grid": "grid_votes",
    "table": "table_votes",
}


class Vote(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    tiny: Optional[str] = None
    small: Optional[str] = None
    medium: Optional[str] = None
    large: Optional[str] = None
    huge: Optional[str] = None

    @classmethod
    def full(cls, name: Optional[str], sizes: Mapping[str, Any]) -> "Vote":
        """Build a vote with every size field set, missing ones as None."""
        values: Dict[str, Any] = {size: sizes.get(size) for size in SIZES}
        return cls(name=name, **values)

    def to_row(self, *, partial: bool = False) -> Dict[str, Any]:
        """Column mapping for a write; `partial` keeps only supplied fields."""
        return self.model_dump(exclude_unset=partial)

    def without_name(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"name"})


class AggregatedValueGroup(BaseModel):
    size: str
    value: str
    voters: list[str]


class UpsertResult(BaseModel):
    name: Optional[str]
    created: bool
    # Rows affected by the write; an update of an absent name reports 0.
    matched: int = 1


__all__ = ["SIZES", "VOTE_TABLES", "Vote", "AggregatedValueGroup", "UpsertResult"]
