"""Vote data access for a single votes table.

Each `VoteStore` owns one table (`grid_votes` or `table_votes`) and runs every
statement in its own transaction on the engine it was constructed with.
Engine failures leave this module as `StoreError` or
`MissingRequiredFieldError`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy import Column, MetaData, Table, Text, insert, select, update
from sqlalchemy.engine import Engine

from spacing.db.errors import store_errors
from spacing.errors import MissingRequiredFieldError
from spacing.logic.vote_aggregation import read_aggregate
from spacing.models.vote import SIZES, AggregatedValueGroup, UpsertResult, Vote

logger = logging.getLogger(__name__)

VoteInput = Union[Vote, Mapping[str, Any]]


def votes_table(table_name: str, metadata: MetaData | None = None) -> Table:
    """Describe a votes table; the schema itself is created by migrations."""
    return Table(
        table_name,
        metadata if metadata is not None else MetaData(),
        Column("name", Text, primary_key=True),
        *(Column(size, Text, nullable=True) for size in SIZES),
    )


def _row(vote: VoteInput) -> Dict[str, Any]:
    # Models contribute only the fields that were supplied
    if isinstance(vote, Vote):
        return vote.to_row(partial=True)
    return dict(vote)


class VoteStore:
    def __init__(self, engine: Engine, table_name: str) -> None:
        self.engine = engine
        self.table = votes_table(table_name)

    @property
    def table_name(self) -> str:
        return self.table.name

    def get(self, name: Optional[str]) -> Optional[Vote]:
        """Return the vote cast by `name`, or None when there is none."""
        if name is None:
            return None
        stmt = select(self.table).where(self.table.c.name == name)
        with store_errors("get", self.table_name):
            with self.engine.connect() as conn:
                row = conn.execute(stmt).mappings().first()
        return Vote(**row) if row is not None else None

    def get_all(self) -> List[Vote]:
        stmt = select(self.table).order_by(self.table.c.name)
        with store_errors("get_all", self.table_name):
            with self.engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
        return [Vote(**row) for row in rows]

    def insert(self, vote: VoteInput) -> UpsertResult:
        """Add a new vote; `name` is required by the table."""
        row = _row(vote)
        stmt = insert(self.table).values(**row)
        with store_errors("insert", self.table_name):
            with self.engine.begin() as conn:
                conn.execute(stmt)
        logger.info("votes.insert name=%s table=%s", row.get("name"), self.table_name)
        return UpsertResult(name=row.get("name"), created=True, matched=1)

    def update(self, vote: VoteInput) -> UpsertResult:
        """Overwrite the supplied sizes of the vote named `vote.name`.

        Sizes that were not supplied keep their stored values. Updating a
        name with no stored vote succeeds with `matched == 0`.
        """
        values = _row(vote)
        name = values.pop("name", None)
        if name is None:
            logger.warning("votes.update.missing_name table=%s", self.table_name)
            raise MissingRequiredFieldError(message="Vote name is required")
        if not values:
            matched = 1 if self.get(name) is not None else 0
            return UpsertResult(name=name, created=False, matched=matched)
        stmt = update(self.table).where(self.table.c.name == name).values(**values)
        with store_errors("update", self.table_name):
            with self.engine.begin() as conn:
                matched = conn.execute(stmt).rowcount
        logger.info(
            "votes.update name=%s table=%s fields=%s matched=%s",
            name,
            self.table_name,
            sorted(values),
            matched,
        )
        return UpsertResult(name=name, created=False, matched=matched)

    def replace(self, vote: VoteInput) -> UpsertResult:
        """Insert the vote when its name is unknown, otherwise update it.

        The lookup and the write are separate statements: a concurrent insert
        of the same name makes this insert fail on the primary key, which
        surfaces as a StoreError and is not retried.
        """
        name = _row(vote).get("name")
        if self.get(name) is None:
            return self.insert(vote)
        return self.update(vote)

    def aggregate(self) -> List[AggregatedValueGroup]:
        return read_aggregate(self.engine, self.table)


__all__ = ["VoteStore", "votes_table"]
