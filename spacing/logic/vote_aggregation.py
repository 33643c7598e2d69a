"""Aggregation of votes by distinct value, per size.

For every size a projection selects the non-null values of that size column,
grouped by value, together with the size name, a fixed size rank and the
names of the voters sharing the value. The five projections are combined
with a set UNION; since the size name differs per projection the union never
merges rows across sizes.

Ordering is by size rank descending (tiny, small, medium, large, huge) and
then by value in plain string order.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from sqlalchemy import Integer, String, Table, func, literal, select, union
from sqlalchemy.engine import Engine
from sqlalchemy.sql import Select

from spacing.db.errors import store_errors
from spacing.models.vote import SIZES, AggregatedValueGroup

logger = logging.getLogger(__name__)

# huge=1 ... tiny=5; listed descending
SIZE_RANK: Dict[str, int] = {size: rank for rank, size in enumerate(reversed(SIZES), start=1)}


def _collect_names(dialect_name: str, name_column: Any) -> Any:
    # SQLite has no array type; its JSON array is decoded after fetch
    if dialect_name == "sqlite":
        return func.json_group_array(name_column)
    return func.array_agg(name_column)


def _size_projection(table: Table, size: str, dialect_name: str) -> Select:
    column = table.c[size]
    return (
        select(
            literal(size, String).label("size"),
            literal(SIZE_RANK[size], Integer).label("size_rank"),
            column.label("value"),
            _collect_names(dialect_name, table.c.name).label("voters"),
        )
        .where(column.is_not(None))
        .group_by(column)
    )


def build_aggregate_query(table: Table, dialect_name: str) -> Select:
    groups = union(*(_size_projection(table, size, dialect_name) for size in SIZES)).subquery("size_groups")
    value_order = groups.c.value
    if dialect_name == "postgresql":
        # Locale collations ignore punctuation; "C" compares code points
        value_order = value_order.collate("C")
    return select(groups.c.size, groups.c.value, groups.c.voters).order_by(
        groups.c.size_rank.desc(), value_order
    )


def _voters(raw: Any) -> List[str]:
    if isinstance(raw, str):
        raw = json.loads(raw)
    return sorted(str(name) for name in (raw or []))


def read_aggregate(engine: Engine, table: Table) -> List[AggregatedValueGroup]:
    """Return every (size, value) group of `table`, or [] when it is empty."""
    query = build_aggregate_query(table, engine.dialect.name)
    with store_errors("aggregate", table.name):
        with engine.connect() as conn:
            rows = conn.execute(query).mappings().all()
    groups = [
        AggregatedValueGroup(size=row["size"], value=row["value"], voters=_voters(row["voters"]))
        for row in rows
    ]
    logger.info("votes.aggregate table=%s groups=%d", table.name, len(groups))
    return groups


__all__ = ["SIZE_RANK", "build_aggregate_query", "read_aggregate"]
