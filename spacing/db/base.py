"""SQLAlchemy engine construction.

The service targets PostgreSQL in production but supports SQLite for local
development and tests. No declarative models are defined here; this module
only builds engines. The application constructs one engine at startup,
passes it to each vote store and disposes it at shutdown.
"""

from __future__ import annotations

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

DEFAULT_DSN = "postgresql+psycopg2://wiki@db/spacing"


def resolve_dsn(dsn: str, port: int | None = None) -> str:
    """Return `dsn` with its port replaced when `port` is given."""
    if port is None:
        return dsn
    url = make_url(dsn).set(port=port)
    return url.render_as_string(hide_password=False)


def create_db_engine(url: str) -> Engine:
    """Build an Engine for `url`.

    For SQLite in-memory URLs, use a StaticPool to keep a single connection
    alive across sessions and threads; otherwise each checkout would see a
    fresh, empty database.
    """
    kwargs: dict = {"future": True, "pool_pre_ping": True}
    if url.startswith("sqlite") and ":memory:" in url:
        kwargs.update({
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        })
    elif url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    engine = create_engine(url, **kwargs)
    logger.info("db.engine.created dialect=%s", engine.dialect.name)
    return engine


__all__ = ["DEFAULT_DSN", "resolve_dsn", "create_db_engine"]
