from __future__ import annotations

"""Functional test bootstrap for the spacing votes service.

Each test gets its own in-memory SQLite database (StaticPool keeps the single
connection alive) with the packaged SQLite migrations applied, so tests never
see each other's votes. The FastAPI app is built around that engine with
startup migrations disabled.
"""

import os
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

# Keep any locally configured database out of the test run
os.environ.pop("DATABASE_URL", None)
os.environ.pop("DB_PORT", None)

from spacing.config import AppConfig, DatabaseConfig, MigrationsConfig  # noqa: E402
from spacing.db.base import create_db_engine  # noqa: E402
from spacing.db.migrations_runner import apply_migrations  # noqa: E402
from spacing.logic.repository_votes import VoteStore  # noqa: E402
from spacing.main import create_app  # noqa: E402

MEMORY_URL = "sqlite+pysqlite:///:memory:"


@pytest.fixture
def engine() -> Iterator[Engine]:
    eng = create_db_engine(MEMORY_URL)
    apply_migrations(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def grid_store(engine: Engine) -> VoteStore:
    return VoteStore(engine, "grid_votes")


@pytest.fixture
def table_store(engine: Engine) -> VoteStore:
    return VoteStore(engine, "table_votes")


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        database=DatabaseConfig(dsn=MEMORY_URL),
        migrations=MigrationsConfig(auto_apply=False),
    )


@pytest.fixture
def app(app_config: AppConfig, engine: Engine):
    return create_app(app_config, engine)


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def vote() -> dict:
    return {
        "name": "Frænky",
        "tiny": "12ex",
        "small": "0.2em",
        "medium": "10em",
        "large": "18rem",
        "huge": "0.6ex",
    }
