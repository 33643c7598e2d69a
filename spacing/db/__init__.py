"""Database bootstrap utilities for the spacing votes service.

This module exposes convenience imports for engine construction and the
migrations runner that applies the SQL files shipped under `migrations/`.
Route handlers never import from here; they go through vote stores.
"""

from spacing.db.base import create_db_engine, resolve_dsn
from spacing.db.migrations_runner import apply_migrations, rollback_last_migration

__all__ = [
    "create_db_engine",
    "resolve_dsn",
    "apply_migrations",
    "rollback_last_migration",
]
