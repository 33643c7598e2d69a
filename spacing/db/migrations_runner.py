"""Lightweight SQL migrations runner.

Applies the packaged .sql files for the engine's dialect
(`migrations/postgresql/` or `migrations/sqlite/`) in lexical order. Skips
rollback files on forward runs and records applied filenames in the
`schema_migrations` table so a migration is never applied twice.

Each forward file `NNN_name.sql` may have a `NNN_name_rollback.sql`
counterpart used by `rollback_last_migration`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

MIGRATIONS_ROOT = Path(__file__).resolve().parent / "migrations"
JOURNAL_TABLE = "schema_migrations"
ROLLBACK_SUFFIX = "_rollback"


def migrations_dir_for(engine: Engine) -> Path:
    name = (engine.dialect.name or "").lower()
    return MIGRATIONS_ROOT / ("sqlite" if "sqlite" in name else "postgresql")


def _iter_sql_files(root: Path) -> Iterable[Path]:
    for p in sorted(root.glob("*.sql")):
        if p.stem.lower().endswith(ROLLBACK_SUFFIX):
            continue
        yield p


def _split_statements(sql: str) -> List[str]:
    """Split a script on ';', dropping empty segments and comment-only lines."""
    statements: List[str] = []
    for chunk in sql.split(";"):
        lines = [ln for ln in chunk.splitlines() if not ln.strip().startswith("--")]
        stmt = "\n".join(lines).strip()
        if stmt:
            statements.append(stmt)
    return statements


def _exec_script(conn: Connection, sql: str) -> None:
    # pysqlite refuses several statements in one execute(); run them one by one
    for stmt in _split_statements(sql):
        conn.exec_driver_sql(stmt)


def _ensure_journal(conn: Connection) -> None:
    conn.exec_driver_sql(
        f"CREATE TABLE IF NOT EXISTS {JOURNAL_TABLE} ("
        " filename TEXT NOT NULL PRIMARY KEY,"
        " applied_at TEXT NOT NULL"
        ")"
    )


def applied_migrations(engine: Engine) -> List[str]:
    """Return applied migration filenames in application order."""
    with engine.begin() as conn:
        _ensure_journal(conn)
        rows = conn.execute(text(f"SELECT filename FROM {JOURNAL_TABLE} ORDER BY filename")).fetchall()
    return [str(r[0]) for r in rows]


def apply_migrations(engine: Engine, migrations_dir: str | Path | None = None) -> List[str]:
    """Apply pending migrations and return the filenames applied by this call."""
    root = Path(migrations_dir) if migrations_dir is not None else migrations_dir_for(engine)
    if not root.exists():
        logger.warning("migrations_dir_missing path=%s", root)
        return []

    applied_now: List[str] = []
    with engine.begin() as conn:
        _ensure_journal(conn)
        done = {
            str(r[0]) for r in conn.execute(text(f"SELECT filename FROM {JOURNAL_TABLE}")).fetchall()
        }
        for sql_path in _iter_sql_files(root):
            fname = sql_path.name
            if fname in done:
                continue
            sql = sql_path.read_text(encoding="utf-8")
            if not sql.strip():
                continue
            _exec_script(conn, sql)
            conn.execute(
                text(f"INSERT INTO {JOURNAL_TABLE} (filename, applied_at) VALUES (:f, :at)"),
                {
                    "f": fname,
                    # ISO-8601 UTC without fractional seconds
                    "at": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
                },
            )
            applied_now.append(fname)
            logger.info("migration_applied file=%s", fname)
    return applied_now


def rollback_last_migration(engine: Engine, migrations_dir: str | Path | None = None) -> str | None:
    """Revert the most recently applied migration.

    Returns the reverted filename, or None when nothing was applied. Raises
    FileNotFoundError when the migration ships no rollback script.
    """
    root = Path(migrations_dir) if migrations_dir is not None else migrations_dir_for(engine)
    with engine.begin() as conn:
        _ensure_journal(conn)
        row = conn.execute(
            text(f"SELECT filename FROM {JOURNAL_TABLE} ORDER BY filename DESC LIMIT 1")
        ).fetchone()
        if row is None:
            return None
        fname = str(row[0])
        rollback_path = root / f"{Path(fname).stem}{ROLLBACK_SUFFIX}.sql"
        if not rollback_path.exists():
            raise FileNotFoundError(f"No rollback script for {fname}: {rollback_path}")
        _exec_script(conn, rollback_path.read_text(encoding="utf-8"))
        conn.execute(text(f"DELETE FROM {JOURNAL_TABLE} WHERE filename = :f"), {"f": fname})
    logger.info("migration_rolled_back file=%s", fname)
    return fname


__all__ = [
    "MIGRATIONS_ROOT",
    "migrations_dir_for",
    "applied_migrations",
    "apply_migrations",
    "rollback_last_migration",
]
