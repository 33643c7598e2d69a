"""Configuration utilities for the spacing votes service.

This module loads application configuration with the following rules:
- Primary source: `spacing_config.json` at the working directory root.
- Overrides: optional text files under `config/`, then environment variables.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator, model_validator

from spacing.db.base import DEFAULT_DSN, resolve_dsn


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("spacing_config.json")
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        # Recoverable: an unreadable override falls through to the next source
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class DatabaseConfig(BaseModel):
    dsn: str
    port: Optional[int] = Field(default=None, gt=0, lt=65536)

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v

    @property
    def url(self) -> str:
        """DSN with the configured port applied."""
        return resolve_dsn(self.dsn, self.port)


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=29004, gt=0, lt=65536)
    tls_certfile: Optional[str] = None
    tls_keyfile: Optional[str] = None

    @model_validator(mode="after")
    def tls_files_come_in_pairs(self) -> "ServerConfig":
        if bool(self.tls_certfile) != bool(self.tls_keyfile):
            raise ValueError("server.tls_certfile and server.tls_keyfile must be set together")
        return self

    @property
    def tls_enabled(self) -> bool:
        return bool(self.tls_certfile and self.tls_keyfile)


class MigrationsConfig(BaseModel):
    auto_apply: bool = True


class CorsConfig(BaseModel):
    origins: List[str] = Field(default_factory=lambda: ["*"])


class LoggingConfig(BaseModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def level_must_be_known(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.strip().upper()
        if level not in allowed:
            raise ValueError(f"logging.level must be one of {sorted(allowed)}")
        return level


class AppConfig(BaseModel):
    database: DatabaseConfig
    server: ServerConfig = Field(default_factory=ServerConfig)
    migrations: MigrationsConfig = Field(default_factory=MigrationsConfig)
    cors: CorsConfig = Field(default_factory=CorsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def _truthy(text: str) -> bool:
    return str(text).strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) spacing_config.json at the working directory root
    4) Defaults for the docker-compose deployment
    """

    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    def _get(env_key: str, file_key: str, json_key: str, default: Optional[str] = None) -> Optional[str]:
        return _env(env_key) or _read_config_file(file_key) or _base(json_key, default)

    dsn = _get("DATABASE_URL", "database.url", "database.dsn", DEFAULT_DSN)
    db_port_text = _get("DB_PORT", "database.port", "database.port")

    host = _get("SERVER_HOST", "server.host", "server.host", "0.0.0.0")
    port_text = _get("SERVER_PORT", "server.port", "server.port", "29004")
    certfile = _get("TLS_CERT_FILE", "server.tls.certfile", "server.tls_certfile")
    keyfile = _get("TLS_KEY_FILE", "server.tls.keyfile", "server.tls_keyfile")

    auto_apply_text = _get("AUTO_APPLY_MIGRATIONS", "migrations.auto_apply", "migrations.auto_apply", "true")

    origins_text = _get("CORS_ORIGINS", "cors.origins", "cors.origins", "*")
    level = _get("LOG_LEVEL", "logging.level", "logging.level", "INFO")

    try:
        cfg = AppConfig(
            database=DatabaseConfig(
                dsn=dsn,
                port=int(str(db_port_text).strip()) if db_port_text else None,
            ),
            server=ServerConfig(
                host=host,
                port=int(str(port_text).strip()),
                tls_certfile=certfile or None,
                tls_keyfile=keyfile or None,
            ),
            migrations=MigrationsConfig(auto_apply=_truthy(auto_apply_text)),
            cors=CorsConfig(origins=[o.strip() for o in str(origins_text).split(",") if o.strip()]),
            logging=LoggingConfig(level=level),
        )
        return cfg
    except PydanticValidationError as e:
        # Surface an actionable message before failing startup
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "ServerConfig",
    "MigrationsConfig",
    "CorsConfig",
    "LoggingConfig",
    "load_config",
]
