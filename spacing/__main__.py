"""Run the spacing votes server: `python -m spacing [--host H] [--port N] [--db-port N]`."""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import uvicorn

from spacing.config import AppConfig, load_config
from spacing.logging_setup import build_logging_config, configure_logging
from spacing.main import create_app

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="spacing", description="Serve grid and table spacing votes.")
    parser.add_argument("--host", help="interface to bind (default from config)")
    parser.add_argument("--port", type=int, help="port to listen on (default from config)")
    parser.add_argument("--db-port", type=int, help="port the database server listens on")
    return parser.parse_args(argv)


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Return `config` with command-line overrides applied."""
    server = config.server.model_copy(
        update={k: v for k, v in {"host": args.host, "port": args.port}.items() if v is not None}
    )
    database = config.database
    if args.db_port is not None:
        database = database.model_copy(update={"port": args.db_port})
    return config.model_copy(update={"server": server, "database": database})


def main(argv: Optional[Sequence[str]] = None) -> None:
    config = apply_overrides(load_config(), parse_args(argv))
    configure_logging(config.logging.level)
    server = config.server
    logger.info(
        "server.start host=%s port=%s tls=%s", server.host, server.port, server.tls_enabled
    )
    uvicorn.run(
        create_app(config),
        host=server.host,
        port=server.port,
        ssl_certfile=server.tls_certfile,
        ssl_keyfile=server.tls_keyfile,
        log_config=build_logging_config(config.logging.level),
    )


if __name__ == "__main__":
    main()
