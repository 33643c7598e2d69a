from __future__ import annotations

import logging
from typing import Callable

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from spacing.config import AppConfig, load_config
from spacing.db.base import create_db_engine
from spacing.db.migrations_runner import apply_migrations
from spacing.errors import StoreError, ValidationError
from spacing.http.problem import (
    handle_http_exception,
    handle_request_validation_error,
    handle_store_error,
    handle_unexpected_error,
    handle_validation_error,
)
from spacing.http.request_id import RequestIdMiddleware
from spacing.logging_setup import configure_logging
from spacing.logic.repository_votes import VoteStore
from spacing.middleware.cors import apply_cors
from spacing.models.vote import VOTE_TABLES
from spacing.routes import api_router

logger = logging.getLogger(__name__)


def _health_check(engine: Engine) -> Callable[[], dict]:
    def check() -> dict:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {"status": "ok", "db": True}
        except SQLAlchemyError as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": str(e)}

    return check


def create_app(config: AppConfig | None = None, engine: Engine | None = None) -> FastAPI:
    """Build the FastAPI application.

    The engine is created here from `config` unless one is passed in; an
    engine created here is disposed when the application shuts down, a
    caller-supplied one is left to its owner.
    """
    config = config or load_config()
    configure_logging(config.logging.level)

    owns_engine = engine is None
    if engine is None:
        engine = create_db_engine(config.database.url)

    app = FastAPI(title="Spacing votes", version="1.0.0")
    app.state.config = config
    app.state.engine = engine
    app.state.vote_stores = {
        context: VoteStore(engine, table_name) for context, table_name in VOTE_TABLES.items()
    }

    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(StoreError, handle_store_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    apply_cors(app, origins=config.cors.origins)
    # Added last so it wraps CORS and echoes the id on every response
    app.add_middleware(RequestIdMiddleware)

    @app.on_event("startup")
    def _startup_migrations() -> None:
        if not config.migrations.auto_apply:
            logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")
            return
        try:
            applied = apply_migrations(engine)
        except Exception:
            logger.error("Failed to apply migrations at startup", exc_info=True)
            raise
        logger.info("startup_migrations applied=%s", applied)

    @app.on_event("shutdown")
    def _dispose_engine() -> None:
        if owns_engine:
            engine.dispose()
            logger.info("db.engine.disposed")

    app.include_router(api_router)

    health_check = _health_check(engine)

    @app.get("/health")
    def health():
        return health_check()

    return app
