"""FastAPI application package for the spacing votes service.

This package exposes the FastAPI application factory for the service that
collects grid and table spacing votes. It wires only cross-cutting
middleware (request-id and CORS) and mounts the vote routers. Business logic
lives in `spacing/logic/` and route handlers in `spacing/routes/`.
"""

from __future__ import annotations

from spacing.main import create_app

__all__ = ["create_app"]
