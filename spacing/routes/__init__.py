"""APIRouter registration for the spacing votes service."""

from __future__ import annotations

from fastapi import APIRouter

from spacing.models.vote import VOTE_TABLES
from spacing.routes.votes import make_votes_router

api_router = APIRouter()
for _context in VOTE_TABLES:
    api_router.include_router(
        make_votes_router(_context),
        prefix=f"/votes/{_context}",
        tags=[f"{_context.capitalize()} votes"],
    )

__all__ = ["api_router"]
