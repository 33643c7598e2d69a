"""Vote routes for one voting context.

`make_votes_router` builds the four vote endpoints bound to the store of a
given context (grid or table). Handlers only translate HTTP into calls on
`spacing.logic.votes_service`; validation, persistence and error mapping
live elsewhere.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse, Response

from spacing.http.problem import vote_not_found
from spacing.logic import votes_service
from spacing.logic.repository_votes import VoteStore

logger = logging.getLogger(__name__)


def make_votes_router(context: str) -> APIRouter:
    router = APIRouter()

    def get_store(request: Request) -> VoteStore:
        return request.app.state.vote_stores[context]

    @router.get("", summary=f"List {context} votes grouped by value")
    def get_all(store: VoteStore = Depends(get_store)):
        """Return every (size, value) group with its voters; 204 when empty."""
        groups = votes_service.read_aggregate(store)
        if not groups:
            return Response(status_code=204)
        return JSONResponse([g.model_dump() for g in groups])

    @router.get("/{voter}", summary=f"Read one {context} vote")
    def get_one(voter: str, store: VoteStore = Depends(get_store)):
        vote = votes_service.read_one(store, voter)
        if vote is None:
            return vote_not_found(voter)
        return JSONResponse(vote.model_dump())

    @router.patch("/{voter}", summary=f"Update the given sizes of a {context} vote")
    def patch_one(
        voter: str,
        payload: Optional[Dict[str, Any]] = Body(None),
        store: VoteStore = Depends(get_store),
    ):
        """Overwrite only the supplied sizes and return the whole vote, without its name."""
        partial = votes_service.build_vote(voter, payload or {}, full=False)
        vote = votes_service.patch(store, voter, partial)
        if vote is None:
            return vote_not_found(voter)
        return JSONResponse(vote.without_name())

    @router.put("/{voter}", summary=f"Create or replace a {context} vote")
    def put_one(
        voter: str,
        payload: Optional[Dict[str, Any]] = Body(None),
        store: VoteStore = Depends(get_store),
    ):
        """Replace the vote, nullifying missing sizes; 201 if created, 204 otherwise."""
        vote = votes_service.build_vote(voter, payload or {}, full=True)
        result = votes_service.create_or_replace(store, vote)
        return Response(status_code=201 if result.created else 204)

    return router


__all__ = ["make_votes_router"]
