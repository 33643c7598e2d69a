"""Core vote operations used by the HTTP layer."""

from __future__ import annotations

import pytest

from spacing.errors import ValidationError
from spacing.logic import votes_service
from spacing.models.vote import SIZES


def test_build_full_vote_nullifies_missing_sizes():
    vote = votes_service.build_vote("Bany", {"tiny": "1em"}, full=True)

    assert vote.name == "Bany"
    assert vote.to_row(partial=True) == {
        "name": "Bany",
        "tiny": "1em",
        "small": None,
        "medium": None,
        "large": None,
        "huge": None,
    }


def test_build_partial_vote_keeps_only_supplied_sizes():
    vote = votes_service.build_vote("Bany", {"large": "0.7em", "tiny": "0.2em"}, full=False)

    assert vote.to_row(partial=True) == {"name": "Bany", "large": "0.7em", "tiny": "0.2em"}


def test_payload_name_is_ignored():
    vote = votes_service.build_vote("Bany", {"name": "Mallory", "tiny": "1em"}, full=False)

    assert vote.name == "Bany"


def test_invalid_sizes_raise_validation_error():
    with pytest.raises(ValidationError) as excinfo:
        votes_service.build_vote("Bany", {"tiny": "1em", "medium": "10"}, full=True)

    assert excinfo.value.invalid_sizes == ["medium"]
    assert excinfo.value.unknown_fields == []


def test_unknown_keys_raise_validation_error():
    with pytest.raises(ValidationError) as excinfo:
        votes_service.build_vote("Bany", {"gigantic": "9em"}, full=True)

    assert excinfo.value.invalid_sizes == []
    assert excinfo.value.unknown_fields == ["gigantic"]


def test_create_or_replace_reports_creation(grid_store, vote):
    full = votes_service.build_vote(vote["name"], vote, full=True)

    assert votes_service.create_or_replace(grid_store, full).created is True
    assert votes_service.create_or_replace(grid_store, full).created is False


def test_replace_nullifies_sizes_left_out(grid_store, vote):
    grid_store.insert(vote)
    del vote["large"]

    votes_service.create_or_replace(grid_store, votes_service.build_vote(vote["name"], vote, full=True))

    assert votes_service.read_one(grid_store, vote["name"]).large is None


def test_patch_returns_merged_vote(grid_store, vote):
    grid_store.insert(vote)
    partial = votes_service.build_vote(vote["name"], {"tiny": "0.2em", "large": "0.7em"}, full=False)

    patched = votes_service.patch(grid_store, vote["name"], partial)

    assert patched.model_dump() == {**vote, "tiny": "0.2em", "large": "0.7em"}


def test_patch_of_unknown_voter_returns_none_without_writing(grid_store):
    partial = votes_service.build_vote("ghost", {"tiny": "1em"}, full=False)

    assert votes_service.patch(grid_store, "ghost", partial) is None
    assert votes_service.read_one(grid_store, "ghost") is None


def test_patch_with_no_sizes_returns_current_vote(grid_store, vote):
    grid_store.insert(vote)

    patched = votes_service.patch(grid_store, vote["name"], votes_service.build_vote(vote["name"], {}, full=False))

    assert patched.model_dump() == vote


def test_read_aggregate_covers_all_sizes(grid_store, vote):
    grid_store.insert(vote)

    assert [g.size for g in votes_service.read_aggregate(grid_store)] == list(SIZES)
