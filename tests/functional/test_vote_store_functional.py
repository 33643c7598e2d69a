"""Vote store reads, writes and the upsert decision, against SQLite."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import SQLAlchemyError

from spacing.errors import MissingRequiredFieldError, StoreError
from spacing.models.vote import Vote


def _count(store) -> int:
    return len(store.get_all())


def test_insert_then_get_round_trips(grid_store, vote):
    result = grid_store.insert(vote)

    assert result.created is True
    assert result.name == vote["name"]
    assert grid_store.get(vote["name"]).model_dump() == vote


def test_get_unknown_name_returns_none(grid_store):
    assert grid_store.get("nobody") is None
    assert grid_store.get(None) is None


def test_insert_accepts_models(grid_store, vote):
    grid_store.insert(Vote(**vote))

    assert grid_store.get(vote["name"]) == Vote(**vote)


def test_insert_without_name_raises_missing_required_field(grid_store, vote):
    del vote["name"]

    with pytest.raises(MissingRequiredFieldError):
        grid_store.insert(vote)
    assert _count(grid_store) == 0


def test_insert_with_null_name_raises_missing_required_field(grid_store):
    with pytest.raises(MissingRequiredFieldError):
        grid_store.insert(Vote(name=None, tiny="1em"))
    assert _count(grid_store) == 0


def test_duplicate_insert_is_a_store_error(grid_store, vote):
    grid_store.insert(vote)

    with pytest.raises(StoreError) as excinfo:
        grid_store.insert(vote)
    assert not isinstance(excinfo.value, MissingRequiredFieldError)


def test_store_errors_keep_the_engine_error(grid_store, vote):
    grid_store.insert(vote)

    with pytest.raises(StoreError) as excinfo:
        grid_store.insert(vote)
    assert isinstance(excinfo.value.__cause__, SQLAlchemyError)
    assert excinfo.value.original is excinfo.value.__cause__
    assert excinfo.value.message


def test_insert_unknown_column_is_a_store_error(grid_store):
    with pytest.raises(StoreError):
        grid_store.insert({"name": "Snorlo", "gigantic": "9em"})


def test_update_replaces_supplied_values(grid_store, vote):
    grid_store.insert(vote)
    vote["huge"] = "27em"

    result = grid_store.update(vote)

    assert result.created is False
    assert result.matched == 1
    assert grid_store.get(vote["name"]).model_dump() == vote


def test_update_only_touches_supplied_fields(grid_store, vote):
    grid_store.insert(vote)

    grid_store.update({"name": vote["name"], "huge": "2em"})

    stored = grid_store.get(vote["name"])
    assert stored.huge == "2em"
    assert (stored.tiny, stored.small, stored.medium, stored.large) == (
        vote["tiny"],
        vote["small"],
        vote["medium"],
        vote["large"],
    )


def test_update_with_partial_model_keeps_unset_fields(grid_store, vote):
    grid_store.insert(vote)

    grid_store.update(Vote(name=vote["name"], tiny="0.1ex"))

    stored = grid_store.get(vote["name"])
    assert stored.tiny == "0.1ex"
    assert stored.huge == vote["huge"]


def test_update_can_nullify_explicitly(grid_store, vote):
    grid_store.insert(vote)

    grid_store.update(Vote(name=vote["name"], large=None))

    assert grid_store.get(vote["name"]).large is None


def test_update_of_unknown_name_matches_nothing(grid_store):
    result = grid_store.update({"name": "ghost", "tiny": "1em"})

    assert result.created is False
    assert result.matched == 0
    assert grid_store.get("ghost") is None


def test_update_without_name_raises_before_writing(grid_store, vote):
    grid_store.insert(vote)

    with pytest.raises(StoreError) as excinfo:
        grid_store.update({"tiny": "5em"})
    assert isinstance(excinfo.value, MissingRequiredFieldError)
    assert grid_store.get(vote["name"]).tiny == vote["tiny"]


def test_update_with_no_sizes_reports_existence(grid_store, vote):
    grid_store.insert(vote)

    assert grid_store.update({"name": vote["name"]}).matched == 1
    assert grid_store.update({"name": "ghost"}).matched == 0


def test_replace_creates_then_updates(grid_store, vote):
    vote["name"] = "Flavìo"

    first = grid_store.replace(vote)
    vote["tiny"] = "0.001ex"
    second = grid_store.replace(vote)

    assert first.created is True
    assert second.created is False
    assert grid_store.get("Flavìo").tiny == "0.001ex"


def test_replace_without_name_is_a_store_error(grid_store, vote):
    del vote["name"]

    with pytest.raises(StoreError):
        grid_store.replace(vote)
    assert _count(grid_store) == 0


def test_get_all_lists_votes_by_name(grid_store, vote):
    grid_store.insert({**vote, "name": "b"})
    grid_store.insert({**vote, "name": "a"})

    assert [v.name for v in grid_store.get_all()] == ["a", "b"]


def test_contexts_do_not_share_votes(grid_store, table_store, vote):
    grid_store.insert(vote)

    assert table_store.get(vote["name"]) is None
    assert table_store.replace(vote).created is True
    assert grid_store.table_name == "grid_votes"
    assert table_store.table_name == "table_votes"
