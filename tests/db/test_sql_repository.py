"""Unit tests for src/db/sql_repository.py"""

from unittest.mock import patch

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.db.schema import DBKeyValue
from src.db.sql_repository import SQLKeyValueStore


def test_set_and_get_item(db_session_repo: Session) -> None:
    store = SQLKeyValueStore(db_session_repo)
    store.set_item("speedle.board.daily.2026-10-19", '{"answer": "apple"}')
    assert store.get_item("speedle.board.daily.2026-10-19") == '{"answer": "apple"}'


def test_get_unknown_key(db_session_repo: Session) -> None:
    """Should return None if the key does not match anything in the database."""
    store = SQLKeyValueStore(db_session_repo)
    assert store.get_item("nope") is None

    store.set_item("speedle.board.daily.2026-10-19", "{}")
    assert store.get_item("speedle.board.daily.2026-10-20") is None


def test_set_item_overwrites(db_session_repo: Session) -> None:
    """Second write to the same key replaces the value, no duplicate rows."""
    store = SQLKeyValueStore(db_session_repo)
    store.set_item("k", "first")
    store.set_item("k", "second")
    assert store.get_item("k") == "second"
    assert db_session_repo.scalar(select(func.count()).select_from(DBKeyValue)) == 1


def test_failed_commit_raises_repository_error(db_session_repo: Session) -> None:
    store = SQLKeyValueStore(db_session_repo)
    with patch.object(db_session_repo, "commit", side_effect=OperationalError("stmt", {}, Exception("disk full"))):
        with pytest.raises(RepositoryError):
            store.set_item("k", "value")


def test_failed_read_raises_repository_error(db_session_repo: Session) -> None:
    store = SQLKeyValueStore(db_session_repo)
    with patch.object(db_session_repo, "scalar", side_effect=OperationalError("stmt", {}, Exception("locked"))):
        with pytest.raises(RepositoryError):
            store.get_item("k")
        with pytest.raises(RepositoryError):
            store.set_item("k", "value")


def test_missing_table_raises_repository_error() -> None:
    """An engine whose tables were never created."""
    bare_engine = create_engine("sqlite:///:memory:")
    with Session(bare_engine) as db:
        store = SQLKeyValueStore(db)
        with pytest.raises(RepositoryError):
            store.get_item("speedle.board.daily.2026-10-19")
