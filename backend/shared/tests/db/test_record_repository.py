"""Tests for SqliteRecordRepository."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from shared.db.connection import Database
from shared.db.record_repository import SqliteRecordRepository
from shared.errors import InvalidResource

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def repo(tmp_path: Path):
    db = Database(tmp_path / "content.db")
    db.connect()
    yield SqliteRecordRepository(db)
    db.close()


class TestCreateAndRead:
    async def test_create_assigns_id_and_timestamps(self, repo: SqliteRecordRepository) -> None:
        record = await repo.create_record("projects", {"title": "X"})

        assert record["id"]
        assert record["title"] == "X"
        assert record["created_at"] == record["updated_at"]

    async def test_get_returns_created_record(self, repo: SqliteRecordRepository) -> None:
        created = await repo.create_record("books", {"title": "Dune", "status": "reading"})

        fetched = await repo.get_record("books", created["id"])

        assert fetched == created

    async def test_get_unknown_id_returns_none(self, repo: SqliteRecordRepository) -> None:
        assert await repo.get_record("books", "missing") is None

    async def test_list_is_newest_first(self, repo: SqliteRecordRepository) -> None:
        first = await repo.create_record("videos", {"title": "one"})
        second = await repo.create_record("videos", {"title": "two"})
        third = await repo.create_record("videos", {"title": "three"})

        ids = [r["id"] for r in await repo.list_records("videos")]

        assert ids == [third["id"], second["id"], first["id"]]

    async def test_collections_are_isolated(self, repo: SqliteRecordRepository) -> None:
        await repo.create_record("projects", {"title": "X"})
        assert await repo.list_records("books") == []


class TestUpdate:
    async def test_merges_fields_and_bumps_updated_at(self, repo: SqliteRecordRepository) -> None:
        created = await repo.create_record("projects", {"title": "X", "description": "old"})

        updated = await repo.update_record("projects", created["id"], {"description": "new"})

        assert updated is not None
        assert updated["title"] == "X"
        assert updated["description"] == "new"
        assert updated["created_at"] == created["created_at"]
        assert updated["updated_at"] >= created["updated_at"]
        assert await repo.get_record("projects", created["id"]) == updated

    async def test_unknown_id_returns_none(self, repo: SqliteRecordRepository) -> None:
        assert await repo.update_record("projects", "missing", {"title": "Y"}) is None

    async def test_last_write_wins(self, repo: SqliteRecordRepository) -> None:
        created = await repo.create_record("projects", {"title": "X"})

        await repo.update_record("projects", created["id"], {"title": "A"})
        await repo.update_record("projects", created["id"], {"title": "B"})

        record = await repo.get_record("projects", created["id"])
        assert record is not None
        assert record["title"] == "B"


class TestDelete:
    async def test_removes_record(self, repo: SqliteRecordRepository) -> None:
        created = await repo.create_record("projects", {"title": "X"})

        assert await repo.delete_record("projects", created["id"]) is True
        assert await repo.get_record("projects", created["id"]) is None

    async def test_unknown_id_returns_false(self, repo: SqliteRecordRepository) -> None:
        assert await repo.delete_record("projects", "missing") is False


class TestAllowList:
    @pytest.mark.parametrize("name", ["users", "projects; DROP TABLE books", "sqlite_master"])
    async def test_unregistered_collection_rejected(self, repo: SqliteRecordRepository, name: str) -> None:
        with pytest.raises(InvalidResource):
            await repo.list_records(name)
