"""Unit tests for DataProxy against a real SQLite repository."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from portal.proxy.service import DataProxy, ProxyAction
from shared.auth.service import AdminAuthService
from shared.auth.settings import AuthSettings
from shared.db.connection import Database
from shared.db.record_repository import SqliteRecordRepository
from shared.errors import (
    ConfigurationError,
    InvalidAction,
    InvalidResource,
    NotFound,
    Unauthorized,
    ValidationError,
)

if TYPE_CHECKING:
    from pathlib import Path

SECRET = "proxy-secret"


@pytest.fixture
def proxy(tmp_path: Path):
    db = Database(tmp_path / "proxy.db")
    db.connect()
    yield DataProxy(AdminAuthService(AuthSettings(secret=SECRET)), SqliteRecordRepository(db))
    db.close()


class TestDispatch:
    async def test_full_crud_cycle(self, proxy):
        created = await proxy.execute({"action": "create", "table": "courses", "data": {"title": "ML"}, "secret": SECRET})
        record_id = created["id"]

        fetched = await proxy.execute({"action": "get", "table": "courses", "id": record_id, "secret": SECRET})
        assert fetched == created

        updated = await proxy.execute(
            {"action": "update", "table": "courses", "id": record_id, "data": {"category": "AI"}, "secret": SECRET},
        )
        assert updated["title"] == "ML"
        assert updated["category"] == "AI"

        assert await proxy.execute({"action": "delete", "table": "courses", "id": record_id, "secret": SECRET}) is None

        with pytest.raises(NotFound):
            await proxy.execute({"action": "get", "table": "courses", "id": record_id, "secret": SECRET})

    async def test_delete_missing_is_not_found(self, proxy):
        with pytest.raises(NotFound):
            await proxy.execute({"action": "delete", "table": "courses", "id": "missing", "secret": SECRET})

    def test_action_enum(self):
        assert {a.value for a in ProxyAction} == {"list", "get", "create", "update", "delete"}


class TestCheckOrder:
    async def test_authorization_before_table(self, proxy):
        with pytest.raises(Unauthorized):
            await proxy.execute({"action": "list", "table": "nope", "secret": "wrong"})

    async def test_table_before_action(self, proxy):
        with pytest.raises(InvalidResource):
            await proxy.execute({"action": "nope", "table": "nope", "secret": SECRET})

    async def test_invalid_action(self, proxy):
        with pytest.raises(InvalidAction):
            await proxy.execute({"action": ["list"], "table": "projects", "secret": SECRET})

    async def test_non_object_body(self, proxy):
        with pytest.raises(ValidationError):
            await proxy.execute("list projects")

    async def test_update_requires_data(self, proxy):
        with pytest.raises(ValidationError):
            await proxy.execute({"action": "update", "table": "projects", "id": "x", "secret": SECRET})

    async def test_unconfigured(self, tmp_path):
        db = Database(tmp_path / "unconfigured.db")
        db.connect()
        proxy = DataProxy(AdminAuthService(AuthSettings(secret="")), SqliteRecordRepository(db))
        with pytest.raises(ConfigurationError):
            await proxy.execute({"action": "list", "table": "projects", "secret": "x"})
        db.close()
