"""Data proxy: privileged CRUD over the registered content collections.

The proxy holds the only handle on the record repository that accepts
writes. Every call re-authorizes the caller's credentials before the
collection, action, or payload is even looked at, so an unauthorized caller
learns nothing about which collections exist.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

import structlog

from shared.auth.credentials import credentials_from_body
from shared.dal.collections import get_collection, validate_create, validate_update
from shared.errors import InvalidAction, NotFound, Unauthorized, ValidationError

if TYPE_CHECKING:
    from shared.auth.service import AdminAuthService
    from shared.dal.collections import Collection
    from shared.dal.record_repository import Record, RecordRepository

logger = structlog.get_logger()

# Longest caller-supplied name echoed into the audit log.
_MAX_LOGGED_NAME = 64


class ProxyAction(StrEnum):
    LIST = "list"
    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class DataProxy:
    def __init__(self, auth: AdminAuthService, repository: RecordRepository) -> None:
        self._auth = auth
        self._repository = repository

    async def execute(self, body: object) -> Record | list[Record] | None:
        """Run one proxy request and return the value for the ``data`` field.

        Raises Unauthorized, InvalidResource, InvalidAction, ValidationError,
        or NotFound; see ``shared.errors``.
        """
        if not isinstance(body, dict):
            raise ValidationError

        try:
            self._auth.authorize_credentials(credentials_from_body(body))
        except Unauthorized:
            logger.warning("unauthorized data proxy call", table=_loggable(body.get("table")))
            raise

        collection = get_collection(body.get("table"))
        action = _parse_action(body.get("action"))
        log = logger.bind(action=action.value, table=collection.name)

        if action == ProxyAction.LIST:
            records = await self._repository.list_records(collection.name)
            log.info("data proxy call", count=len(records))
            return records
        if action == ProxyAction.CREATE:
            data = validate_create(collection, body.get("data"))
            log.info("data proxy call", fields=sorted(data))
            return await self._repository.create_record(collection.name, data)

        record_id = _parse_id(body.get("id"))
        log = log.bind(record_id=record_id)
        if action == ProxyAction.GET:
            log.info("data proxy call")
            return await self._get(collection, record_id)
        if action == ProxyAction.UPDATE:
            data = validate_update(collection, body.get("data"))
            log.info("data proxy call", fields=sorted(data))
            return await self._update(collection, record_id, data)
        log.info("data proxy call")
        await self._delete(collection, record_id)
        return None

    async def _get(self, collection: Collection, record_id: str) -> Record:
        record = await self._repository.get_record(collection.name, record_id)
        if record is None:
            raise NotFound
        return record

    async def _update(self, collection: Collection, record_id: str, data: dict[str, Any]) -> Record:
        record = await self._repository.update_record(collection.name, record_id, data)
        if record is None:
            raise NotFound
        return record

    async def _delete(self, collection: Collection, record_id: str) -> None:
        if not await self._repository.delete_record(collection.name, record_id):
            raise NotFound


def _parse_action(value: object) -> ProxyAction:
    try:
        return ProxyAction(value)
    except ValueError as e:
        raise InvalidAction from e


def _parse_id(value: object) -> str:
    if not value or not isinstance(value, str):
        raise ValidationError("Record id is required")
    return value


def _loggable(value: object) -> str | None:
    return value[:_MAX_LOGGED_NAME] if isinstance(value, str) else None
