"""Abstract interface for content record persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

Record = dict[str, Any]


class RecordRepository(ABC):
    """Abstract interface for schema-light record collections.

    Records are flat maps that always carry ``id``, ``created_at`` and
    ``updated_at``. Implementations can use SQLite, PostgreSQL, etc.
    """

    @abstractmethod
    async def list_records(self, collection: str) -> list[Record]:
        """Return every record in the collection, newest first."""

    @abstractmethod
    async def get_record(self, collection: str, record_id: str) -> Record | None: ...

    @abstractmethod
    async def create_record(self, collection: str, data: dict[str, Any]) -> Record:
        """Insert a record with a server-assigned id and return it."""

    @abstractmethod
    async def update_record(self, collection: str, record_id: str, data: dict[str, Any]) -> Record | None:
        """Merge ``data`` into the record. Return None when the id does not exist."""

    @abstractmethod
    async def delete_record(self, collection: str, record_id: str) -> bool:
        """Remove the record. Return False when the id does not exist."""
