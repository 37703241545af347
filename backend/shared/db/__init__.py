"""SQLite database layer: connection management and repository implementations."""

from shared.db.connection import Database
from shared.db.record_repository import SqliteRecordRepository

__all__ = [
    "Database",
    "SqliteRecordRepository",
]
