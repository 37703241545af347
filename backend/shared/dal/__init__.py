"""Data access layer: collection registry, record schemas, and repository interface."""

from shared.dal.collections import COLLECTIONS, Collection, get_collection, validate_create, validate_update
from shared.dal.record_repository import Record, RecordRepository

__all__ = [
    "COLLECTIONS",
    "Collection",
    "Record",
    "RecordRepository",
    "get_collection",
    "validate_create",
    "validate_update",
]
