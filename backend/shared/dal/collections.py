"""Registry of content collections: the single allow-list for privileged and public access.

Every table the data proxy may touch, every table the public read API may
serve, and every table the database creates comes from ``COLLECTIONS``.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any

import pydantic
from pydantic import ConfigDict, create_model

from shared.dal.models import (
    AdminSettingRecord,
    BookRecord,
    CourseRecord,
    ProfileRecord,
    ProjectRecord,
    SiteSettingsRecord,
    VerseRecord,
    VerseSettingsRecord,
    VideoRecord,
)
from shared.errors import InvalidResource, ValidationError

if TYPE_CHECKING:
    from shared.dal.models import RecordSchema

# Assigned by the repository; dashboards echo them back in update payloads.
SERVER_MANAGED_FIELDS = frozenset({"id", "created_at", "updated_at"})


@dataclass(frozen=True)
class Collection:
    name: str
    schema: type[RecordSchema]
    public: bool = False  # readable through the public API without the secret


COLLECTIONS: dict[str, Collection] = {
    c.name: c
    for c in (
        Collection("profile", ProfileRecord, public=True),
        Collection("projects", ProjectRecord, public=True),
        Collection("books", BookRecord, public=True),
        Collection("videos", VideoRecord, public=True),
        Collection("courses", CourseRecord, public=True),
        Collection("site_settings", SiteSettingsRecord),
        Collection("verses", VerseRecord),
        Collection("verse_settings", VerseSettingsRecord),
        Collection("admin_settings", AdminSettingRecord),
    )
}


def get_collection(name: object) -> Collection:
    """Look up a registered collection. Raises InvalidResource for anything else."""
    if not isinstance(name, str) or name not in COLLECTIONS:
        raise InvalidResource
    return COLLECTIONS[name]


def validate_create(collection: Collection, data: object) -> dict[str, Any]:
    """Validate a full record payload and return the fields to store."""
    payload = _strip_server_fields(collection, data)
    try:
        record = collection.schema.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(_describe(collection, e)) from e
    return record.model_dump(mode="json")


def validate_update(collection: Collection, data: object) -> dict[str, Any]:
    """Validate a partial record payload and return only the fields the caller sent."""
    payload = _strip_server_fields(collection, data)
    if not payload:
        raise ValidationError("Update payload must contain at least one field")
    try:
        record = _partial_schema(collection.schema).model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(_describe(collection, e)) from e
    return record.model_dump(mode="json", exclude_unset=True)


def _strip_server_fields(collection: Collection, data: object) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError(f"Record payload for {collection.name} must be an object")
    return {k: v for k, v in data.items() if k not in SERVER_MANAGED_FIELDS}


@functools.cache
def _partial_schema(schema: type[RecordSchema]) -> type[pydantic.BaseModel]:
    """Build a variant of ``schema`` where every field may be omitted (but not nulled if non-nullable)."""
    fields: dict[str, Any] = {}
    for name, info in schema.model_fields.items():
        annotation = Annotated[(info.annotation, *info.metadata)] if info.metadata else info.annotation
        fields[name] = (annotation, None)
    return create_model(f"{schema.__name__}Patch", __config__=ConfigDict(extra="forbid"), **fields)


def _describe(collection: Collection, exc: pydantic.ValidationError) -> str:
    """Summarize schema errors by field location, without echoing submitted values."""
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"]) or "record"
        problems.append(f"{location}: {err['msg']}")
    return f"Invalid {collection.name} record: " + "; ".join(problems)
