"""Read-only views of published content for the public site."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from shared.dal.collections import get_collection
from shared.errors import InvalidResource

if TYPE_CHECKING:
    from shared.dal.record_repository import Record, RecordRepository

DEFAULT_SITE_SETTINGS: dict[str, Any] = {
    "site_title": "Portfolio",
    "site_description": "Projects, writing, and talks.",
    "og_image_url": None,
    "font_heading": "Inter",
    "font_body": "Inter",
    "navigation_items": [
        {"label": "Home", "href": "#home"},
        {"label": "Projects", "href": "#projects"},
        {"label": "About", "href": "#about"},
        {"label": "Contact", "href": "#contact"},
    ],
    "footer_tagline": "",
    "footer_availability": "Available for freelance projects",
    "footer_copyright": "All rights reserved.",
    "footer_quick_links": [
        {"label": "Projects", "href": "#projects"},
        {"label": "About", "href": "#about"},
        {"label": "Contact", "href": "#contact"},
    ],
    "social_github": None,
    "social_linkedin": None,
    "social_twitter": None,
    "social_email": None,
    "location": "",
}

_LIST_SETTINGS = ("navigation_items", "footer_quick_links")

VERSE_PLACEMENTS = frozenset({"homepage", "footer"})


class PublicContentService:
    def __init__(self, repository: RecordRepository) -> None:
        self._repository = repository

    async def list_published(self, name: str) -> list[Record]:
        """Published records of a public collection, by ``sort_order`` then newest first."""
        collection = get_collection(name)
        if not collection.public:
            raise InvalidResource
        records = await self._repository.list_records(collection.name)
        # list_records is newest first and sort is stable.
        published = [r for r in records if r.get("published") is not False]
        return sorted(published, key=_sort_order)

    async def site_settings(self) -> dict[str, Any]:
        """The stored settings row merged over the defaults."""
        settings = copy.deepcopy(DEFAULT_SITE_SETTINGS)
        row = await self._first("site_settings")
        if row is None:
            return settings
        for key, value in row.items():
            if key in _LIST_SETTINGS and not isinstance(value, list):
                continue
            # Unset fields are stored as null; they must not blank a default.
            if value is None and settings.get(key) is not None:
                continue
            settings[key] = value
        return settings

    async def verse_of_the_day(self, placement: str) -> dict[str, Any] | None:
        """The active verse for ``placement``, or None when the widget should not render."""
        settings = await self._first("verse_settings") or {}
        enabled = settings.get("enabled", True)
        configured_placement = settings.get("placement") or "homepage"
        if not enabled or configured_placement != placement:
            return None

        verses = await self._repository.list_records("verses")
        active = next((v for v in verses if v.get("is_active") is True), None)
        if active is None:
            return None

        verse = {"verse_text": active.get("verse_text"), "reference": active.get("reference")}
        if settings.get("show_reflection", False) and active.get("reflection"):
            verse["reflection"] = active["reflection"]
        return verse

    async def _first(self, name: str) -> Record | None:
        records = await self._repository.list_records(name)
        return records[0] if records else None


def _sort_order(record: Record) -> int:
    value = record.get("sort_order")
    return value if isinstance(value, int) and not isinstance(value, bool) else 0
