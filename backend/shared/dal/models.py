"""Record schemas for every content collection the portal stores.

Schemas describe the client-editable fields only. ``id``, ``created_at`` and
``updated_at`` are assigned by the repository and are never part of a payload.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RecordSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")


class NavigationItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    label: str
    href: str


class ProfileRecord(RecordSchema):
    name: str = Field(min_length=1)
    title: str = Field(min_length=1)
    bio: str | None = None
    email: str | None = None
    github: str | None = None
    linkedin: str | None = None
    photo_url: str | None = None
    # Free-form JSON blocks edited as lists of objects in the dashboard.
    skills: Any = None
    education: Any = None
    career: Any = None
    languages: Any = None
    memberships: Any = None


class ProjectRecord(RecordSchema):
    title: str = Field(min_length=1)
    subtitle: str | None = None
    description: str | None = None
    category: str | None = None
    tech_stack: list[str] | None = None
    image_url: str | None = None
    external_link: str | None = None
    github_link: str | None = None
    featured: bool | None = False
    published: bool | None = True
    sort_order: int | None = 0


class BookRecord(RecordSchema):
    title: str = Field(min_length=1)
    description: str | None = None
    cover_url: str | None = None
    external_link: str | None = None
    status: str | None = None
    published: bool | None = True
    sort_order: int | None = 0


class VideoRecord(RecordSchema):
    title: str = Field(min_length=1)
    description: str | None = None
    category: str | None = None
    embed_url: str | None = None
    thumbnail_url: str | None = None
    published: bool | None = True
    sort_order: int | None = 0


class CourseRecord(RecordSchema):
    title: str = Field(min_length=1)
    description: str | None = None
    category: str | None = None
    thumbnail_url: str | None = None
    external_link: str | None = None
    published: bool | None = True
    sort_order: int | None = 0


class SiteSettingsRecord(RecordSchema):
    site_title: str | None = None
    site_description: str | None = None
    og_image_url: str | None = None
    font_heading: str | None = None
    font_body: str | None = None
    navigation_items: list[NavigationItem] | None = None
    footer_tagline: str | None = None
    footer_availability: str | None = None
    footer_copyright: str | None = None
    footer_quick_links: list[NavigationItem] | None = None
    social_github: str | None = None
    social_linkedin: str | None = None
    social_twitter: str | None = None
    social_email: str | None = None
    location: str | None = None


class VerseRecord(RecordSchema):
    verse_text: str = Field(min_length=1)
    reference: str = Field(min_length=1)
    theme: str | None = None
    reflection: str | None = None
    is_active: bool = False
    display_date: str | None = None
    mode: str | None = None


class VerseSettingsRecord(RecordSchema):
    enabled: bool = True
    mode: str = "manual"
    show_reflection: bool = False
    placement: str = "homepage"


class AdminSettingRecord(RecordSchema):
    setting_key: str = Field(min_length=1)
    setting_value: str | None = None
