"""Request-body validation for the content generation endpoints.

Checks run in a fixed order: body shape, credential presence, then the
individual fields. Nothing here touches auth, rate limits, or the network.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from shared.auth.credentials import Credentials, credentials_from_body
from shared.errors import InvalidAction, ValidationError
from writer.prompts import DEFAULT_IMAGE_STYLE, DEFAULT_IMAGE_TYPE

if TYPE_CHECKING:
    from writer.prompts import PromptCatalog

MAX_CONTENT_CHARS = 10_000
MAX_TITLE_CHARS = 500


@dataclass
class TextRequest:
    action: str
    content: str
    credentials: Credentials
    context: dict[str, Any] = field(default_factory=dict)


@dataclass
class ImageRequest:
    title: str
    credentials: Credentials
    category: str | None = None
    style: str = DEFAULT_IMAGE_STYLE
    image_type: str = DEFAULT_IMAGE_TYPE


def parse_text_request(body: object, catalog: PromptCatalog) -> TextRequest:
    if not isinstance(body, dict):
        raise ValidationError
    credentials = _require_credentials(body)

    action = body.get("action")
    if not action or not isinstance(action, str):
        raise ValidationError("Action is required")

    content = body.get("content")
    if not content or not isinstance(content, str):
        raise ValidationError("Content is required")
    if len(content) > MAX_CONTENT_CHARS:
        raise ValidationError(f"Content too long (max {MAX_CONTENT_CHARS} characters)")

    if action not in catalog.text_actions:
        raise InvalidAction

    context = body.get("context")
    if context is None:
        context = {}
    elif not isinstance(context, dict):
        raise ValidationError("Context must be an object")

    return TextRequest(action=action, content=content, credentials=credentials, context=context)


def parse_image_request(body: object, catalog: PromptCatalog) -> ImageRequest:
    if not isinstance(body, dict):
        raise ValidationError
    credentials = _require_credentials(body)

    title = body.get("title")
    if not title or not isinstance(title, str):
        raise ValidationError("Title is required")
    if len(title) > MAX_TITLE_CHARS:
        raise ValidationError(f"Title too long (max {MAX_TITLE_CHARS} characters)")

    style = body.get("style") or DEFAULT_IMAGE_STYLE
    if not isinstance(style, str) or style not in catalog.image_styles:
        raise ValidationError("Invalid style")

    image_type = body.get("type") or DEFAULT_IMAGE_TYPE
    if not isinstance(image_type, str) or image_type not in catalog.image_types:
        raise ValidationError("Invalid type")

    category = body.get("category")
    if category is not None and not isinstance(category, str):
        raise ValidationError("Invalid category")

    return ImageRequest(
        title=title,
        credentials=credentials,
        category=category or None,
        style=style,
        image_type=image_type,
    )


def _require_credentials(body: dict) -> Credentials:
    credentials = credentials_from_body(body)
    if not credentials.present:
        raise ValidationError("Admin authentication required")
    return credentials
