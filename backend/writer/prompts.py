"""Prompt catalog for text and thumbnail generation.

Templates are data: they live in ``prompts.yaml`` beside this module and are
loaded once per process. The catalog also defines which text actions, image
styles, and image types a request may name.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "prompts.yaml"

DEFAULT_IMAGE_STYLE = "professional"
DEFAULT_IMAGE_TYPE = "project"

MAX_PROMPT_TITLE_CHARS = 200
MAX_PROMPT_CATEGORY_CHARS = 100

# Characters a caller could use to fake template or markup structure inside the image prompt.
_PROMPT_UNSAFE_CHARS = re.compile(r"[<>{}\[\]]")

_ASPECT_RATIOS = {
    "video": "16:9 aspect ratio",
    "course": "16:9 aspect ratio",
    "book": "3:4 portrait",
}


@dataclass(frozen=True)
class TextTemplate:
    system: str
    user: str
    default_type: str = "this item"
    context_lines: dict[str, str] = field(default_factory=dict)

    def render(self, content: str, context: dict[str, Any]) -> tuple[str, str]:
        """Return the (system, user) prompt pair for ``content``."""
        item_type = context.get("type") or self.default_type
        lines = [self.user.format(content=content, type=item_type)]
        for key, line in self.context_lines.items():
            value = context.get(key)
            if value:
                lines.append(line.format(value=value))
        return self.system, "\n".join(lines)


@dataclass(frozen=True)
class PromptCatalog:
    text_actions: dict[str, TextTemplate]
    image_styles: dict[str, str]
    image_types: dict[str, str]

    def render_text(self, action: str, content: str, context: dict[str, Any]) -> tuple[str, str]:
        return self.text_actions[action].render(content, context)

    def build_image_prompt(self, title: str, category: str | None, style: str, image_type: str) -> str:
        """Compose the thumbnail prompt.

        Title and category are stripped of bracket characters and truncated
        before they are spliced in.
        """
        aspect = _ASPECT_RATIOS.get(image_type, "square")
        prompt = (
            f"Create a {aspect} thumbnail image for a {self.image_types[image_type]} "
            f'titled "{sanitize_prompt_text(title, MAX_PROMPT_TITLE_CHARS)}".'
        )
        if category:
            prompt += f" The category is {sanitize_prompt_text(category, MAX_PROMPT_CATEGORY_CHARS)}."
        prompt += (
            f" Style: {self.image_styles[style]}. The image should be portfolio-safe, clean, and professional."
            " Do not include any text or words in the image - it should be purely visual/abstract."
            " Ultra high resolution."
        )
        return prompt


def sanitize_prompt_text(value: str, max_chars: int) -> str:
    return _PROMPT_UNSAFE_CHARS.sub("", value)[:max_chars]


@functools.cache
def load_prompt_catalog(path: Path = DEFAULT_CATALOG_PATH) -> PromptCatalog:
    """Load and check the prompt catalog. Raises ValueError on a malformed file."""
    with path.open(encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Prompt catalog {path} must be a mapping")

    actions = raw.get("text_actions")
    if not isinstance(actions, dict) or not actions:
        raise ValueError(f"Prompt catalog {path} has no text_actions")

    text_actions: dict[str, TextTemplate] = {}
    for name, entry in actions.items():
        if not isinstance(entry, dict) or not all(isinstance(entry.get(k), str) for k in ("system", "user")):
            raise ValueError(f"Text action '{name}' needs string 'system' and 'user' templates")
        text_actions[name] = TextTemplate(
            system=entry["system"],
            user=entry["user"],
            default_type=entry.get("default_type", "this item"),
            context_lines=dict(entry.get("context_lines") or {}),
        )

    image_styles = _string_map(raw, "image_styles", path)
    image_types = _string_map(raw, "image_types", path)
    if DEFAULT_IMAGE_STYLE not in image_styles or DEFAULT_IMAGE_TYPE not in image_types:
        raise ValueError(f"Prompt catalog {path} is missing the default image style or type")

    return PromptCatalog(text_actions=text_actions, image_styles=image_styles, image_types=image_types)


def _string_map(raw: dict, key: str, path: Path) -> dict[str, str]:
    value = raw.get(key)
    if not isinstance(value, dict) or not all(isinstance(v, str) for v in value.values()):
        raise ValueError(f"Prompt catalog {path}: '{key}' must map names to strings")
    return {str(k): v for k, v in value.items()}
