"""Request helpers shared by the portal handlers."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from shared.errors import ValidationError

if TYPE_CHECKING:
    from starlette.requests import Request


async def read_json_body(request: Request) -> object:
    """Decode the JSON body. Shape checks are left to the service that consumes it."""
    try:
        return await request.json()
    except (ValueError, json.JSONDecodeError) as e:
        raise ValidationError from e
