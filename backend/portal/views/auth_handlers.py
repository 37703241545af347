"""admin-auth function: verify the shared secret and manage signed admin tokens."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.responses import JSONResponse

from portal.views.common import read_json_body
from shared.auth.models import Role
from shared.errors import InvalidAction, ValidationError

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.auth.service import AdminAuthService

logger = structlog.get_logger()


def _string_field(body: dict, key: str) -> str:
    value = body.get(key)
    return value if isinstance(value, str) else ""


async def admin_auth(request: Request) -> JSONResponse:
    """POST /functions/v1/admin-auth - dispatch on ``action``.

    - ``verify``: ``{secret}`` -> ``{valid}``, plus ``{token, expires_at}`` when valid
    - ``check``: ``{token}`` -> ``{valid}``
    - ``logout``: ``{token}`` -> ``{revoked}``
    """
    auth_service: AdminAuthService = request.app.state.auth_service
    body = await read_json_body(request)
    if not isinstance(body, dict):
        raise ValidationError

    # Misconfiguration is reported before anything about the request is judged.
    auth_service.ensure_configured()

    action = body.get("action")
    if action == "verify":
        role = auth_service.verify_secret(_string_field(body, "secret"))
        if role != Role.OWNER:
            return JSONResponse({"valid": False})
        issued = auth_service.issue_token()
        return JSONResponse({"valid": True, "token": issued.token, "expires_at": issued.expires_at})

    if action == "check":
        role = auth_service.check_token(_string_field(body, "token"))
        return JSONResponse({"valid": role == Role.OWNER})

    if action == "logout":
        revoked = auth_service.revoke_token(_string_field(body, "token"))
        return JSONResponse({"revoked": revoked})

    raise InvalidAction
