"""ASGI middleware for the portal server."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

# Every response is JSON or a stored image; nothing here should load scripts or be framed.
SECURITY_HEADERS: list[tuple[bytes, bytes]] = [
    (b"x-content-type-options", b"nosniff"),
    (b"x-frame-options", b"DENY"),
    (b"referrer-policy", b"no-referrer"),
    (b"content-security-policy", b"default-src 'none'; img-src 'self'; frame-ancestors 'none'"),
]

_NO_STORE = (b"cache-control", b"no-store")
_FUNCTIONS_PREFIX = "/functions/"


class SecurityHeadersMiddleware:
    """Inject security headers into every HTTP response.

    Function endpoints also get ``Cache-Control: no-store`` since their
    responses can carry admin tokens and unpublished records.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        extra_headers = list(SECURITY_HEADERS)
        if scope["path"].startswith(_FUNCTIONS_PREFIX):
            extra_headers.append(_NO_STORE)

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.extend(extra_headers)
                message["headers"] = headers
            await send(message)

        await self.app(scope, receive, send_with_headers)


class SlashNormalizationMiddleware:
    """Strip trailing slashes so that /path/ is handled the same as /path.

    Starlette would otherwise answer the trailing-slash variant with a 307
    redirect, which cross-origin callers see as a failed preflight.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            path: str = scope["path"]
            if len(path) > 1 and path.endswith("/"):
                scope["path"] = path.rstrip("/")
        await self.app(scope, receive, send)
