"""Async client for the portal's function endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx
import structlog

if TYPE_CHECKING:
    from console.settings import ConsoleSettings

logger = structlog.get_logger()

FUNCTIONS_PREFIX = "/functions/v1"


class ApiError(Exception):
    """A function endpoint answered with a non-2xx status (``status`` 0 for network failures)."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")


@dataclass
class VerifyResult:
    valid: bool
    token: str | None = None
    expires_at: float | None = None


class AdminApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: ConsoleSettings, transport: httpx.AsyncBaseTransport | None = None) -> AdminApiClient:
        return cls(settings.base_url, timeout=settings.request_timeout_seconds, transport=transport)

    # admin-auth

    async def verify(self, secret: str) -> VerifyResult:
        body = await self._call("admin-auth", {"action": "verify", "secret": secret})
        if not body.get("valid"):
            return VerifyResult(valid=False)
        return VerifyResult(valid=True, token=body.get("token"), expires_at=body.get("expires_at"))

    async def check(self, token: str) -> bool:
        body = await self._call("admin-auth", {"action": "check", "token": token})
        return bool(body.get("valid"))

    async def logout(self, token: str) -> bool:
        body = await self._call("admin-auth", {"action": "logout", "token": token})
        return bool(body.get("revoked"))

    # admin-data

    async def list_records(self, token: str, table: str) -> list[dict[str, Any]]:
        return await self._data(token, "list", table)

    async def get_record(self, token: str, table: str, record_id: str) -> dict[str, Any]:
        return await self._data(token, "get", table, id=record_id)

    async def create_record(self, token: str, table: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._data(token, "create", table, data=data)

    async def update_record(self, token: str, table: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._data(token, "update", table, id=record_id, data=data)

    async def delete_record(self, token: str, table: str, record_id: str) -> None:
        await self._data(token, "delete", table, id=record_id)

    # content generation

    async def generate_text(
        self,
        token: str,
        action: str,
        content: str,
        context: dict[str, Any] | None = None,
    ) -> str:
        body: dict[str, Any] = {"action": action, "content": content, "token": token}
        if context:
            body["context"] = context
        return (await self._call("ai-writer", body))["text"]

    async def generate_image(
        self,
        token: str,
        title: str,
        *,
        category: str | None = None,
        style: str | None = None,
        image_type: str | None = None,
    ) -> str:
        body: dict[str, Any] = {"title": title, "token": token}
        if category:
            body["category"] = category
        if style:
            body["style"] = style
        if image_type:
            body["type"] = image_type
        return (await self._call("ai-image", body))["url"]

    async def _data(self, token: str, action: str, table: str, **fields: Any) -> Any:  # noqa: ANN401
        body = {"action": action, "table": table, "token": token, **fields}
        return (await self._call("admin-data", body)).get("data")

    async def _call(self, function: str, body: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base_url}{FUNCTIONS_PREFIX}/{function}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(url, json=body)
        except httpx.HTTPError as e:
            logger.warning("function call failed", function=function, error_type=type(e).__name__)
            raise ApiError(0, f"Could not reach {function}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.is_error:
            message = payload.get("error") if isinstance(payload, dict) else None
            raise ApiError(response.status_code, message or response.reason_phrase)
        if not isinstance(payload, dict):
            raise ApiError(response.status_code, f"Unexpected response from {function}")
        return payload
