"""HTTP client for the upstream chat-completions gateway."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from shared.errors import ConfigurationError, UpstreamFailure, UpstreamQuotaExhausted, UpstreamRateLimited

if TYPE_CHECKING:
    from writer.settings import AISettings

logger = structlog.get_logger()


class AIGatewayClient:
    """Sends chat-completion requests and maps gateway failures onto the error taxonomy.

    The API key is checked on every call so a missing key surfaces as a
    configuration error at request time rather than at startup.
    """

    def __init__(self, settings: AISettings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._transport = transport

    async def complete_text(self, system_prompt: str, user_prompt: str) -> str:
        """Return the stripped reply text, or an empty string when the gateway sent none."""
        data = await self._post(
            {
                "model": self._settings.text_model,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                "max_tokens": self._settings.text_max_tokens,
                "temperature": self._settings.text_temperature,
            },
        )
        content = _first_message(data).get("content")
        return content.strip() if isinstance(content, str) else ""

    async def generate_image(self, prompt: str) -> str:
        """Return the inline ``data:`` URL of the first generated image."""
        data = await self._post(
            {
                "model": self._settings.image_model,
                "messages": [{"role": "user", "content": prompt}],
                "modalities": ["image", "text"],
            },
        )
        try:
            url = _first_message(data)["images"][0]["image_url"]["url"]
        except (KeyError, IndexError, TypeError) as e:
            logger.error("no image in gateway response")
            raise UpstreamFailure from e
        if not isinstance(url, str) or not url:
            logger.error("no image in gateway response")
            raise UpstreamFailure
        return url

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        if not self._settings.is_configured:
            logger.error("AI_API_KEY not configured")
            raise ConfigurationError("AI service not configured")

        headers = {"Authorization": f"Bearer {self._settings.api_key}"}
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.request_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self._settings.gateway_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error("AI gateway request failed", error_type=type(e).__name__)
            raise UpstreamFailure from e

        if response.status_code == HTTPStatus.TOO_MANY_REQUESTS:
            logger.warning("AI gateway rate limited", model=payload["model"])
            raise UpstreamRateLimited
        if response.status_code == HTTPStatus.PAYMENT_REQUIRED:
            logger.warning("AI gateway credits exhausted", model=payload["model"])
            raise UpstreamQuotaExhausted
        if response.is_error:
            logger.error("AI gateway error", status=response.status_code, model=payload["model"])
            raise UpstreamFailure

        try:
            data = response.json()
        except ValueError as e:
            logger.error("AI gateway returned invalid JSON", status=response.status_code)
            raise UpstreamFailure from e
        if not isinstance(data, dict):
            logger.error("AI gateway returned unexpected payload", payload_type=type(data).__name__)
            raise UpstreamFailure
        return data


def _first_message(data: dict[str, Any]) -> dict[str, Any]:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return {}
    message = choices[0].get("message")
    return message if isinstance(message, dict) else {}
