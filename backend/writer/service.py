"""Content generation services behind the ai-writer and ai-image endpoints."""

from __future__ import annotations

import base64
import binascii
import re
import secrets
import string
import time
from typing import TYPE_CHECKING

import structlog

from shared.errors import RateLimited, UpstreamFailure
from writer.prompts import load_prompt_catalog
from writer.requests import parse_image_request, parse_text_request

if TYPE_CHECKING:
    from shared.auth.service import AdminAuthService
    from shared.ratelimit import RateLimiter
    from shared.storage import AssetStorage
    from writer.client import AIGatewayClient
    from writer.prompts import PromptCatalog

logger = structlog.get_logger()

IMAGE_RATE_LIMIT_KEY = "ai-image-generation"
GENERATED_ASSET_PREFIX = "ai-generated"

_DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")
_FILENAME_ALPHABET = string.ascii_lowercase + string.digits


def text_rate_limit_key(action: str) -> str:
    return f"ai-writer-{action}"


class TextGenerationService:
    def __init__(
        self,
        auth: AdminAuthService,
        client: AIGatewayClient,
        limiter: RateLimiter,
        catalog: PromptCatalog | None = None,
    ) -> None:
        self._auth = auth
        self._client = client
        self._limiter = limiter
        self._catalog = catalog or load_prompt_catalog()

    async def generate(self, body: object) -> str:
        """Validate, authorize, and rate-limit a text request, then return the generated text."""
        request = parse_text_request(body, self._catalog)
        self._auth.authorize_credentials(request.credentials)
        if not self._limiter.hit(text_rate_limit_key(request.action)):
            raise RateLimited

        system_prompt, user_prompt = self._catalog.render_text(request.action, request.content, request.context)
        logger.info("generating text", action=request.action, content_length=len(request.content))
        text = await self._client.complete_text(system_prompt, user_prompt)
        logger.info("generated text", action=request.action, length=len(text))
        return text


class ImageGenerationService:
    def __init__(
        self,
        auth: AdminAuthService,
        client: AIGatewayClient,
        limiter: RateLimiter,
        storage: AssetStorage,
        catalog: PromptCatalog | None = None,
    ) -> None:
        self._auth = auth
        self._client = client
        self._limiter = limiter
        self._storage = storage
        self._catalog = catalog or load_prompt_catalog()

    async def generate(self, body: object) -> str:
        """Generate a thumbnail, store it, and return its public URL."""
        request = parse_image_request(body, self._catalog)
        self._auth.authorize_credentials(request.credentials)
        if not self._limiter.hit(IMAGE_RATE_LIMIT_KEY):
            raise RateLimited

        prompt = self._catalog.build_image_prompt(
            request.title,
            request.category,
            request.style,
            request.image_type,
        )
        logger.info("generating image", image_type=request.image_type, style=request.style)
        data_url = await self._client.generate_image(prompt)
        content = decode_image_data_url(data_url)

        key = generated_asset_key()
        try:
            url = self._storage.save_asset(key, content, "image/png")
        except (OSError, ValueError) as e:
            logger.error("failed to store generated image", key=key, error=str(e))
            raise UpstreamFailure from e
        logger.info("stored generated image", key=key, size=len(content))
        return url


def decode_image_data_url(data_url: str) -> bytes:
    """Decode a ``data:image/...;base64,`` URL (or bare base64) into bytes."""
    try:
        content = base64.b64decode(_DATA_URL_PREFIX.sub("", data_url, count=1), validate=True)
    except (binascii.Error, ValueError) as e:
        logger.error("generated image is not valid base64")
        raise UpstreamFailure from e
    if not content:
        logger.error("generated image is empty")
        raise UpstreamFailure
    return content


def generated_asset_key() -> str:
    """Return a fresh ``ai-generated/{millis}-{random9}.png`` storage key."""
    suffix = "".join(secrets.choice(_FILENAME_ALPHABET) for _ in range(9))
    return f"{GENERATED_ASSET_PREFIX}/{int(time.time() * 1000)}-{suffix}.png"
