"""Tests for AIGatewayClient against a mocked gateway."""

import json

import httpx
import pytest

from shared.errors import ConfigurationError, UpstreamFailure, UpstreamQuotaExhausted, UpstreamRateLimited
from writer.client import AIGatewayClient
from writer.settings import AISettings

API_KEY = "test-api-key"


def _settings(**overrides) -> AISettings:
    return AISettings(api_key=API_KEY, **overrides)


def _client(handler, **overrides) -> AIGatewayClient:
    return AIGatewayClient(_settings(**overrides), transport=httpx.MockTransport(handler))


def _text_reply(content):
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


class TestCompleteText:
    async def test_sends_chat_completion_request(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return _text_reply("  polished text \n")

        text = await _client(handler).complete_text("system prompt", "user prompt")

        assert text == "polished text"
        assert captured["url"] == "https://ai.gateway.lovable.dev/v1/chat/completions"
        assert captured["auth"] == f"Bearer {API_KEY}"
        assert captured["body"] == {
            "model": "google/gemini-3-flash-preview",
            "messages": [
                {"role": "system", "content": "system prompt"},
                {"role": "user", "content": "user prompt"},
            ],
            "max_tokens": 500,
            "temperature": 0.7,
        }

    async def test_missing_reply_is_empty_text(self):
        text = await _client(lambda _r: httpx.Response(200, json={"choices": []})).complete_text("s", "u")
        assert text == ""

    async def test_missing_api_key_is_configuration_error(self):
        def handler(_request):
            raise AssertionError("gateway must not be called")

        client = AIGatewayClient(AISettings(api_key=""), transport=httpx.MockTransport(handler))
        with pytest.raises(ConfigurationError):
            await client.complete_text("s", "u")

    @pytest.mark.parametrize(
        ("status", "error"),
        [
            (429, UpstreamRateLimited),
            (402, UpstreamQuotaExhausted),
            (500, UpstreamFailure),
            (401, UpstreamFailure),
        ],
    )
    async def test_gateway_status_mapping(self, status, error):
        with pytest.raises(error):
            await _client(lambda _r: httpx.Response(status, text="upstream detail")).complete_text("s", "u")

    async def test_upstream_detail_not_in_public_message(self):
        with pytest.raises(UpstreamFailure) as exc_info:
            await _client(lambda _r: httpx.Response(500, text="stack trace here")).complete_text("s", "u")
        assert exc_info.value.public_message == "Service temporarily unavailable"

    async def test_network_error_is_upstream_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(UpstreamFailure):
            await _client(handler).complete_text("s", "u")

    async def test_invalid_json_is_upstream_failure(self):
        with pytest.raises(UpstreamFailure):
            await _client(lambda _r: httpx.Response(200, text="not json")).complete_text("s", "u")


class TestGenerateImage:
    async def test_returns_data_url_and_requests_image_modality(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"choices": [{"message": {"images": [{"image_url": {"url": "data:image/png;base64,AAAA"}}]}}]},
            )

        url = await _client(handler).generate_image("draw a thing")

        assert url == "data:image/png;base64,AAAA"
        assert captured["body"]["model"] == "google/gemini-2.5-flash-image"
        assert captured["body"]["modalities"] == ["image", "text"]
        assert captured["body"]["messages"] == [{"role": "user", "content": "draw a thing"}]

    async def test_missing_image_is_upstream_failure(self):
        with pytest.raises(UpstreamFailure):
            await _client(lambda _r: _text_reply("sorry, text only")).generate_image("p")
