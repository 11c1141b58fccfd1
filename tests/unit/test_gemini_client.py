"""Unit tests for the Gemini REST client.

Tests cover:
- Request shape (headers, URL, text and inline image parts)
- Error classification (config, transport, API envelope, empty response)
- Model listing
"""

import asyncio
import base64
import json

import aiohttp
import pytest

from cookbook.ai.gemini_client import GeminiClient, api_error_from_body, build_generate_request
from cookbook.errors import APIError, ConfigError, EmptyResponseError, TransportError
from cookbook.utils.config import Config


PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF"


def success_body(text: str) -> str:
    return json.dumps({"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]})


class FakeResponse:
    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self._body = body.encode("utf-8")

    async def read(self) -> bytes:
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession; records every request."""

    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict] = []
        self.timeout = None

    def __call__(self, timeout=None):
        self.timeout = timeout
        return self

    def request(self, method, url, json=None, headers=None):
        self.calls.append({"method": method, "url": url, "json": json, "headers": headers})
        if self.error is not None:
            raise self.error
        return self.response

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def make_client(session: FakeSession, api_key: str = "test-key") -> GeminiClient:
    return GeminiClient(
        api_key=api_key,
        model="gemini-2.5-flash",
        base_url="https://example.test/v1beta",
        timeout_seconds=7,
        session_factory=session,
    )


class TestBuildRequest:
    """Test request payload construction."""

    def test_text_only(self):
        payload = build_generate_request("Hello").to_payload()
        assert payload == {"contents": [{"parts": [{"text": "Hello"}]}]}

    def test_image_inlined_after_text(self):
        payload = build_generate_request("Describe", PNG_BYTES).to_payload()
        parts = payload["contents"][0]["parts"]

        assert parts[0] == {"text": "Describe"}
        assert parts[1]["inline_data"]["mime_type"] == "image/png"
        assert base64.b64decode(parts[1]["inline_data"]["data"]) == PNG_BYTES

    def test_jpeg_mime_type(self):
        payload = build_generate_request("Describe", JPEG_BYTES).to_payload()
        assert payload["contents"][0]["parts"][1]["inline_data"]["mime_type"] == "image/jpeg"


class TestGenerate:
    """Test generate() success and failure paths."""

    @pytest.mark.asyncio
    async def test_missing_api_key_raises_config_error_without_request(self):
        session = FakeSession(FakeResponse(200, success_body("hi")))
        client = make_client(session, api_key="")

        with pytest.raises(ConfigError):
            await client.generate("prompt")
        assert session.calls == []

    @pytest.mark.asyncio
    async def test_success_returns_first_text(self):
        session = FakeSession(FakeResponse(200, success_body("[]")))
        client = make_client(session)

        assert await client.generate("prompt") == "[]"

        call = session.calls[0]
        assert call["method"] == "POST"
        assert call["url"] == "https://example.test/v1beta/models/gemini-2.5-flash:generateContent"
        assert call["headers"]["x-goog-api-key"] == "test-key"
        assert call["json"]["contents"][0]["parts"] == [{"text": "prompt"}]
        assert session.timeout.total == 7

    @pytest.mark.asyncio
    async def test_single_request_with_image(self):
        session = FakeSession(FakeResponse(200, success_body("1. Bake.")))
        client = make_client(session)

        await client.generate("prompt", image_bytes=JPEG_BYTES)

        assert len(session.calls) == 1
        assert len(session.calls[0]["json"]["contents"][0]["parts"]) == 2

    @pytest.mark.asyncio
    async def test_api_error_from_envelope(self):
        body = json.dumps({"error": {"code": 400, "message": "API key not valid", "status": "INVALID_ARGUMENT"}})
        client = make_client(FakeSession(FakeResponse(400, body)))

        with pytest.raises(APIError) as exc:
            await client.generate("prompt")

        assert exc.value.code == 400
        assert exc.value.message == "API key not valid"
        assert exc.value.status == "INVALID_ARGUMENT"

    @pytest.mark.asyncio
    async def test_api_error_envelope_without_code_or_message(self):
        body = json.dumps({"error": {"status": "UNAVAILABLE"}})
        client = make_client(FakeSession(FakeResponse(503, body)))

        with pytest.raises(APIError) as exc:
            await client.generate("prompt")

        assert exc.value.code == 503
        assert exc.value.message == "Unknown Gemini API error"
        assert exc.value.is_transient

    @pytest.mark.asyncio
    async def test_api_error_falls_back_to_raw_body(self):
        client = make_client(FakeSession(FakeResponse(502, "<html>Bad Gateway</html>")))

        with pytest.raises(APIError) as exc:
            await client.generate("prompt")

        assert exc.value.code == 502
        assert exc.value.message == "<html>Bad Gateway</html>"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            "{}",
            json.dumps({"candidates": []}),
            json.dumps({"candidates": [{"content": {"parts": []}}]}),
            json.dumps({"candidates": [{"content": {"parts": [{}]}}]}),
            json.dumps({"candidates": [{"finishReason": "SAFETY"}]}),
            json.dumps({"candidates": [{"content": {"parts": [{"text": ""}]}}]}),
            "not json",
        ],
    )
    async def test_empty_response(self, body):
        client = make_client(FakeSession(FakeResponse(200, body)))

        with pytest.raises(EmptyResponseError):
            await client.generate("prompt")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [aiohttp.ClientConnectionError("connection refused"), aiohttp.InvalidURL("bad url"), asyncio.TimeoutError()],
    )
    async def test_transport_error(self, error):
        client = make_client(FakeSession(error=error))

        with pytest.raises(TransportError):
            await client.generate("prompt")


class TestListModels:
    """Test the diagnostics listing."""

    @pytest.mark.asyncio
    async def test_list_models(self):
        body = json.dumps(
            {
                "models": [
                    {
                        "name": "models/gemini-2.5-flash",
                        "version": "001",
                        "displayName": "Gemini 2.5 Flash",
                        "supportedGenerationMethods": ["generateContent"],
                        "inputTokenLimit": 1048576,
                    }
                ]
            }
        )
        session = FakeSession(FakeResponse(200, body))

        models = await make_client(session).list_models()

        assert [m.name for m in models] == ["models/gemini-2.5-flash"]
        assert models[0].displayName == "Gemini 2.5 Flash"
        assert session.calls[0]["method"] == "GET"
        assert session.calls[0]["url"] == "https://example.test/v1beta/models"

    @pytest.mark.asyncio
    async def test_list_models_error_prefixed(self):
        body = json.dumps({"error": {"code": 403, "message": "Permission denied"}})
        client = make_client(FakeSession(FakeResponse(403, body)))

        with pytest.raises(APIError) as exc:
            await client.list_models()

        assert exc.value.code == 403
        assert exc.value.message == "ListModels Error: Permission denied"

    @pytest.mark.asyncio
    async def test_list_models_raw_body_marked_separately(self):
        client = make_client(FakeSession(FakeResponse(502, "<html>Bad Gateway</html>")))

        with pytest.raises(APIError) as exc:
            await client.list_models()

        assert exc.value.code == 502
        assert exc.value.message == "ListModels Raw Error: <html>Bad Gateway</html>"

    @pytest.mark.asyncio
    async def test_list_models_requires_key(self):
        with pytest.raises(ConfigError):
            await make_client(FakeSession(), api_key="").list_models()


class TestFactory:
    """Test construction from configuration."""

    def test_from_config(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        monkeypatch.setenv("GEMINI_MODEL", "gemini-test")
        monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "12")

        client = GeminiClient.from_config(Config())

        assert client.api_key == "k"
        assert client.model == "gemini-test"
        assert client.timeout_seconds == 12
        assert client.generate_url.endswith("/models/gemini-test:generateContent")

    def test_api_error_from_body_string_error(self):
        error = api_error_from_body(500, '{"error": "boom"}', "Unknown")
        assert error.code == 500
        assert error.message == '{"error": "boom"}'
