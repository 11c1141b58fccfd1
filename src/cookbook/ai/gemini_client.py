"""Gemini REST client for text generation and model listing.

Stateless wire client: one HTTP round trip per call, no retries. Every
failure is classified into the `AIClientError` taxonomy:

- ConfigError: no API key configured (no request is made)
- TransportError: network/URL failure or timeout
- APIError: non-2xx status, with code and message taken from the error
  envelope when it parses, else the raw status and body text
- EmptyResponseError: 2xx body without a usable text candidate

Retry policy, if any, belongs to the caller (see cookbook.utils.retry).
"""

import asyncio
import base64
from typing import Callable, Optional

import aiohttp
from pydantic import ValidationError

from cookbook.ai.images import guess_mime_type
from cookbook.errors import APIError, ConfigError, EmptyResponseError, TransportError
from cookbook.models.gemini import (
    Content,
    ErrorEnvelope,
    GenerateContentRequest,
    GenerateContentResponse,
    InlineData,
    ListModelsResponse,
    ModelInfo,
    Part,
)
from cookbook.utils.config import Config, config
from cookbook.utils.logger import logger


API_KEY_HEADER = "x-goog-api-key"


def build_generate_request(prompt: str, image_bytes: Optional[bytes] = None) -> GenerateContentRequest:
    """Build a single-turn request: the text part, then the image inline when given."""
    parts = [Part(text=prompt)]
    if image_bytes is not None:
        parts.append(
            Part(
                inline_data=InlineData(
                    mime_type=guess_mime_type(image_bytes),
                    data=base64.b64encode(image_bytes).decode("ascii"),
                )
            )
        )
    return GenerateContentRequest(contents=[Content(parts=parts)])


def api_error_from_body(
    status: int,
    body: str,
    default_message: str,
    prefix: str = "",
    raw_prefix: str = "",
) -> APIError:
    """Classify a non-2xx response.

    Uses the `{error: {code, message, status}}` envelope when the body has
    that shape, falling back to the HTTP status and the raw body text.
    `prefix` marks envelope messages and `raw_prefix` marks raw bodies.
    """
    try:
        envelope = ErrorEnvelope.model_validate_json(body)
    except ValidationError:
        return APIError(status, f"{raw_prefix}{body}")

    detail = envelope.error
    return APIError(
        detail.code or status,
        f"{prefix}{detail.message or default_message}",
        status=detail.status,
    )


class GeminiClient:
    """Client for the Gemini generateContent and models endpoints.

    Construct one explicitly and inject it where it is needed; tests pass a
    fake with the same `generate` coroutine.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout_seconds: int = 30,
        session_factory: Callable[..., aiohttp.ClientSession] = aiohttp.ClientSession,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._session_factory = session_factory

    @classmethod
    def from_config(cls, cfg: Config = config) -> "GeminiClient":
        """Create a client from application configuration."""
        return cls(
            api_key=cfg.GEMINI_API_KEY,
            model=cfg.GEMINI_MODEL,
            base_url=cfg.GEMINI_BASE_URL,
            timeout_seconds=cfg.REQUEST_TIMEOUT_SECONDS,
        )

    @property
    def generate_url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    @property
    def models_url(self) -> str:
        return f"{self.base_url}/models"

    async def generate(self, prompt: str, image_bytes: Optional[bytes] = None) -> str:
        """Generate text from a prompt and an optional image.

        Args:
            prompt: Text prompt guiding the model's response.
            image_bytes: Optional JPEG/PNG bytes, sent inline as base64.

        Returns:
            Text of the first part of the first candidate.

        Raises:
            ConfigError: If no API key is configured.
            TransportError: On network or URL failure.
            APIError: On a non-success status.
            EmptyResponseError: If the response carries no text.
        """
        self._require_api_key()
        payload = build_generate_request(prompt, image_bytes).to_payload()
        logger.debug(
            f"Gemini generate: model={self.model}, prompt={len(prompt)} chars, "
            f"image={'yes' if image_bytes is not None else 'no'}"
        )

        status, body = await self._request("POST", self.generate_url, payload)
        if not 200 <= status < 300:
            raise api_error_from_body(status, body, "Unknown Gemini API error")

        try:
            decoded = GenerateContentResponse.model_validate_json(body)
        except ValidationError as e:
            logger.warning(f"Gemini raw response: {body}")
            raise EmptyResponseError("Response body could not be decoded") from e

        text = decoded.first_text()
        if not text:
            logger.warning(f"Gemini raw response: {body}")
            raise EmptyResponseError("No text in response")
        return text

    async def list_models(self) -> list[ModelInfo]:
        """List models available to the configured key (diagnostics only).

        Raises:
            Same taxonomy as `generate`.
        """
        self._require_api_key()
        status, body = await self._request("GET", self.models_url)
        if not 200 <= status < 300:
            raise api_error_from_body(
                status,
                body,
                "Unknown ListModels API error",
                prefix="ListModels Error: ",
                raw_prefix="ListModels Raw Error: ",
            )

        try:
            return ListModelsResponse.model_validate_json(body).models
        except ValidationError as e:
            logger.warning(f"ListModels decoding error: {e}")
            raise EmptyResponseError("Models listing could not be decoded") from e

    def _require_api_key(self) -> None:
        if not self.api_key:
            raise ConfigError("Missing GEMINI_API_KEY")

    async def _request(self, method: str, url: str, payload: Optional[dict] = None) -> tuple[int, str]:
        """Perform one HTTP round trip and return (status, body text)."""
        headers = {API_KEY_HEADER: self.api_key}
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        try:
            async with self._session_factory(timeout=timeout) as session:
                async with session.request(method, url, json=payload, headers=headers) as response:
                    raw = await response.read()
                    return response.status, raw.decode("utf-8", errors="replace")
        except asyncio.TimeoutError as e:
            raise TransportError(f"Request to {url} timed out after {self.timeout_seconds}s") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e
