"""Google Gemini API wrapper returning parsed JSON or raising ModelInvocationError."""

import json
import logging
from typing import Protocol

from google import genai
from google.genai import types

from config import settings
from services.errors import ModelInvocationError

logger = logging.getLogger(__name__)


class ModelClient(Protocol):
    """Anything that turns a prompt into a JSON object. Stubbed in tests."""

    async def generate_json(self, prompt: str, system_instruction: str = "") -> dict: ...


def _strip_code_fences(text: str) -> str:
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


def parse_json_response(text: str | None) -> dict:
    """Parse a model response body into a JSON object. No partial recovery."""
    if not text or not text.strip():
        raise ModelInvocationError("No response from model")

    text = _strip_code_fences(text.strip())
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ModelInvocationError(f"Model response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ModelInvocationError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class GeminiClient:
    """Single round-trip JSON generation against Gemini. No retries."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.2,
        max_output_tokens: int = 2500,
    ) -> None:
        self._client = genai.Client(api_key=api_key)
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    async def generate_json(self, prompt: str, system_instruction: str = "") -> dict:
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction or None,
                    temperature=self.temperature,
                    max_output_tokens=self.max_output_tokens,
                    response_mime_type="application/json",
                ),
            )
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            raise ModelInvocationError(f"Gemini API error: {e}") from e

        try:
            return parse_json_response(response.text)
        except ModelInvocationError as e:
            logger.error("Failed to parse Gemini response as JSON: %s", e)
            raise


_client: GeminiClient | None = None


def get_client() -> GeminiClient | None:
    """Process-default client built from settings; None when no key is set."""
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - judging disabled")
        return None
    if _client is None:
        _client = GeminiClient(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            temperature=settings.model_temperature,
            max_output_tokens=settings.max_output_tokens,
        )
    return _client
