"""Gemini REST client with retry logic and JSON-mode helpers."""

import asyncio
import json
import logging
from typing import Any

import httpx

from crimecast.config import get_settings
from crimecast.exceptions import (
    ConfigurationError,
    GeminiClientError,
    OracleMalformedError,
    OracleUnavailableError,
)

logger = logging.getLogger(__name__)
settings = get_settings()


class GeminiClient:
    """
    Client for the Google Gemini ``generateContent`` REST API.

    Features:
    - API key sent as a header, never in the URL
    - Exponential backoff retry on rate limits, server and network errors
    - JSON response mode with tolerant extraction of the JSON payload
    - Function-calling contents for tool-using prompts
    """

    def __init__(
        self,
        api_key: str | None = settings.gemini_api_key,
        model: str = settings.gemini_model,
        base_url: str = settings.gemini_base_url,
        max_retries: int = settings.gemini_max_retries,
        timeout: float = settings.gemini_timeout_seconds,
    ):
        if not api_key:
            raise ConfigurationError(
                "GEMINI_API_KEY is not defined. Please set it in your .env file."
            )
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.timeout = timeout

        self.headers: dict[str, str] = {
            "Content-Type": "application/json",
            "x-goog-api-key": api_key,
        }

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def _request_with_retry(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST to generateContent with exponential backoff retry."""
        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.endpoint, headers=self.headers, json=payload)
                    response.raise_for_status()
                    try:
                        return response.json()
                    except ValueError as e:
                        raise OracleMalformedError(f"Gemini returned a non-JSON body: {e}") from e

            except httpx.HTTPStatusError as e:
                last_error = e
                if e.response.status_code == 429:  # Rate limited
                    wait_time = 2**attempt * 5  # 5s, 10s, 20s
                    logger.warning(f"Gemini rate limited, waiting {wait_time}s before retry")
                    await asyncio.sleep(wait_time)
                elif e.response.status_code >= 500:  # Server error
                    wait_time = 2**attempt
                    logger.warning(f"Gemini server error {e.response.status_code}, retry in {wait_time}s")
                    await asyncio.sleep(wait_time)
                else:
                    raise GeminiClientError(f"HTTP error: {e}") from e

            except httpx.RequestError as e:
                last_error = e
                wait_time = 2**attempt
                logger.warning(f"Gemini request error: {e}, retry in {wait_time}s")
                await asyncio.sleep(wait_time)

        raise GeminiClientError(f"Failed after {self.max_retries} retries: {last_error}")

    async def generate_content(
        self,
        contents: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        system_instruction: str | None = None,
        response_mime_type: str | None = None,
        max_output_tokens: int | None = None,
    ) -> dict[str, Any]:
        """
        Run one generateContent call and return the first candidate's content.

        Args:
            contents: Conversation turns (``{"role": ..., "parts": [...]}``)
            tools: Optional tool declarations
            system_instruction: Optional system prompt
            response_mime_type: e.g. "application/json" for JSON mode
            max_output_tokens: Optional output cap

        Returns:
            The candidate ``content`` dict (``{"role": "model", "parts": [...]}``)
        """
        payload: dict[str, Any] = {"contents": contents}
        if tools:
            payload["tools"] = tools
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}

        generation_config: dict[str, Any] = {}
        if response_mime_type:
            generation_config["responseMimeType"] = response_mime_type
        if max_output_tokens:
            generation_config["maxOutputTokens"] = max_output_tokens
        if generation_config:
            payload["generationConfig"] = generation_config

        data = await self._request_with_retry(payload)
        if not isinstance(data, dict):
            raise OracleMalformedError(f"Gemini returned {type(data).__name__}, expected an object")

        candidates = data.get("candidates") or []
        if not isinstance(candidates, list) or not all(isinstance(c, dict) for c in candidates):
            raise OracleMalformedError("Gemini returned malformed candidates")
        if not candidates or not isinstance(candidates[0].get("content"), dict):
            feedback = data.get("promptFeedback")
            reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            reason = reason or "no candidates"
            raise OracleUnavailableError(f"Gemini returned no output ({reason})")

        return candidates[0]["content"]

    async def generate_text(self, prompt: str, **kwargs: Any) -> str:
        """Single-turn prompt returning the concatenated text parts."""
        content = await self.generate_content(
            [{"role": "user", "parts": [{"text": prompt}]}], **kwargs
        )
        text = content_text(content)
        if not text:
            raise OracleUnavailableError("Gemini returned an empty response")
        return text

    async def generate_json(self, prompt: str) -> Any:
        """Single-turn prompt in JSON mode, returning the decoded payload."""
        text = await self.generate_text(prompt, response_mime_type="application/json")
        return parse_json_payload(text)


def _parts(content: dict[str, Any]) -> list[dict[str, Any]]:
    parts = content.get("parts")
    if not isinstance(parts, list):
        return []
    return [part for part in parts if isinstance(part, dict)]


def content_text(content: dict[str, Any]) -> str:
    """Join the text parts of a content block."""
    return "".join(str(part.get("text", "")) for part in _parts(content)).strip()


def function_calls(content: dict[str, Any]) -> list[dict[str, Any]]:
    """Function-call parts (``{"name": ..., "args": {...}}``) of a content block."""
    return [
        part["functionCall"] for part in _parts(content) if isinstance(part.get("functionCall"), dict)
    ]


def parse_json_payload(text: str) -> Any:
    """
    Decode model output as JSON.

    Tolerates markdown code fences and prose around a single JSON object or
    array.
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
        cleaned = cleaned.strip()

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    for opener, closer in (("{", "}"), ("[", "]")):
        start_idx = cleaned.find(opener)
        end_idx = cleaned.rfind(closer)
        if start_idx != -1 and end_idx > start_idx:
            try:
                return json.loads(cleaned[start_idx : end_idx + 1])
            except json.JSONDecodeError:
                continue

    raise OracleMalformedError(f"Gemini output is not valid JSON: {text[:200]!r}")
