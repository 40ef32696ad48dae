"""Tests for the Gemini REST client."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from crimecast.exceptions import (
    ConfigurationError,
    GeminiClientError,
    OracleMalformedError,
    OracleUnavailableError,
)
from crimecast.services.gemini_client import (
    GeminiClient,
    content_text,
    function_calls,
    parse_json_payload,
)
from conftest import gemini_response


class TestGeminiClient:
    """Tests for GeminiClient."""

    def test_init_with_key(self):
        """Test client initialization with an API key."""
        client = GeminiClient(api_key="test_key", model="gemini-test")

        assert client.headers["x-goog-api-key"] == "test_key"
        assert client.endpoint.endswith("/models/gemini-test:generateContent")
        assert "test_key" not in client.endpoint

    @pytest.mark.parametrize("api_key", [None, ""])
    def test_init_without_key(self, api_key):
        """Test a missing API key is a configuration error."""
        with pytest.raises(ConfigurationError):
            GeminiClient(api_key=api_key)

    @pytest.mark.asyncio
    async def test_generate_content_payload(self, mock_gemini_client):
        """Test request payload assembly."""
        mock_gemini_client._request_with_retry.return_value = gemini_response("hello")
        tools = [{"functionDeclarations": [{"name": "f"}]}]

        content = await mock_gemini_client.generate_content(
            [{"role": "user", "parts": [{"text": "hi"}]}],
            tools=tools,
            system_instruction="be brief",
            max_output_tokens=64,
        )

        payload = mock_gemini_client._request_with_retry.call_args[0][0]
        assert payload["tools"] == tools
        assert payload["systemInstruction"] == {"parts": [{"text": "be brief"}]}
        assert payload["generationConfig"] == {"maxOutputTokens": 64}
        assert content_text(content) == "hello"

    @pytest.mark.asyncio
    async def test_generate_content_blocked(self, mock_gemini_client):
        """Test a response without candidates raises OracleUnavailableError."""
        mock_gemini_client._request_with_retry.return_value = {
            "promptFeedback": {"blockReason": "SAFETY"}
        }

        with pytest.raises(OracleUnavailableError) as exc_info:
            await mock_gemini_client.generate_text("question")

        assert "SAFETY" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_generate_text_empty(self, mock_gemini_client):
        """Test whitespace-only output is treated as no output."""
        mock_gemini_client._request_with_retry.return_value = gemini_response("   ")

        with pytest.raises(OracleUnavailableError):
            await mock_gemini_client.generate_text("question")

    @pytest.mark.asyncio
    async def test_retry_on_rate_limit(self):
        """Test exponential backoff on rate limit."""
        client = GeminiClient(api_key="test", max_retries=2)
        mock_response = httpx.Response(429, request=httpx.Request("POST", "http://test"))

        with (
            patch("httpx.AsyncClient.post") as mock_post,
            patch("crimecast.services.gemini_client.asyncio.sleep", new=AsyncMock()) as mock_sleep,
        ):
            mock_post.side_effect = httpx.HTTPStatusError(
                "Rate limited", request=mock_response.request, response=mock_response
            )

            with pytest.raises(GeminiClientError) as exc_info:
                await client._request_with_retry({"contents": []})

            assert "Failed after" in str(exc_info.value)
            assert mock_post.call_count == 2
            assert mock_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_retry_on_network_error(self):
        """Test network errors are retried and then succeed."""
        client = GeminiClient(api_key="test", max_retries=3)
        ok = httpx.Response(
            200, json=gemini_response("ok"), request=httpx.Request("POST", "http://test")
        )

        with (
            patch("httpx.AsyncClient.post") as mock_post,
            patch("crimecast.services.gemini_client.asyncio.sleep", new=AsyncMock()),
        ):
            mock_post.side_effect = [httpx.ConnectError("refused"), ok]

            data = await client._request_with_retry({"contents": []})

        assert data["candidates"][0]["content"]["parts"][0]["text"] == "ok"
        assert mock_post.call_count == 2

    @pytest.mark.asyncio
    async def test_no_retry_on_client_error(self):
        """Test no retry on 4xx client errors (except 429)."""
        client = GeminiClient(api_key="test", max_retries=3)
        mock_response = httpx.Response(
            400,
            request=httpx.Request("POST", "http://test"),
            content=b"Bad request",
        )

        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.side_effect = httpx.HTTPStatusError(
                "Bad request", request=mock_response.request, response=mock_response
            )

            with pytest.raises(GeminiClientError):
                await client._request_with_retry({"contents": []})

            assert mock_post.call_count == 1

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        """Test a 200 reply that is not JSON is a malformed answer, not retried."""
        client = GeminiClient(api_key="test", max_retries=3)
        html = httpx.Response(
            200, content=b"<html>proxy</html>", request=httpx.Request("POST", "http://test")
        )

        with patch("httpx.AsyncClient.post", new=AsyncMock(return_value=html)) as mock_post:
            with pytest.raises(OracleMalformedError):
                await client.generate_text("question")

        assert mock_post.call_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [[], "text", {"candidates": "none"}, {"candidates": ["x"]}],
    )
    async def test_unexpected_body_shape(self, mock_gemini_client, body):
        """Test JSON bodies of the wrong shape are malformed answers."""
        mock_gemini_client._request_with_retry.return_value = body

        with pytest.raises(OracleMalformedError):
            await mock_gemini_client.generate_text("question")

    def test_ignores_non_object_parts(self):
        """Test stray non-object parts are skipped."""
        content = {"parts": ["junk", {"text": "ok"}, {"functionCall": "bad"}]}

        assert content_text(content) == "ok"
        assert function_calls(content) == []

    def test_client_error_is_oracle_unavailable(self):
        """Test transport errors take the oracle-unavailable path."""
        assert issubclass(GeminiClientError, OracleUnavailableError)


class TestContentHelpers:
    """Tests for response content helpers."""

    def test_function_calls(self):
        """Test function-call parts are extracted in order."""
        content = {
            "parts": [
                {"text": "Let me check."},
                {"functionCall": {"name": "getCrimeData", "args": {"crimeType": "Theft"}}},
            ]
        }

        assert function_calls(content) == [{"name": "getCrimeData", "args": {"crimeType": "Theft"}}]
        assert content_text(content) == "Let me check."

    def test_parse_plain_json(self):
        assert parse_json_payload('{"a": 1}') == {"a": 1}

    def test_parse_fenced_json(self):
        """Test markdown code fences are stripped."""
        assert parse_json_payload('```json\n{"alerts": []}\n```') == {"alerts": []}

    def test_parse_json_with_prose(self):
        """Test JSON embedded in prose is recovered."""
        assert parse_json_payload('Here you go: {"a": [1, 2]} Thanks!') == {"a": [1, 2]}

    def test_parse_invalid(self):
        with pytest.raises(OracleMalformedError):
            parse_json_payload("no json here")
