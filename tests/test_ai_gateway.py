"""
Tests for the AI gateway client.

Covers the status mapping (429 / 402 / other), the weather completion and
the verbatim chat stream relay. No network access - the OpenAI client and
the requests session are mocked.
"""

import httpx
import openai
import pytest
import requests
from types import SimpleNamespace
from unittest.mock import MagicMock

from backend.services.ai_gateway import (
    CHAT_SYSTEM_PROMPT, GatewayConfigurationError, GatewayError,
    GatewayPaymentRequiredError, GatewayRateLimitError, analyze_weather,
    build_weather_prompt, open_chat_stream, raise_for_gateway_status, relay_stream,
)

GATEWAY_REQUEST = httpx.Request("POST", "https://gateway.test/v1/chat/completions")


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _status_error(status_code):
    return openai.APIStatusError(
        f"status {status_code}",
        response=httpx.Response(status_code, request=GATEWAY_REQUEST),
        body=None,
    )


class TestStatusMapping:

    def test_rate_limit(self):
        with pytest.raises(GatewayRateLimitError) as exc_info:
            raise_for_gateway_status(429)
        assert exc_info.value.status_code == 429

    def test_payment_required(self):
        with pytest.raises(GatewayPaymentRequiredError) as exc_info:
            raise_for_gateway_status(402)
        assert exc_info.value.status_code == 402

    def test_other_status_is_generic_500(self):
        with pytest.raises(GatewayError) as exc_info:
            raise_for_gateway_status(503, "upstream down")
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "AI gateway error"


class TestAnalyzeWeather:

    def setup_method(self):
        """Set up a mocked OpenAI client."""
        self.client = MagicMock()

    def test_returns_completion_text(self):
        self.client.chat.completions.create.return_value = _completion("## Climate Overview\nMild.")

        analysis = analyze_weather(28.39, -80.61, "Cape Canaveral", client=self.client)

        assert analysis.startswith("## Climate Overview")
        kwargs = self.client.chat.completions.create.call_args.kwargs
        assert kwargs["stream"] is False
        assert kwargs["messages"][0]["role"] == "system"
        assert "Cape Canaveral" in kwargs["messages"][1]["content"]

    def test_empty_content_is_error(self):
        self.client.chat.completions.create.return_value = _completion("")
        with pytest.raises(GatewayError, match="No analysis received from AI"):
            analyze_weather(0.0, 0.0, client=self.client)

    def test_rate_limit_passes_through(self):
        self.client.chat.completions.create.side_effect = _status_error(429)
        with pytest.raises(GatewayRateLimitError):
            analyze_weather(0.0, 0.0, client=self.client)

    def test_payment_required_passes_through(self):
        self.client.chat.completions.create.side_effect = _status_error(402)
        with pytest.raises(GatewayPaymentRequiredError):
            analyze_weather(0.0, 0.0, client=self.client)

    def test_connection_error_is_gateway_error(self):
        self.client.chat.completions.create.side_effect = openai.APIConnectionError(request=GATEWAY_REQUEST)
        with pytest.raises(GatewayError):
            analyze_weather(0.0, 0.0, client=self.client)

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("AI_GATEWAY_API_KEY", raising=False)
        with pytest.raises(GatewayConfigurationError, match="not configured"):
            analyze_weather(0.0, 0.0)

    def test_prompt_defaults_location_name(self):
        assert "Location: Custom Location" in build_weather_prompt(1.0, 2.0)


class TestChatStream:

    def setup_method(self):
        """Set up a mocked requests session."""
        self.session = MagicMock()
        self.upstream = MagicMock()
        self.upstream.ok = True
        self.upstream.status_code = 200
        self.session.post.return_value = self.upstream

    def test_system_prompt_prepended(self, monkeypatch):
        monkeypatch.setenv("AI_GATEWAY_API_KEY", "test-key")

        result = open_chat_stream([{"role": "user", "content": "How do I start?"}], session=self.session)

        assert result is self.upstream
        kwargs = self.session.post.call_args.kwargs
        assert kwargs["stream"] is True
        assert kwargs["headers"]["Authorization"] == "Bearer test-key"
        assert kwargs["json"]["stream"] is True
        assert kwargs["json"]["messages"] == [
            {"role": "system", "content": CHAT_SYSTEM_PROMPT},
            {"role": "user", "content": "How do I start?"},
        ]

    @pytest.mark.parametrize("status_code,error_type", [
        (429, GatewayRateLimitError),
        (402, GatewayPaymentRequiredError),
        (500, GatewayError),
    ])
    def test_upstream_errors_close_connection(self, monkeypatch, status_code, error_type):
        monkeypatch.setenv("AI_GATEWAY_API_KEY", "test-key")
        self.upstream.ok = False
        self.upstream.status_code = status_code
        self.upstream.text = "upstream says no"

        with pytest.raises(error_type):
            open_chat_stream([], session=self.session)
        self.upstream.close.assert_called_once()

    def test_unreachable_gateway(self, monkeypatch):
        monkeypatch.setenv("AI_GATEWAY_API_KEY", "test-key")
        self.session.post.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(GatewayError):
            open_chat_stream([], session=self.session)

    def test_missing_api_key_skips_request(self, monkeypatch):
        monkeypatch.delenv("AI_GATEWAY_API_KEY", raising=False)
        with pytest.raises(GatewayConfigurationError):
            open_chat_stream([], session=self.session)
        self.session.post.assert_not_called()

    def test_relay_is_verbatim(self):
        chunks = [b'data: {"choices":[{"delta":{"content":"Hi"}}]}\n\n', b"", b"data: [DONE]\n\n"]
        self.upstream.iter_content.return_value = iter(chunks)

        relayed = list(relay_stream(self.upstream))

        assert b"".join(relayed) == b"".join(chunks)
        self.upstream.close.assert_called_once()

    def test_relay_closes_upstream_when_consumer_stops(self):
        self.upstream.iter_content.return_value = iter([b"data: 1\n\n", b"data: 2\n\n"])

        stream = relay_stream(self.upstream)
        next(stream)
        stream.close()

        self.upstream.close.assert_called_once()
