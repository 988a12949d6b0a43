"""Tests for voicenote.llm.postprocess module."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from voicenote.config import PostProcessingConfig
from voicenote.exceptions import PostProcessingError
from voicenote.llm.postprocess import PostProcessor, build_request, extract_text
from voicenote.models import RequestShape


def chat_response(content: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


class TestRequestShape:
    @pytest.mark.parametrize("model", ["gpt-4", "gpt-4o-mini", "gpt-3.5-turbo"])
    def test_chat_models(self, model: str) -> None:
        assert RequestShape.for_model(model) is RequestShape.CHAT

    @pytest.mark.parametrize("model", ["text-davinci-003", "davinci-002", "llama3"])
    def test_completion_models(self, model: str) -> None:
        assert RequestShape.for_model(model) is RequestShape.COMPLETION


class TestBuildRequest:
    def test_chat_request(self, post_processing_config) -> None:
        url, body = build_request("hello there", post_processing_config)

        assert url == "https://llm.example.com/v1/chat/completions"
        assert body == {
            "model": "gpt-4",
            "messages": [
                {"role": "system", "content": "Fix punctuation."},
                {"role": "user", "content": "hello there"},
            ],
        }

    def test_completion_request(self, post_processing_config) -> None:
        config = post_processing_config.model_copy(update={"model": "text-davinci-003"})
        url, body = build_request("hello there", config)

        assert url == "https://llm.example.com/v1/completions"
        assert body == {"model": "text-davinci-003", "prompt": "Fix punctuation.\n\nhello there"}

    def test_trailing_slash_on_base(self) -> None:
        config = PostProcessingConfig(api_base="https://llm.example.com/", model="gpt-4")
        url, _ = build_request("x", config)
        assert url == "https://llm.example.com/v1/chat/completions"


class TestExtractText:
    def test_completion_text_preferred(self) -> None:
        payload = {"choices": [{"text": "  from text  ", "message": {"content": "from message"}}]}
        assert extract_text(payload) == "from text"

    def test_chat_content(self) -> None:
        payload = {"choices": [{"message": {"content": "\nHello, world.\n"}}]}
        assert extract_text(payload) == "Hello, world."

    def test_empty_text_falls_back_to_message(self) -> None:
        payload = {"choices": [{"text": "", "message": {"content": "chat"}}]}
        assert extract_text(payload) == "chat"

    def test_no_choices_raises(self) -> None:
        with pytest.raises(PostProcessingError):
            extract_text({"choices": []})

    def test_missing_fields_raises(self) -> None:
        with pytest.raises(PostProcessingError):
            extract_text({"choices": [{"index": 0}]})

    def test_whitespace_only_raises(self) -> None:
        with pytest.raises(PostProcessingError):
            extract_text({"choices": [{"text": "   "}]})


class TestProcess:
    def test_disabled_is_identity(self, post_processing_config, mock_http) -> None:
        client, transport = mock_http(lambda request: chat_response("changed"))
        config = post_processing_config.model_copy(update={"enabled": False})

        for text in ["", "Hello", "Hello\nworld", "  spaced  "]:
            assert asyncio.run(PostProcessor(client=client).process(text, config)) == text

        assert transport.requests == []

    def test_empty_text_skips_request(self, post_processing_config, mock_http) -> None:
        client, transport = mock_http(lambda request: chat_response("changed"))

        assert asyncio.run(PostProcessor(client=client).process("", post_processing_config)) == ""
        assert transport.requests == []

    def test_chat_rewrite(self, post_processing_config, mock_http) -> None:
        client, transport = mock_http(lambda request: chat_response(" Hello, world. "))

        result = asyncio.run(PostProcessor(client=client).process("hello world", post_processing_config))

        assert result == "Hello, world."
        request = transport.requests[0]
        assert request.url.path == "/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-llm-5678"
        assert json.loads(request.content)["messages"][1]["content"] == "hello world"

    def test_completion_rewrite(self, post_processing_config, mock_http) -> None:
        client, transport = mock_http(
            lambda request: httpx.Response(200, json={"choices": [{"text": "\n\nHello, world."}]})
        )
        config = post_processing_config.model_copy(update={"model": "text-davinci-003"})

        result = asyncio.run(PostProcessor(client=client).process("hello world", config))

        assert result == "Hello, world."
        assert transport.requests[0].url.path == "/v1/completions"
        assert json.loads(transport.requests[0].content)["prompt"] == "Fix punctuation.\n\nhello world"

    def test_transport_error_returns_original(self, post_processing_config, mock_http) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = mock_http(handler)

        result = asyncio.run(PostProcessor(client=client).process("keep me", post_processing_config))

        assert result == "keep me"

    def test_error_status_returns_original(self, post_processing_config, mock_http) -> None:
        client, _ = mock_http(lambda request: httpx.Response(500, text="server error"))

        result = asyncio.run(PostProcessor(client=client).process("keep me", post_processing_config))

        assert result == "keep me"

    def test_malformed_body_returns_original(self, post_processing_config, mock_http) -> None:
        client, _ = mock_http(lambda request: httpx.Response(200, text="not json"))

        result = asyncio.run(PostProcessor(client=client).process("keep me", post_processing_config))

        assert result == "keep me"

    def test_missing_choices_returns_original(self, post_processing_config, mock_http) -> None:
        client, _ = mock_http(lambda request: httpx.Response(200, json={"id": "cmpl-1"}))

        result = asyncio.run(PostProcessor(client=client).process("keep me", post_processing_config))

        assert result == "keep me"
