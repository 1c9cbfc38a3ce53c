# tests/unit/llm/adapters/test_unit_ollama_adapter.py — v1
"""Tests for llm/adapters/ollama_adapter.py — mocked SDK client."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import ollama
import pytest

from knock.core.errors import (
    AuthError,
    GatewayError,
    MalformedResponseError,
    NetworkError,
    RateLimitError,
    UnsupportedProviderError,
)
from knock.llm.adapters.ollama_adapter import OllamaAdapter
from knock.llm.models import Message


@pytest.fixture
def sdk_client():
    client = MagicMock()
    client.chat = AsyncMock(return_value={
        "message": {"role": "assistant", "content": "ls -S"},
        "prompt_eval_count": 50,
        "eval_count": 4,
    })
    return client


@pytest.fixture
def adapter(sdk_client):
    return OllamaAdapter(model="llama3", host="http://localhost:11434", client=sdk_client)


class TestComplete:
    @pytest.mark.asyncio
    async def test_success(self, adapter, sdk_client):
        resp = await adapter.complete(
            [Message(role="user", content="list files")],
            system="sys",
            max_tokens=100,
            temperature=0.2,
        )
        assert resp.content == "ls -S"
        assert resp.provider == "ollama"
        assert resp.input_tokens == 50
        assert resp.output_tokens == 4

        kwargs = sdk_client.chat.call_args.kwargs
        assert kwargs["model"] == "llama3"
        assert kwargs["stream"] is False
        assert kwargs["options"] == {"num_predict": 100, "temperature": 0.2}
        assert kwargs["messages"][0] == {"role": "system", "content": "sys"}

    @pytest.mark.asyncio
    async def test_no_credential_needed(self, adapter):
        resp = await adapter.complete([Message(role="user", content="x")])
        assert resp.content == "ls -S"

    @pytest.mark.asyncio
    async def test_missing_message_is_malformed(self, adapter, sdk_client):
        sdk_client.chat.return_value = {"done": True}
        with pytest.raises(MalformedResponseError):
            await adapter.complete([Message(role="user", content="x")])


class TestErrorTranslation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("error,expected", [
        (httpx.ConnectError("refused"), NetworkError),
        (httpx.ReadTimeout("slow"), NetworkError),
        (ConnectionRefusedError("refused"), NetworkError),
        (ollama.ResponseError("unauthorized", 401), AuthError),
        (ollama.ResponseError("too many", 429), RateLimitError),
        (ollama.ResponseError("model 'llama3' not found", 404), UnsupportedProviderError),
        (ollama.ResponseError("oom", 500), NetworkError),
        (ollama.ResponseError("bad", 400), GatewayError),
    ])
    async def test_errors(self, adapter, sdk_client, error, expected):
        sdk_client.chat.side_effect = error
        with pytest.raises(expected) as exc_info:
            await adapter.complete([Message(role="user", content="x")])
        assert exc_info.value.provider == "ollama"
