# tests/unit/llm/adapters/test_unit_openai_adapter.py — v1
"""Tests for llm/adapters/openai_adapter.py — mocked SDK client."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from knock.core.errors import (
    AuthError,
    GatewayError,
    MalformedResponseError,
    NetworkError,
    RateLimitError,
)
from knock.llm.adapters.openai_adapter import OpenAIAdapter
from knock.llm.models import Message

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _status_error(cls, status: int):
    return cls("boom", response=httpx.Response(status, request=_REQUEST), body=None)


def _completion(content: str | None = "ls -S", choices: bool = True):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))] if choices else [],
        usage=SimpleNamespace(prompt_tokens=100, completion_tokens=5),
    )


@pytest.fixture
def sdk_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=_completion())
    return client


@pytest.fixture
def adapter(sdk_client):
    return OpenAIAdapter(model="gpt-4o-mini", api_key="sk-test", client=sdk_client)


class TestComplete:
    @pytest.mark.asyncio
    async def test_success(self, adapter, sdk_client):
        resp = await adapter.complete(
            [Message(role="user", content="list files")],
            system="You are a shell",
            max_tokens=64,
            temperature=0.2,
        )
        assert resp.content == "ls -S"
        assert resp.provider == "openai"
        assert resp.input_tokens == 100
        assert resp.output_tokens == 5

        kwargs = sdk_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["max_tokens"] == 64
        assert kwargs["messages"][0] == {"role": "system", "content": "You are a shell"}
        assert kwargs["messages"][1] == {"role": "user", "content": "list files"}

    @pytest.mark.asyncio
    async def test_missing_key_fails_before_call(self, sdk_client):
        adapter = OpenAIAdapter(api_key=None, client=sdk_client)
        with pytest.raises(AuthError):
            await adapter.complete([Message(role="user", content="x")])
        sdk_client.chat.completions.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_choices(self, adapter, sdk_client):
        sdk_client.chat.completions.create.return_value = _completion(choices=False)
        with pytest.raises(MalformedResponseError):
            await adapter.complete([Message(role="user", content="x")])

    @pytest.mark.asyncio
    async def test_null_content_becomes_empty(self, adapter, sdk_client):
        sdk_client.chat.completions.create.return_value = _completion(content=None)
        resp = await adapter.complete([Message(role="user", content="x")])
        assert resp.content == ""


class TestErrorTranslation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("error,expected", [
        (openai.APIConnectionError(request=_REQUEST), NetworkError),
        (openai.APITimeoutError(request=_REQUEST), NetworkError),
        (_status_error(openai.AuthenticationError, 401), AuthError),
        (_status_error(openai.PermissionDeniedError, 403), AuthError),
        (_status_error(openai.RateLimitError, 429), RateLimitError),
        (_status_error(openai.InternalServerError, 503), NetworkError),
        (_status_error(openai.BadRequestError, 400), GatewayError),
    ])
    async def test_sdk_errors(self, adapter, sdk_client, error, expected):
        sdk_client.chat.completions.create.side_effect = error
        with pytest.raises(expected) as exc_info:
            await adapter.complete([Message(role="user", content="x")])
        assert exc_info.value.provider == "openai"
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_unrelated_error_not_translated(self, adapter, sdk_client):
        sdk_client.chat.completions.create.side_effect = RuntimeError("bug")
        with pytest.raises(RuntimeError):
            await adapter.complete([Message(role="user", content="x")])


class TestProperties:
    def test_identity(self, adapter):
        assert adapter.provider_name == "openai"
        assert adapter.model == "gpt-4o-mini"
