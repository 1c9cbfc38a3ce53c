# tests/integration/conftest.py — v8
"""Shared fixtures for integration tests.

Real SQLite / JSON stores under tmp_path, a recording mock LLM client.
No external services: every provider call goes to MockLLMClient.
"""

from __future__ import annotations

from typing import Any

import pytest

from knock.config.provider_config import ProviderConfig
from knock.config.settings import Settings
from knock.core.errors import GatewayError
from knock.llm.base_client import BaseLLMClient
from knock.llm.models import LLMResponse, Message


class MockLLMClient(BaseLLMClient):
    """Mock LLM client for integration testing without real LLM services.

    Replies are taken from a queue, then from the default. Queued
    exceptions are raised instead of returned.
    """

    def __init__(self, default_response: str = "ls -S", model: str = "mock-model"):
        self._default_response = default_response
        self._model = model
        self._response_queue: list[str | Exception] = []
        self.calls: list[dict[str, Any]] = []

    @classmethod
    def from_config(cls, config: ProviderConfig, settings: Settings) -> MockLLMClient:
        return cls(model=config.model)

    def set_responses(self, *responses: str | Exception) -> None:
        self._response_queue = list(responses)

    def set_default(self, response: str) -> None:
        self._default_response = response

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.2,
    ) -> LLMResponse:
        self.calls.append({
            "messages": messages, "system": system,
            "max_tokens": max_tokens, "temperature": temperature,
        })
        item = self._response_queue.pop(0) if self._response_queue else self._default_response
        if isinstance(item, Exception):
            raise item
        return LLMResponse(
            content=item, input_tokens=50, output_tokens=len(item) // 4,
            model=self._model, provider="mock", latency_ms=10,
            raw_response={"mock": True},
        )

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def model(self) -> str:
        return self._model


@pytest.fixture
def mock_llm() -> MockLLMClient:
    return MockLLMClient()


@pytest.fixture
def failing_llm() -> MockLLMClient:
    client = MockLLMClient()
    client.set_responses(GatewayError("provider exploded", provider="mock"))
    return client


@pytest.fixture
def make_llm():
    """Factory for additional MockLLMClient instances."""
    return MockLLMClient
