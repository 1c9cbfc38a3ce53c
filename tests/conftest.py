# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides a mock LLM client, context snapshots and temp-dir backed stores.
No network access — every provider call is mocked.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from knock.cache.sqlite_store import SqliteCacheStore
from knock.core.models import ContextSnapshot, ProviderResponse
from knock.history.sqlite_history import SqliteHistoryStore
from knock.llm.gateway import ProviderGateway
from knock.llm.models import LLMResponse
from knock.storage.layout import StorageLayout


# === FIXTURES: Sample data ===


@pytest.fixture
def linux_bash() -> ContextSnapshot:
    return ContextSnapshot(os="linux", shell="bash", cwd="/home/user/project")


@pytest.fixture
def sample_response() -> ProviderResponse:
    return ProviderResponse(command="ls -S")


# === FIXTURES: Mock LLM ===


@pytest.fixture
def mock_llm_response() -> LLMResponse:
    """Standard mock LLM response."""
    return LLMResponse(
        content="ls -S",
        input_tokens=120,
        output_tokens=4,
        model="mock-1",
        provider="mock",
        latency_ms=42,
    )


@pytest.fixture
def mock_llm_client(mock_llm_response: LLMResponse) -> AsyncMock:
    """Mock BaseLLMClient with default response."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value=mock_llm_response)
    client.provider_name = "mock"
    client.model = "mock-1"
    return client


@pytest.fixture
def gateway(mock_llm_client: AsyncMock) -> ProviderGateway:
    return ProviderGateway(mock_llm_client)


# === FIXTURES: Stores ===


@pytest.fixture
def layout(tmp_path: Path) -> StorageLayout:
    return StorageLayout.at(tmp_path / "knock")


@pytest.fixture
def cache_store(layout: StorageLayout):
    store = SqliteCacheStore(db_path=layout.cache_db)
    yield store
    store.close()


@pytest.fixture
def history_store(layout: StorageLayout):
    store = SqliteHistoryStore(db_path=layout.history_db, limit=100)
    yield store
    store.close()
