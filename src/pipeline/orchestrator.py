# src/pipeline/orchestrator.py — v2
"""Pipeline orchestrator — one query from text to command.

Per-invocation state machine:

    start → cache_lookup ─hit→ store_and_log → done
                         └miss→ dispatch ─ok→ store_and_log → done
                                         └error→ failed

Gateway errors end the run with no cache write and no history entry.
Store failures inside store_and_log are logged and reported as warnings
but never turn a successful dispatch into a failure. Persistence happens
only after the gateway call has returned and contains no await points,
so a run cancelled mid-dispatch leaves nothing behind.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Literal

from knock.cache.fingerprint import compute_fingerprint, normalize_query
from knock.context.detector import detect_context
from knock.core.errors import StoreError
from knock.core.models import ContextSnapshot, HistoryEntry, ProviderResponse
from knock.logging.context import set_fingerprint_context

if TYPE_CHECKING:
    from knock.cache.base_cache_store import BaseCacheStore
    from knock.history.base_history_store import BaseHistoryStore
    from knock.llm.gateway import ProviderGateway

logger = logging.getLogger(__name__)

PipelineStage = Literal[
    "start", "cache_lookup", "dispatch", "store_and_log", "done", "failed"
]


@dataclass
class PipelineResult:
    """Outcome of a successful pipeline run."""

    response: ProviderResponse
    fingerprint: str
    cache_hit: bool
    context: ContextSnapshot
    stage: PipelineStage = "done"
    warnings: list[str] = field(default_factory=list)


class CommandPipeline:
    """Fingerprint → cache → gateway → cache store → history append.

    Usage:
        pipeline = CommandPipeline(gateway, cache, history)
        result = await pipeline.run("list files sorted by size", "standard")

    Args:
        gateway: Provider gateway for cache misses.
        cache: Cache store, or None to run without caching.
        history: History log, or None to skip logging.
        context_provider: Returns the ContextSnapshot for this invocation.
        clock: Returns epoch seconds for history timestamps.
        use_cache: When False, skip lookup but still store fresh responses.
    """

    def __init__(
        self,
        gateway: ProviderGateway,
        cache: BaseCacheStore | None = None,
        history: BaseHistoryStore | None = None,
        context_provider: Callable[[], ContextSnapshot] = detect_context,
        clock: Callable[[], float] = time.time,
        use_cache: bool = True,
    ) -> None:
        self._gateway = gateway
        self._cache = cache
        self._history = history
        self._context_provider = context_provider
        self._clock = clock
        self._use_cache = use_cache
        self._stage: PipelineStage = "start"

    @property
    def stage(self) -> PipelineStage:
        """Stage reached by the most recent run."""
        return self._stage

    async def run(self, query: str, mode: str = "standard") -> PipelineResult:
        """Translate one query.

        Raises:
            InputError: Empty query or unknown mode (nothing is touched).
            GatewayError: Provider call failed (nothing is persisted).
        """
        self._stage = "start"
        text = normalize_query(query)
        ctx = self._context_provider()
        fingerprint = compute_fingerprint(text, ctx, mode, scope=self._gateway.scope)
        set_fingerprint_context(fingerprint)
        warnings: list[str] = []

        self._stage = "cache_lookup"
        response = await self._lookup(fingerprint, warnings)
        cache_hit = response is not None

        if response is None:
            self._stage = "dispatch"
            try:
                response = await self._gateway.dispatch(text, ctx, mode)
            except BaseException:
                self._stage = "failed"
                raise
            logger.info("Dispatched to %s", self._gateway.provider_name)
        else:
            logger.info("Served from cache")

        self._stage = "store_and_log"
        if not cache_hit:
            await self._store(fingerprint, response, warnings)
        await self._log(text, response, warnings)

        self._stage = "done"
        return PipelineResult(
            response=response,
            fingerprint=fingerprint,
            cache_hit=cache_hit,
            context=ctx,
            stage=self._stage,
            warnings=warnings,
        )

    async def _lookup(
        self, fingerprint: str, warnings: list[str]
    ) -> ProviderResponse | None:
        if self._cache is None or not self._use_cache:
            return None
        try:
            entry = await self._cache.get(fingerprint)
        except StoreError as e:
            logger.warning("Cache lookup failed, continuing without cache: %s", e)
            warnings.append(f"cache lookup failed: {e}")
            return None
        return entry.response if entry is not None else None

    async def _store(
        self, fingerprint: str, response: ProviderResponse, warnings: list[str]
    ) -> None:
        if self._cache is None:
            return
        try:
            await self._cache.put(fingerprint, response)
        except StoreError as e:
            logger.warning("Cache write failed: %s", e)
            warnings.append(f"cache write failed: {e}")

    async def _log(
        self, query: str, response: ProviderResponse, warnings: list[str]
    ) -> None:
        if self._history is None:
            return
        entry = HistoryEntry(
            query=query, command=response.command, timestamp=int(self._clock())
        )
        try:
            await self._history.append(entry)
        except StoreError as e:
            logger.warning("History append failed: %s", e)
            warnings.append(f"history append failed: {e}")
