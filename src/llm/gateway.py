# src/llm/gateway.py — v1
"""Provider gateway: compose the prompt, call the backend, normalize the reply.

The gateway never retries and never touches local state; its only side
effect is the outbound call made by the wrapped client.
"""

from __future__ import annotations

import logging

from knock.core.errors import InputError
from knock.core.models import REQUEST_MODES, ContextSnapshot, ProviderResponse
from knock.llm.base_client import BaseLLMClient
from knock.llm.parser import parse_response
from knock.llm.prompts import MODE_PROFILES, build_messages, system_prompt

logger = logging.getLogger(__name__)


class ProviderGateway:
    """Uniform request/response contract over any BaseLLMClient."""

    def __init__(self, client: BaseLLMClient) -> None:
        self._client = client

    @property
    def provider_name(self) -> str:
        return self._client.provider_name

    @property
    def scope(self) -> str:
        """'provider:model' tag, folded into cache fingerprints."""
        return f"{self._client.provider_name}:{self._client.model}"

    async def dispatch(
        self, query: str, ctx: ContextSnapshot, mode: str
    ) -> ProviderResponse:
        """Ask the backend for a command (or an explanation).

        Raises:
            InputError: Unknown mode.
            GatewayError: Network, auth, rate-limit or parse failure.
        """
        if mode not in REQUEST_MODES:
            raise InputError(f"Unknown request mode: {mode!r}")

        profile = MODE_PROFILES[mode]
        llm_response = await self._client.complete(
            messages=build_messages(query, ctx, mode),
            system=system_prompt(mode),
            max_tokens=profile.max_tokens,
            temperature=profile.temperature,
        )
        logger.debug(
            "Provider %s answered in %dms (%d in / %d out tokens)",
            llm_response.provider,
            llm_response.latency_ms,
            llm_response.input_tokens,
            llm_response.output_tokens,
        )
        return parse_response(llm_response.content, mode, query)
