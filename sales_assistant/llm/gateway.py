from __future__ import annotations

from collections.abc import AsyncIterator

import structlog

from sales_assistant.llm.base import BaseLLMProvider

logger = structlog.get_logger(__name__)


class CompletionGateway:
    """Binds a provider to the two generation profiles the assistant uses."""

    def __init__(
        self,
        provider: BaseLLMProvider,
        answer_temperature: float = 0.2,
        answer_max_tokens: int = 1024,
        suggestion_temperature: float = 0.7,
        suggestion_max_tokens: int = 256,
    ) -> None:
        self._provider = provider
        self._answer_temperature = answer_temperature
        self._answer_max_tokens = answer_max_tokens
        self._suggestion_temperature = suggestion_temperature
        self._suggestion_max_tokens = suggestion_max_tokens

    async def complete_streaming(
        self, messages: list[dict[str, str]]
    ) -> AsyncIterator[str]:
        """Low temperature, long output; tokens are forwarded as produced."""
        logger.debug("completion_stream_requested", messages=len(messages))
        return await self._provider.generate_stream(
            messages,
            temperature=self._answer_temperature,
            max_tokens=self._answer_max_tokens,
        )

    async def complete_once(self, messages: list[dict[str, str]]) -> str:
        """Higher temperature, short output; blocks for the full text."""
        logger.debug("completion_requested", messages=len(messages))
        return await self._provider.generate(
            messages,
            temperature=self._suggestion_temperature,
            max_tokens=self._suggestion_max_tokens,
        )
