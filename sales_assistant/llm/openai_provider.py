from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncAzureOpenAI, AsyncOpenAI
import structlog

from sales_assistant.core.config import Settings, get_settings
from sales_assistant.core.exceptions import GenerationError
from sales_assistant.llm.base import BaseLLMProvider

logger = structlog.get_logger(__name__)


def _message_text(response: Any) -> str:
    """Pull the assistant text out of a chat completion, or fail loudly."""
    choices = getattr(response, "choices", None)
    if not choices:
        raise GenerationError("The model returned no choices.")
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if content is not None and not isinstance(content, str):
        raise GenerationError("The model returned an unexpected message shape.")
    return content or ""


def _delta_text(chunk: Any) -> str:
    choices = getattr(chunk, "choices", None)
    if not choices:
        return ""
    content = getattr(getattr(choices[0], "delta", None), "content", None)
    return content if isinstance(content, str) else ""


class OpenAIProvider(BaseLLMProvider):
    provider_name = "openai"

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str | None = None,
    ) -> None:
        settings = get_settings()
        self._client = client or self._build_client(settings)
        self._model = model or self._default_model(settings)

    def _build_client(self, settings: Settings) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.llm_timeout_seconds,
            max_retries=settings.llm_max_retries,
        )

    def _default_model(self, settings: Settings) -> str:
        return settings.chat_model

    async def generate(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 256,
    ) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as exc:
            logger.error(
                "llm_generation_failed", provider=self.provider_name, error=str(exc)
            )
            raise GenerationError() from exc

        content = _message_text(response)
        usage = getattr(response, "usage", None)
        logger.info(
            "llm_generation_completed",
            provider=self.provider_name,
            tokens=getattr(usage, "total_tokens", None),
        )
        return content

    async def generate_stream(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.2,
        max_tokens: int = 1024,
    ) -> AsyncIterator[str]:
        try:
            stream = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                stream=True,
            )
        except Exception as exc:
            logger.error("llm_stream_failed", provider=self.provider_name, error=str(exc))
            raise GenerationError() from exc

        return self._iter_deltas(stream)

    async def _iter_deltas(self, stream: Any) -> AsyncIterator[str]:
        try:
            async for chunk in stream:
                text = _delta_text(chunk)
                if text:
                    yield text
        except Exception as exc:
            logger.error("llm_stream_failed", provider=self.provider_name, error=str(exc))
            raise GenerationError() from exc
        finally:
            # Also runs on cancellation when the HTTP client disconnects.
            await stream.close()


class AzureOpenAIProvider(OpenAIProvider):
    provider_name = "azure"

    def _build_client(self, settings: Settings) -> AsyncAzureOpenAI:
        return AsyncAzureOpenAI(
            api_key=settings.azure_openai_api_key,
            azure_endpoint=settings.azure_openai_endpoint,
            api_version=settings.azure_openai_api_version,
            timeout=settings.llm_timeout_seconds,
            max_retries=settings.llm_max_retries,
        )

    def _default_model(self, settings: Settings) -> str:
        return settings.azure_openai_chat_deployment
