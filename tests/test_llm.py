from types import SimpleNamespace

import pytest

from sales_assistant.core.exceptions import GenerationError
from sales_assistant.llm.gateway import CompletionGateway
from sales_assistant.llm.openai_provider import OpenAIProvider

MESSAGES = [{"role": "user", "content": "¿Qué es el PSD?"}]


def _completion(content):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(total_tokens=42),
    )


def _delta(content):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


class FakeStream:
    def __init__(self, chunks, error: Exception | None = None):
        self._chunks = list(chunks)
        self._error = error
        self.closed = False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error

    async def close(self):
        self.closed = True


class FakeCompletions:
    def __init__(self, result=None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


def _gateway(completions: FakeCompletions) -> CompletionGateway:
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return CompletionGateway(OpenAIProvider(client=client, model="gpt-test"))


async def _collect(stream) -> list[str]:
    return [token async for token in stream]


@pytest.mark.asyncio
async def test_complete_once_returns_text_with_suggestion_profile() -> None:
    completions = FakeCompletions(result=_completion('["¿Uno?"]'))

    text = await _gateway(completions).complete_once(MESSAGES)

    assert text == '["¿Uno?"]'
    call = completions.calls[0]
    assert call["model"] == "gpt-test"
    assert call["messages"] == MESSAGES
    assert call["temperature"] == 0.7
    assert call["max_tokens"] == 256
    assert "stream" not in call


@pytest.mark.asyncio
async def test_complete_once_treats_null_content_as_empty() -> None:
    completions = FakeCompletions(result=_completion(None))

    assert await _gateway(completions).complete_once(MESSAGES) == ""


@pytest.mark.asyncio
async def test_complete_once_without_choices_fails() -> None:
    completions = FakeCompletions(result=SimpleNamespace(choices=[], usage=None))

    with pytest.raises(GenerationError):
        await _gateway(completions).complete_once(MESSAGES)


@pytest.mark.asyncio
async def test_upstream_failure_raises_generation_error() -> None:
    completions = FakeCompletions(error=RuntimeError("rate limited"))

    with pytest.raises(GenerationError):
        await _gateway(completions).complete_once(MESSAGES)
    with pytest.raises(GenerationError):
        await _gateway(completions).complete_streaming(MESSAGES)


@pytest.mark.asyncio
async def test_streaming_forwards_deltas_in_order_and_closes() -> None:
    stream = FakeStream([_delta("El "), _delta(None), _delta("PSD"), SimpleNamespace(choices=[])])
    completions = FakeCompletions(result=stream)

    tokens = await _collect(await _gateway(completions).complete_streaming(MESSAGES))

    assert tokens == ["El ", "PSD"]
    assert stream.closed
    call = completions.calls[0]
    assert call["stream"] is True
    assert call["temperature"] == 0.2
    assert call["max_tokens"] == 1024


@pytest.mark.asyncio
async def test_stream_is_opened_before_iteration() -> None:
    completions = FakeCompletions(result=FakeStream([_delta("x")]))

    await _gateway(completions).complete_streaming(MESSAGES)

    assert len(completions.calls) == 1


@pytest.mark.asyncio
async def test_mid_stream_failure_raises_generation_error() -> None:
    stream = FakeStream([_delta("parcial")], error=RuntimeError("connection reset"))
    completions = FakeCompletions(result=stream)
    tokens = await _gateway(completions).complete_streaming(MESSAGES)

    received = []
    with pytest.raises(GenerationError):
        async for token in tokens:
            received.append(token)

    assert received == ["parcial"]
    assert stream.closed
