"""
Shared fixtures: fake collaborators and a TestClient wired to them.

The fakes record every call so tests can assert that a request never
reached the vector store or the model provider.
"""

from collections.abc import AsyncIterator

import pytest
from fastapi.testclient import TestClient

from main import app
from sales_assistant.api.dependencies import get_pipeline
from sales_assistant.core.config import Settings, get_settings
from sales_assistant.db.models import DocumentChunk
from sales_assistant.llm.base import BaseLLMProvider
from sales_assistant.llm.gateway import CompletionGateway
from sales_assistant.rag.pipeline import RAGPipeline

AUTH_HEADER = {"Authorization": "Bearer test-token"}


class FakeRetriever:
    def __init__(self, chunks=None, error: Exception | None = None):
        self.chunks = chunks or []
        self.error = error
        self.calls: list[dict] = []

    async def retrieve(self, embedding, authorization, threshold=None, limit=None):
        self.calls.append({"embedding": list(embedding), "authorization": authorization})
        if self.error is not None:
            raise self.error
        return list(self.chunks)


class FakeProvider(BaseLLMProvider):
    def __init__(
        self,
        text: str = "",
        tokens: list[str] | None = None,
        error: Exception | None = None,
    ):
        self.text = text
        self.tokens = tokens or []
        self.error = error
        self.stream_error: Exception | None = None
        self.calls: list[dict] = []

    async def generate(self, messages, temperature=0.7, max_tokens=256):
        self.calls.append(
            {"mode": "once", "messages": messages, "temperature": temperature, "max_tokens": max_tokens}
        )
        if self.error is not None:
            raise self.error
        return self.text

    async def generate_stream(self, messages, temperature=0.2, max_tokens=1024):
        self.calls.append(
            {"mode": "stream", "messages": messages, "temperature": temperature, "max_tokens": max_tokens}
        )
        if self.error is not None:
            raise self.error
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[str]:
        for token in self.tokens:
            yield token
        if self.stream_error is not None:
            raise self.stream_error


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        supabase_url="https://project.supabase.co",
        supabase_anon_key="anon-key",
        llm_provider="openai",
        openai_api_key="sk-test",
    )


@pytest.fixture
def retriever() -> FakeRetriever:
    return FakeRetriever(chunks=[DocumentChunk(content="PSD corrige la acidez del suelo")])


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def client(settings, retriever, provider):
    pipeline = RAGPipeline(retriever=retriever, gateway=CompletionGateway(provider))
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()
