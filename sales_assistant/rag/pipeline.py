from __future__ import annotations

from collections.abc import AsyncIterator, Sequence

import structlog

from sales_assistant.db.models import ConversationMessage
from sales_assistant.db.vector_search import SimilarityRetriever
from sales_assistant.llm.gateway import CompletionGateway
from sales_assistant.rag.composer import compose_answer_prompt, compose_suggestion_prompt
from sales_assistant.rag.context import assemble_context
from sales_assistant.rag.suggestions import parse_suggestions

logger = structlog.get_logger(__name__)


class RAGPipeline:
    """Core orchestrator: retrieve → compose → generate."""

    def __init__(
        self,
        retriever: SimilarityRetriever,
        gateway: CompletionGateway,
    ) -> None:
        self._retriever = retriever
        self._gateway = gateway

    async def _context_for(self, embedding: Sequence[float], authorization: str) -> str:
        chunks = await self._retriever.retrieve(embedding, authorization=authorization)
        return assemble_context(chunks)

    async def run_stream(
        self,
        messages: Sequence[ConversationMessage],
        embedding: Sequence[float],
        authorization: str,
    ) -> AsyncIterator[str]:
        """
        Retrieve documents and open the answer stream.

        Retrieval and the upstream call both complete before this returns,
        so their failures surface as exceptions rather than a broken stream.
        """
        logger.info("rag_stream_started", turns=len(messages))
        context = await self._context_for(embedding, authorization)
        prompt = compose_answer_prompt(messages, context)
        return await self._gateway.complete_streaming(prompt)

    async def suggest(
        self,
        messages: Sequence[ConversationMessage],
        embedding: Sequence[float],
        authorization: str,
    ) -> list[str]:
        """Follow-up questions for the most recent message."""
        logger.info("rag_suggestions_started", turns=len(messages))
        context = await self._context_for(embedding, authorization)
        prompt = compose_suggestion_prompt(messages[-1], context)
        raw = await self._gateway.complete_once(prompt)
        suggestions = parse_suggestions(raw)
        logger.info("rag_suggestions_completed", count=len(suggestions))
        return suggestions
