from __future__ import annotations

from collections.abc import Sequence

import httpx
import structlog

from sales_assistant.core.exceptions import AuthorizationError, RetrievalError
from sales_assistant.db.models import DocumentChunk

logger = structlog.get_logger(__name__)


class SimilarityRetriever:
    """
    Similarity search through a Supabase RPC function.

    The caller's bearer credential is forwarded untouched so row-level
    security on the document tables applies to the query.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        function_name: str = "match_document_sections",
        threshold: float = 0.8,
        limit: int = 5,
    ) -> None:
        self._http = http_client
        self._url = f"{base_url.rstrip('/')}/rest/v1/rpc/{function_name}"
        self._api_key = api_key
        self._threshold = threshold
        self._limit = limit

    async def retrieve(
        self,
        embedding: Sequence[float],
        authorization: str,
        threshold: float | None = None,
        limit: int | None = None,
    ) -> list[DocumentChunk]:
        """
        Return up to ``limit`` chunks whose similarity is above ``threshold``.

        The store orders rows by descending similarity. No matches is an
        empty list, not an error. Any store failure raises RetrievalError.
        """
        threshold = self._threshold if threshold is None else threshold
        limit = self._limit if limit is None else limit

        try:
            response = await self._http.post(
                self._url,
                params={"select": "content", "limit": str(limit)},
                json={"embedding": list(embedding), "match_threshold": threshold},
                headers={
                    "apikey": self._api_key,
                    "Authorization": authorization,
                    "Content-Type": "application/json",
                },
            )
        except (httpx.HTTPError, ValueError) as exc:
            # ValueError: the embedding could not be encoded as JSON.
            logger.error("vector_search_failed", error=str(exc))
            raise RetrievalError() from exc

        if response.status_code in (401, 403):
            logger.warning("vector_search_unauthorized", status=response.status_code)
            raise AuthorizationError("Invalid authorization credential")

        if response.is_error:
            logger.error(
                "vector_search_failed",
                status=response.status_code,
                body=response.text[:500],
            )
            raise RetrievalError()

        try:
            rows = response.json()
        except ValueError as exc:
            logger.error("vector_search_bad_payload", error=str(exc))
            raise RetrievalError() from exc

        if not isinstance(rows, list):
            logger.error("vector_search_bad_payload", payload_type=type(rows).__name__)
            raise RetrievalError()

        chunks = [
            DocumentChunk(content=row["content"])
            for row in rows
            if isinstance(row, dict) and isinstance(row.get("content"), str)
        ]

        logger.info(
            "vector_search_completed",
            results=len(chunks),
            limit=limit,
            threshold=threshold,
        )
        return chunks
