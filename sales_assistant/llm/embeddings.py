from __future__ import annotations

from sentence_transformers import SentenceTransformer
import structlog

from sales_assistant.core.config import get_settings
from sales_assistant.core.exceptions import EmbeddingError

logger = structlog.get_logger(__name__)

_model: SentenceTransformer | None = None


def _get_model() -> SentenceTransformer:
    global _model
    if _model is None:
        settings = get_settings()
        _model = SentenceTransformer(settings.embedding_model)
        logger.info("embedding_model_loaded", model=settings.embedding_model)
    return _model


def embed_text(text: str) -> list[float]:
    """
    Mean-pooled, unit-normalized embedding for one message.

    Runs on the client before a request is sent; the backend only receives
    the resulting vector.
    """
    try:
        vector = _get_model().encode(text, normalize_embeddings=True)
    except Exception as exc:
        logger.error("embedding_failed", error=str(exc))
        raise EmbeddingError(str(exc)) from exc
    embedding = [float(v) for v in vector]
    logger.debug("embedding_generated", dimensions=len(embedding))
    return embedding
