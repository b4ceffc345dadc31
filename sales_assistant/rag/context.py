from __future__ import annotations

import structlog

from sales_assistant.db.models import DocumentChunk
from sales_assistant.rag.prompts import NO_DOCUMENTS

logger = structlog.get_logger(__name__)


def assemble_context(chunks: list[DocumentChunk]) -> str:
    """
    Join retrieved chunk contents, most similar first, with blank lines.

    No matches is valid input to generation: the sentinel NO_DOCUMENTS takes
    the place of the documents so the model falls back to its refusal text.
    """
    contents = [chunk.content for chunk in chunks if chunk.content.strip()]
    if not contents:
        logger.info("context_empty")
        return NO_DOCUMENTS

    context = "\n\n".join(contents)
    logger.info("context_assembled", chunks=len(contents), chars=len(context))
    logger.debug("context_text", context=context)
    return context
