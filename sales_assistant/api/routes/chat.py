from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, StreamingResponse
import structlog

from sales_assistant.api.dependencies import (
    get_pipeline,
    read_chat_request,
    require_bearer_token,
    require_configuration,
)
from sales_assistant.api.schemas import ChatRequest, ErrorResponse, SuggestionsResponse
from sales_assistant.core.config import Settings, get_settings
from sales_assistant.core.exceptions import GenerationError
from sales_assistant.rag.pipeline import RAGPipeline

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["chat"])


async def _relay(tokens: AsyncIterator[str]) -> AsyncIterator[str]:
    # Headers are already sent; a failure can only end the body early.
    try:
        async for token in tokens:
            yield token
    except GenerationError:
        logger.error("answer_stream_aborted")


@router.options("/chat")
async def chat_preflight(settings: Settings = Depends(get_settings)):
    return PlainTextResponse(
        "ok",
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Headers": ", ".join(settings.cors_allow_headers),
        },
    )


@router.post(
    "/chat",
    dependencies=[Depends(require_configuration)],
    responses={
        401: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def chat(
    authorization: str = Depends(require_bearer_token),
    request: ChatRequest = Depends(read_chat_request),
    pipeline: RAGPipeline = Depends(get_pipeline),
):
    history = request.history()

    if request.request_suggestions:
        suggestions = await pipeline.suggest(
            messages=history,
            embedding=request.embedding,
            authorization=authorization,
        )
        return SuggestionsResponse(suggestions=suggestions)

    tokens = await pipeline.run_stream(
        messages=history,
        embedding=request.embedding,
        authorization=authorization,
    )
    return StreamingResponse(_relay(tokens), media_type="text/plain; charset=utf-8")
