from functools import lru_cache

from fastapi import Depends, Header, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
import structlog

from sales_assistant.api.schemas import ChatRequest
from sales_assistant.core.config import Settings, get_settings
from sales_assistant.core.exceptions import AuthorizationError, ConfigurationError
from sales_assistant.db.client import get_http_client
from sales_assistant.db.vector_search import SimilarityRetriever
from sales_assistant.llm.factory import create_llm_provider
from sales_assistant.llm.gateway import CompletionGateway
from sales_assistant.rag.pipeline import RAGPipeline

logger = structlog.get_logger(__name__)


@lru_cache
def get_pipeline() -> RAGPipeline:
    settings = get_settings()
    retriever = SimilarityRetriever(
        http_client=get_http_client(),
        base_url=settings.supabase_url,
        api_key=settings.supabase_anon_key,
        function_name=settings.match_function,
        threshold=settings.match_threshold,
        limit=settings.match_count,
    )
    gateway = CompletionGateway(
        provider=create_llm_provider(),
        answer_temperature=settings.answer_temperature,
        answer_max_tokens=settings.answer_max_tokens,
        suggestion_temperature=settings.suggestion_temperature,
        suggestion_max_tokens=settings.suggestion_max_tokens,
    )
    return RAGPipeline(retriever=retriever, gateway=gateway)


def require_configuration(settings: Settings = Depends(get_settings)) -> None:
    missing = settings.missing_configuration()
    if missing:
        logger.error("configuration_missing", missing=missing)
        raise ConfigurationError()


def require_bearer_token(authorization: str | None = Header(default=None)) -> str:
    """Return the raw Authorization header; it is forwarded, never interpreted."""
    if not authorization:
        raise AuthorizationError()
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthorizationError("Authorization header must be a bearer token")
    return authorization


async def read_chat_request(request: Request) -> ChatRequest:
    """
    Parse the body only once the configuration and credential checks passed.

    Declaring ChatRequest as a body parameter would make FastAPI decode the
    JSON before any dependency runs.
    """
    raw = await request.body()
    try:
        return ChatRequest.model_validate_json(raw or b"{}")
    except ValidationError as exc:
        errors = [
            {**error, "loc": ("body", *error["loc"])}
            for error in exc.errors(include_url=False)
        ]
        raise RequestValidationError(errors) from exc
