from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from sales_assistant.core.exceptions import (
    AuthorizationError,
    ConfigurationError,
    GenerationError,
    LLMProviderNotFoundError,
    RAGBaseError,
    RetrievalError,
)

logger = structlog.get_logger(__name__)

_STATUS_MAP = {
    ConfigurationError: 500,
    AuthorizationError: 401,
    RetrievalError: 500,
    GenerationError: 500,
    LLMProviderNotFoundError: 500,
}


async def rag_exception_handler(request: Request, exc: RAGBaseError) -> JSONResponse:
    status_code = _STATUS_MAP.get(type(exc), 500)
    logger.error(
        "request_error",
        error_type=type(exc).__name__,
        message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message},
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"Invalid request body: {location} {first.get('msg', '')}".strip()
    logger.warning("request_invalid", path=request.url.path, errors=len(errors))
    return JSONResponse(status_code=422, content={"error": message})
