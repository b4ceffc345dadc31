from contextlib import asynccontextmanager

import logging

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from sales_assistant.api.dependencies import get_pipeline
from sales_assistant.api.routes import chat, health
from sales_assistant.core.config import get_settings
from sales_assistant.core.exceptions import RAGBaseError
from sales_assistant.db.client import close_http_client
from sales_assistant.middleware.error_handler import (
    rag_exception_handler,
    validation_exception_handler,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )
    logger.info(
        "starting_app",
        environment=settings.environment,
        llm_provider=settings.llm_provider,
    )
    missing = settings.missing_configuration()
    if missing:
        logger.warning("configuration_incomplete_at_startup", missing=missing)
    yield
    get_pipeline.cache_clear()
    await close_http_client()
    logger.info("app_shutdown")


app = FastAPI(
    title="Sumagro Sales Assistant API",
    version="0.1.0",
    lifespan=lifespan,
)

# Browsers call the chat endpoint directly from the front end.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=get_settings().cors_allow_headers,
)

# Exception handlers
app.add_exception_handler(RAGBaseError, rag_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Routes
app.include_router(health.router)
app.include_router(chat.router)
