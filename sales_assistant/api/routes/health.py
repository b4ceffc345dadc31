from fastapi import APIRouter

from sales_assistant.api.schemas import HealthResponse, ReadinessResponse
from sales_assistant.core.config import get_settings
from sales_assistant.db.client import check_store_connection

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def liveness():
    return HealthResponse(status="ok")


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness():
    settings = get_settings()
    configured = not settings.missing_configuration()
    store_ok = configured and await check_store_connection()
    return ReadinessResponse(
        status="ok" if configured and store_ok else "degraded",
        configuration="complete" if configured else "missing",
        vector_store="connected" if store_ok else "disconnected",
        llm_provider=settings.llm_provider,
    )
