from __future__ import annotations

import httpx
import structlog

from sales_assistant.core.config import get_settings

logger = structlog.get_logger(__name__)

_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    """Process-wide HTTP client for the Supabase REST API."""
    global _client
    if _client is None or _client.is_closed:
        settings = get_settings()
        _client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.store_timeout_seconds),
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
        )
        logger.info("http_client_created")
    return _client


async def close_http_client() -> None:
    global _client
    if _client is not None and not _client.is_closed:
        await _client.aclose()
        _client = None
        logger.info("http_client_closed")


async def check_store_connection() -> bool:
    """Ping the Supabase REST endpoint. Returns True if reachable."""
    settings = get_settings()
    if not settings.supabase_url:
        return False
    try:
        response = await get_http_client().get(
            f"{settings.supabase_url.rstrip('/')}/rest/v1/",
            headers={"apikey": settings.supabase_anon_key},
        )
        return response.status_code < 500
    except httpx.HTTPError:
        return False
