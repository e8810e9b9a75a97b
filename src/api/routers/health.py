"""Health check endpoints."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_settings
from core.config import Settings
from core.redis import get_redis_client


logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    redis: str
    accounts_dir: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    """
    Check application health.

    Redis only backs the users cache, so an unavailable Redis degrades the
    status without failing it. A missing accounts directory lists no users.
    """
    redis_client = get_redis_client()
    redis_status = "healthy" if redis_client and await redis_client.ping() else "unavailable"

    accounts_dir = settings.accounts_dir
    accounts_status = "healthy" if accounts_dir and accounts_dir.is_dir() else "missing"
    if accounts_status != "healthy":
        logger.warning("Accounts directory unavailable: %s", accounts_dir)

    return HealthResponse(
        status="healthy" if redis_status == accounts_status == "healthy" else "degraded",
        redis=redis_status,
        accounts_dir=accounts_status,
    )
