"""
Health check роутер.
"""

import logging
from fastapi import APIRouter

from ..schemas import HealthResponse
from ....core.config import AppConfig

logger = logging.getLogger("chat-memory.api.health")

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint"""
    logger.debug("Health check called")
    return HealthResponse(
        status="healthy",
        service="chat-memory",
        version=AppConfig.VERSION
    )
