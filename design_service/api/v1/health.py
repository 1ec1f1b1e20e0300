"""
Health check endpoint.
"""
from datetime import datetime, timezone
import time

from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict

from design_service.config import settings

router = APIRouter()

# Track service start time
SERVICE_START_TIME = time.time()


class HealthResponse(BaseModel):
    """Health check response model"""
    status: str  # "healthy", "degraded"
    service: str
    version: str
    environment: str
    uptime_seconds: float
    catalog_components: int
    provider_configured: bool
    model: str
    timestamp: datetime

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "service": "Design Block Service",
                "version": "0.1.0",
                "environment": "development",
                "uptime_seconds": 12.5,
                "catalog_components": 3,
                "provider_configured": True,
                "model": "gpt-4o-mini",
                "timestamp": "2025-12-16T12:00:00Z"
            }
        }
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Service health",
    description="Degraded when no text-generation provider is configured."
)
async def health(request: Request) -> HealthResponse:
    pipeline = request.app.state.pipeline
    provider_configured = pipeline.provider is not None

    return HealthResponse(
        status="healthy" if provider_configured else "degraded",
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        uptime_seconds=round(time.time() - SERVICE_START_TIME, 2),
        catalog_components=len(pipeline.catalog),
        provider_configured=provider_configured,
        model=settings.llm_model,
        timestamp=datetime.now(timezone.utc),
    )
