"""
Main FastAPI application.

Exposes the design tools over HTTP:
1. GET  /api/v1/tools           - tool list with argument schemas
2. POST /api/v1/tools/{name}    - invoke one tool
3. GET  /health                 - catalog and provider status
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uuid
import time

from design_service.config import settings
from design_service.core.logger import setup_logging
from design_service.llm.base import BaseLLMProvider
from design_service.llm.openai_provider import OpenAICompatibleProvider
from design_service.models.schemas.catalog import ComponentCatalog, load_catalog
from design_service.services.pipeline import DesignPipeline

from design_service.utils.logging import get_logger, log_context

# Import routers
from design_service.api.v1 import health, tools

logger = get_logger(__name__)


def create_provider() -> Optional[BaseLLMProvider]:
    """Provider from settings, or None when no API key is configured"""
    try:
        return OpenAICompatibleProvider(settings.llm_config)
    except ValueError as e:
        logger.warning(
            "app.startup.provider.unavailable",
            "Running without a text-generation provider; block design is disabled",
            extra={"reason": str(e)}
        )
        return None


def install_services(
    app: FastAPI,
    provider: Optional[BaseLLMProvider],
    catalog: ComponentCatalog,
) -> DesignPipeline:
    """Attach the pipeline and the tool dispatcher to the app state"""
    pipeline = DesignPipeline(provider, catalog)
    app.state.pipeline = pipeline
    app.state.dispatcher = tools.ToolDispatcher(pipeline)
    return pipeline


# ============================================================================
# APPLICATION LIFESPAN
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan with structured logging"""

    setup_logging()
    correlation_id = str(uuid.uuid4())

    with log_context(correlation_id=correlation_id, operation="startup"):
        logger.info(
            "app.startup.started",
            extra={
                "service": settings.app_name,
                "version": settings.app_version,
                "debug": settings.debug
            }
        )

        catalog = load_catalog(settings.catalog_paths, settings.catalog_group_title)
        logger.info(
            "app.startup.catalog.loaded",
            extra={"components": len(catalog), "source": catalog.source}
        )

        provider = create_provider()
        install_services(app, provider, catalog)

        logger.info(
            "app.startup.completed",
            extra={"status": "ready", "provider_configured": provider is not None}
        )

    yield

    with log_context(correlation_id=str(uuid.uuid4()), operation="shutdown"):
        logger.info(
            "app.shutdown.completed",
            extra={"stats": app.state.pipeline.get_stats()}
        )


# ============================================================================
# FASTAPI APP
# ============================================================================

app = FastAPI(
    title=settings.api_title,
    version=settings.app_version,
    description="Splits UI requirements into design blocks and designs each block against a component catalog",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# REQUEST/RESPONSE LOGGING MIDDLEWARE
# ============================================================================

@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """Log all HTTP requests with correlation tracking"""

    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())

    start_time = time.time()

    with log_context(correlation_id=correlation_id, operation=request.url.path):
        logger.info(
            "http.request.received",
            extra={
                "path": request.url.path,
                "method": request.method,
                "client_ip": request.client.host if request.client else None,
            }
        )

        try:
            response = await call_next(request)

            logger.performance(
                "http.request.completed",
                duration_ms=(time.time() - start_time) * 1000,
                extra={
                    "status_code": response.status_code,
                    "path": request.url.path,
                    "method": request.method
                }
            )

            response.headers["X-Correlation-ID"] = correlation_id
            return response

        except Exception as e:
            logger.error(
                "http.request.failed",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": (time.time() - start_time) * 1000
                },
                exc_info=e
            )
            raise


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler with structured logging"""

    logger.error(
        "app.exception.unhandled",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__
        },
        exc_info=exc
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later.",
            "correlation_id": request.headers.get("X-Correlation-ID", "unknown")
        }
    )


# ============================================================================
# ROUTERS
# ============================================================================

app.include_router(health.router)

app.include_router(
    tools.router,
    prefix="/api/v1",
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "design_service.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
