"""ASGI entry point: ``uvicorn aioffice.main:app``.

Logging is configured at import so that messages emitted while the
application is assembled are already structured.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aioffice import __version__
from aioffice.api import router as api_router
from aioffice.core.config import settings
from aioffice.core.logging import get_logger, setup_logging
from aioffice.db.session import engine
from aioffice.services.workflow.runner import get_runner

setup_logging(
    log_level=settings.LOG_LEVEL,
    log_file=settings.LOG_FILE,
    service_name=settings.PROJECT_NAME,
    enable_json=settings.LOG_JSON_FORMAT,
    enable_sensitive_filter=settings.LOG_SENSITIVE_FILTER,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:  # noqa: ARG001 - Required by FastAPI lifespan interface
    """Log startup; on shutdown let in-flight runs finish before closing pools.

    Runs write their terminal state from their own task, so the runner is
    drained before its HTTP clients and the database engine are closed.
    """
    logger.info(
        f"Starting {settings.PROJECT_NAME} {__version__}",
        extra={
            "context": {
                "action": "application_startup",
                "debug": settings.DEBUG,
                "log_level": settings.LOG_LEVEL,
                "text_generation": bool(settings.AI_GATEWAY_API_KEY),
                "url_guard": settings.OUTBOUND_URL_GUARD_ENABLED,
            }
        },
    )

    yield

    runner = get_runner()
    logger.info(
        "Draining workflow runs before shutdown",
        extra={
            "context": {
                "action": "application_shutdown",
                "active_runs": runner.scheduler.active,
            }
        },
    )
    await runner.shutdown()
    await engine.dispose()
    logger.info(
        "Shutdown complete",
        extra={"context": {"action": "application_shutdown", "status": "success"}},
    )


service_router = APIRouter(tags=["Service"])


@service_router.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "healthy"}


@service_router.get("/")
async def root() -> dict[str, str]:
    """Service name, version and docs location."""
    return {
        "name": settings.PROJECT_NAME,
        "version": __version__,
        "docs": "/docs",
    }


def create_app() -> FastAPI:
    """Assemble the application: CORS, versioned API and service routes."""
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Workflow execution engine for AI Office",
        version=__version__,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(api_router, prefix=settings.API_V1_PREFIX)
    application.include_router(service_router)
    return application


app = create_app()
