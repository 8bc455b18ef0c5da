"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storysky.api.router import router as api_router
from storysky.api.routes.push import router as push_router
from storysky.config import Settings, get_settings
from storysky.domain.errors import DomainError, ErrorCode
from storysky.infrastructure.activity_log import ActivityLog, FileActivityLog, MemoryActivityLog
from storysky.infrastructure.document_store import (
    DocumentStore,
    JsonFileDocumentStore,
    MemoryDocumentStore,
)
from storysky.infrastructure.push_client import PushNotifier, load_vapid_keys
from storysky.repositories.entity_store import EntityStore
from storysky.services.recommender import Recommender

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.VALIDATION_FAILED: 400,
    ErrorCode.NOT_FOUND: 404,
}


def build_storage(settings: Settings) -> tuple[DocumentStore, ActivityLog]:
    """Create the document gateway and activity log for the configured backend."""
    if settings.uses_file_storage:
        return JsonFileDocumentStore(settings.data_file), FileActivityLog(settings.activity_file)
    return MemoryDocumentStore(), MemoryActivityLog()


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "Invalid request: " + "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure onto the {"error": message} envelope."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        return JSONResponse({"error": exc.message}, status_code=ERROR_STATUS.get(exc.code, 400))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse({"error": _format_validation_errors(exc)}, status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            {"error": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse({"error": "Internal server error"}, status_code=500)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Loads persisted state and the VAPID key pair eagerly, so a missing key
    file fails here rather than on the first request.

    Raises:
        RuntimeError: If the VAPID key file is missing or malformed
    """
    settings = settings or get_settings()

    try:
        vapid_keys = load_vapid_keys(settings.vapid_file)
    except RuntimeError as e:
        logger.critical(str(e))
        raise

    gateway, activity_log = build_storage(settings)
    store = EntityStore(gateway)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler for startup/shutdown."""
        logger.info("Starting StorySky backend...")
        logger.info(f"Environment: {settings.environment}, storage: {gateway.name}")
        yield
        logger.info("Shutting down StorySky backend...")

    docs_kwargs = {}
    if settings.is_production:
        docs_kwargs = {"docs_url": None, "redoc_url": None, "openapi_url": None}

    app = FastAPI(
        title="StorySky",
        description="Short story sharing with comments, likes and recommendations",
        version="0.1.0",
        lifespan=lifespan,
        **docs_kwargs,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.activity_log = activity_log
    app.state.recommender = Recommender(store, activity_log)
    app.state.notifier = PushNotifier(vapid_keys, subject=settings.vapid_subject)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Include routers
    app.include_router(api_router)
    app.include_router(push_router)

    @app.get("/health")
    async def health_check() -> JSONResponse:
        """Lightweight liveness check."""
        return JSONResponse({"status": "healthy", "storage": gateway.name})

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
