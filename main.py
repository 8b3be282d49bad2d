"""Main application entry point for the image relay."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import ApplicationConfig, load_config
from middleware import (
    BodySizeLimitMiddleware,
    CorrelationMiddleware,
    RequestBodyTooLarge,
    body_too_large_handler,
)
from routers import generate_router, health_router, metrics_router
from services import (
    GenerationRelay,
    HealthMetricsService,
    InMemoryQuotaStore,
    QuotaGate,
    QuotaStore,
    ReplicateClient,
)
from utils import configure_logging, get_logger, log_exception


def init_services(
    app: FastAPI,
    config: ApplicationConfig,
    client: Optional[ReplicateClient] = None,
    quota_store: Optional[QuotaStore] = None,
) -> None:
    """Build the service graph and attach it to the application state."""
    quota_gate = QuotaGate(config, quota_store if quota_store is not None else InMemoryQuotaStore())
    health_metrics = HealthMetricsService(config, quota_gate)
    relay = GenerationRelay(
        config,
        client if client is not None else ReplicateClient(config),
        on_poll=lambda job: health_metrics.record_polls(1),
    )

    app.state.config = config
    app.state.quota_gate = quota_gate
    app.state.relay = relay
    app.state.health_metrics = health_metrics


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management."""
    config: ApplicationConfig = app.state.config
    logger = get_logger(__name__)

    if not config.provider_configured:
        logger.warning("REPLICATE_API_TOKEN is not set; generation requests will fail")

    logger.info(
        "Image relay started",
        model=config.replicate_model,
        quota_enabled=config.quota_enabled,
        max_daily_generations=config.max_daily_generations,
        port=config.server_port,
    )

    yield

    logger.info("Image relay stopped")


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_errors(exc)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log_exception(get_logger(__name__), exc, "Unhandled error", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": str(exc)},
    )


def create_app(
    config: Optional[ApplicationConfig] = None,
    client: Optional[ReplicateClient] = None,
    quota_store: Optional[QuotaStore] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The provider client and quota store can be injected, which is how tests
    swap in mocks and how a shared quota store would be wired in.
    """
    config = config or load_config()
    configure_logging(config.log_level, json_output=config.log_json)

    app = FastAPI(
        title=config.app_name,
        description="Relays prompt and image pairs to a hosted image-generation model",
        version=config.app_version,
        lifespan=lifespan,
    )
    init_services(app, config, client=client, quota_store=quota_store)

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=config.max_body_bytes)
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RequestBodyTooLarge, body_too_large_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(generate_router)
    app.include_router(health_router)
    app.include_router(metrics_router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    config = app.state.config
    uvicorn.run(app, host=config.server_host, port=config.server_port)
