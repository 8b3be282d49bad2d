"""Image generation router for the image relay."""

import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from models import GenerationRequest
from services import GenerationRelay, HealthMetricsService, QuotaGate
from utils import client_key_from_request, get_logger

router = APIRouter(prefix="/api", tags=["generate"])
logger = get_logger(__name__)

QUOTA_EXCEEDED_MESSAGE = "Daily limit reached. Please come back tomorrow!"


def get_quota_gate(request: Request) -> QuotaGate:
    """Dependency to get the quota gate from application state."""
    return request.app.state.quota_gate  # type: ignore[no-any-return]


def get_relay(request: Request) -> GenerationRelay:
    """Dependency to get the generation relay from application state."""
    return request.app.state.relay  # type: ignore[no-any-return]


def get_health_service(request: Request) -> HealthMetricsService:
    """Dependency to get health service from application state."""
    return request.app.state.health_metrics  # type: ignore[no-any-return]


@router.post("/generate")
async def generate(
    payload: GenerationRequest,
    request: Request,
    quota_gate: QuotaGate = Depends(get_quota_gate),
    relay: GenerationRelay = Depends(get_relay),
    health_service: HealthMetricsService = Depends(get_health_service),
) -> JSONResponse:
    """Relay a prompt and image to the inference provider."""
    client_key = client_key_from_request(request, quota_gate.config.client_ip_header)

    # No await between here and the decision: the quota update stays atomic.
    quota = quota_gate.check_and_consume(client_key)
    health_service.record_quota_decision(quota)
    if not quota.allowed:
        logger.info("Generation rejected by quota", client_key=client_key, limit=quota.limit)
        return JSONResponse(status_code=429, content={"error": QUOTA_EXCEEDED_MESSAGE})

    started = time.monotonic()
    result, outcome = await relay.generate_with_outcome(payload)
    health_service.record_generation(outcome, time.monotonic() - started)

    logger.info(
        "Generation request finished",
        client_key=client_key,
        outcome=outcome.value,
        status_code=result.status_code,
        quota_used=quota.count,
    )
    return JSONResponse(status_code=result.status_code, content=result.body)
