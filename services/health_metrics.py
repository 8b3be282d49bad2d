"""Health and metrics service for the image relay.

This service provides health reporting and request accounting.
"""

import time
from collections import Counter as Tally
from datetime import datetime, timezone
from typing import Any, Dict

from prometheus_client import Counter, Histogram, generate_latest

from config import ApplicationConfig
from models import GenerationOutcome, QuotaResult
from utils import get_logger
from .quota_gate import QuotaGate

generation_requests = Counter(
    "relay_generation_requests_total",
    "Total number of generation requests handled",
    ["outcome"]
)

quota_decisions = Counter(
    "relay_quota_decisions_total",
    "Total number of quota gate decisions",
    ["decision"]
)

generation_duration = Histogram(
    "relay_generation_duration_seconds",
    "Time spent relaying a generation request",
    buckets=(1, 2.5, 5, 10, 20, 30, 60, 120, 300),
)

prediction_polls = Counter(
    "relay_prediction_polls_total",
    "Total number of prediction status fetches"
)


class HealthMetricsService:
    """Tracks relay activity and reports health."""

    def __init__(self, config: ApplicationConfig, quota_gate: QuotaGate) -> None:
        self.config = config
        self.quota_gate = quota_gate
        self.logger = get_logger(__name__, service="health_metrics")

        self._start_time = time.time()
        self._outcomes: Tally = Tally()
        self._quota_decisions: Tally = Tally()
        self._polls = 0

    @property
    def uptime_seconds(self) -> int:
        return int(time.time() - self._start_time)

    def record_generation(self, outcome: GenerationOutcome, duration_seconds: float) -> None:
        self._outcomes[outcome.value] += 1
        generation_requests.labels(outcome=outcome.value).inc()
        generation_duration.observe(duration_seconds)

    def record_quota_decision(self, result: QuotaResult) -> None:
        self._quota_decisions[result.decision.value] += 1
        quota_decisions.labels(decision=result.decision.value).inc()
        if not result.allowed:
            # Rejections never reach the provider, so they stay out of the duration histogram.
            self._outcomes[GenerationOutcome.QUOTA_REJECTED.value] += 1
            generation_requests.labels(outcome=GenerationOutcome.QUOTA_REJECTED.value).inc()

    def record_polls(self, count: int) -> None:
        if count > 0:
            self._polls += count
            prediction_polls.inc(count)

    async def get_health_status(self) -> Dict[str, Any]:
        """Get application health status."""
        provider_configured = self.config.provider_configured
        return {
            "status": "healthy" if provider_configured else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": self.config.app_version,
            "uptime_seconds": self.uptime_seconds,
            "provider_configured": provider_configured,
            "model": self.config.replicate_model,
            "quota_enabled": self.quota_gate.enabled,
            "tracked_clients": len(self.quota_gate.store),
        }

    async def get_metrics_data(self) -> Dict[str, Any]:
        """Get request accounting as plain JSON."""
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime_seconds": self.uptime_seconds,
            "generation_requests": dict(self._outcomes),
            "quota_decisions": dict(self._quota_decisions),
            "prediction_polls": self._polls,
            "quota": {
                "enabled": self.quota_gate.enabled,
                "max_daily_generations": self.config.max_daily_generations,
                "tracked_clients": len(self.quota_gate.store),
            },
        }

    def get_prometheus_metrics(self) -> bytes:
        """Get Prometheus metrics in text exposition format."""
        return generate_latest()
