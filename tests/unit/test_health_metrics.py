"""Unit tests for the health and metrics service."""

import pytest

from models import GenerationOutcome, QuotaDecision, QuotaResult
from services import HealthMetricsService, QuotaGate


class TestHealthMetricsService:
    """Test cases for HealthMetricsService class."""

    @pytest.fixture
    def health_service(self, mock_config, quota_store) -> HealthMetricsService:
        return HealthMetricsService(mock_config, QuotaGate(mock_config, quota_store))

    @pytest.mark.asyncio
    async def test_quota_rejection_counts_as_outcome(self, health_service) -> None:
        health_service.record_quota_decision(
            QuotaResult(decision=QuotaDecision.ALLOWED, client_key="a", count=1, limit=4)
        )
        health_service.record_quota_decision(
            QuotaResult(decision=QuotaDecision.REJECTED, client_key="a", count=4, limit=4)
        )

        data = await health_service.get_metrics_data()

        assert data["quota_decisions"] == {"allowed": 1, "rejected": 1}
        assert data["generation_requests"] == {"quota_rejected": 1}

    @pytest.mark.asyncio
    async def test_generation_and_poll_accounting(self, health_service) -> None:
        health_service.record_generation(GenerationOutcome.SUCCESS, 2.5)
        health_service.record_generation(GenerationOutcome.TIMEOUT, 300.0)
        health_service.record_polls(3)
        health_service.record_polls(0)

        data = await health_service.get_metrics_data()

        assert data["generation_requests"] == {"success": 1, "timeout": 1}
        assert data["prediction_polls"] == 3

    @pytest.mark.asyncio
    async def test_health_status(self, health_service, quota_store) -> None:
        health_service.quota_gate.check_and_consume("198.51.100.1")

        status = await health_service.get_health_status()

        assert status["status"] == "healthy"
        assert status["model"] == "google/nano-banana-pro"
        assert status["tracked_clients"] == 1
        assert status["uptime_seconds"] >= 0

    def test_prometheus_exposition(self, health_service) -> None:
        health_service.record_generation(GenerationOutcome.SUCCESS, 1.0)

        text = health_service.get_prometheus_metrics().decode()

        assert "relay_generation_duration_seconds_bucket" in text
        assert 'relay_generation_requests_total{outcome="success"}' in text
