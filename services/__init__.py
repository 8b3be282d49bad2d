"""Service layer for the image relay."""

from .exceptions import (
    PredictionTimeoutError,
    ProviderError,
    ProviderRequestError,
    ProviderResponseError,
    RelayError,
)
from .generation_relay import GenerationRelay
from .health_metrics import HealthMetricsService
from .quota_gate import QuotaGate
from .quota_store import InMemoryQuotaStore, QuotaStore
from .replicate_client import ReplicateClient

__all__ = [
    "GenerationRelay",
    "HealthMetricsService",
    "InMemoryQuotaStore",
    "PredictionTimeoutError",
    "ProviderError",
    "ProviderRequestError",
    "ProviderResponseError",
    "QuotaGate",
    "QuotaStore",
    "RelayError",
    "ReplicateClient",
]
