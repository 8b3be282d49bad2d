"""Enumeration types for image relay models."""

from enum import Enum


class PredictionStatus(str, Enum):
    """Lifecycle states of a provider prediction job."""

    STARTING = "starting"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset(
    {PredictionStatus.SUCCEEDED, PredictionStatus.FAILED, PredictionStatus.CANCELED}
)


class QuotaDecision(str, Enum):
    """Outcome of a quota check."""

    ALLOWED = "allowed"
    REJECTED = "rejected"


class GenerationOutcome(str, Enum):
    """Outcome labels used for request accounting."""

    SUCCESS = "success"
    CLIENT_ERROR = "client_error"
    QUOTA_REJECTED = "quota_rejected"
    PROVIDER_ERROR = "provider_error"
    PREDICTION_FAILED = "prediction_failed"
    TIMEOUT = "timeout"
    ERROR = "error"
