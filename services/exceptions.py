"""Exception types raised by relay services."""

from typing import Any, Optional

from models import PredictionJob


class RelayError(Exception):
    """Base class for relay errors."""


class ProviderError(RelayError):
    """The inference provider could not be used."""


class ProviderResponseError(ProviderError):
    """The provider answered with a non-success HTTP status."""

    def __init__(self, status_code: int, details: Any) -> None:
        super().__init__(f"Provider returned HTTP {status_code}")
        self.status_code = status_code
        self.details = details


class ProviderRequestError(ProviderError):
    """The provider could not be reached or returned an unreadable response."""


class PredictionTimeoutError(RelayError):
    """A prediction did not reach a terminal state before the poll deadline."""

    def __init__(self, job: PredictionJob, timeout_seconds: float, polls: Optional[int] = None) -> None:
        super().__init__(
            f"Prediction {job.id} still {job.status.value} after {timeout_seconds:g}s"
        )
        self.job = job
        self.timeout_seconds = timeout_seconds
        self.polls = polls
