"""Data models for the image relay.

This module contains all Pydantic models used throughout the application,
ensuring strict type safety and runtime validation."""

# Import all enums
from .enums import GenerationOutcome, PredictionStatus, QuotaDecision, TERMINAL_STATUSES

# Import quota models
from .quota import QuotaRecord, QuotaResult

# Import provider models
from .prediction import PredictionJob, PredictionUrls

# Import generation models
from .generation import GenerationRequest, GenerationResult

__all__ = [
    # Enums
    "GenerationOutcome",
    "PredictionStatus",
    "QuotaDecision",
    "TERMINAL_STATUSES",
    # Quota models
    "QuotaRecord",
    "QuotaResult",
    # Provider models
    "PredictionJob",
    "PredictionUrls",
    # Generation models
    "GenerationRequest",
    "GenerationResult",
]
