"""Quota management models for the image relay."""

from pydantic import BaseModel, Field

from .enums import QuotaDecision


class QuotaRecord(BaseModel):
    """Usage counter for one client on one calendar day."""

    client_key: str = Field(..., description="Client identifier, usually an IP address")
    date_stamp: str = Field(..., description="UTC calendar day in ISO format (YYYY-MM-DD)")
    count: int = Field(default=0, ge=0, description="Generations consumed on date_stamp")


class QuotaResult(BaseModel):
    """Result of a check-and-consume call."""

    decision: QuotaDecision = Field(..., description="Whether the request may proceed")
    client_key: str = Field(..., description="Client identifier that was checked")
    count: int = Field(..., ge=0, description="Generations consumed today after this check")
    limit: int = Field(..., gt=0, description="Configured daily maximum")

    @property
    def allowed(self) -> bool:
        return self.decision == QuotaDecision.ALLOWED

    @property
    def remaining(self) -> int:
        return max(self.limit - self.count, 0)
