"""Generation request/response models for the image relay."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class GenerationRequest(BaseModel):
    """Inbound generation request body.

    Both fields are optional at the parsing layer so that missing values are
    reported by the relay with its own message instead of a framework 422.
    """

    model_config = ConfigDict(extra="ignore")

    prompt: Optional[str] = Field(default=None, description="Text prompt")
    image: Optional[str] = Field(default=None, description="Image URL or data URI")


class GenerationResult(BaseModel):
    """Transport-neutral outcome of a generation call."""

    status_code: int = Field(..., ge=100, le=599, description="HTTP status to return")
    body: Dict[str, Any] = Field(default_factory=dict, description="JSON response body")

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def success(cls, result: str) -> "GenerationResult":
        return cls(status_code=200, body={"result": result})

    @classmethod
    def client_error(cls, message: str) -> "GenerationResult":
        return cls(status_code=400, body={"error": message})

    @classmethod
    def server_error(
        cls, message: str, details: Any = None, status_code: int = 500, **extra: Any
    ) -> "GenerationResult":
        return cls(status_code=status_code, body={"error": message, "details": details, **extra})
