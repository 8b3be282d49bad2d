"""Provider prediction resource models for the image relay."""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .enums import PredictionStatus


class PredictionUrls(BaseModel):
    """Links returned with a prediction resource."""

    model_config = ConfigDict(extra="ignore")

    get: str = Field(..., description="Per-job status endpoint")
    cancel: Optional[str] = Field(default=None, description="Per-job cancel endpoint")


class PredictionJob(BaseModel):
    """Local snapshot of a provider prediction job.

    The provider owns the job; every poll replaces this snapshot wholesale.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Opaque provider job identifier")
    status: PredictionStatus = Field(..., description="Current lifecycle state")
    urls: PredictionUrls = Field(..., description="Job links")
    output: Optional[Union[str, List[str]]] = Field(default=None, description="Image reference(s)")
    error: Optional[Any] = Field(default=None, description="Provider-reported error detail")

    @property
    def poll_url(self) -> str:
        return self.urls.get

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def first_output(self) -> Optional[str]:
        """Return the first image reference, or the bare output when it is not a list."""
        if isinstance(self.output, list):
            return self.output[0] if self.output else None
        return self.output
