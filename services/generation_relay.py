"""Generation relay service for the image relay.

Drives one prediction from submission to a terminal state and maps the
outcome onto a response. Every failure is converted into a GenerationResult;
nothing raised here reaches the web layer.
"""

import asyncio
from typing import Callable, Optional, Tuple

from config import ApplicationConfig
from models import GenerationOutcome, GenerationRequest, GenerationResult, PredictionJob, PredictionStatus
from utils import get_logger, log_exception
from .exceptions import PredictionTimeoutError, ProviderRequestError, ProviderResponseError
from .replicate_client import ReplicateClient

GENERATION_FAILED = "Failed to generate image"
PREDICTION_FAILED = "Prediction failed"
PREDICTION_TIMED_OUT = "Prediction timed out"


def _is_blank(value: Optional[str]) -> bool:
    return not isinstance(value, str) or not value.strip()


class GenerationRelay:
    """Submit, poll and resolve image generation jobs."""

    def __init__(
        self,
        config: ApplicationConfig,
        client: ReplicateClient,
        on_poll: Optional[Callable[[PredictionJob], None]] = None,
    ) -> None:
        self.config = config
        self.client = client
        self.on_poll = on_poll
        self.logger = get_logger(__name__, service="generation_relay")

    @staticmethod
    def validate(request: GenerationRequest) -> Optional[str]:
        """Return the client-facing message for the first missing field, if any."""
        if _is_blank(request.prompt):
            return "Prompt is required"
        if _is_blank(request.image):
            return "Image is required"
        return None

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        result, _ = await self.generate_with_outcome(request)
        return result

    async def generate_with_outcome(
        self, request: GenerationRequest
    ) -> Tuple[GenerationResult, GenerationOutcome]:
        """Run a generation and also report its accounting outcome."""
        message = self.validate(request)
        if message:
            return GenerationResult.client_error(message), GenerationOutcome.CLIENT_ERROR

        try:
            job = await self.client.create_prediction(request.prompt, request.image)
            job = await self.wait_for_completion(job)
            return self._resolve(job)
        except ProviderResponseError as e:
            self.logger.error(
                "Provider rejected request",
                provider_status=e.status_code,
                details=e.details,
            )
            return (
                GenerationResult.server_error(
                    GENERATION_FAILED, e.details, status_code=502, provider_status=e.status_code
                ),
                GenerationOutcome.PROVIDER_ERROR,
            )
        except PredictionTimeoutError as e:
            self.logger.error(
                "Prediction timed out",
                prediction_id=e.job.id,
                status=e.job.status.value,
                timeout_seconds=e.timeout_seconds,
                polls=e.polls,
            )
            await self._cancel_quietly(e.job)
            details = {
                "id": e.job.id,
                "status": e.job.status.value,
                "timeout_seconds": e.timeout_seconds,
            }
            return (
                GenerationResult.server_error(PREDICTION_TIMED_OUT, details, status_code=504),
                GenerationOutcome.TIMEOUT,
            )
        except ProviderRequestError as e:
            log_exception(self.logger, e, "Provider request failed")
            return GenerationResult.server_error(GENERATION_FAILED, str(e)), GenerationOutcome.ERROR
        except Exception as e:
            log_exception(self.logger, e, "Unexpected error during generation")
            return GenerationResult.server_error(GENERATION_FAILED, str(e)), GenerationOutcome.ERROR

    async def wait_for_completion(self, job: PredictionJob) -> PredictionJob:
        """Poll the job's status URL until it is terminal or the deadline passes."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.config.poll_timeout_seconds
        polls = 0

        while not job.is_terminal:
            if loop.time() >= deadline:
                raise PredictionTimeoutError(job, self.config.poll_timeout_seconds, polls)
            await asyncio.sleep(self.config.poll_interval_seconds)
            job = await self.client.get_prediction(job.poll_url)
            polls += 1
            if self.on_poll:
                self.on_poll(job)
            self.logger.debug(
                "Polled prediction", prediction_id=job.id, status=job.status.value, polls=polls
            )

        self.logger.info(
            "Prediction reached terminal state",
            prediction_id=job.id,
            status=job.status.value,
            polls=polls,
        )
        return job

    def _resolve(self, job: PredictionJob) -> Tuple[GenerationResult, GenerationOutcome]:
        if job.status != PredictionStatus.SUCCEEDED:
            self.logger.error("Prediction failed", prediction_id=job.id, status=job.status.value, error=job.error)
            return GenerationResult.server_error(PREDICTION_FAILED, job.error), GenerationOutcome.PREDICTION_FAILED

        image_url = job.first_output()
        if not image_url:
            self.logger.error("Prediction succeeded without output", prediction_id=job.id)
            return (
                GenerationResult.server_error(PREDICTION_FAILED, "Prediction returned no output"),
                GenerationOutcome.PREDICTION_FAILED,
            )

        self.logger.info("Generation complete", prediction_id=job.id, result=image_url)
        return GenerationResult.success(image_url), GenerationOutcome.SUCCESS

    async def _cancel_quietly(self, job: PredictionJob) -> None:
        """Best-effort cancel of an abandoned job; failures are only logged."""
        if not job.urls.cancel:
            return
        try:
            await self.client.cancel_prediction(job.urls.cancel)
            self.logger.info("Cancelled timed out prediction", prediction_id=job.id)
        except Exception as e:
            log_exception(self.logger, e, "Failed to cancel prediction", prediction_id=job.id)
