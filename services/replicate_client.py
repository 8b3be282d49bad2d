"""Replicate client service for the image relay.

This module handles all communication with the Replicate predictions API.
"""

import asyncio
from collections import namedtuple
from typing import Any, Dict, Optional

import requests

from config import ApplicationConfig
from models import PredictionJob
from utils import get_logger, get_correlation_id
from .exceptions import ProviderRequestError, ProviderResponseError

# Result object to pass between sync and async contexts
SyncRequestResult = namedtuple("SyncRequestResult", ["status_code", "json_data", "error"])


def _response_payload(response: requests.Response) -> Any:
    """Decode a provider body as JSON, falling back to raw text."""
    try:
        return response.json()
    except ValueError:
        return response.text


class ReplicateClient:
    """Async facade over blocking `requests` calls to the provider.

    Each request runs on the default executor so the event loop keeps serving
    other callers while a prediction is submitted or polled.
    """

    def __init__(self, config: ApplicationConfig) -> None:
        self.config = config
        self.logger = get_logger(__name__, service="replicate_client")

    @property
    def predictions_url(self) -> str:
        return f"{self.config.replicate_base_url}/models/{self.config.replicate_model}/predictions"

    def _headers(self) -> Dict[str, str]:
        headers = {
            "User-Agent": f"image-relay/{self.config.app_version}",
            "Authorization": f"Bearer {self.config.replicate_api_token}",
            "Content-Type": "application/json",
        }
        correlation_id = get_correlation_id()
        if correlation_id:
            headers["X-Correlation-ID"] = correlation_id
        return headers

    def _execute_sync_request(
        self,
        method: str,
        url: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> SyncRequestResult:
        """Executes a synchronous HTTP request and returns a result object."""
        try:
            with requests.Session() as session:
                response = session.request(
                    method=method.upper(),
                    url=url,
                    json=data,
                    timeout=self.config.provider_timeout_seconds,
                    headers=headers,
                )
                return SyncRequestResult(
                    status_code=response.status_code,
                    json_data=_response_payload(response),
                    error=None,
                )
        except requests.exceptions.RequestException as e:
            self.logger.error(f"SYNC HTTP request failed: {e}", method=method.upper(), url=url)
            return SyncRequestResult(status_code=None, json_data=None, error=str(e))

    async def _make_async_request(
        self,
        method: str,
        url: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Run the sync request on the executor and translate failures into exceptions."""
        # Headers are built here so the request's correlation ID is read in its own context.
        headers = self._headers()
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(
            None, self._execute_sync_request, method, url, data, headers
        )
        if result.error:
            raise ProviderRequestError(result.error)
        if not 200 <= result.status_code < 300:
            raise ProviderResponseError(result.status_code, result.json_data)
        return result.json_data

    def _parse_job(self, payload: Any) -> PredictionJob:
        if not isinstance(payload, dict):
            raise ProviderRequestError(f"Unexpected prediction payload: {payload!r}")
        return PredictionJob.model_validate(payload)

    async def create_prediction(self, prompt: str, image: str) -> PredictionJob:
        """Submit a new prediction for the configured model."""
        body = {
            "input": {
                # The model expects a list even for a single image.
                "image_input": [image],
                "prompt": prompt,
                "output_format": self.config.output_format,
            }
        }
        self.logger.info(
            "Submitting prediction",
            model=self.config.replicate_model,
            prompt_length=len(prompt),
        )
        payload = await self._make_async_request("POST", self.predictions_url, data=body)
        job = self._parse_job(payload)
        self.logger.info("Prediction created", prediction_id=job.id, status=job.status.value)
        return job

    async def get_prediction(self, url: str) -> PredictionJob:
        """Fetch the current state of a prediction from its status URL."""
        payload = await self._make_async_request("GET", url)
        return self._parse_job(payload)

    async def cancel_prediction(self, url: str) -> PredictionJob:
        """Request cancellation of a running prediction."""
        payload = await self._make_async_request("POST", url)
        return self._parse_job(payload)
