"""Test utilities and fixtures for image relay tests."""

import os
import sys
from datetime import date
from typing import Any, AsyncGenerator, Dict, List, Optional, Union
from unittest.mock import AsyncMock

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Importing main builds an app from the environment; keep it deterministic.
os.environ.setdefault("REPLICATE_API_TOKEN", "test-token")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from config import ApplicationConfig
from main import create_app
from models import PredictionJob
from services import InMemoryQuotaStore, ReplicateClient

TEST_STATUS_URL = "https://api.replicate.test/v1/predictions/pred-001"
TEST_CANCEL_URL = "https://api.replicate.test/v1/predictions/pred-001/cancel"


def make_prediction(
    status: str,
    output: Optional[Union[str, List[str]]] = None,
    error: Any = None,
    prediction_id: str = "pred-001",
) -> PredictionJob:
    """Build a prediction snapshot as the provider would return it."""
    return PredictionJob.model_validate(create_mock_prediction_payload(status, output, error, prediction_id))


def create_mock_prediction_payload(
    status: str,
    output: Optional[Union[str, List[str]]] = None,
    error: Any = None,
    prediction_id: str = "pred-001",
) -> Dict[str, Any]:
    """Create a raw provider prediction resource for testing."""
    return {
        "id": prediction_id,
        "model": "google/nano-banana-pro",
        "version": "hidden",
        "status": status,
        "input": {"prompt": "a cat", "output_format": "jpg"},
        "output": output,
        "error": error,
        "logs": "",
        "created_at": "2025-01-15T10:00:00Z",
        "urls": {"get": TEST_STATUS_URL, "cancel": TEST_CANCEL_URL},
    }


class FakeClock:
    """Controllable replacement for the quota gate's calendar clock."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def mock_config() -> ApplicationConfig:
    """Create a configuration for testing with fast polling."""
    return ApplicationConfig(
        replicate_api_token="test-token",
        replicate_base_url="https://api.replicate.test/v1",
        replicate_model="google/nano-banana-pro",
        poll_interval_seconds=0,
        poll_timeout_seconds=5,
        max_daily_generations=4,
        quota_enabled=True,
        log_level="WARNING",
    )


@pytest.fixture
def mock_replicate_client() -> AsyncMock:
    """Create a mock provider client."""
    mock_client = AsyncMock(spec=ReplicateClient)
    mock_client.create_prediction = AsyncMock(
        return_value=make_prediction("succeeded", output=["http://x/img.jpg"])
    )
    mock_client.get_prediction = AsyncMock()
    mock_client.cancel_prediction = AsyncMock(return_value=make_prediction("canceled"))
    return mock_client


@pytest.fixture
def quota_store() -> InMemoryQuotaStore:
    return InMemoryQuotaStore()


@pytest.fixture
def relay_app(mock_config, mock_replicate_client, quota_store) -> FastAPI:
    """Create the FastAPI app wired to the mock provider client."""
    return create_app(mock_config, client=mock_replicate_client, quota_store=quota_store)


@pytest_asyncio.fixture(scope="function")
async def test_client(relay_app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client for the app."""
    transport = ASGITransport(app=relay_app, client=("203.0.113.9", 51000))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def create_mock_generation_request() -> Dict[str, Any]:
    """Create a generation request body for testing."""
    return {
        "prompt": "Turn this photo into a watercolor painting",
        "image": "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg==",
    }
