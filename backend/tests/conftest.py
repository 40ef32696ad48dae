"""Pytest fixtures for CrimeCast backend tests."""

import json
import time
from collections.abc import AsyncGenerator
from datetime import UTC, date, datetime
from typing import Any
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from crimecast.config import Settings, get_settings
from crimecast.dependencies import get_gemini_client, get_incident_store
from crimecast.limiter import limiter
from crimecast.main import app
from crimecast.schemas.common import Position
from crimecast.schemas.forecast import DateRange, PredictCrimeRequest
from crimecast.schemas.incident import IncidentRecord
from crimecast.services.gemini_client import GeminiClient
from crimecast.services.incident_store import IncidentStore


def gemini_response(text: str | None = None, parts: list[dict] | None = None) -> dict[str, Any]:
    """Raw generateContent response with a single candidate."""
    if parts is None:
        parts = [{"text": text or ""}]
    return {"candidates": [{"content": {"role": "model", "parts": parts}}]}


def gemini_json_response(payload: Any) -> dict[str, Any]:
    """generateContent response whose text is ``payload`` serialized as JSON."""
    return gemini_response(json.dumps(payload))


def make_incident(
    id: str,
    crime_type: str,
    station: str,
    occurred_at: datetime,
    lat: float = 28.6,
    lng: float = 77.2,
) -> IncidentRecord:
    return IncidentRecord(
        id=id,
        position=Position(lat=lat, lng=lng),
        crime_type=crime_type,
        occurred_at=occurred_at,
        police_station=station,
    )


@pytest.fixture(autouse=True)
def utc_local_time(monkeypatch):
    """Run every test with the process time zone set to UTC."""
    if hasattr(time, "tzset"):
        monkeypatch.setenv("TZ", "UTC0")
        time.tzset()
    yield
    if hasattr(time, "tzset"):
        monkeypatch.undo()
        time.tzset()


@pytest.fixture
def kolkata_local_time(monkeypatch):
    """Switch the process time zone to Indian Standard Time (UTC+05:30)."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "IST-05:30")
    time.tzset()


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults."""
    return Settings(
        gemini_api_key="test_key",
        oracle_timeout_seconds=5.0,
        debug=True,
    )


@pytest.fixture
def today() -> date:
    """Reference day splitting history from future in unit tests."""
    return date(2024, 9, 10)


@pytest.fixture
def sample_incidents() -> list[IncidentRecord]:
    """Hand-written incidents around the 2024-09-10 reference day."""
    return [
        make_incident("FIR1", "Theft", "Connaught Place", datetime(2024, 9, 1, 10, 0, tzinfo=UTC), 28.60, 77.20),
        make_incident("FIR2", "Theft", "Karol Bagh", datetime(2024, 9, 1, 15, 0, tzinfo=UTC), 28.65, 77.19),
        make_incident("FIR3", "Accident", "Connaught Place", datetime(2024, 9, 5, 9, 0, tzinfo=UTC), 28.62, 77.21),
        make_incident("FIR4", "Harassment", "Hauz Khas", datetime(2024, 9, 10, 20, 0, tzinfo=UTC), 28.55, 77.20),
        make_incident("FIR5", "Theft", "Hauz Khas", datetime(2024, 9, 10, 8, 30, tzinfo=UTC), 28.54, 77.19),
        # Before the usual test range
        make_incident("FIR6", "Theft", "Connaught Place", datetime(2024, 8, 31, 23, 0, tzinfo=UTC), 28.63, 77.22),
        # After the reference day
        make_incident("FIR7", "Theft", "Karol Bagh", datetime(2024, 9, 12, 11, 0, tzinfo=UTC), 28.66, 77.18),
    ]


@pytest.fixture
def store(sample_incidents) -> IncidentStore:
    return IncidentStore(sample_incidents)


@pytest.fixture
def forecast_request() -> PredictCrimeRequest:
    """Sep 1 to Sep 20, all stations, thefts only."""
    return PredictCrimeRequest(
        date_range=DateRange(start_date=date(2024, 9, 1), end_date=date(2024, 9, 20)),
        police_station="all",
        crime_types=["Theft"],
    )


@pytest.fixture
def mock_gemini_client() -> GeminiClient:
    """Gemini client whose HTTP layer is mocked."""
    client = GeminiClient(api_key="test_key", max_retries=2)
    client._request_with_retry = AsyncMock()
    return client


@pytest_asyncio.fixture
async def client(
    store: IncidentStore,
    mock_gemini_client: GeminiClient,
    test_settings: Settings,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with the store, settings and Gemini client overridden."""
    app.dependency_overrides[get_incident_store] = lambda: store
    app.dependency_overrides[get_gemini_client] = lambda: mock_gemini_client
    app.dependency_overrides[get_settings] = lambda: test_settings
    limiter.enabled = False

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    limiter.enabled = True
    app.dependency_overrides.clear()
