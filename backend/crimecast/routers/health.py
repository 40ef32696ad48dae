"""Health and readiness endpoints."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from crimecast.config import Settings, get_settings
from crimecast.dependencies import get_incident_store
from crimecast.services.incident_store import IncidentStore

router = APIRouter(tags=["health"])


class IncidentStoreStatus(BaseModel):
    """Status of the in-memory incident store."""

    record_count: int
    date_range: list[str] | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    oracle_configured: bool
    incidents: IncidentStoreStatus


@router.get("/health", response_model=HealthResponse)
async def health_check(
    store: Annotated[IncidentStore, Depends(get_incident_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """
    Health check endpoint.

    Reports the incident store size and whether a Gemini API key is set.
    """
    span = store.date_range()
    date_range = [str(span[0]), str(span[1])] if span else None

    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        oracle_configured=bool(settings.gemini_api_key),
        incidents=IncidentStoreStatus(record_count=len(store), date_range=date_range),
    )


@router.get("/ready")
async def readiness_check() -> dict:
    """Simple readiness probe for container orchestration."""
    return {"status": "ready"}


@router.get("/live")
async def liveness_check() -> dict:
    """Simple liveness probe for container orchestration."""
    return {"status": "alive"}
