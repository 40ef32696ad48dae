"""API routes for browsing the incident store."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from crimecast.dependencies import get_incident_store
from crimecast.schemas.incident import IncidentQuery, IncidentSummary
from crimecast.services.incident_store import IncidentStore
from crimecast.services.query_tool import query_incidents

router = APIRouter(prefix="/incidents", tags=["incidents"])


@router.get("", response_model=list[IncidentSummary])
async def list_incidents(
    store: Annotated[IncidentStore, Depends(get_incident_store)],
    crime_type: str | None = Query(None, alias="crimeType", description="Filter by crime type"),
    police_station: str | None = Query(
        None, alias="policeStation", description="Filter by police station"
    ),
    start_date: date | None = Query(None, alias="startDate", description="First day (inclusive)"),
    end_date: date | None = Query(None, alias="endDate", description="Last day (inclusive)"),
) -> list[IncidentSummary]:
    """
    Search incidents.

    Same lookup the chat assistant uses: filters are optional,
    case-insensitive, and date bounds are inclusive.
    """
    query = IncidentQuery(
        crime_type=crime_type,
        police_station=police_station,
        start_date=start_date,
        end_date=end_date,
    )
    return query_incidents(store, query)


@router.get("/stations", response_model=list[str])
async def list_stations(
    store: Annotated[IncidentStore, Depends(get_incident_store)],
) -> list[str]:
    """Get list of all police stations."""
    return store.police_stations()


@router.get("/crime-types", response_model=list[str])
async def list_crime_types(
    store: Annotated[IncidentStore, Depends(get_incident_store)],
) -> list[str]:
    """Get list of all crime types."""
    return store.crime_types()
