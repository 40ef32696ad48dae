"""API route for patrol route generation."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from crimecast.config import Settings, get_settings
from crimecast.dependencies import get_incident_store
from crimecast.schemas.route import GenerateRouteRequest, PatrolRoute
from crimecast.services.hotspots import select_hotspots
from crimecast.services.incident_store import IncidentStore
from crimecast.services.routing import build_route

logger = logging.getLogger(__name__)
router = APIRouter(tags=["patrol"])


@router.post("/generate-route", response_model=PatrolRoute)
async def generate_route(
    body: GenerateRouteRequest,
    store: Annotated[IncidentStore, Depends(get_incident_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PatrolRoute:
    """
    Patrol route over the hotspots of a forecast.

    Takes the response of ``/predict-crime`` and returns the hotspots to
    visit in order, with total distance and estimated patrol time.
    """
    candidates = select_hotspots(
        body.predicted_data,
        store,
        police_station=body.police_station,
        max_oracle_hotspots=settings.max_oracle_hotspots,
        max_derived_hotspots=settings.max_derived_hotspots,
    )
    return build_route(
        candidates,
        ordering=settings.route_ordering,
        speed_kmh=settings.patrol_speed_kmh,
    )
