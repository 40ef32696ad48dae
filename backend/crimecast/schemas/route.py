"""Pydantic schemas for patrol routes."""

from pydantic import Field

from crimecast.schemas.common import CamelModel, Position
from crimecast.schemas.forecast import PredictCrimeResponse, RiskLevel


class HotspotCandidate(CamelModel):
    """Unordered location proposed for a patrol."""

    id: str
    position: Position
    name: str | None = None
    description: str | None = None
    risk_level: RiskLevel | None = None
    predicted_crime_type: str | None = None


class Hotspot(HotspotCandidate):
    """Hotspot placed on a patrol route."""

    order: int = Field(..., ge=1)


class PatrolRoute(CamelModel):
    """Ordered patrol with its distance and duration summary."""

    hotspots: list[Hotspot] = Field(default_factory=list)
    total_distance: str = "0.0 km"
    estimated_time: str = "0 min"


class GenerateRouteRequest(CamelModel):
    """Body of the route generation endpoint."""

    predicted_data: PredictCrimeResponse
    police_station: str = "all"
