"""Request/response contract of the forecast oracle."""

from datetime import date

from pydantic import Field

from crimecast.schemas.common import CamelModel, CrimeTypeBreakdownEntry, Position
from crimecast.schemas.forecast import RiskLevel


class ForecastOracleRequest(CamelModel):
    """Everything the oracle needs to forecast the future part of a range."""

    historical_summary: str
    future_dates: list[date]
    crime_types: list[str]
    police_station: str = "all"


class DailyPrediction(CamelModel):
    """Predicted incident count for one future date."""

    day: date = Field(alias="date")
    predicted_count: int | None = Field(None, ge=0)


class OracleHotspot(CamelModel):
    """Geo-located hotspot as returned by the oracle."""

    position: Position
    risk_level: RiskLevel = "Medium"
    reason: str = ""
    predicted_crime_type: str | None = None
    location_name: str | None = None


class ForecastOracleResponse(CamelModel):
    """Validated oracle answer. Completeness is not guaranteed."""

    daily_predictions: list[DailyPrediction]
    predicted_breakdown: list[CrimeTypeBreakdownEntry]
    predicted_hotspots: list[OracleHotspot] | None = None
