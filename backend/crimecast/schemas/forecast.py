"""Pydantic schemas for crime forecasts."""

from datetime import date
from typing import Literal

from pydantic import Field, field_validator, model_validator

from crimecast.schemas.common import CamelModel, CrimeTypeBreakdownEntry, Position

RiskLevel = Literal["High", "Medium", "Low"]


class DateRange(CamelModel):
    """Inclusive calendar date range."""

    start_date: date
    end_date: date

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _truncate_timestamp(cls, value):
        # Dashboards send full ISO timestamps; only the calendar date matters.
        if isinstance(value, str) and len(value) > 10:
            return value[:10]
        return value


class PredictCrimeRequest(CamelModel):
    """Dashboard filters for a forecast run."""

    date_range: DateRange | None = None
    police_station: str = "all"
    crime_types: list[str] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """Whether the filters are sufficient to produce a forecast."""
        return self.date_range is not None and bool(self.crime_types)


class DailyCountPoint(CamelModel):
    """One day of the combined historical/predicted series."""

    day: date = Field(alias="date")
    historical_count: int | None = None
    predicted_count: int | None = None

    @model_validator(mode="after")
    def _one_source_per_day(self) -> "DailyCountPoint":
        if (self.historical_count is None) == (self.predicted_count is None):
            raise ValueError(
                "exactly one of historicalCount and predictedCount must be set"
            )
        return self


class PredictedHotspot(CamelModel):
    """Hotspot suggested by the forecast oracle."""

    id: str
    position: Position
    risk_level: RiskLevel = "Medium"
    reason: str = ""
    predicted_crime_type: str | None = None
    location_name: str | None = None


class PredictCrimeResponse(CamelModel):
    """Result of a forecast run."""

    daily_data: list[DailyCountPoint] = Field(default_factory=list)
    predicted_crime_type_breakdown: list[CrimeTypeBreakdownEntry] = Field(default_factory=list)
    historical_crime_type_breakdown: list[CrimeTypeBreakdownEntry] = Field(default_factory=list)
    predicted_hotspots: list[PredictedHotspot] = Field(default_factory=list)
