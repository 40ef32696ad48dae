"""Pydantic schemas for incident records."""

from datetime import date, datetime

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from crimecast.schemas.common import CamelModel, Position


class IncidentRecord(CamelModel):
    """
    A single reported incident.

    Records are generated once per process and never modified afterwards.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    position: Position
    crime_type: str
    occurred_at: datetime = Field(alias="date")
    police_station: str


class IncidentSummary(CamelModel):
    """Incident without coordinates, small enough to hand to the chat model."""

    id: str
    crime_type: str
    occurred_at: datetime = Field(alias="date")
    police_station: str


class IncidentQuery(CamelModel):
    """Optional filters accepted by the incident query tool."""

    crime_type: str | None = None
    police_station: str | None = None
    start_date: date | None = None
    end_date: date | None = None
