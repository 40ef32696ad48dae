"""Shared Pydantic building blocks."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Position(BaseModel):
    """Geographic coordinates."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class CrimeTypeBreakdownEntry(CamelModel):
    """Number of incidents of a single crime type."""

    crime_type: str
    count: int = Field(0, ge=0)
