"""Pydantic schemas for API request/response validation."""

from crimecast.schemas.alerts import SafetyAlert, SafetyAlertsResponse
from crimecast.schemas.chat import ChatRequest, ChatResponse
from crimecast.schemas.common import CrimeTypeBreakdownEntry, Position
from crimecast.schemas.forecast import (
    DailyCountPoint,
    DateRange,
    PredictCrimeRequest,
    PredictCrimeResponse,
    PredictedHotspot,
)
from crimecast.schemas.incident import IncidentQuery, IncidentRecord, IncidentSummary
from crimecast.schemas.oracle import (
    DailyPrediction,
    ForecastOracleRequest,
    ForecastOracleResponse,
    OracleHotspot,
)
from crimecast.schemas.route import (
    GenerateRouteRequest,
    Hotspot,
    HotspotCandidate,
    PatrolRoute,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "CrimeTypeBreakdownEntry",
    "DailyCountPoint",
    "DailyPrediction",
    "DateRange",
    "ForecastOracleRequest",
    "ForecastOracleResponse",
    "GenerateRouteRequest",
    "Hotspot",
    "HotspotCandidate",
    "IncidentQuery",
    "IncidentRecord",
    "IncidentSummary",
    "OracleHotspot",
    "PatrolRoute",
    "Position",
    "PredictCrimeRequest",
    "PredictCrimeResponse",
    "PredictedHotspot",
    "SafetyAlert",
    "SafetyAlertsResponse",
]
