"""Services for aggregation, forecasting, routing and the LLM collaborators."""

from crimecast.services.alerts import SafetyAlertService
from crimecast.services.chat import ChatAssistant
from crimecast.services.forecast import ForecastService
from crimecast.services.gemini_client import GeminiClient
from crimecast.services.incident_store import IncidentStore
from crimecast.services.oracle import GeminiForecastOracle

__all__ = [
    "ChatAssistant",
    "ForecastService",
    "GeminiClient",
    "GeminiForecastOracle",
    "IncidentStore",
    "SafetyAlertService",
]
