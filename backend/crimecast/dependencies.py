"""FastAPI dependencies wiring services to configuration."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from crimecast.config import Settings, get_settings
from crimecast.services.alerts import SafetyAlertService
from crimecast.services.chat import ChatAssistant
from crimecast.services.forecast import ForecastService
from crimecast.services.gemini_client import GeminiClient
from crimecast.services.incident_store import IncidentStore
from crimecast.services.oracle import GeminiForecastOracle


@lru_cache
def get_incident_store() -> IncidentStore:
    """Process-wide incident store, generated once from the configured seed."""
    settings = get_settings()
    return IncidentStore.from_seed(
        seed=settings.incident_seed,
        count=settings.incident_count,
        history_days=settings.incident_history_days,
    )


def get_gemini_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> GeminiClient:
    """Gemini client for the current request; fails without an API key."""
    return GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        max_retries=settings.gemini_max_retries,
        timeout=settings.gemini_timeout_seconds,
    )


def get_forecast_service(
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[IncidentStore, Depends(get_incident_store)],
    client: Annotated[GeminiClient, Depends(get_gemini_client)],
) -> ForecastService:
    return ForecastService(
        store,
        GeminiForecastOracle(client),
        oracle_timeout=settings.oracle_timeout_seconds,
    )


def get_chat_assistant(
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[IncidentStore, Depends(get_incident_store)],
    client: Annotated[GeminiClient, Depends(get_gemini_client)],
) -> ChatAssistant:
    return ChatAssistant(client, store, max_tool_rounds=settings.max_tool_rounds)


def get_alert_service(
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[IncidentStore, Depends(get_incident_store)],
    client: Annotated[GeminiClient, Depends(get_gemini_client)],
) -> SafetyAlertService:
    return SafetyAlertService(client, store, lookback_days=settings.alert_lookback_days)
