"""Predictive women's safety alerts generated from recent incidents."""

import json
import logging
from datetime import datetime

from pydantic import ValidationError

from crimecast.exceptions import OracleError, OracleMalformedError
from crimecast.schemas.alerts import SafetyAlert, SafetyAlertsResponse
from crimecast.services.gemini_client import GeminiClient
from crimecast.services.incident_store import IncidentStore

logger = logging.getLogger(__name__)

ALERT_CRIME_TYPES = ["Harassment", "Theft", "Accident"]

ALERTS_PROMPT = """You are a crime analyst AI for a police department. Your task is to analyze recent crime data related to women's safety and generate predictive alerts for areas that show emerging risk patterns.

Recent Crime Data:
{incidents}

Instructions:
1. Analyze the provided crime data, looking for clusters of incidents (3 or more) in specific locations (police stations) or at certain times.
2. Focus on crimes like Harassment, Theft, and Accidents that disproportionately affect women's safety.
3. If you identify a pattern or a significant cluster, generate a predictive alert.
4. Assign a 'severity' (High, Medium, Low) based on the number of incidents and the nature of the crimes.
5. Provide a concise 'title' and a 'reason' for each alert.
6. If no significant patterns are found, return an empty 'alerts' array.

Return ONLY a JSON object of this shape:
{{"alerts": [{{"id": "alert-1", "title": "...", "reason": "...", "severity": "High", "location": "..."}}]}}"""


class SafetyAlertService:
    """Builds safety alerts by asking Gemini to find clusters in recent incidents."""

    def __init__(self, client: GeminiClient, store: IncidentStore, lookback_days: int = 14):
        self.client = client
        self.store = store
        self.lookback_days = lookback_days

    def build_prompt(self, now: datetime | None = None) -> str:
        recent = self.store.recent(self.lookback_days, crime_types=ALERT_CRIME_TYPES, now=now)
        incidents = [
            {
                "id": r.id,
                "crimeType": r.crime_type,
                "date": r.occurred_at.isoformat(),
                "policeStation": r.police_station,
            }
            for r in recent
        ]
        logger.info(f"Analyzing {len(incidents)} incidents from the last {self.lookback_days} days")
        return ALERTS_PROMPT.format(incidents=json.dumps(incidents))

    async def generate(self, now: datetime | None = None) -> list[SafetyAlert]:
        """
        Generate alerts for the recent incident window.

        Oracle failures produce an empty list.
        """
        try:
            payload = await self.client.generate_json(self.build_prompt(now))
            return parse_alerts(payload).alerts
        except OracleError as e:
            logger.warning(f"Safety alert generation failed: {e}")
            return []


def parse_alerts(payload: object) -> SafetyAlertsResponse:
    """Validate a decoded alert payload."""
    try:
        return SafetyAlertsResponse.model_validate(payload)
    except ValidationError as e:
        raise OracleMalformedError(f"Safety alerts failed validation: {e}") from e
