"""Forecast oracle: Gemini-backed crime-count and hotspot predictions."""

import logging
from typing import Protocol

from pydantic import ValidationError

from crimecast.exceptions import OracleMalformedError
from crimecast.schemas.oracle import ForecastOracleRequest, ForecastOracleResponse
from crimecast.services.gemini_client import GeminiClient

logger = logging.getLogger(__name__)

FORECAST_PROMPT = """You are an AI crime analyst. Based on the historical summary, predict crime trends for the upcoming dates.

Historical Summary:
{historical_summary}

Police station: {police_station}

Your task is to predict the daily crime counts for the following future dates: {future_dates}.

Also, provide a plausible breakdown of the total predicted crimes for these future dates across the following crime types: {crime_types}.

Optionally, list up to 7 predicted hotspots inside Delhi (latitude 28.40 to 28.88, longitude 76.84 to 77.24) where these crimes are most likely, each with a risk level of High, Medium or Low.

Return ONLY a JSON object of this shape:
{{
  "dailyPredictions": [{{"date": "YYYY-MM-DD", "predictedCount": 0}}],
  "predictedBreakdown": [{{"crimeType": "Theft", "count": 0}}],
  "predictedHotspots": [
    {{"position": {{"lat": 28.6, "lng": 77.2}}, "riskLevel": "High", "reason": "...",
      "predictedCrimeType": "Theft", "locationName": "..."}}
  ]
}}

Ensure that you provide a prediction for every future date requested. The predicted counts should be reasonable based on the historical average."""


class ForecastOracle(Protocol):
    """Anything able to forecast the future part of a date range."""

    async def forecast(self, request: ForecastOracleRequest) -> ForecastOracleResponse: ...


class GeminiForecastOracle:
    """Forecast oracle that asks Gemini for a JSON prediction."""

    def __init__(self, client: GeminiClient):
        self.client = client

    def build_prompt(self, request: ForecastOracleRequest) -> str:
        return FORECAST_PROMPT.format(
            historical_summary=request.historical_summary,
            police_station=request.police_station,
            future_dates=", ".join(d.isoformat() for d in request.future_dates),
            crime_types=", ".join(request.crime_types),
        )

    async def forecast(self, request: ForecastOracleRequest) -> ForecastOracleResponse:
        """
        Ask Gemini for predictions covering ``request.future_dates``.

        Raises:
            OracleUnavailableError: transport failure or empty output
            OracleMalformedError: output is not JSON or does not match the contract
        """
        logger.info(
            f"Requesting forecast for {len(request.future_dates)} future dates "
            f"({', '.join(request.crime_types)})"
        )
        payload = await self.client.generate_json(self.build_prompt(request))
        return parse_forecast_response(payload)


def parse_forecast_response(payload: object) -> ForecastOracleResponse:
    """Validate a decoded oracle payload against the response contract."""
    if not isinstance(payload, dict):
        raise OracleMalformedError(
            f"Forecast oracle returned {type(payload).__name__}, expected an object"
        )
    try:
        return ForecastOracleResponse.model_validate(payload)
    except ValidationError as e:
        raise OracleMalformedError(f"Forecast oracle response failed validation: {e}") from e
