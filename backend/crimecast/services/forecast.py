"""Forecast pipeline: aggregate history, query the oracle, combine the series."""

import asyncio
import logging
from datetime import date

from crimecast.exceptions import OracleError
from crimecast.schemas.common import CrimeTypeBreakdownEntry
from crimecast.schemas.forecast import (
    DailyCountPoint,
    PredictCrimeRequest,
    PredictCrimeResponse,
    PredictedHotspot,
)
from crimecast.schemas.oracle import ForecastOracleRequest, ForecastOracleResponse
from crimecast.services.aggregator import HistoricalAggregate, aggregate_history
from crimecast.services.incident_store import IncidentStore
from crimecast.services.oracle import ForecastOracle

logger = logging.getLogger(__name__)


def reconcile_breakdown(
    entries: list[CrimeTypeBreakdownEntry],
    crime_types: list[str],
) -> list[CrimeTypeBreakdownEntry]:
    """
    Align a breakdown with the requested crime types.

    The result has one entry per requested type, in request order. Types the
    source omits are zero-filled, unrequested types are dropped, and the first
    entry wins when a type appears twice. Matching is case-insensitive.
    """
    counts: dict[str, int] = {}
    for entry in entries:
        counts.setdefault(entry.crime_type.lower(), entry.count)

    result: list[CrimeTypeBreakdownEntry] = []
    seen: set[str] = set()
    for crime_type in crime_types:
        key = crime_type.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(CrimeTypeBreakdownEntry(crime_type=crime_type, count=counts.get(key, 0)))
    return result


def combine_forecast(
    aggregate: HistoricalAggregate,
    oracle_response: ForecastOracleResponse | None,
    crime_types: list[str],
) -> PredictCrimeResponse:
    """
    Merge historical counts and oracle predictions into one daily series.

    Every future date gets exactly one point: the first oracle prediction for
    it (``None`` counts as 0), or a zero placeholder when the oracle skipped
    it. Predictions for dates outside the future range are ignored.

    Args:
        aggregate: Historical counts and the future dates of the range
        oracle_response: Validated oracle answer, or None when unavailable
        crime_types: Requested crime types

    Returns:
        PredictCrimeResponse sorted by date
    """
    daily: list[DailyCountPoint] = [
        DailyCountPoint(day=day, historical_count=count, predicted_count=None)
        for day, count in aggregate.daily_counts
    ]

    future = set(aggregate.future_dates)
    covered: set[date] = set()
    if oracle_response is not None:
        for prediction in oracle_response.daily_predictions:
            if prediction.day not in future or prediction.day in covered:
                continue
            covered.add(prediction.day)
            daily.append(
                DailyCountPoint(
                    day=prediction.day,
                    historical_count=None,
                    predicted_count=prediction.predicted_count or 0,
                )
            )

    missing = [day for day in aggregate.future_dates if day not in covered]
    if oracle_response is not None and missing:
        logger.warning(f"Oracle skipped {len(missing)} future dates, filling with 0")
    for day in missing:
        daily.append(DailyCountPoint(day=day, historical_count=None, predicted_count=0))

    daily.sort(key=lambda point: point.day)

    predicted_entries = oracle_response.predicted_breakdown if oracle_response else []
    hotspots: list[PredictedHotspot] = []
    if oracle_response is not None and oracle_response.predicted_hotspots:
        hotspots = [
            PredictedHotspot(id=f"ph-{index}", **hotspot.model_dump())
            for index, hotspot in enumerate(oracle_response.predicted_hotspots, start=1)
        ]

    return PredictCrimeResponse(
        daily_data=daily,
        predicted_crime_type_breakdown=reconcile_breakdown(predicted_entries, crime_types),
        historical_crime_type_breakdown=reconcile_breakdown(aggregate.breakdown, crime_types),
        predicted_hotspots=hotspots,
    )


class ForecastService:
    """
    Runs the forecast pipeline for one dashboard request.

    Oracle failures (errors, malformed answers, timeouts) never reach the
    caller: the result falls back to historical data with zero predictions.
    """

    def __init__(
        self,
        store: IncidentStore,
        oracle: ForecastOracle,
        oracle_timeout: float | None = None,
    ):
        self.store = store
        self.oracle = oracle
        self.oracle_timeout = oracle_timeout

    async def predict(
        self,
        request: PredictCrimeRequest,
        today: date | None = None,
    ) -> PredictCrimeResponse:
        """Aggregate, forecast and combine for the given filters."""
        if not request.is_complete:
            logger.info("Forecast filters incomplete, returning empty result")
            return PredictCrimeResponse()

        aggregate = aggregate_history(self.store, request, today=today)

        if not aggregate.future_dates:
            return combine_forecast(aggregate, None, request.crime_types)

        oracle_request = ForecastOracleRequest(
            historical_summary=aggregate.summary(request.police_station, request.crime_types),
            future_dates=aggregate.future_dates,
            crime_types=request.crime_types,
            police_station=request.police_station,
        )
        oracle_response = await self._call_oracle(oracle_request)
        return combine_forecast(aggregate, oracle_response, request.crime_types)

    async def _call_oracle(self, request: ForecastOracleRequest) -> ForecastOracleResponse | None:
        try:
            return await asyncio.wait_for(self.oracle.forecast(request), self.oracle_timeout)
        except TimeoutError:
            logger.warning(f"Forecast oracle timed out after {self.oracle_timeout}s, using fallback")
        except OracleError as e:
            logger.warning(f"Forecast oracle failed, using fallback: {e}")
        return None
