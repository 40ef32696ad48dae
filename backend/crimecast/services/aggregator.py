"""Historical aggregation of incidents over a dashboard date range."""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from crimecast.schemas.common import CrimeTypeBreakdownEntry
from crimecast.schemas.forecast import PredictCrimeRequest
from crimecast.services.incident_store import IncidentStore, local_day, station_matches

logger = logging.getLogger(__name__)


@dataclass
class HistoricalAggregate:
    """Past/future split of a date range with the historical counts."""

    past_days: list[date] = field(default_factory=list)
    future_dates: list[date] = field(default_factory=list)
    daily_counts: list[tuple[date, int]] = field(default_factory=list)
    breakdown: list[CrimeTypeBreakdownEntry] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(count for _, count in self.daily_counts)

    def summary(self, police_station: str, crime_types: list[str]) -> str:
        """Plain-language summary of the history, as handed to the oracle."""
        days = len(self.daily_counts) or 1
        average = self.total / days
        return (
            f"For police station '{police_station}' and crime types "
            f"[{', '.join(crime_types)}], there were a total of {self.total} "
            f"incidents over the last {days} days. The daily average was about "
            f"{average:.1f} incidents."
        )


def each_day(start: date, end: date) -> list[date]:
    """Every calendar day in ``[start, end]``; empty when ``end < start``."""
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def split_days(start: date, end: date, today: date) -> tuple[list[date], list[date]]:
    """Partition a range into days up to and including today, and later days."""
    days = each_day(start, end)
    past = [d for d in days if d <= today]
    future = [d for d in days if d > today]
    return past, future


def aggregate_history(
    store: IncidentStore,
    request: PredictCrimeRequest,
    today: date | None = None,
) -> HistoricalAggregate:
    """
    Count historical incidents per day and per crime type.

    Only days up to ``today`` are counted; every such day gets a bucket even
    when nothing happened on it. Incidents are bucketed by their local
    calendar day, the same clock ``date.today()`` uses. The crime-type breakdown holds exactly the
    requested types, zero-filled, in request order.

    Args:
        store: Incident source
        request: Dashboard filters (must carry a date range)
        today: Reference day separating history from future (defaults to today)

    Returns:
        HistoricalAggregate with chronologically ordered daily counts
    """
    if request.date_range is None:
        raise ValueError("aggregate_history requires a date range")

    today = today or date.today()
    start = request.date_range.start_date
    end = request.date_range.end_date
    past_days, future_dates = split_days(start, end, today)

    counts: dict[date, int] = {day: 0 for day in past_days}
    by_type: dict[str, int] = {crime_type: 0 for crime_type in request.crime_types}

    if past_days:
        last_day = min(end, today)
        for record in store:
            if record.crime_type not in by_type:
                continue
            if not station_matches(record, request.police_station):
                continue
            day = local_day(record.occurred_at)
            if day < start or day > last_day:
                continue
            counts[day] += 1
            by_type[record.crime_type] += 1

    aggregate = HistoricalAggregate(
        past_days=past_days,
        future_dates=future_dates,
        daily_counts=[(day, counts[day]) for day in past_days],
        breakdown=[
            CrimeTypeBreakdownEntry(crime_type=crime_type, count=count)
            for crime_type, count in by_type.items()
        ],
    )
    logger.info(
        f"Aggregated {aggregate.total} historical incidents over {len(past_days)} days "
        f"({len(future_dates)} future days, station={request.police_station})"
    )
    return aggregate
