"""In-memory incident store backed by a deterministic mock data generator."""

import logging
from collections.abc import Callable, Iterable, Iterator
from datetime import UTC, date, datetime, time, timedelta

from crimecast.schemas.common import Position
from crimecast.schemas.incident import IncidentRecord

logger = logging.getLogger(__name__)

ALL_STATIONS = "all"

POLICE_STATIONS = [
    "Connaught Place",
    "Karol Bagh",
    "Chandni Chowk",
    "Vasant Kunj",
    "Hauz Khas",
]

CRIME_TYPES = ["Theft", "Accident", "Harassment"]

# Bounding box of the generated coordinates (Delhi)
DELHI_BOUNDS = {
    "north": 28.88,
    "south": 28.40,
    "west": 76.84,
    "east": 77.24,
}


def seeded_random(seed: int) -> Callable[[], float]:
    """
    Linear congruential generator returning floats in [0, 1).

    The same seed always yields the same sequence, independent of the
    interpreter's global ``random`` state.
    """
    state = seed

    def next_value() -> float:
        nonlocal state
        state = (state * 9301 + 49297) % 233280
        return state / 233280

    return next_value


def generate_incidents(
    seed: int = 1,
    count: int = 200,
    now: datetime | None = None,
    history_days: int = 90,
) -> list[IncidentRecord]:
    """
    Generate synthetic incident records.

    Args:
        seed: LCG seed; identical seeds produce identical records
        count: Number of records to generate
        now: Reference time the incidents are dated back from (defaults to local now)
        history_days: Incidents are spread over this many days before ``now``

    Returns:
        List of incident records with ids FIR1000, FIR1001, ...
    """
    rand = seeded_random(seed)
    now = now or datetime.now().astimezone()

    def pick(values: list[str]) -> str:
        return values[int(rand() * len(values))]

    records: list[IncidentRecord] = []
    for i in range(count):
        # Draw order is part of the dataset definition; do not reorder.
        days_ago = int(rand() * history_days)
        hour = int(rand() * 24)
        minute = int(rand() * 60)
        crime_type = pick(CRIME_TYPES)
        station = pick(POLICE_STATIONS)
        lat = rand() * (DELHI_BOUNDS["north"] - DELHI_BOUNDS["south"]) + DELHI_BOUNDS["south"]
        lng = rand() * (DELHI_BOUNDS["east"] - DELHI_BOUNDS["west"]) + DELHI_BOUNDS["west"]

        occurred_at = (now - timedelta(days=days_ago)).replace(
            hour=hour, minute=minute, second=0, microsecond=0
        )
        records.append(
            IncidentRecord(
                id=f"FIR{1000 + i}",
                position=Position(lat=lat, lng=lng),
                crime_type=crime_type,
                occurred_at=occurred_at,
                police_station=station,
            )
        )

    return records


def station_matches(record: IncidentRecord, station: str | None) -> bool:
    """Exact station match, with ``None`` or ``"all"`` matching everything."""
    return station is None or station == ALL_STATIONS or record.police_station == station


class IncidentStore:
    """
    Read-only collection of incident records.

    Features:
    - Station / crime-type filtering used by the forecast pipeline
    - Case-insensitive query with inclusive day boundaries for the chat tool
    """

    def __init__(self, records: Iterable[IncidentRecord]):
        self._records: tuple[IncidentRecord, ...] = tuple(records)

    @classmethod
    def from_seed(
        cls,
        seed: int = 1,
        count: int = 200,
        now: datetime | None = None,
        history_days: int = 90,
    ) -> "IncidentStore":
        """Build a store from the seeded generator."""
        records = generate_incidents(seed=seed, count=count, now=now, history_days=history_days)
        logger.info(f"Generated {len(records)} mock incidents (seed={seed})")
        return cls(records)

    @property
    def records(self) -> tuple[IncidentRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[IncidentRecord]:
        return iter(self._records)

    def police_stations(self) -> list[str]:
        """Distinct police stations, sorted."""
        return sorted({r.police_station for r in self._records})

    def crime_types(self) -> list[str]:
        """Distinct crime types, sorted."""
        return sorted({r.crime_type for r in self._records})

    def date_range(self) -> tuple[date, date] | None:
        """Oldest and newest incident day, or None when empty."""
        if not self._records:
            return None
        days = [local_day(r.occurred_at) for r in self._records]
        return min(days), max(days)

    def filter(
        self,
        station: str | None = None,
        crime_types: Iterable[str] | None = None,
    ) -> list[IncidentRecord]:
        """
        Filter by exact station (or "all") and crime-type membership.

        Store order is preserved.
        """
        wanted = set(crime_types) if crime_types is not None else None
        return [
            r
            for r in self._records
            if station_matches(r, station) and (wanted is None or r.crime_type in wanted)
        ]

    def query(
        self,
        crime_type: str | None = None,
        police_station: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[IncidentRecord]:
        """
        Query incidents; every omitted filter means "no constraint".

        String filters are case-insensitive. Dates are inclusive local days:
        the start date counts from local start of day, the end date up to
        local end of day.
        """
        results = list(self._records)

        if crime_type:
            needle = crime_type.lower()
            results = [r for r in results if r.crime_type.lower() == needle]

        if police_station:
            needle = police_station.lower()
            results = [r for r in results if r.police_station.lower() == needle]

        if start_date:
            lower = datetime.combine(start_date, time.min).astimezone()
            results = [r for r in results if r.occurred_at.astimezone() >= lower]

        if end_date:
            upper = datetime.combine(end_date, time.max).astimezone()
            results = [r for r in results if r.occurred_at.astimezone() <= upper]

        return results

    def recent(
        self,
        days: int,
        crime_types: Iterable[str] | None = None,
        now: datetime | None = None,
    ) -> list[IncidentRecord]:
        """Incidents within the last ``days`` days up to ``now``."""
        now = now or datetime.now(UTC)
        start = now - timedelta(days=days)
        wanted = set(crime_types) if crime_types is not None else None
        results: list[IncidentRecord] = []
        for r in self._records:
            occurred = _comparable(r.occurred_at, now)
            if start <= occurred <= now and (wanted is None or r.crime_type in wanted):
                results.append(r)
        return results


def local_day(value: datetime) -> date:
    """Calendar day of ``value`` on the server's local clock."""
    return value.astimezone().date()


def _comparable(value: datetime, reference: datetime) -> datetime:
    """Align awareness of ``value`` with ``reference``."""
    if reference.tzinfo is None:
        return value.replace(tzinfo=None)
    if value.tzinfo is None:
        return value.replace(tzinfo=reference.tzinfo)
    return value
