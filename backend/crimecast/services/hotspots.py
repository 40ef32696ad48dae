"""Hotspot selection for patrol routes."""

import logging

from crimecast.schemas.forecast import PredictCrimeResponse, PredictedHotspot
from crimecast.schemas.route import HotspotCandidate
from crimecast.services.incident_store import IncidentStore, local_day

logger = logging.getLogger(__name__)

RISK_RANK = {"High": 0, "Medium": 1, "Low": 2}


def rank_crime_types(prediction: PredictCrimeResponse) -> list[str]:
    """Crime types with a positive predicted count, most frequent first."""
    entries = [e for e in prediction.predicted_crime_type_breakdown if e.count > 0]
    entries.sort(key=lambda e: e.count, reverse=True)
    return [e.crime_type for e in entries]


def _unique_id(hotspot_id: str, taken: set[str]) -> str:
    """``hotspot_id``, suffixed with -2, -3, ... if already used on this route."""
    unique = hotspot_id
    suffix = 1
    while unique in taken:
        suffix += 1
        unique = f"{hotspot_id}-{suffix}"
    taken.add(unique)
    return unique


def _from_oracle(hotspots: list[PredictedHotspot], limit: int) -> list[HotspotCandidate]:
    ranked = sorted(hotspots, key=lambda h: RISK_RANK.get(h.risk_level, len(RISK_RANK)))
    # Ids come from the client payload and may repeat
    taken: set[str] = set()
    return [
        HotspotCandidate(
            id=_unique_id(h.id, taken),
            position=h.position,
            name=h.location_name,
            description=h.reason or None,
            risk_level=h.risk_level,
            predicted_crime_type=h.predicted_crime_type,
        )
        for h in ranked[:limit]
    ]


def _derived(
    prediction: PredictCrimeResponse,
    store: IncidentStore,
    police_station: str,
    limit: int,
) -> list[HotspotCandidate]:
    ranking = rank_crime_types(prediction)
    if not ranking:
        return []

    rank = {crime_type: index for index, crime_type in enumerate(ranking)}
    matches = store.filter(station=police_station, crime_types=ranking)
    # sorted() is stable: store order is kept within a crime type
    matches = sorted(matches, key=lambda r: rank[r.crime_type])

    return [
        HotspotCandidate(
            id=f"hs-{record.id}",
            position=record.position,
            description=(
                f"Near {record.police_station} station, reported on "
                f"{local_day(record.occurred_at).isoformat()}."
            ),
            predicted_crime_type=record.crime_type,
        )
        for record in matches[:limit]
    ]


def select_hotspots(
    prediction: PredictCrimeResponse,
    store: IncidentStore,
    police_station: str = "all",
    max_oracle_hotspots: int = 7,
    max_derived_hotspots: int = 5,
) -> list[HotspotCandidate]:
    """
    Choose the locations a patrol should cover.

    Hotspots geo-located by the oracle are used when present (highest risk
    first). Otherwise past incidents of the top predicted crime types at the
    requested station serve as proxy locations. An empty list is a valid
    result.
    """
    if prediction.predicted_hotspots:
        candidates = _from_oracle(prediction.predicted_hotspots, max_oracle_hotspots)
        mode = "oracle"
    else:
        candidates = _derived(prediction, store, police_station, max_derived_hotspots)
        mode = "derived"

    logger.info(f"Selected {len(candidates)} hotspots ({mode} mode, station={police_station})")
    return candidates
