"""Patrol route construction from selected hotspots."""

import logging
import math
from collections.abc import Sequence
from typing import Literal

from crimecast.schemas.common import Position
from crimecast.schemas.route import Hotspot, HotspotCandidate, PatrolRoute

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
DEFAULT_PATROL_SPEED_KMH = 20.0

RouteOrdering = Literal["latitude", "nearest_neighbor"]


# ---------------- Geometry helpers ----------------
def haversine_km(a: Position, b: Position) -> float:
    """Great-circle distance between two points in kilometres."""
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dl = math.radians(b.lng - a.lng)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dl / 2) ** 2
    # Clamp: rounding can push h a hair above 1 for antipodal points
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, h)))


def path_length_km(positions: Sequence[Position]) -> float:
    """Sum of the legs between consecutive positions."""
    return sum(haversine_km(positions[i], positions[i + 1]) for i in range(len(positions) - 1))


def format_distance(km: float) -> str:
    return f"{km:.1f} km"


def format_duration(minutes: float) -> str:
    # Half-up rounding, 2.5 -> 3
    return f"{math.floor(minutes + 0.5)} min"


# ---------------- Ordering strategies ----------------
def order_by_latitude(candidates: Sequence[HotspotCandidate]) -> list[HotspotCandidate]:
    """South to north. A cheap approximation, not a shortest tour."""
    return sorted(candidates, key=lambda c: c.position.lat)


def order_nearest_neighbor(candidates: Sequence[HotspotCandidate]) -> list[HotspotCandidate]:
    """Greedy tour starting at the southernmost hotspot."""
    if not candidates:
        return []

    remaining = list(candidates)
    current = min(remaining, key=lambda c: c.position.lat)
    remaining.remove(current)
    tour = [current]

    while remaining:
        current = min(remaining, key=lambda c: haversine_km(current.position, c.position))
        remaining.remove(current)
        tour.append(current)

    return tour


ORDERINGS = {
    "latitude": order_by_latitude,
    "nearest_neighbor": order_nearest_neighbor,
}


def _to_hotspot(candidate: HotspotCandidate, order: int) -> Hotspot:
    label = candidate.name or f"{candidate.predicted_crime_type or 'Patrol'} Hotspot"
    data = candidate.model_dump()
    data["name"] = f"{order}. {label}"
    return Hotspot(order=order, **data)


def build_route(
    candidates: Sequence[HotspotCandidate],
    ordering: RouteOrdering = "latitude",
    speed_kmh: float = DEFAULT_PATROL_SPEED_KMH,
) -> PatrolRoute:
    """
    Order hotspots into a patrol and summarise its length and duration.

    Fewer than two hotspots produce a zero-length route containing whatever
    was given.

    Args:
        candidates: Hotspots to visit, in any order
        ordering: "latitude" (default) or "nearest_neighbor"
        speed_kmh: Average patrol speed used for the time estimate

    Returns:
        PatrolRoute with 1-based contiguous ``order`` values
    """
    if len(candidates) < 2:
        hotspots = [_to_hotspot(c, order) for order, c in enumerate(candidates, start=1)]
        return PatrolRoute(
            hotspots=hotspots,
            total_distance=format_distance(0.0),
            estimated_time=format_duration(0.0),
        )

    try:
        order_fn = ORDERINGS[ordering]
    except KeyError:
        raise ValueError(f"Unknown route ordering: {ordering}") from None

    ordered = order_fn(candidates)
    hotspots = [_to_hotspot(c, order) for order, c in enumerate(ordered, start=1)]

    total_km = path_length_km([h.position for h in hotspots])
    minutes = (total_km / speed_kmh) * 60

    logger.info(f"Built {ordering} route over {len(hotspots)} hotspots: {total_km:.1f} km")
    return PatrolRoute(
        hotspots=hotspots,
        total_distance=format_distance(total_km),
        estimated_time=format_duration(minutes),
    )
