import math
from typing import Any

from pipeflow.network.records import Pipeline, Position, Tank, Valve

# --- Local Coordinates ---

BASE_LAT = 17.385
BASE_LON = 78.4867
METERS_PER_DEGREE = 6_371_000 * math.pi / 180


def at(east: float = 0.0, north: float = 0.0) -> Position:
    """Position offset from the base point by the given meters."""
    lat = BASE_LAT + north / METERS_PER_DEGREE
    lon = BASE_LON + east / (METERS_PER_DEGREE * math.cos(math.radians(BASE_LAT)))
    return Position(lat, lon)


def waypoint(east: float = 0.0, north: float = 0.0) -> dict[str, float]:
    p = at(east, north)
    return {"lat": p.lat, "lng": p.lon}


# --- Factory Functions ---


def make_tank(id: str = "tank", position: Position | None = None, **overrides: Any) -> Tank:
    overrides.setdefault("is_active", True)
    return Tank(id=id, position=position or at(0, 0), **overrides)


def make_valve(id: str = "valve", position: Position | None = None, **overrides: Any) -> Valve:
    return Valve(id=id, position=position or at(0, 0), **overrides)


def make_pipeline(
    id: str | int = "p1",
    points: list[tuple[float, float]] | None = None,
    **overrides: Any,
) -> Pipeline:
    """Pipeline through ``points`` given as (east, north) meter offsets."""
    if points is None:
        points = [(0, 0), (200, 0), (400, 0)]
    return Pipeline(id=id, waypoints=[waypoint(e, n) for e, n in points], **overrides)
