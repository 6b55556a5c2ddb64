from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from pipeflow.network.records import Position

EARTH_RADIUS_M = 6_371_000


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute geodesic distance between two WGS84 points in meters."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def haversine_many(lat: float, lon: float, lats: np.ndarray, lons: np.ndarray) -> np.ndarray:
    """Distances in meters from one point to each of ``lats``/``lons``."""
    lats = np.radians(np.asarray(lats, dtype=float))
    lons = np.radians(np.asarray(lons, dtype=float))
    lat_rad = math.radians(lat)
    lon_rad = math.radians(lon)

    a = np.sin((lats - lat_rad) / 2) ** 2 + math.cos(lat_rad) * np.cos(lats) * np.sin((lons - lon_rad) / 2) ** 2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def distance(p1: Position, p2: Position) -> float:
    return haversine(p1.lat, p1.lon, p2.lat, p2.lon)


def point_to_segment_distance(point: Position, seg_start: Position, seg_end: Position) -> float | None:
    """Distance in meters from ``point`` to the closest point of a segment.

    The projection is done in plain lat/lon space, which is fine over the
    few hundred meters a pipeline segment spans. The projection parameter is
    clamped to [0, 1] so the closest point always lies on the segment.

    Returns None for a zero-length segment.
    """
    dlat = seg_end.lat - seg_start.lat
    dlon = seg_end.lon - seg_start.lon
    len_sq = dlat * dlat + dlon * dlon
    if len_sq == 0:
        return None

    param = ((point.lat - seg_start.lat) * dlat + (point.lon - seg_start.lon) * dlon) / len_sq
    param = min(1.0, max(0.0, param))

    return haversine(point.lat, point.lon, seg_start.lat + param * dlat, seg_start.lon + param * dlon)
