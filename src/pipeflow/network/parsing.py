import json
import logging
import math
from collections.abc import Mapping, Sequence
from typing import Any

from .records import Pipeline, Position

logger = logging.getLogger(__name__)


def _coordinate(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def parse_waypoint(raw: Any) -> Position | None:
    """Return the waypoint as a Position, or None if it is not usable."""
    if isinstance(raw, Position):
        lat, lon = _coordinate(raw.lat), _coordinate(raw.lon)
    elif isinstance(raw, Mapping):
        lat = _coordinate(raw.get("lat", raw.get("latitude")))
        lon = _coordinate(raw.get("lng", raw.get("lon", raw.get("longitude"))))
    else:
        return None
    if lat is None or lon is None:
        return None
    return Position(lat, lon)


def raw_waypoints(pipeline: Pipeline, warn: bool = True) -> list[Any]:
    """Decode the stored waypoint representation into a plain list.

    Undecodable or non-list geometry is logged and yields an empty list.
    """
    raw = pipeline.waypoints
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            if warn:
                logger.warning(f"Pipeline {pipeline.id}: cannot decode waypoints ({e})")
            return []
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        return list(raw)
    if warn:
        logger.warning(f"Pipeline {pipeline.id}: waypoints must be a list, got {type(raw).__name__}")
    return []


def parse_waypoints(pipeline: Pipeline, warn: bool = True) -> list[Position | None]:
    """Parse every waypoint, keeping None placeholders for invalid ones.

    Placeholders preserve positions in the sequence so that two valid
    waypoints separated by an invalid one are never joined.
    """
    parsed: list[Position | None] = []
    for i, raw in enumerate(raw_waypoints(pipeline, warn)):
        position = parse_waypoint(raw)
        if position is None and warn:
            logger.warning(f"Pipeline {pipeline.id}: invalid waypoint at index {i}: {raw!r}")
        parsed.append(position)
    return parsed


def segment_pairs(waypoints: list[Position | None]) -> list[tuple[Position, Position]]:
    """Consecutive pairs where both waypoints are valid."""
    return [(a, b) for a, b in zip(waypoints, waypoints[1:]) if a is not None and b is not None]


def pipeline_segments(pipeline: Pipeline, warn: bool = True) -> list[tuple[Position, Position]]:
    return segment_pairs(parse_waypoints(pipeline, warn))


def segment_count(pipeline: Pipeline) -> int:
    """Nominal sub-segment count, ``waypoints - 1``, regardless of validity."""
    return max(0, len(raw_waypoints(pipeline, warn=False)) - 1)
