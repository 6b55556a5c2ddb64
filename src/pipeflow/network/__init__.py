from .parsing import parse_waypoint, parse_waypoints, pipeline_segments, segment_count
from .records import Pipeline, Position, Tank, Valve, ValveCategory
from .snapshot import NetworkSnapshot, load_snapshot, save_snapshot
from .validation import SnapshotError

__all__ = [
    # Records
    "Pipeline",
    "Position",
    "Tank",
    "Valve",
    "ValveCategory",
    # Geometry parsing
    "parse_waypoint",
    "parse_waypoints",
    "pipeline_segments",
    "segment_count",
    # Snapshots
    "NetworkSnapshot",
    "SnapshotError",
    "load_snapshot",
    "save_snapshot",
]
