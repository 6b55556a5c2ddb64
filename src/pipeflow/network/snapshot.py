from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .parsing import raw_waypoints
from .records import Pipeline, Position, Tank, Valve, ValveCategory
from .validation import SnapshotError

if TYPE_CHECKING:
    from pipeflow.config import FlowSettings
    from pipeflow.flow import FlowResult
    from pipeflow.supply import SupplyOverview

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "1.0"


def _first(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _flag(value: Any) -> bool:
    # Storage hands flags over as 0/1 integers
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


def _position(record: Mapping[str, Any], label: str) -> Position:
    try:
        return Position(float(record["latitude"]), float(record["longitude"]))
    except KeyError as e:
        raise SnapshotError(f"missing coordinate {e}", record=label) from e
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"invalid coordinates ({e})", record=label) from e


def _identifier(record: Mapping[str, Any], kind: str, *keys: str) -> Any:
    if not isinstance(record, Mapping):
        raise SnapshotError(f"expected an object, got {type(record).__name__}", record=kind)
    value = _first(record, *keys)
    if value is None or value == "":
        raise SnapshotError(f"missing identifier ({' or '.join(keys)})", record=kind)
    return value


def tank_from_dict(record: Mapping[str, Any]) -> Tank:
    tank_id = str(_identifier(record, "tank", "tankId", "id"))
    label = f"tank '{tank_id}'"
    try:
        return Tank(
            id=tank_id,
            position=_position(record, label),
            is_active=_flag(record.get("isActive", False)),
            name=record.get("name") or "",
            shape=record.get("shape") or "cylinder",
            diameter=float(_first(record, "diameter", default=5.0)),
            height=float(_first(record, "height", default=10.0)),
            sensor_height=float(_first(record, "sensorHeight", default=10.0)),
            capacity=float(record["capacity"]) if record.get("capacity") is not None else None,
            locality=_first(record, "locality", "mandal", default=""),
        )
    except SnapshotError:
        raise
    except (TypeError, ValueError) as e:
        raise SnapshotError(str(e), record=label) from e


def valve_from_dict(record: Mapping[str, Any]) -> Valve:
    valve_id = str(_identifier(record, "valve", "valveId", "id"))
    label = f"valve '{valve_id}'"
    parent = record.get("parentValveId")
    try:
        return Valve(
            id=valve_id,
            position=_position(record, label),
            is_open=_flag(record.get("isOpen", True)),
            category=record.get("category") or ValveCategory.MAIN,
            parent_valve_id=str(parent) if parent not in (None, "") else None,
            households=int(record.get("households") or 0),
            locality=_first(record, "locality", "mandal", default=""),
            name=record.get("name") or "",
        )
    except SnapshotError:
        raise
    except (TypeError, ValueError) as e:
        raise SnapshotError(str(e), record=label) from e


def pipeline_from_dict(record: Mapping[str, Any]) -> Pipeline:
    pipeline_id = _identifier(record, "pipeline", "id", "pipelineId")
    try:
        return Pipeline(
            id=pipeline_id,
            waypoints=_first(record, "nodes", "waypoints", default=[]),
            active=_flag(record.get("active", True)),
            capacity=float(_first(record, "capacity", default=500.0)),
            name=record.get("name") or "",
        )
    except (TypeError, ValueError) as e:
        raise SnapshotError(str(e), record=f"pipeline '{pipeline_id}'") from e


@dataclass(frozen=True)
class NetworkSnapshot:
    """A consistent, read-only view of tanks, valves and pipelines."""

    tanks: tuple[Tank, ...] = ()
    valves: tuple[Valve, ...] = ()
    pipelines: tuple[Pipeline, ...] = ()

    @property
    def active_tanks(self) -> list[Tank]:
        return [t for t in self.tanks if t.is_active]

    @property
    def closed_valves(self) -> list[Valve]:
        return [v for v in self.valves if not v.is_open]

    @property
    def active_pipelines(self) -> list[Pipeline]:
        return [p for p in self.pipelines if p.active]

    def flow_paths(self, settings: FlowSettings | None = None) -> FlowResult:
        from pipeflow.flow import calculate_flow_paths

        return calculate_flow_paths(self.tanks, self.valves, self.pipelines, settings)

    def supply_overview(self, settings: FlowSettings | None = None) -> SupplyOverview:
        from pipeflow.supply import distribute

        return distribute(self.tanks, self.valves, self.pipelines, settings)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NetworkSnapshot:
        """Build a snapshot from an export document.

        Raises:
            SnapshotError: If a collection is missing or a record lacks an
                identifier or coordinates.
        """
        if not isinstance(data, Mapping):
            raise SnapshotError(f"expected an object, got {type(data).__name__}")
        missing = [key for key in ("tanks", "valves", "pipelines") if not isinstance(data.get(key), list)]
        if missing:
            raise SnapshotError(f"invalid import data format, missing {missing}")

        return cls(
            tanks=tuple(tank_from_dict(r) for r in data["tanks"]),
            valves=tuple(valve_from_dict(r) for r in data["valves"]),
            pipelines=tuple(pipeline_from_dict(r) for r in data["pipelines"]),
        )

    def to_dict(self) -> dict[str, Any]:
        now = datetime.now(UTC)
        return {
            "version": SNAPSHOT_VERSION,
            "timestamp": int(now.timestamp() * 1000),
            "exportDate": now.isoformat(),
            "tanks": [
                {
                    "tankId": t.id,
                    "name": t.name,
                    "latitude": t.position.lat,
                    "longitude": t.position.lon,
                    "isActive": t.is_active,
                    "shape": t.shape,
                    "diameter": t.diameter,
                    "height": t.height,
                    "sensorHeight": t.sensor_height,
                    "capacity": t.capacity,
                    "mandal": t.locality,
                }
                for t in self.tanks
            ],
            "valves": [
                {
                    "valveId": v.id,
                    "name": v.name,
                    "latitude": v.position.lat,
                    "longitude": v.position.lon,
                    "isOpen": v.is_open,
                    "category": str(v.category),
                    "parentValveId": v.parent_valve_id,
                    "households": v.households,
                    "mandal": v.locality,
                }
                for v in self.valves
            ],
            "pipelines": [
                {
                    "id": p.id,
                    "name": p.name,
                    "capacity": p.capacity,
                    "active": p.active,
                    "nodes": [
                        {"lat": wp.lat, "lng": wp.lon} if isinstance(wp, Position) else wp
                        for wp in raw_waypoints(p, warn=False)
                    ],
                }
                for p in self.pipelines
            ],
        }


def load_snapshot(filename: str | Path) -> NetworkSnapshot:
    path = Path(filename)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file {path} does not exist.")
    with open(path) as f:
        data = json.load(f)

    snapshot = NetworkSnapshot.from_dict(data)
    logger.info(
        f"Loaded snapshot from {path}: {len(snapshot.tanks)} tanks, "
        f"{len(snapshot.valves)} valves, {len(snapshot.pipelines)} pipelines"
    )
    return snapshot


def save_snapshot(snapshot: NetworkSnapshot, filename: str | Path) -> None:
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(snapshot.to_dict(), f, indent=2)
    logger.info(f"Snapshot saved to {path}")
