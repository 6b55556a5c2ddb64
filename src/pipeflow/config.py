from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Self

_CAMEL_ALIASES = {
    "connectDistance": "connect_distance",
    "blockDistance": "block_distance",
    "valveBlockDistance": "block_distance",
    "associationDistance": "association_distance",
    "utilization": "utilization",
    "householdFlowRate": "household_flow_rate",
    "lowFillPercent": "low_fill_percent",
    "highFillPercent": "high_fill_percent",
}


@dataclass(frozen=True, slots=True)
class FlowSettings:
    """Tunable constants for flow propagation and supply distribution.

    Distances are in meters. ``utilization`` is the share of a pipeline's
    nominal capacity assumed to reach an open valve, and
    ``household_flow_rate`` the flow units one household consumes.
    """

    connect_distance: float = 50.0
    block_distance: float = 3.0
    association_distance: float = 15.0
    utilization: float = 0.8
    household_flow_rate: float = 10.0
    low_fill_percent: float = 10.0
    high_fill_percent: float = 80.0

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def from_dict(cls, cfg: dict[str, Any]) -> Self:
        known = {f.name for f in fields(cls)}
        values: dict[str, float] = {}
        for key, value in cfg.items():
            name = _CAMEL_ALIASES.get(key, key)
            if name in known:
                values[name] = float(value)
        return cls(**values)

    def validate(self) -> None:
        for name in ("connect_distance", "block_distance", "association_distance", "household_flow_rate"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"FlowSettings.{name} must be > 0 (got {value})")
        if not 0 < self.utilization <= 1:
            raise ValueError(f"FlowSettings.utilization must be in (0, 1] (got {self.utilization})")
        if not 0 <= self.low_fill_percent <= self.high_fill_percent <= 100:
            raise ValueError(
                "FlowSettings fill thresholds must satisfy 0 <= low <= high <= 100 "
                f"(got low={self.low_fill_percent}, high={self.high_fill_percent})"
            )

    def with_overrides(self, **kwargs: float) -> Self:
        """Create new settings with updated values (immutable)."""
        invalid = set(kwargs) - {f.name for f in fields(self)}
        if invalid:
            raise ValueError(f"Unknown settings: {invalid}")
        return replace(self, **kwargs)


DEFAULT_SETTINGS = FlowSettings()
