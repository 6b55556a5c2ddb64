from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, NamedTuple


class Position(NamedTuple):
    lat: float
    lon: float

    def key(self) -> str:
        """Canonical node key, coordinates rounded to 6 decimals."""
        return f"{self.lat:.6f},{self.lon:.6f}"


class ValveCategory(StrEnum):
    MAIN = "main"
    SUB = "sub"


@dataclass(frozen=True)
class Tank:
    id: str
    position: Position
    is_active: bool = False
    name: str = ""
    shape: str = "cylinder"
    diameter: float = 5.0  # m
    height: float = 10.0  # m
    sensor_height: float = 10.0  # m
    capacity: float | None = None  # liters
    locality: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id cannot be empty")
        if self.diameter <= 0:
            raise ValueError("diameter must be positive")
        if self.height <= 0:
            raise ValueError("height must be positive")

    @property
    def label(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class Valve:
    id: str
    position: Position
    is_open: bool = True
    category: str = ValveCategory.MAIN
    parent_valve_id: str | None = None
    households: int = 0
    locality: str = ""
    name: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id cannot be empty")
        if self.households < 0:
            raise ValueError("households cannot be negative")

    @property
    def label(self) -> str:
        return self.name or self.id

    @property
    def is_main(self) -> bool:
        return self.category == ValveCategory.MAIN

    @property
    def is_sub(self) -> bool:
        return self.category == ValveCategory.SUB


@dataclass(frozen=True)
class Pipeline:
    """A drawn pipeline.

    ``waypoints`` is kept as the storage layer hands it over: a sequence of
    positions or ``{"lat": .., "lng": ..}`` mappings, or a JSON string of
    the same. Malformed geometry is tolerated and only filtered when the
    pipeline is parsed, see ``pipeflow.network.parsing``.
    """

    id: str | int
    waypoints: Any = field(default_factory=list)
    active: bool = True
    capacity: float = 500.0
    name: str = ""

    def __post_init__(self) -> None:
        if self.id is None or self.id == "":
            raise ValueError("id cannot be empty")
        if self.capacity < 0:
            raise ValueError("capacity cannot be negative")
