import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pipeflow.config import DEFAULT_SETTINGS, FlowSettings
from pipeflow.network.records import Tank

WATER_DENSITY = 1000  # kg/m³
GRAVITY = 9.81  # m/s²

_SHAPE_ALIASES = {
    "cylinder": "cylinder",
    "cylindrical": "cylinder",
    "cuboid": "cuboid",
    "rectangular": "cuboid",
    "square": "cuboid",
}


class TankShape(StrEnum):
    CYLINDER = "cylinder"
    CUBOID = "cuboid"

    @classmethod
    def parse(cls, value: str) -> "TankShape":
        try:
            return cls(_SHAPE_ALIASES[value.strip().lower()])
        except KeyError:
            raise ValueError(f"Unknown tank shape: {value!r}") from None


class FillStatus(StrEnum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class TankMetrics:
    water_level: float  # m
    volume_liters: float
    percentage: float
    pressure_kpa: float
    weight_kg: float
    status: FillStatus

    def to_dict(self) -> dict[str, Any]:
        return {
            "waterLevel": self.water_level,
            "waterLevelCm": round(self.water_level * 100, 2),
            "volume": self.volume_liters,
            "percentage": self.percentage,
            "pressure": self.pressure_kpa,
            "weight": self.weight_kg,
            "status": str(self.status),
        }


def tank_capacity_liters(diameter: float, height: float, shape: str) -> float:
    """Nominal capacity; cuboid tanks are assumed to have a square base."""
    match TankShape.parse(shape):
        case TankShape.CYLINDER:
            volume_m3 = math.pi * (diameter / 2) ** 2 * height
        case TankShape.CUBOID:
            volume_m3 = diameter * diameter * height
    return round(volume_m3 * 1000, 2)


def liquid_height(sensor_height: float, distance_cm: float, tank_height: float) -> float:
    """Water column height from a top-mounted distance sensor, clamped to the tank."""
    height = sensor_height - distance_cm / 100
    return max(0.0, min(height, tank_height))


def classify_fill(percentage: float, settings: FlowSettings = DEFAULT_SETTINGS) -> FillStatus:
    if percentage < settings.low_fill_percent:
        return FillStatus.LOW
    if percentage >= settings.high_fill_percent:
        return FillStatus.HIGH
    return FillStatus.NORMAL


def _base_area(tank: Tank, shape: TankShape) -> float:
    if shape is TankShape.CYLINDER:
        return math.pi * (tank.diameter / 2) ** 2
    if tank.capacity:
        width = (tank.capacity / 1000) / (tank.diameter * tank.height)
        return tank.diameter * width
    return tank.diameter * tank.diameter


def tank_metrics(tank: Tank, level_m: float, settings: FlowSettings | None = None) -> TankMetrics:
    """Volume, pressure and fill status for a tank holding ``level_m`` meters of water.

    The level is clamped to [0, tank.height]. For cuboid tanks the width is
    derived from the stated capacity when there is one.

    Raises:
        ValueError: If the tank shape is not recognised.
    """
    settings = settings or DEFAULT_SETTINGS
    shape = TankShape.parse(tank.shape)
    level = max(0.0, min(level_m, tank.height))

    volume_m3 = _base_area(tank, shape) * level
    percentage = level / tank.height * 100
    pressure_kpa = WATER_DENSITY * GRAVITY * level / 1000

    return TankMetrics(
        water_level=round(level, 2),
        volume_liters=round(volume_m3 * 1000, 2),
        percentage=round(percentage, 1),
        pressure_kpa=round(pressure_kpa, 2),
        weight_kg=round(volume_m3 * WATER_DENSITY, 2),
        status=classify_fill(percentage, settings),
    )
