import math

import pytest

from pipeflow.config import FlowSettings
from pipeflow.tank import (
    FillStatus,
    TankShape,
    classify_fill,
    liquid_height,
    tank_capacity_liters,
    tank_metrics,
)
from pipeflow.testing import make_tank


class TestTankShape:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("cylinder", TankShape.CYLINDER),
            ("Cylindrical", TankShape.CYLINDER),
            (" rectangular ", TankShape.CUBOID),
            ("square", TankShape.CUBOID),
        ],
    )
    def test_aliases(self, raw, expected):
        assert TankShape.parse(raw) is expected

    def test_unknown_shape(self):
        with pytest.raises(ValueError, match="Unknown tank shape"):
            TankShape.parse("sphere")


class TestCapacity:
    def test_cylinder(self):
        assert tank_capacity_liters(5, 10, "cylinder") == round(math.pi * 2.5**2 * 10 * 1000, 2)

    def test_cuboid_has_square_base(self):
        assert tank_capacity_liters(2, 3, "cuboid") == 12000.0


class TestLiquidHeight:
    def test_sensor_reading(self):
        assert liquid_height(10, 250, 10) == pytest.approx(7.5)

    def test_reading_below_floor_clamps_to_zero(self):
        assert liquid_height(10, 1200, 10) == 0.0

    def test_sensor_above_tank_clamps_to_height(self):
        assert liquid_height(12, 0, 10) == 10


class TestClassifyFill:
    @pytest.mark.parametrize(
        "percentage, expected",
        [
            (0, FillStatus.LOW),
            (9.9, FillStatus.LOW),
            (10, FillStatus.NORMAL),
            (79.9, FillStatus.NORMAL),
            (80, FillStatus.HIGH),
        ],
    )
    def test_default_thresholds(self, percentage, expected):
        assert classify_fill(percentage) is expected

    def test_custom_thresholds(self):
        settings = FlowSettings(low_fill_percent=30, high_fill_percent=90)
        assert classify_fill(25, settings) is FillStatus.LOW
        assert classify_fill(85, settings) is FillStatus.NORMAL


class TestTankMetrics:
    def test_cylinder(self):
        tank = make_tank(diameter=2.0, height=4.0)
        metrics = tank_metrics(tank, 1.0)

        assert metrics.water_level == 1.0
        assert metrics.volume_liters == round(math.pi * 1000, 2)
        assert metrics.percentage == 25.0
        assert metrics.pressure_kpa == 9.81
        assert metrics.weight_kg == metrics.volume_liters
        assert metrics.status is FillStatus.NORMAL

    def test_level_is_clamped(self):
        tank = make_tank(diameter=2.0, height=4.0)
        assert tank_metrics(tank, 6.0).percentage == 100.0
        assert tank_metrics(tank, 6.0).status is FillStatus.HIGH
        assert tank_metrics(tank, -1.0).volume_liters == 0.0

    def test_cuboid_width_from_capacity(self):
        tank = make_tank(shape="cuboid", diameter=2.0, height=4.0, capacity=16000.0)
        assert tank_metrics(tank, 1.0).volume_liters == 4000.0

    def test_cuboid_without_capacity(self):
        tank = make_tank(shape="rectangular", diameter=3.0, height=4.0)
        assert tank_metrics(tank, 2.0).volume_liters == 18000.0

    def test_unknown_shape(self):
        with pytest.raises(ValueError):
            tank_metrics(make_tank(shape="sphere"), 1.0)

    def test_percentage_has_one_decimal(self):
        tank = make_tank(height=3.0)
        assert tank_metrics(tank, 1.0).percentage == 33.3

    def test_to_dict(self):
        data = tank_metrics(make_tank(diameter=2.0, height=4.0), 1.25).to_dict()
        assert data["waterLevelCm"] == 125.0
        assert data["status"] == "normal"
        assert set(data) == {"waterLevel", "waterLevelCm", "volume", "percentage", "pressure", "weight", "status"}
