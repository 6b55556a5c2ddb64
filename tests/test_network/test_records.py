import pytest

from pipeflow.network import Pipeline, Position, Tank, Valve, ValveCategory


class TestPosition:
    def test_key_rounds_to_six_decimals(self):
        assert Position(17.1234567, 78.9876543).key() == "17.123457,78.987654"

    def test_unpacks_as_pair(self):
        lat, lon = Position(1.5, 2.5)
        assert (lat, lon) == (1.5, 2.5)


class TestTank:
    def test_label_prefers_name(self):
        assert Tank(id="t1", position=Position(0, 0), name="North").label == "North"
        assert Tank(id="t1", position=Position(0, 0)).label == "t1"

    def test_inactive_by_default(self):
        assert Tank(id="t1", position=Position(0, 0)).is_active is False

    def test_rejects_empty_id(self):
        with pytest.raises(ValueError, match="id cannot be empty"):
            Tank(id="", position=Position(0, 0))

    def test_rejects_non_positive_dimensions(self):
        with pytest.raises(ValueError, match="diameter"):
            Tank(id="t1", position=Position(0, 0), diameter=0)
        with pytest.raises(ValueError, match="height"):
            Tank(id="t1", position=Position(0, 0), height=-1)


class TestValve:
    def test_category_flags(self):
        main = Valve(id="v1", position=Position(0, 0), category=ValveCategory.MAIN)
        sub = Valve(id="v2", position=Position(0, 0), category="sub")
        other = Valve(id="v3", position=Position(0, 0), category="bypass")

        assert main.is_main and not main.is_sub
        assert sub.is_sub and not sub.is_main
        assert not other.is_main and not other.is_sub

    def test_open_by_default(self):
        assert Valve(id="v1", position=Position(0, 0)).is_open is True

    def test_rejects_negative_households(self):
        with pytest.raises(ValueError, match="households cannot be negative"):
            Valve(id="v1", position=Position(0, 0), households=-1)


class TestPipeline:
    def test_defaults(self):
        pipeline = Pipeline(id=1)
        assert pipeline.active is True
        assert pipeline.capacity == 500.0
        assert pipeline.waypoints == []

    def test_rejects_negative_capacity(self):
        with pytest.raises(ValueError, match="capacity cannot be negative"):
            Pipeline(id="p1", capacity=-10)

    def test_rejects_empty_id(self):
        with pytest.raises(ValueError, match="id cannot be empty"):
            Pipeline(id="")
