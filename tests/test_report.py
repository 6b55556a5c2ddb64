import pytest

from pipeflow.flow import calculate_flow_paths
from pipeflow.report import SEGMENT_COLUMNS, regions_frame, segments_frame, valve_tree_frame
from pipeflow.supply import distribute
from pipeflow.testing import at, make_pipeline, make_tank, make_valve


@pytest.fixture
def network():
    tanks = [make_tank(id="t1", name="North OHSR")]
    valves = [
        make_valve(id="gate", position=at(300, 1), is_open=False, name="Gate 3"),
        make_valve(id="m1", position=at(100, 5), households=100, locality="Ameerpet"),
        make_valve(id="s1", position=at(150, 5), category="sub", parent_valve_id="m1", households=40),
    ]
    pipelines = [make_pipeline(id="p1", capacity=625.0)]
    return tanks, valves, pipelines


class TestSegmentsFrame:
    def test_rows_and_labels(self, network):
        result = calculate_flow_paths(*network)
        df = segments_frame(result)

        assert list(df.columns) == SEGMENT_COLUMNS
        assert list(df["status"]) == ["flowing", "blocked"]
        assert list(df["label"]) == ["North OHSR", "Gate 3"]
        assert (df["pipeline_id"] == "p1").all()

    def test_empty_result(self):
        df = segments_frame(calculate_flow_paths([], [], []))
        assert df.empty
        assert list(df.columns) == SEGMENT_COLUMNS


class TestRegionsFrame:
    def test_coverage_column(self, network):
        df = regions_frame(distribute(*network))

        assert list(df["region"]) == ["Unassigned", "Ameerpet"]
        ameerpet = df.set_index("region").loc["Ameerpet"]
        assert ameerpet["total_households"] == 100
        assert ameerpet["served_households"] == 50
        assert ameerpet["coverage_percent"] == 50.0

    def test_region_without_households(self, network):
        df = regions_frame(distribute(*network)).set_index("region")
        assert df.loc["Unassigned", "coverage_percent"] == 0.0


class TestValveTreeFrame:
    def test_one_row_per_main_valve(self, network):
        df = valve_tree_frame(distribute(*network))

        assert list(df["valve_id"]) == ["gate", "m1"]
        row = df.set_index("valve_id").loc["m1"]
        assert row["children"] == 1
        assert row["direct_households"] == 60
        assert row["direct_flow"] == 300.0
