import pandas as pd

from pipeflow.flow import FlowResult
from pipeflow.supply import SupplyOverview

SEGMENT_COLUMNS = ["pipeline_id", "status", "start_lat", "start_lon", "end_lat", "end_lon", "label"]


def segments_frame(result: FlowResult) -> pd.DataFrame:
    """One row per classified segment, flowing first."""
    rows = [
        {
            "pipeline_id": s.pipeline_id,
            "status": "flowing",
            "start_lat": s.start.lat,
            "start_lon": s.start.lon,
            "end_lat": s.end.lat,
            "end_lon": s.end.lon,
            "label": s.source_tank,
        }
        for s in result.flowing
    ]
    rows.extend(
        {
            "pipeline_id": s.pipeline_id,
            "status": "blocked",
            "start_lat": s.start.lat,
            "start_lon": s.start.lon,
            "end_lat": s.end.lat,
            "end_lon": s.end.lon,
            "label": s.blocked_by,
        }
        for s in result.blocked
    )
    return pd.DataFrame(rows, columns=SEGMENT_COLUMNS)


def regions_frame(overview: SupplyOverview) -> pd.DataFrame:
    df = pd.DataFrame(
        {
            "region": [r.name for r in overview.regions],
            "valves": [len(r.valves) for r in overview.regions],
            "total_households": [r.total_households for r in overview.regions],
            "served_households": [r.served_households for r in overview.regions],
            "total_flow": [r.total_flow for r in overview.regions],
        }
    )
    served = df["served_households"].astype(float)
    total = df["total_households"].astype(float)
    df["coverage_percent"] = (served / total.where(total > 0) * 100).fillna(0.0).clip(upper=100.0).round(1)
    return df


def valve_tree_frame(overview: SupplyOverview) -> pd.DataFrame:
    """One row per main valve with its distribution figures."""
    df = pd.DataFrame(
        {
            "valve_id": [n.valve.id for n in overview.valve_tree],
            "is_open": [n.valve.is_open for n in overview.valve_tree],
            "children": [len(n.children) for n in overview.valve_tree],
            "total_households": [n.total_households for n in overview.valve_tree],
            "direct_households": [n.direct_households for n in overview.valve_tree],
            "served_households": [n.served_households for n in overview.valve_tree],
            "total_flow": [n.total_flow for n in overview.valve_tree],
            "direct_flow": [n.direct_flow for n in overview.valve_tree],
        }
    )
    numeric_cols = df.select_dtypes(include=["float64"]).columns
    df[numeric_cols] = df[numeric_cols].round(2)
    return df
