import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from pipeflow.config import DEFAULT_SETTINGS, FlowSettings
from pipeflow.flow import FlowResult, calculate_flow_paths
from pipeflow.geo import point_to_segment_distance
from pipeflow.network.parsing import pipeline_segments
from pipeflow.network.records import Pipeline, Tank, Valve

from .tree import ValveTreeNode, build_valve_tree

logger = logging.getLogger(__name__)

UNASSIGNED_REGION = "Unassigned"


@dataclass(frozen=True, slots=True)
class SupplyStats:
    total_households: int
    served_households: int
    coverage_percent: float
    total_flow: float
    avg_supply_per_household: float
    main_valve_count: int
    sub_valve_count: int
    active_tank_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalHouseholds": self.total_households,
            "servedHouseholds": self.served_households,
            "coveragePercent": self.coverage_percent,
            "totalFlow": self.total_flow,
            "avgSupplyPerHousehold": self.avg_supply_per_household,
            "mainValveCount": self.main_valve_count,
            "subValveCount": self.sub_valve_count,
            "activeTankCount": self.active_tank_count,
        }


@dataclass(frozen=True, slots=True)
class ValveSupply:
    valve: Valve
    flow: float
    served_households: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "valveId": self.valve.id,
            "name": self.valve.name,
            "category": str(self.valve.category),
            "isOpen": self.valve.is_open,
            "households": self.valve.households,
            "flow": self.flow,
            "servedHouseholds": self.served_households,
        }


@dataclass(frozen=True)
class RegionSummary:
    name: str
    valves: list[ValveSupply] = field(default_factory=list)
    total_households: int = 0
    served_households: int = 0
    total_flow: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "valves": [v.to_dict() for v in self.valves],
            "totalHouseholds": self.total_households,
            "servedHouseholds": self.served_households,
            "totalFlow": self.total_flow,
        }


@dataclass(frozen=True)
class SupplyOverview:
    stats: SupplyStats
    regions: list[RegionSummary]
    valve_tree: list[ValveTreeNode]
    flow: FlowResult

    def region(self, name: str) -> RegionSummary:
        for region in self.regions:
            if region.name == name:
                return region
        raise KeyError(f"Region '{name}' not found")

    def to_dict(self) -> dict[str, Any]:
        return {
            "stats": self.stats.to_dict(),
            "regions": [r.to_dict() for r in self.regions],
            "valveTree": [n.to_dict() for n in self.valve_tree],
        }


def find_connected_pipelines(
    valve: Valve,
    pipelines: Iterable[Pipeline],
    association_distance: float = DEFAULT_SETTINGS.association_distance,
) -> list[Pipeline]:
    """Active pipelines with a sub-segment closer than ``association_distance`` to the valve."""
    connected: list[Pipeline] = []
    for pipeline in pipelines:
        if not pipeline.active:
            continue
        for start, end in pipeline_segments(pipeline, warn=False):
            dist = point_to_segment_distance(valve.position, start, end)
            if dist is not None and dist < association_distance:
                connected.append(pipeline)
                break
    return connected


def estimate_valve_flow(
    valve: Valve,
    pipelines: Sequence[Pipeline],
    flowing_ids: set[str | int],
    settings: FlowSettings = DEFAULT_SETTINGS,
) -> float:
    """Share of nominal capacity of the flowing pipelines the valve sits on."""
    if not valve.is_open:
        return 0.0
    connected = find_connected_pipelines(valve, pipelines, settings.association_distance)
    return sum(p.capacity * settings.utilization for p in connected if p.id in flowing_ids)


def _distribute_node(node: ValveTreeNode, valve_flows: dict[str, float], settings: FlowSettings) -> None:
    if not node.valve.is_open:
        return
    open_households = node.open_households
    if open_households <= 0:
        return

    node.served_households = min(open_households, math.floor(node.total_flow / settings.household_flow_rate))

    flow_per_household = node.total_flow / open_households
    node.direct_flow = node.direct_households * flow_per_household
    # Parent distribution replaces the child's own pipeline estimate
    for child in node.open_children():
        child_flow = child.households * flow_per_household
        node.child_flows[child.id] = child_flow
        valve_flows[child.id] = child_flow


def _build_regions(
    valves: Sequence[Valve],
    tree: Sequence[ValveTreeNode],
    valve_flows: dict[str, float],
) -> list[RegionSummary]:
    nodes_by_id = {n.valve.id: n for n in tree}
    grouped: dict[str, list[Valve]] = {}
    for valve in valves:
        grouped.setdefault(valve.locality or UNASSIGNED_REGION, []).append(valve)

    regions: list[RegionSummary] = []
    for name, members in grouped.items():
        entries: list[ValveSupply] = []
        households = served = 0
        flow = 0.0
        for valve in members:
            node = nodes_by_id.get(valve.id)
            node_served = node.served_households if node is not None else 0
            valve_flow = node.total_flow if node is not None else valve_flows.get(valve.id, 0.0)
            entries.append(ValveSupply(valve=valve, flow=round(valve_flow, 2), served_households=node_served))
            if node is not None:
                households += node.total_households
                served += node.served_households
                flow += node.total_flow
        regions.append(
            RegionSummary(
                name=name,
                valves=entries,
                total_households=households,
                served_households=served,
                total_flow=round(flow, 2),
            )
        )
    return regions


def distribute(
    tanks: Iterable[Tank],
    valves: Iterable[Valve],
    pipelines: Iterable[Pipeline],
    settings: FlowSettings | None = None,
) -> SupplyOverview:
    """Estimate served households and flow down the valve hierarchy.

    Steps:
    1. Propagate flow to learn which pipelines carry water.
    2. Build the main/sub valve tree.
    3. Give every open valve ``capacity * utilization`` for each flowing
       pipeline within ``association_distance`` of it.
    4. For each open main valve, serve ``floor(flow / household_flow_rate)``
       households at most, and split its flow evenly per open household
       between its direct households and its open children.
    5. Aggregate totals and per-locality regions.

    Rounding is applied only to the returned summary values.
    """
    settings = settings or DEFAULT_SETTINGS
    tanks = list(tanks)
    valves = list(valves)
    pipelines = [p for p in pipelines if p.active]

    flow = calculate_flow_paths(tanks, valves, pipelines, settings)
    flowing_ids = flow.flowing_pipeline_ids()

    tree = build_valve_tree(valves)
    valve_flows = {v.id: estimate_valve_flow(v, pipelines, flowing_ids, settings) for v in valves}

    for node in tree:
        node.total_flow = valve_flows[node.valve.id]
        node.child_flows = {c.id: valve_flows[c.id] for c in node.children}

    for node in tree:
        _distribute_node(node, valve_flows, settings)

    total_households = sum(n.total_households for n in tree)
    served_households = sum(n.served_households for n in tree)
    total_flow = sum(n.total_flow for n in tree)

    coverage = served_households / total_households * 100 if total_households > 0 else 0.0
    avg_supply = total_flow / served_households if served_households > 0 else 0.0

    stats = SupplyStats(
        total_households=total_households,
        served_households=served_households,
        coverage_percent=round(min(coverage, 100.0), 1),
        total_flow=round(total_flow, 2),
        avg_supply_per_household=round(avg_supply, 2),
        main_valve_count=sum(1 for v in valves if v.is_main),
        sub_valve_count=sum(1 for v in valves if v.is_sub),
        active_tank_count=sum(1 for t in tanks if t.is_active),
    )
    logger.info(
        f"Supply overview: {stats.served_households}/{stats.total_households} households served "
        f"({stats.coverage_percent}%), total flow {stats.total_flow}"
    )

    return SupplyOverview(
        stats=stats,
        regions=_build_regions(valves, tree, valve_flows),
        valve_tree=tree,
        flow=flow,
    )


calculate_supply_overview = distribute
