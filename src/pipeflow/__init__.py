"""
pipeflow

Flow topology and supply distribution for gravity-fed water networks.

Pipelines are drawn independently as lists of geographic waypoints. The
package snaps them into one graph, traces which segments carry water from the
active tanks given the closed gate valves, and estimates how many households
behind each valve are served.

Modules:
    geo: Great-circle and point-to-segment distances.
    network: Input records (Tank, Valve, Pipeline), waypoint parsing and snapshots.
    graph: Snapped pipeline graph and its builder.
    flow: Flow propagation from active tanks.
    supply: Valve tree and household supply distribution.
    tank: Tank fill metrics.
    report: pandas views of flow and supply results.
    visualize: matplotlib flow map.
"""

from .config import DEFAULT_SETTINGS, FlowSettings
from .flow import BlockedSegment, FlowResult, FlowSegment, calculate_flow_paths, propagate
from .graph import PipelineGraph, build_graph
from .network import NetworkSnapshot, Pipeline, Position, SnapshotError, Tank, Valve, ValveCategory
from .supply import SupplyOverview, calculate_supply_overview, distribute

# Define what should be imported with "from pipeflow import *"
__all__ = [
    "DEFAULT_SETTINGS",
    "FlowSettings",
    "Position",
    "Tank",
    "Valve",
    "ValveCategory",
    "Pipeline",
    "NetworkSnapshot",
    "SnapshotError",
    "PipelineGraph",
    "build_graph",
    "FlowResult",
    "FlowSegment",
    "BlockedSegment",
    "propagate",
    "calculate_flow_paths",
    "SupplyOverview",
    "distribute",
    "calculate_supply_overview",
]

# Package version
__version__ = "0.1.0"
