from .distribute import (
    RegionSummary,
    SupplyOverview,
    SupplyStats,
    ValveSupply,
    calculate_supply_overview,
    distribute,
    estimate_valve_flow,
    find_connected_pipelines,
)
from .tree import ValveTreeNode, build_valve_tree

__all__ = [
    # Results
    "RegionSummary",
    "SupplyOverview",
    "SupplyStats",
    "ValveSupply",
    # Valve tree
    "ValveTreeNode",
    "build_valve_tree",
    # Distribution
    "calculate_supply_overview",
    "distribute",
    "estimate_valve_flow",
    "find_connected_pipelines",
]
