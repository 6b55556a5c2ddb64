from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from pipeflow.network.records import Valve


@dataclass
class ValveTreeNode:
    """A main valve and the sub-valves hanging off it.

    ``valve.households`` counts the households behind the main valve
    including those behind its children, so ``direct_households`` is what
    remains after subtracting the children, floored at zero.
    """

    valve: Valve
    children: list[Valve] = field(default_factory=list)
    direct_households: int = 0
    served_households: int = 0
    total_flow: float = 0.0
    direct_flow: float = 0.0
    child_flows: dict[str, float] = field(default_factory=dict)

    @property
    def total_households(self) -> int:
        return self.valve.households

    def open_children(self) -> list[Valve]:
        return [c for c in self.children if c.is_open]

    @property
    def open_households(self) -> int:
        return self.direct_households + sum(c.households for c in self.open_children())

    def to_dict(self) -> dict[str, Any]:
        return {
            "valveId": self.valve.id,
            "name": self.valve.name,
            "isOpen": self.valve.is_open,
            "locality": self.valve.locality,
            "totalHouseholds": self.total_households,
            "directHouseholds": self.direct_households,
            "servedHouseholds": self.served_households,
            "totalFlow": round(self.total_flow, 2),
            "directFlow": round(self.direct_flow, 2),
            "children": [
                {
                    "valveId": c.id,
                    "name": c.name,
                    "isOpen": c.is_open,
                    "households": c.households,
                    "flow": round(self.child_flows.get(c.id, 0.0), 2),
                }
                for c in self.children
            ],
        }


def build_valve_tree(valves: Iterable[Valve]) -> list[ValveTreeNode]:
    """One tree entry per main valve, in input order.

    Sub-valves attach to the main valve named by ``parent_valve_id``. A
    sub-valve whose parent is missing or is not a main valve belongs to no
    entry.
    """
    valves = list(valves)
    children_by_parent: dict[str, list[Valve]] = {}
    for valve in valves:
        if valve.is_sub and valve.parent_valve_id is not None:
            children_by_parent.setdefault(valve.parent_valve_id, []).append(valve)

    tree: list[ValveTreeNode] = []
    for valve in valves:
        if not valve.is_main:
            continue
        children = children_by_parent.get(valve.id, [])
        direct = max(0, valve.households - sum(c.households for c in children))
        tree.append(ValveTreeNode(valve=valve, children=children, direct_households=direct))
    return tree
