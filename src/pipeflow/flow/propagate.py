import logging
from collections import deque
from collections.abc import Iterable, Sequence

from pipeflow.config import DEFAULT_SETTINGS, FlowSettings
from pipeflow.geo import point_to_segment_distance
from pipeflow.graph import PipelineGraph, build_graph
from pipeflow.network.parsing import segment_count
from pipeflow.network.records import Pipeline, Position, Tank, Valve

from .segments import BlockedSegment, FlowResult, FlowSegment

logger = logging.getLogger(__name__)


def find_blocking_valve(
    start: Position,
    end: Position,
    closed_valves: Sequence[Valve],
    block_distance: float = DEFAULT_SETTINGS.block_distance,
) -> Valve | None:
    """Return the first closed valve lying within ``block_distance`` of the segment."""
    for valve in closed_valves:
        dist = point_to_segment_distance(valve.position, start, end)
        if dist is None:
            continue
        if dist < block_distance:
            logger.debug(f"Valve '{valve.label}' blocks segment at {dist:.2f} m")
            return valve
    return None


def total_segments(pipelines: Iterable[Pipeline]) -> int:
    return sum(segment_count(p) for p in pipelines if p.active)


def propagate(
    graph: PipelineGraph,
    active_tanks: Sequence[Tank],
    closed_valves: Sequence[Valve],
    connect_distance: float = DEFAULT_SETTINGS.connect_distance,
    block_distance: float = DEFAULT_SETTINGS.block_distance,
) -> FlowResult:
    """Classify graph segments as flowing or blocked by traversing from tanks.

    Each tank seeds a breadth-first search from every node within
    ``connect_distance`` of it. Visited nodes and classified segments are
    shared across tanks, so a segment is classified exactly once and the
    first tank to reach a node is credited with the segments explored from
    it. A segment with a closed valve within ``block_distance`` is blocked
    and the search does not continue past it.

    ``total_segments`` is taken from the graph: the nominal sub-segment count
    of the active pipelines, independent of the traversal.
    """
    flowing: list[FlowSegment] = []
    blocked: list[BlockedSegment] = []
    visited_nodes: set[str] = set()
    classified: set[frozenset[str]] = set()

    for tank in active_tanks:
        queue = deque(graph.nodes_within(tank.position, connect_distance))

        while queue:
            node_key = queue.popleft()
            if node_key in visited_nodes:
                continue
            visited_nodes.add(node_key)

            for edge in graph.nodes[node_key].edges:
                if edge.pair in classified:
                    continue
                classified.add(edge.pair)

                start = graph.position(edge.source)
                end = graph.position(edge.target)
                valve = find_blocking_valve(start, end, closed_valves, block_distance)

                if valve is not None:
                    blocked.append(BlockedSegment(edge.pipeline_id, start, end, blocked_by=valve.label))
                    continue

                flowing.append(FlowSegment(edge.pipeline_id, start, end, source_tank=tank.label))
                queue.append(edge.target)

    return FlowResult(flowing=flowing, blocked=blocked, total_segments=graph.total_segments)


def calculate_flow_paths(
    tanks: Iterable[Tank],
    valves: Iterable[Valve],
    pipelines: Iterable[Pipeline],
    settings: FlowSettings | None = None,
) -> FlowResult:
    """Build the pipeline graph and propagate flow from all active tanks."""
    settings = settings or DEFAULT_SETTINGS
    pipelines = [p for p in pipelines if p.active]
    active_tanks = [t for t in tanks if t.is_active]
    closed_valves = [v for v in valves if not v.is_open]

    if not active_tanks:
        logger.info("No active tanks for flow calculation")
        return FlowResult(total_segments=total_segments(pipelines))

    graph = build_graph(pipelines, settings.connect_distance)
    result = propagate(
        graph,
        active_tanks,
        closed_valves,
        connect_distance=settings.connect_distance,
        block_distance=settings.block_distance,
    )

    logger.info(
        f"Flow calculation complete: {len(result.flowing)} flowing, "
        f"{len(result.blocked)} blocked of {result.total_segments} segments"
    )
    return result
