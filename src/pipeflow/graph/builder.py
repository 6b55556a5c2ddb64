import logging
from collections.abc import Iterable

from pipeflow.config import DEFAULT_SETTINGS
from pipeflow.network.parsing import parse_waypoints, segment_count, segment_pairs
from pipeflow.network.records import Pipeline, Position

from .model import PipelineGraph

logger = logging.getLogger(__name__)


def _snap(graph: PipelineGraph, position: Position, connect_distance: float) -> str:
    key = graph.first_within(position, connect_distance)
    if key is None:
        key = graph.add_node(position)
    return key


def build_graph(
    pipelines: Iterable[Pipeline],
    connect_distance: float = DEFAULT_SETTINGS.connect_distance,
) -> PipelineGraph:
    """Build one undirected graph from independently drawn pipelines.

    Waypoints closer than ``connect_distance`` meters to an existing node are
    snapped onto it, which is how separately drawn pipelines join at
    junctions. The first node within range wins, in insertion order.

    Inactive pipelines are ignored. Invalid waypoints are skipped with a
    warning; a pipeline without any pair of consecutive valid waypoints
    contributes nothing.
    """
    graph = PipelineGraph()

    for pipeline in pipelines:
        if not pipeline.active:
            continue
        graph.total_segments += segment_count(pipeline)

        waypoints = parse_waypoints(pipeline)
        if not segment_pairs(waypoints):
            logger.warning(f"Pipeline {pipeline.id} has fewer than 2 valid consecutive waypoints, skipping")
            continue

        keys = [_snap(graph, wp, connect_distance) if wp is not None else None for wp in waypoints]

        for source, target in zip(keys, keys[1:]):
            if source is None or target is None:
                continue
            graph.add_edge(source, target, pipeline.id)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            f"Built pipeline graph: {len(graph.nodes)} nodes, {len(graph.edges)} segments, {graph.islands()} islands"
        )
    return graph
