from dataclasses import dataclass, field

import networkx as nx
import numpy as np

from pipeflow.geo import haversine_many
from pipeflow.network.records import Position


@dataclass(frozen=True, slots=True)
class GraphEdge:
    source: str
    target: str
    pipeline_id: str | int

    @property
    def pair(self) -> frozenset[str]:
        """Direction-free identity of the physical sub-segment."""
        return frozenset((self.source, self.target))

    def reversed(self) -> "GraphEdge":
        return GraphEdge(source=self.target, target=self.source, pipeline_id=self.pipeline_id)


@dataclass(slots=True)
class GraphNode:
    key: str
    position: Position
    edges: list[GraphEdge] = field(default_factory=list)


@dataclass
class PipelineGraph:
    """Undirected pipeline graph keyed by snapped node position.

    Nodes live in a mapping keyed by their canonical ``"lat,lon"`` string and
    edges reference node keys only. Every physical sub-segment is stored once
    in ``edges`` and twice in adjacency, once per direction.

    ``total_segments`` is the nominal sub-segment count of the pipelines the
    graph was built from, including segments that touch an invalid waypoint.
    """

    nodes: dict[str, GraphNode] = field(default_factory=dict)
    edges: list[GraphEdge] = field(default_factory=list)
    total_segments: int = 0
    _lats: list[float] = field(default_factory=list, init=False, repr=False)
    _lons: list[float] = field(default_factory=list, init=False, repr=False)
    _keys: list[str] = field(default_factory=list, init=False, repr=False)

    def __len__(self) -> int:
        return len(self.nodes)

    def add_node(self, position: Position) -> str:
        key = position.key()
        if key in self.nodes:
            return key
        self.nodes[key] = GraphNode(key=key, position=position)
        self._lats.append(position.lat)
        self._lons.append(position.lon)
        self._keys.append(key)
        return key

    def add_edge(self, source: str, target: str, pipeline_id: str | int) -> GraphEdge:
        if source not in self.nodes:
            raise KeyError(f"Node '{source}' does not exist")
        if target not in self.nodes:
            raise KeyError(f"Node '{target}' does not exist")
        edge = GraphEdge(source=source, target=target, pipeline_id=pipeline_id)
        self.nodes[source].edges.append(edge)
        self.nodes[target].edges.append(edge.reversed())
        self.edges.append(edge)
        return edge

    def nodes_within(self, position: Position, radius: float) -> list[str]:
        """Keys of nodes strictly closer than ``radius`` meters, in insertion order."""
        if not self._keys:
            return []
        dists = haversine_many(position.lat, position.lon, np.array(self._lats), np.array(self._lons))
        return [self._keys[i] for i in np.flatnonzero(dists < radius)]

    def first_within(self, position: Position, radius: float) -> str | None:
        """First node (insertion order) strictly closer than ``radius`` meters."""
        if not self._keys:
            return None
        dists = haversine_many(position.lat, position.lon, np.array(self._lats), np.array(self._lons))
        hits = np.flatnonzero(dists < radius)
        if hits.size == 0:
            return None
        return self._keys[hits[0]]

    def position(self, key: str) -> Position:
        return self.nodes[key].position

    def to_networkx(self) -> nx.MultiGraph:
        graph = nx.MultiGraph()
        for key, node in self.nodes.items():
            graph.add_node(key, position=node.position)
        for edge in self.edges:
            graph.add_edge(edge.source, edge.target, pipeline_id=edge.pipeline_id)
        return graph

    def islands(self) -> int:
        """Number of disconnected sub-networks."""
        if not self.nodes:
            return 0
        return nx.number_connected_components(self.to_networkx())
