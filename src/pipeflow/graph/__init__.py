from .builder import build_graph
from .model import GraphEdge, GraphNode, PipelineGraph

__all__ = [
    "GraphEdge",
    "GraphNode",
    "PipelineGraph",
    "build_graph",
]
