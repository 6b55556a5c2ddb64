from .propagate import calculate_flow_paths, find_blocking_valve, propagate, total_segments
from .segments import BlockedSegment, FlowResult, FlowSegment

__all__ = [
    # Results
    "BlockedSegment",
    "FlowResult",
    "FlowSegment",
    # Propagation
    "calculate_flow_paths",
    "find_blocking_valve",
    "propagate",
    "total_segments",
]
