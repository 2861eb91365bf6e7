"""critpath: directed weighted graphs, topological order and critical paths."""

from critpath.graph import (
    CycleDetectedError,
    EdgeNotFoundError,
    GraphError,
    IntNode,
    InvalidRangeError,
    LongestPath,
    WeightedGraph,
    format_nodes,
)

__version__ = "0.1.0"

__all__ = [
    "CycleDetectedError",
    "EdgeNotFoundError",
    "GraphError",
    "IntNode",
    "InvalidRangeError",
    "LongestPath",
    "WeightedGraph",
    "format_nodes",
]
