"""Weighted directed graph with topological sorting and critical paths.

This module provides the WeightedGraph container, the Kahn's-algorithm
topological sort and the longest-path computation built on top of it.
"""

from critpath.graph.algorithms import LongestPath, longest_path, topological_sort
from critpath.graph.nodes import DEFAULT_SEPARATOR, IntNode, Node, format_nodes
from critpath.graph.validator import GraphValidator, ValidationReport
from critpath.graph.weighted_graph import (
    CycleDetectedError,
    EdgeNotFoundError,
    GraphError,
    InvalidRangeError,
    WeightedGraph,
)

__all__ = [
    "DEFAULT_SEPARATOR",
    "CycleDetectedError",
    "EdgeNotFoundError",
    "GraphError",
    "GraphValidator",
    "IntNode",
    "InvalidRangeError",
    "LongestPath",
    "Node",
    "ValidationReport",
    "WeightedGraph",
    "format_nodes",
    "longest_path",
    "topological_sort",
]
