"""Directed, weighted graph with incremental edge mutation.

This module provides the WeightedGraph container together with the error
types raised by graph operations. The container keeps its adjacency lists,
weights and degree counters in lock-step; derived views (source and sink
nodes) are cached and only refreshed by ``compute_source_and_sink``.
"""

from typing import TYPE_CHECKING, Any

from critpath.graph.nodes import Node, format_nodes
from critpath.log_config import get_logger

if TYPE_CHECKING:
    from critpath.graph.algorithms import LongestPath

logger = get_logger(__name__)


class GraphError(Exception):
    """Base class for recoverable graph errors.

    Attributes:
        message: Human readable description of the failure
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CycleDetectedError(GraphError):
    """Raised by a topological sort when the graph contains a cycle.

    The residual edges are the edges that could not be consumed by Kahn's
    algorithm; every cycle of the graph lies within them.

    Attributes:
        residual_edges: Mapping of source node to the destinations left over
    """

    def __init__(self, residual_edges: dict[Node, list[Node]]):
        self.residual_edges = residual_edges
        rendered = ", ".join(
            f"{src}->[{format_nodes(dsts, ', ')}]" for src, dsts in residual_edges.items()
        )
        super().__init__(f"Cycle detected in graph, residual edges: {rendered}")


class EdgeNotFoundError(GraphError):
    """Raised when an operation targets an edge that does not exist."""

    def __init__(self, src: Node, dst: Node):
        self.src = src
        self.dst = dst
        super().__init__(f"Edge not found: {src}->{dst}")


class InvalidRangeError(GraphError):
    """Raised when a longest-path query has no valid src..dst range.

    Attributes:
        src: Requested start node
        dst: Requested end node
        reason: Short explanation of why the range is invalid
    """

    def __init__(self, src: Node, dst: Node, reason: str):
        self.src = src
        self.dst = dst
        self.reason = reason
        super().__init__(f"Invalid range {src}..{dst}: {reason}")


class WeightedGraph:
    """Directed graph with one integer weight per ordered node pair.

    Parallel edges between the same pair are allowed and counted separately
    by the adjacency lists and degree counters, but share a single weight
    (the most recently added one).

    Thread-safety:
        This class is NOT thread-safe. Mutating methods update several
        dictionaries without synchronization; callers sharing a graph across
        threads must guard every call with an external lock.

    Attributes:
        nodes: Insertion-ordered set of every node seen (dict keys)
        edges: Adjacency lists, source node to destinations in insertion order
        weights: Nested mapping ``weights[src][dst] -> int``
        in_degree: Number of incoming edges per node
        out_degree: Number of outgoing edges per node
        source: Cached nodes with in-degree 0 (see compute_source_and_sink)
        sink: Cached nodes with out-degree 0 (see compute_source_and_sink)

    Example:
        >>> graph = WeightedGraph()
        >>> graph.add_edge("a", "b", 2)
        >>> graph.add_edge("b", "c")
        >>> graph.topo_sort()
        ['a', 'b', 'c']
        >>> graph.longest_path("a", "c")
        LongestPath(length=3, path=['a', 'b', 'c'])
    """

    def __init__(self):
        """Initialize an empty graph."""
        self.nodes: dict[Node, None] = {}
        self.edges: dict[Node, list[Node]] = {}
        self.weights: dict[Node, dict[Node, int]] = {}
        self.in_degree: dict[Node, int] = {}
        self.out_degree: dict[Node, int] = {}
        self.source: list[Node] = []
        self.sink: list[Node] = []

    def __contains__(self, node: object) -> bool:
        return node in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(nodes={len(self.nodes)}, edges={self.edge_count})"

    def __copy__(self) -> "WeightedGraph":
        return self.clone()

    def __deepcopy__(self, memo: dict[int, Any]) -> "WeightedGraph":
        return self.clone()

    @property
    def edge_count(self) -> int:
        """Number of edges currently in the graph, parallel edges included."""
        return sum(len(dsts) for dsts in self.edges.values())

    def _register_node(self, node: Node) -> None:
        if node not in self.nodes:
            self.nodes[node] = None
            self.in_degree[node] = 0
            self.out_degree[node] = 0

    def add_edge(self, src: Node, dst: Node, weight: int = 1) -> None:
        """Add a directed edge from src to dst.

        Both nodes are registered if unseen. Adding an edge that already
        exists appends a parallel edge and overwrites the stored weight.

        Args:
            src: Start node of the edge
            dst: End node of the edge
            weight: Edge weight, defaults to 1
        """
        self._register_node(src)
        self._register_node(dst)

        self.edges.setdefault(src, []).append(dst)
        self.weights.setdefault(src, {})[dst] = weight
        self.in_degree[dst] += 1
        self.out_degree[src] += 1

        logger.debug("edge_added", src=str(src), dst=str(dst), weight=weight)

    def remove_edge(self, src: Node, dst: Node) -> None:
        """Remove one src->dst edge.

        When parallel edges exist only one of them is removed; which one is
        not part of the contract. Nodes are never removed, even when they
        are left without edges.

        Args:
            src: Start node of the edge
            dst: End node of the edge

        Raises:
            EdgeNotFoundError: If there is no src->dst edge. The graph is
                left unchanged.
        """
        if not self.has_edge(src, dst):
            logger.warning("remove_missing_edge", src=str(src), dst=str(dst))
            raise EdgeNotFoundError(src, dst)

        destinations = self.edges[src]
        destinations.remove(dst)
        if not destinations:
            del self.edges[src]

        if dst not in destinations:
            del self.weights[src][dst]
            if not self.weights[src]:
                del self.weights[src]

        self.in_degree[dst] -= 1
        self.out_degree[src] -= 1

        logger.debug("edge_removed", src=str(src), dst=str(dst))

    def has_edge(self, src: Node, dst: Node) -> bool:
        """Return True if at least one src->dst edge exists."""
        return dst in self.edges.get(src, ())

    def weight(self, src: Node, dst: Node) -> int:
        """Return the weight of the src->dst edge.

        Raises:
            EdgeNotFoundError: If there is no src->dst edge
        """
        if not self.has_edge(src, dst):
            raise EdgeNotFoundError(src, dst)
        return self.weights[src][dst]

    def successors(self, node: Node) -> list[Node]:
        """Return a copy of the destinations of node's outgoing edges."""
        return list(self.edges.get(node, ()))

    def clone(self) -> "WeightedGraph":
        """Create a fully independent deep copy of the graph.

        Every container is copied, including the cached source and sink
        lists, so mutating the clone never affects this graph and vice
        versa. Nodes themselves are shared since they are immutable keys.

        Returns:
            A new WeightedGraph with the same structure
        """
        copied = WeightedGraph()
        copied.nodes = dict(self.nodes)
        copied.edges = {src: list(dsts) for src, dsts in self.edges.items()}
        copied.weights = {src: dict(dsts) for src, dsts in self.weights.items()}
        copied.in_degree = dict(self.in_degree)
        copied.out_degree = dict(self.out_degree)
        copied.source = list(self.source)
        copied.sink = list(self.sink)

        logger.debug("graph_cloned", node_count=len(self.nodes), edge_count=self.edge_count)

        return copied

    def compute_source_and_sink(self) -> None:
        """Recompute the cached source and sink lists.

        Sources are nodes with in-degree 0, sinks are nodes with out-degree
        0. Both lists follow node insertion order, but callers should treat
        them as sets.
        """
        self.source = [node for node in self.nodes if self.in_degree[node] == 0]
        self.sink = [node for node in self.nodes if self.out_degree[node] == 0]

        logger.debug(
            "source_and_sink_computed",
            source_count=len(self.source),
            sink_count=len(self.sink),
        )

    def topo_sort(self) -> list[Node]:
        """Return the nodes in topological order.

        Raises:
            CycleDetectedError: If the graph is not a DAG
        """
        from critpath.graph.algorithms import topological_sort  # noqa: PLC0415

        return topological_sort(self)

    def longest_path(self, src: Node, dst: Node) -> "LongestPath":
        """Return the maximum-weight path from src to dst.

        Raises:
            InvalidRangeError: If src/dst are unknown or dst cannot be reached
            CycleDetectedError: If the graph is not a DAG
        """
        from critpath.graph.algorithms import longest_path  # noqa: PLC0415

        return longest_path(self, src, dst)

    def get_stats(self) -> dict[str, int]:
        """Get statistics about the current graph state.

        Returns:
            Dictionary with graph statistics including:
                - total_nodes: Number of nodes ever registered
                - total_edges: Number of edges, parallel edges included
                - source_count: Size of the cached source list
                - sink_count: Size of the cached sink list
        """
        stats = {
            "total_nodes": len(self.nodes),
            "total_edges": self.edge_count,
            "source_count": len(self.source),
            "sink_count": len(self.sink),
        }

        logger.debug("graph_stats_retrieved", **stats)

        return stats
