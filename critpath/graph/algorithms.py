"""Topological sort and longest-path computation over a WeightedGraph."""

from collections import deque
from typing import NamedTuple

from critpath.graph.nodes import DEFAULT_SEPARATOR, Node, format_nodes
from critpath.graph.weighted_graph import (
    CycleDetectedError,
    InvalidRangeError,
    WeightedGraph,
)
from critpath.log_config import get_logger

logger = get_logger(__name__)


class LongestPath(NamedTuple):
    """Result of a longest-path query.

    Attributes:
        length: Total weight of the path
        path: Nodes of the path, starting at src and ending at dst
    """

    length: int
    path: list[Node]

    def render(self, separator: str = DEFAULT_SEPARATOR) -> str:
        """Render the path nodes joined by separator."""
        return format_nodes(self.path, separator)


def topological_sort(graph: WeightedGraph) -> list[Node]:
    """Sort the graph topologically using Kahn's algorithm.

    Edges are consumed from a private clone, so the caller's graph keeps its
    edges and degree counters; only its cached source and sink lists are
    refreshed. Nodes that become ready at the same time are emitted in the
    order they were enqueued, which makes the result deterministic for a
    given sequence of mutations.

    Args:
        graph: The graph to sort

    Returns:
        Every node of the graph, each before all nodes it has edges to

    Raises:
        CycleDetectedError: If edges remain once no node is ready. The error
            carries the residual edges.

    Example:
        >>> graph = WeightedGraph()
        >>> graph.add_edge("a", "c")
        >>> graph.add_edge("b", "c")
        >>> topological_sort(graph)
        ['a', 'b', 'c']
    """
    working = graph.clone()
    graph.compute_source_and_sink()

    queue = deque(graph.source)
    order: list[Node] = []

    while queue:
        node = queue.popleft()
        order.append(node)
        for successor in graph.edges.get(node, ()):
            working.remove_edge(node, successor)
            if working.in_degree[successor] == 0:
                queue.append(successor)

    if working.edges:
        logger.error(
            "cycle_detected_in_graph",
            residual_sources=[str(src) for src in working.edges],
            sorted_count=len(order),
            node_count=len(graph.nodes),
        )
        raise CycleDetectedError(working.edges)

    logger.info("topological_sort_completed", node_count=len(order))

    return order


def longest_path(graph: WeightedGraph, src: Node, dst: Node) -> LongestPath:
    """Compute the maximum-weight path from src to dst.

    The topological order is cut down to the slice running from src to dst.
    Walking that slice left to right, each node takes the best distance over
    its already finalized predecessors. Only nodes reachable from src take
    part. On ties the predecessor positioned earliest in the order wins.

    Args:
        graph: A DAG
        src: Start node
        dst: End node

    Returns:
        LongestPath with the total weight and the nodes from src to dst

    Raises:
        InvalidRangeError: If src or dst is not in the graph, src comes
            after dst in topological order, or dst is unreachable from src
        CycleDetectedError: If the graph is not a DAG

    Example:
        >>> graph = WeightedGraph()
        >>> graph.add_edge("a", "b", 2)
        >>> graph.add_edge("b", "d", 3)
        >>> graph.add_edge("a", "c", 1)
        >>> graph.add_edge("c", "d", 5)
        >>> longest_path(graph, "a", "d")
        LongestPath(length=6, path=['a', 'c', 'd'])
    """
    for node in (src, dst):
        if node not in graph.nodes:
            logger.warning("longest_path_unknown_node", node=str(node))
            raise InvalidRangeError(src, dst, f"node {node} is not in the graph")

    order = topological_sort(graph)
    start = order.index(src)
    end = order.index(dst)
    if start > end:
        logger.warning("longest_path_reversed_range", src=str(src), dst=str(dst))
        raise InvalidRangeError(src, dst, f"{src} does not precede {dst} in topological order")

    span = order[start : end + 1]
    dist: dict[Node, int] = {src: 0}
    back: dict[Node, Node] = {}

    for i in range(1, len(span)):
        current = span[i]
        best: int | None = None
        for j in range(i):
            previous = span[j]
            if previous not in dist or not graph.has_edge(previous, current):
                continue
            candidate = dist[previous] + graph.weights[previous][current]
            if best is None or candidate > best:
                best = candidate
                back[current] = previous
        if best is not None:
            dist[current] = best

    if dst not in dist:
        logger.warning("longest_path_unreachable", src=str(src), dst=str(dst))
        raise InvalidRangeError(src, dst, f"{dst} is not reachable from {src}")

    path = [dst]
    node = dst
    while node != src:
        node = back[node]
        path.append(node)
    path.reverse()

    logger.info(
        "longest_path_computed",
        src=str(src),
        dst=str(dst),
        length=dist[dst],
        hops=len(path) - 1,
        span=len(span),
    )

    return LongestPath(dist[dst], path)
