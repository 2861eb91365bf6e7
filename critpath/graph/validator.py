"""Invariant audit for weighted graphs with detailed reporting.

This module checks that a WeightedGraph's derived bookkeeping (degree
counters and weights) agrees with its adjacency lists, and reports cycles
with their full node paths. It is meant for diagnostics and tests; graph
operations never call it implicitly.
"""

from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from critpath.graph.nodes import DEFAULT_SEPARATOR, Node, format_nodes
from critpath.log_config import get_logger

if TYPE_CHECKING:
    from critpath.graph.weighted_graph import WeightedGraph

logger = get_logger(__name__)


@dataclass
class ValidationReport:
    """Report containing validation results for a weighted graph.

    Attributes:
        is_valid: Whether the graph passed all validation checks
        errors: List of error messages (broken invariants, cycles)
        warnings: List of warning messages (potential issues)
        cycles: Detected cycles, each a node path ending where it started
        isolated_nodes: Nodes that currently have no edges at all
    """

    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    cycles: list[list[Node]] = field(default_factory=list)
    isolated_nodes: list[Node] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message and mark validation as failed."""
        self.errors.append(message)
        self.is_valid = False
        logger.error("validation_error", message=message)

    def add_warning(self, message: str) -> None:
        """Add a warning message without failing validation."""
        self.warnings.append(message)
        logger.warning("validation_warning", message=message)

    def summary(self, separator: str = DEFAULT_SEPARATOR) -> str:
        """Generate a human-readable summary of the validation report."""
        lines = [
            f"Validation Status: {'PASS' if self.is_valid else 'FAIL'}",
            f"Errors: {len(self.errors)}",
            f"Warnings: {len(self.warnings)}",
            f"Cycles: {len(self.cycles)}",
            f"Isolated Nodes: {len(self.isolated_nodes)}",
        ]

        if self.errors:
            lines.append("\nErrors:")
            lines.extend(f"  - {error}" for error in self.errors)

        if self.warnings:
            lines.append("\nWarnings:")
            lines.extend(f"  - {warning}" for warning in self.warnings)

        if self.cycles:
            lines.append("\nCycles Detected:")
            for i, cycle in enumerate(self.cycles, 1):
                lines.append(f"  {i}. {format_nodes(cycle, separator)}")

        return "\n".join(lines)


class GraphValidator:
    """Validator auditing the invariants of a WeightedGraph.

    Checks performed:
    - in/out degree counters match the adjacency lists and are never negative
    - every edge has a weight and every weight belongs to an edge
    - every edge endpoint is a registered node
    - cycle detection with complete path information
    - nodes left without any edges (warning only)
    """

    def __init__(self):
        """Initialize the graph validator."""
        self._visited: set[Node] = set()
        self._rec_stack: set[Node] = set()
        self._path: list[Node] = []

    def validate(self, graph: "WeightedGraph") -> ValidationReport:
        """Validate a graph and generate a detailed report.

        Args:
            graph: The WeightedGraph to audit

        Returns:
            ValidationReport containing all validation results
        """
        logger.info(
            "starting_graph_validation",
            node_count=len(graph.nodes),
            edge_count=graph.edge_count,
        )

        report = ValidationReport()

        for message in self._check_unknown_nodes(graph):
            report.add_error(message)

        for message in self._check_degrees(graph):
            report.add_error(message)

        for message in self._check_weights(graph):
            report.add_error(message)

        cycles = self._detect_cycles(graph.edges)
        if cycles:
            report.cycles = cycles
            for cycle in cycles:
                report.add_error(f"Cycle detected: {format_nodes(cycle)}")

        isolated = [
            node for node in graph.nodes if not graph.in_degree.get(node) and not graph.out_degree.get(node)
        ]
        if isolated:
            report.isolated_nodes = isolated
            report.add_warning(f"Nodes without edges: {', '.join(str(n) for n in isolated)}")

        logger.info(
            "graph_validation_complete",
            is_valid=report.is_valid,
            error_count=len(report.errors),
            warning_count=len(report.warnings),
        )

        return report

    def _check_unknown_nodes(self, graph: "WeightedGraph") -> list[str]:
        """Report edge endpoints that were never registered as nodes."""
        messages = []
        for src, dsts in graph.edges.items():
            for node in (src, *dsts):
                if node not in graph.nodes:
                    messages.append(f"Edge endpoint {node} is not a registered node")
        return messages

    def _check_degrees(self, graph: "WeightedGraph") -> list[str]:
        """Compare the degree counters with counts derived from the edges."""
        expected_in: Counter[Node] = Counter()
        expected_out: Counter[Node] = Counter()
        for src, dsts in graph.edges.items():
            expected_out[src] += len(dsts)
            expected_in.update(dsts)

        messages = []
        for node in graph.nodes:
            in_degree = graph.in_degree.get(node, 0)
            out_degree = graph.out_degree.get(node, 0)
            if in_degree < 0 or out_degree < 0:
                messages.append(f"Negative degree for {node}: in={in_degree}, out={out_degree}")
            if in_degree != expected_in[node]:
                messages.append(
                    f"In-degree of {node} is {in_degree}, edges give {expected_in[node]}",
                )
            if out_degree != expected_out[node]:
                messages.append(
                    f"Out-degree of {node} is {out_degree}, edges give {expected_out[node]}",
                )
        return messages

    def _check_weights(self, graph: "WeightedGraph") -> list[str]:
        """Check that weights and edges describe the same node pairs."""
        edge_pairs = {(src, dst) for src, dsts in graph.edges.items() for dst in dsts}
        weight_pairs = {(src, dst) for src, dsts in graph.weights.items() for dst in dsts}

        messages = [
            f"Edge {src}->{dst} has no weight" for src, dst in edge_pairs - weight_pairs
        ]
        messages.extend(
            f"Weight stored for missing edge {src}->{dst}" for src, dst in weight_pairs - edge_pairs
        )
        return messages

    def _detect_cycles(self, edges: dict[Node, list[Node]]) -> list[list[Node]]:
        """Detect cycles using DFS, at most one per DFS tree.

        Args:
            edges: Adjacency lists of the graph

        Returns:
            List of cycles, where each cycle is a node path that starts and
            ends with the same node
        """
        if not edges:
            return []

        self._visited = set()
        self._rec_stack = set()
        self._path = []
        cycles = []

        for node in list(edges):
            if node not in self._visited:
                cycle = self._dfs_cycle_detect(node, edges)
                if cycle:
                    cycles.append(cycle)
                self._rec_stack = set()
                self._path = []

        return cycles

    def _enter(self, node: Node, edges: dict[Node, list[Node]]) -> Iterator[Node]:
        """Mark node as on the current DFS path and return its successor iterator."""
        self._visited.add(node)
        self._rec_stack.add(node)
        self._path.append(node)
        return iter(edges.get(node, ()))

    def _dfs_cycle_detect(
        self,
        node: Node,
        edges: dict[Node, list[Node]],
    ) -> list[Node] | None:
        """DFS-based cycle detection that returns the cycle path.

        Uses an explicit stack of (node, successor iterator) frames so that
        arbitrarily deep graphs do not hit the interpreter recursion limit.

        Args:
            node: Node to start the DFS from
            edges: Adjacency lists of the graph

        Returns:
            List representing the cycle path if found, None otherwise
        """
        stack = [(node, self._enter(node, edges))]

        while stack:
            current, successors = stack[-1]
            for successor in successors:
                if successor not in self._visited:
                    stack.append((successor, self._enter(successor, edges)))
                    break
                if successor in self._rec_stack:
                    cycle_start_idx = self._path.index(successor)
                    return [*self._path[cycle_start_idx:], successor]
            else:
                # Backtrack
                stack.pop()
                self._rec_stack.remove(current)
                self._path.pop()

        return None
