"""Unit tests for GraphValidator class.

Tests cover:
- Validation report bookkeeping and summaries
- Degree and weight consistency audits
- Cycle detection with path reporting
- Isolated node warnings
"""

from critpath.graph.nodes import IntNode
from critpath.graph.validator import GraphValidator, ValidationReport
from critpath.graph.weighted_graph import WeightedGraph


def build(edges: list[tuple]) -> WeightedGraph:
    graph = WeightedGraph()
    for edge in edges:
        graph.add_edge(*edge)
    return graph


class TestValidationReport:
    """Test ValidationReport functionality."""

    def test_initialization(self):
        """Test that ValidationReport initializes correctly."""
        report = ValidationReport()

        assert report.is_valid is True
        assert report.errors == []
        assert report.warnings == []
        assert report.cycles == []
        assert report.isolated_nodes == []

    def test_add_error(self):
        """Test adding errors marks validation as failed."""
        report = ValidationReport()
        report.add_error("Test error")

        assert not report.is_valid
        assert report.errors == ["Test error"]

    def test_add_warning(self):
        """Test adding warnings doesn't fail validation."""
        report = ValidationReport()
        report.add_warning("Test warning")

        assert report.is_valid
        assert report.warnings == ["Test warning"]

    def test_summary_empty_report(self):
        """Test summary generation for empty report."""
        summary = ValidationReport().summary()

        assert "Validation Status: PASS" in summary
        assert "Errors: 0" in summary
        assert "Warnings: 0" in summary

    def test_summary_with_cycles(self):
        """Test summary renders cycles with the chosen separator."""
        report = ValidationReport()
        report.cycles = [["a", "b", "a"]]

        assert "1. a->b->a" in report.summary()
        assert "1. a => b => a" in report.summary(separator=" => ")


class TestGraphValidator:
    """Test invariant audits on real graphs."""

    def test_valid_dag(self):
        """Test that a graph built through the API validates cleanly."""
        graph = build([("a", "b", 2), ("b", "c"), ("a", "c"), ("a", "b")])
        graph.remove_edge("a", "b")

        report = GraphValidator().validate(graph)

        assert report.is_valid
        assert report.errors == []
        assert report.cycles == []

    def test_empty_graph(self):
        """Test that an empty graph is valid."""
        report = GraphValidator().validate(WeightedGraph())

        assert report.is_valid

    def test_cycle_reported_with_path(self):
        """Test cycle path reporting."""
        graph = build([("a", "b"), ("b", "c"), ("c", "a")])

        report = GraphValidator().validate(graph)

        assert not report.is_valid
        assert report.cycles == [["a", "b", "c", "a"]]
        assert any("Cycle detected: a->b->c->a" in error for error in report.errors)

    def test_self_loop_reported(self):
        """Test that a self loop is reported as a cycle."""
        report = GraphValidator().validate(build([("a", "a")]))

        assert report.cycles == [["a", "a"]]

    def test_degree_drift_detected(self):
        """Test that tampered degree counters are reported."""
        graph = build([("a", "b")])
        graph.in_degree["b"] = 3
        graph.out_degree["a"] = -1

        report = GraphValidator().validate(graph)

        assert not report.is_valid
        assert any("In-degree of b is 3" in error for error in report.errors)
        assert any("Negative degree for a" in error for error in report.errors)

    def test_weight_mismatch_detected(self):
        """Test that missing and orphaned weights are reported."""
        graph = build([("a", "b"), ("b", "c")])
        del graph.weights["a"]
        graph.weights["c"] = {"a": 4}

        report = GraphValidator().validate(graph)

        assert "Edge a->b has no weight" in report.errors
        assert "Weight stored for missing edge c->a" in report.errors

    def test_unknown_endpoint_detected(self):
        """Test that edges to unregistered nodes are reported."""
        graph = build([("a", "b")])
        graph.edges["a"].append("ghost")

        report = GraphValidator().validate(graph)

        assert "Edge endpoint ghost is not a registered node" in report.errors

    def test_isolated_nodes_warned(self):
        """Test that nodes without edges only raise a warning."""
        graph = build([("a", "b"), ("b", "c")])
        graph.remove_edge("a", "b")

        report = GraphValidator().validate(graph)

        assert report.is_valid
        assert report.isolated_nodes == ["a"]
        assert report.warnings == ["Nodes without edges: a"]

    def test_validator_reusable(self):
        """Test that one validator instance can audit several graphs."""
        validator = GraphValidator()
        cyclic = build([("a", "b"), ("b", "a")])
        acyclic = build([("x", "y")])

        assert not validator.validate(cyclic).is_valid
        assert validator.validate(acyclic).is_valid


class TestDeepGraphs:
    """Test validation of graphs deeper than the interpreter recursion limit."""

    CHAIN_LENGTH = 3000

    def chain(self) -> WeightedGraph:
        graph = WeightedGraph()
        for i in range(self.CHAIN_LENGTH):
            graph.add_edge(IntNode(i), IntNode(i + 1))
        return graph

    def test_long_chain_is_valid(self):
        """Test a 3000 edge chain validates like it sorts."""
        graph = self.chain()

        assert len(graph.topo_sort()) == self.CHAIN_LENGTH + 1
        report = GraphValidator().validate(graph)

        assert report.is_valid
        assert report.cycles == []

    def test_long_cycle_reported_with_full_path(self):
        """Test that a back edge closing the chain yields the whole cycle."""
        graph = self.chain()
        graph.add_edge(IntNode(self.CHAIN_LENGTH), IntNode(0))

        report = GraphValidator().validate(graph)

        assert not report.is_valid
        (cycle,) = report.cycles
        assert len(cycle) == self.CHAIN_LENGTH + 2
        assert cycle[0] == cycle[-1] == IntNode(0)
        assert cycle[1:4] == [IntNode(1), IntNode(2), IntNode(3)]
