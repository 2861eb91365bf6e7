"""Unit tests for node types and node-sequence rendering."""

from enum import Enum

import pytest

from critpath.graph.nodes import DEFAULT_SEPARATOR, IntNode, Node, format_nodes


class Stage(Enum):
    BUILD = "build"
    TEST = "test"

    def __str__(self) -> str:
        return self.value


class TestIntNode:
    """Test the integer-backed node."""

    def test_str(self):
        """Test rendering as the decimal integer."""
        assert str(IntNode(42)) == "42"
        assert str(IntNode(-3)) == "-3"

    def test_value_equality_and_hash(self):
        """Test that equal values are interchangeable dictionary keys."""
        assert IntNode(5) == IntNode(5)
        assert IntNode(5) != IntNode(6)
        assert {IntNode(5): "x"}[IntNode(5)] == "x"

    def test_immutable(self):
        """Test that nodes cannot be mutated after creation."""
        node = IntNode(1)
        with pytest.raises(AttributeError):
            node.value = 2  # type: ignore[misc]

    def test_satisfies_node_protocol(self):
        """Test that IntNode and common values satisfy the Node protocol."""
        assert isinstance(IntNode(1), Node)
        assert isinstance("a", Node)
        assert isinstance(Stage.BUILD, Node)


class TestFormatNodes:
    """Test joining node sequences."""

    def test_default_separator(self):
        """Test the default arrow separator."""
        assert DEFAULT_SEPARATOR == "->"
        assert format_nodes([IntNode(1), IntNode(2), IntNode(3)]) == "1->2->3"

    def test_custom_separator(self):
        """Test a caller supplied separator."""
        assert format_nodes(["a", "b", "c"], ", ") == "a, b, c"

    def test_uses_node_str(self):
        """Test that each node's own rendering is used."""
        assert format_nodes([Stage.BUILD, Stage.TEST]) == "build->test"

    def test_single_and_empty(self):
        """Test degenerate sequences."""
        assert format_nodes([IntNode(7)]) == "7"
        assert format_nodes([]) == ""
