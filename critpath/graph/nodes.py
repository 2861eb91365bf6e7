"""Node capability and node-sequence rendering.

A node is any hashable value that can render itself with ``str()``. The graph
never looks inside a node beyond equality and hashing, so plain strings,
ints, enums or frozen dataclasses all work. ``IntNode`` is provided as the
integer-backed node type.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

DEFAULT_SEPARATOR = "->"


@runtime_checkable
class Node(Protocol):
    """Protocol for graph nodes: hashable, equality-comparable, printable."""

    def __hash__(self) -> int: ...

    def __str__(self) -> str: ...


@dataclass(frozen=True, slots=True, order=True)
class IntNode:
    """Integer-backed node. Equal and hashed by value, renders as the integer.

    Example:
        >>> str(IntNode(7))
        '7'
        >>> IntNode(7) == IntNode(7)
        True
    """

    value: int

    def __str__(self) -> str:
        return str(self.value)


def format_nodes(nodes: Iterable[Node], separator: str = DEFAULT_SEPARATOR) -> str:
    """Render a node sequence by joining each node's string form.

    Args:
        nodes: Nodes in the order they should appear
        separator: Text placed between consecutive nodes

    Returns:
        The joined string, empty for an empty sequence

    Example:
        >>> format_nodes([IntNode(1), IntNode(2), IntNode(3)])
        '1->2->3'
        >>> format_nodes(["a", "b"], separator=" | ")
        'a | b'
    """
    return separator.join(str(node) for node in nodes)
