"""
Parse tree structure produced by the gpc derivation engine.

Classes:
    ParseNode:
        The payload of one tree node: a symbol name, a value, and whether the
        symbol is a terminal. Terminal nodes carry the matched token's value;
        non-terminal nodes reuse their own name as value.

    ParseTree:
        An ordered n-ary tree of ParseNode. Each tree owns its list of child
        trees; there are no parent links and no sharing between trees.

    ParseTreeDict:
        TypedDict shape of ParseTree.to_dict(), suitable for JSON output.

Functions:
    format_tree(tree, prefix): Render a tree pre-order, one node per line.
    print_tree(tree, prefix): Print format_tree's output to stdout.

Example:
    >>> leaf = ParseTree(ParseNode("NUM", "1", True))
    >>> root = ParseTree(ParseNode("Start", "Start", False), [leaf])
    >>> print(format_tree(root))
    Start (Start)
    |1 (NUM)
"""

from collections.abc import Iterator
from typing import Any, TypedDict


class ParseTreeDict(TypedDict):
    """TypedDict representation of a ParseTree used for serialization.

    Fields:
        name (str): The grammar symbol name.
        value (str): The token value for terminals, the symbol name otherwise.
        is_terminal (bool): Whether the node is a leaf matched against a token.
        children (list[ParseTreeDict]): Child nodes in derivation order.
    """

    name: str
    value: str
    is_terminal: bool
    children: list["ParseTreeDict"]


class ParseNode:
    """A single node payload in a parse tree.

    Attributes:
        name (str): The grammar symbol name (equal to the token name for terminals).
        value (str): The token's literal value, or the symbol name for non-terminals.
        is_terminal (bool): True for leaves matched against a token.

    Defines structural equality and no hash, so instances are unhashable.
    """

    def __init__(self, name: str, value: str, is_terminal: bool):
        self.name = name
        self.value = value
        self.is_terminal = is_terminal

    def __repr__(self) -> str:
        kind = "terminal" if self.is_terminal else "nonterminal"
        return f"ParseNode({self.name}, {self.value!r}, {kind})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, ParseNode)
            and self.name == other.name
            and self.value == other.value
            and self.is_terminal == other.is_terminal
        )


class ParseTree:
    """An ordered, rooted tree of ParseNode values.

    Args:
        node (ParseNode): The payload of the root of this (sub)tree.
        children (list[ParseTree], optional): Child subtrees in derivation order.

    Attributes:
        node (ParseNode): The root payload.
        children (list[ParseTree]): Child subtrees; empty for terminal leaves.

    Like ParseNode, compares structurally and is unhashable.
    """

    def __init__(self, node: ParseNode, children: list["ParseTree"] | None = None):
        self.node = node
        self.children: list["ParseTree"] = children or []

    @property
    def name(self) -> str:
        return self.node.name

    @property
    def value(self) -> str:
        return self.node.value

    @property
    def is_terminal(self) -> bool:
        return self.node.is_terminal

    def __repr__(self) -> str:
        parts = [self.node.name]
        if self.node.is_terminal:
            parts.append(f"value={self.node.value!r}")
        if self.children:
            preview = ", ".join(repr(c) for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        return f"ParseTree({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ParseTree):
            return False
        return self.node == other.node and self.children == other.children

    def walk(self, depth: int = 0) -> Iterator[tuple[int, "ParseTree"]]:
        """Yields ``(depth, subtree)`` pairs in pre-order, starting with this tree."""
        yield depth, self
        for child in self.children:
            yield from child.walk(depth + 1)

    def leaves(self) -> list[ParseNode]:
        """Returns the terminal nodes of the tree from left to right."""
        return [t.node for _, t in self.walk() if t.node.is_terminal]

    def to_dict(self) -> ParseTreeDict:
        return {
            "name": self.node.name,
            "value": self.node.value,
            "is_terminal": self.node.is_terminal,
            "children": [c.to_dict() for c in self.children],
        }


def format_tree(tree: ParseTree, prefix: str = "") -> str:
    """Renders a parse tree pre-order, one ``<value> (<name>)`` line per node.

    Each level of depth adds one ``|`` to the line prefix.

    Args:
        tree: The tree to render.
        prefix: The prefix for the root line.

    Returns:
        The rendered tree without a trailing newline.
    """
    return "\n".join(
        f"{prefix}{'|' * depth}{t.node.value} ({t.node.name})"
        for depth, t in tree.walk()
    )


def print_tree(tree: ParseTree, prefix: str = "") -> None:
    print(format_tree(tree, prefix))


__all__ = ["ParseNode", "ParseTree", "ParseTreeDict", "format_tree", "print_tree"]
