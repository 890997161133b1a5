"""
Mini-C Abstract Syntax Tree (AST) Definitions
=============================================

This module defines the parse tree produced by the Mini-C parser. Every
node is the same immutable shape, ``ASTNode(kind, value, children)``, so
a renderer can draw the tree without knowing any Python types beyond
strings and lists.

Node Kinds and Children
-----------------------
PROGRAM                 declarations and statements, any number
FUNCTION_DECLARATION    [TYPE, PARAMETERS, BLOCK]            value: name
PARAMETERS              PARAMETER*
PARAMETER               [TYPE]                               value: name
VARIABLE_DECLARATION    [TYPE] or [TYPE, INITIALIZATION]     value: name
TYPE                    []                                   value: type
INITIALIZATION          [expression]
IF_STATEMENT            [condition, then] or [condition, then, else]
WHILE_STATEMENT         [condition, body]
FOR_STATEMENT           [FOR_INIT, FOR_CONDITION, FOR_INCREMENT, body]
FOR_INIT                [] or [declaration or expression]
FOR_CONDITION           [] or [expression]
FOR_INCREMENT           [] or [expression]
RETURN_STATEMENT        [] or [expression]
BLOCK                   declarations and statements, any number
ASSIGNMENT              [value]                              value: target
BINARY                  [left, right]                        value: operator
UNARY                   [operand]                            value: operator
LITERAL                 []                                   value: digits
IDENTIFIER              []                                   value: name
GROUPING                [expression]

Design Notes
------------
- Nodes are frozen dataclasses with tuple children; nothing is mutated
  after the parser builds it.
- Nodes have no identity of their own. A node is addressed by its path,
  the tuple of child indices from the root, which is what walk() yields.
  Display state such as "expanded" belongs to the renderer, keyed by path.
- All traversals here use an explicit stack, so deeply nested trees do not
  depend on the interpreter's recursion limit.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional


# =============================================================================
# Node Kinds
# =============================================================================

class NodeKind(Enum):
    """Grammatical category of an AST node."""

    PROGRAM = "PROGRAM"
    FUNCTION_DECLARATION = "FUNCTION_DECLARATION"
    VARIABLE_DECLARATION = "VARIABLE_DECLARATION"
    TYPE = "TYPE"
    PARAMETERS = "PARAMETERS"
    PARAMETER = "PARAMETER"
    INITIALIZATION = "INITIALIZATION"
    IF_STATEMENT = "IF_STATEMENT"
    WHILE_STATEMENT = "WHILE_STATEMENT"
    FOR_STATEMENT = "FOR_STATEMENT"
    FOR_INIT = "FOR_INIT"
    FOR_CONDITION = "FOR_CONDITION"
    FOR_INCREMENT = "FOR_INCREMENT"
    RETURN_STATEMENT = "RETURN_STATEMENT"
    BLOCK = "BLOCK"
    ASSIGNMENT = "ASSIGNMENT"
    BINARY = "BINARY"
    UNARY = "UNARY"
    LITERAL = "LITERAL"
    IDENTIFIER = "IDENTIFIER"
    GROUPING = "GROUPING"


LOOP_KINDS = frozenset({NodeKind.FOR_STATEMENT, NodeKind.WHILE_STATEMENT})

# Allowed child counts per kind; None means any number
ARITY: dict[NodeKind, Optional[frozenset[int]]] = {
    NodeKind.PROGRAM: None,
    NodeKind.FUNCTION_DECLARATION: frozenset({3}),
    NodeKind.VARIABLE_DECLARATION: frozenset({1, 2}),
    NodeKind.TYPE: frozenset({0}),
    NodeKind.PARAMETERS: None,
    NodeKind.PARAMETER: frozenset({1}),
    NodeKind.INITIALIZATION: frozenset({1}),
    NodeKind.IF_STATEMENT: frozenset({2, 3}),
    NodeKind.WHILE_STATEMENT: frozenset({2}),
    NodeKind.FOR_STATEMENT: frozenset({4}),
    NodeKind.FOR_INIT: frozenset({0, 1}),
    NodeKind.FOR_CONDITION: frozenset({0, 1}),
    NodeKind.FOR_INCREMENT: frozenset({0, 1}),
    NodeKind.RETURN_STATEMENT: frozenset({0, 1}),
    NodeKind.BLOCK: None,
    NodeKind.ASSIGNMENT: frozenset({1}),
    NodeKind.BINARY: frozenset({2}),
    NodeKind.UNARY: frozenset({1}),
    NodeKind.LITERAL: frozenset({0}),
    NodeKind.IDENTIFIER: frozenset({0}),
    NodeKind.GROUPING: frozenset({1}),
}


# =============================================================================
# AST Node
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    One node of the parse tree.

    Attributes:
        kind: The NodeKind of this node
        value: Name, operator, type or literal text, when the kind has one
        children: Child nodes in grammatical order
    """
    kind: NodeKind
    value: Optional[str] = None
    children: tuple["ASTNode", ...] = ()

    def __repr__(self) -> str:
        if self.value is not None:
            return f"{self.kind.name}({self.value!r}, {len(self.children)} children)"
        return f"{self.kind.name}({len(self.children)} children)"

    def to_dict(self) -> dict:
        """
        Convert the subtree to nested dicts for JSON serialization.

        Each node becomes ``{"kind", "value", "children"}``. Built bottom-up
        with an explicit stack.
        """
        finished: list[dict] = []
        stack: list[tuple[ASTNode, bool]] = [(self, False)]

        while stack:
            node, children_done = stack.pop()
            if children_done:
                count = len(node.children)
                children = finished[len(finished) - count:]
                del finished[len(finished) - count:]
                finished.append({
                    "kind": node.kind.value,
                    "value": node.value,
                    "children": children,
                })
                continue
            stack.append((node, True))
            for child in reversed(node.children):
                stack.append((child, False))

        return finished[0]


def make_node(kind: NodeKind, value: Optional[str] = None, *children: ASTNode) -> ASTNode:
    """Build a node from positional children."""
    return ASTNode(kind=kind, value=value, children=tuple(children))


# =============================================================================
# Traversal Helpers
# =============================================================================

def walk(root: ASTNode) -> Iterator[tuple[tuple[int, ...], ASTNode]]:
    """
    Iterate over every node in pre-order.

    Yields:
        (path, node) pairs, where path is the tuple of child indices
        leading from root to node (the root's path is ``()``)
    """
    stack: list[tuple[tuple[int, ...], ASTNode]] = [((), root)]
    while stack:
        path, node = stack.pop()
        yield path, node
        for index in range(len(node.children) - 1, -1, -1):
            stack.append((path + (index,), node.children[index]))


def node_at(root: ASTNode, path: tuple[int, ...]) -> ASTNode:
    """
    Return the node addressed by path.

    Raises:
        IndexError: If path does not address a node under root
    """
    node = root
    for index in path:
        node = node.children[index]
    return node


def count_nodes(root: ASTNode, kind: NodeKind) -> int:
    """Count nodes of one kind anywhere under root, root included."""
    return sum(1 for _, node in walk(root) if node.kind == kind)


def validate_arity(root: ASTNode) -> list[str]:
    """
    Check every node's child count against ARITY.

    Returns:
        One message per offending node; empty when the tree is well formed
    """
    problems = []
    for path, node in walk(root):
        allowed = ARITY[node.kind]
        if allowed is not None and len(node.children) not in allowed:
            expected = " or ".join(str(n) for n in sorted(allowed))
            problems.append(
                f"{node.kind.value} at {list(path)} has {len(node.children)} "
                f"children, expected {expected}"
            )
    return problems


# =============================================================================
# AST Printer
# =============================================================================

class ASTPrinter:
    """
    Pretty printer for AST debugging.

    Produces one line per node, indented two spaces per level, in the
    form ``KIND`` or ``KIND: value``.

    Usage:
        printer = ASTPrinter()
        output = printer.print(ast)
        print(output)
    """

    def __init__(self, indent: str = "  "):
        self.indent = indent

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        output: list[str] = []
        for path, current in walk(node):
            label = current.kind.value
            if current.value is not None:
                label = f"{label}: {current.value}"
            output.append(f"{self.indent * len(path)}{label}")
        return "\n".join(output)
