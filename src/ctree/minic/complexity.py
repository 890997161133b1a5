"""
Mini-C Complexity Analyzer
==========================

Coarse, structural estimate of a program's time and space complexity,
read straight off the AST.

Time
----
Only loop nesting is considered. A FOR_STATEMENT or WHILE_STATEMENT makes
its subtree at least O(n); if another loop sits anywhere below it, the
subtree is O(n²). The program's class is the largest found anywhere.

Loops one after another do not add up and nesting deeper than two still
reports O(n²). Trip counts and recursion are ignored.

Space
-----
Every VARIABLE_DECLARATION in the tree is counted. Any declaration at all
makes the program O(n); none leaves it O(1).

Example
-------
>>> from ctree.minic.parser import parse_source
>>> report = analyze(parse_source("while (x) { x = x - 1; }"))
>>> str(report.time)
'O(n)'
"""

from dataclasses import dataclass
from enum import Enum

from ctree.minic.ast import ASTNode, LOOP_KINDS, NodeKind, count_nodes


# =============================================================================
# Complexity Classes
# =============================================================================

class ComplexityClass(Enum):
    """Asymptotic buckets, ordered O(1) < O(n) < O(n²)."""

    O1 = "O(1)"
    ON = "O(n)"
    ON2 = "O(n²)"

    def __str__(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        """Position in the ordering, O(1) first."""
        return list(ComplexityClass).index(self)

    def __lt__(self, other: "ComplexityClass") -> bool:
        if not isinstance(other, ComplexityClass):
            return NotImplemented
        return self.rank < other.rank


@dataclass(frozen=True)
class ComplexityReport:
    """
    Result of complexity analysis.

    Attributes:
        time: Time complexity class
        space: Space complexity class (O1 or ON)
        details: Human-readable rationale, time first then space
    """
    time: ComplexityClass
    space: ComplexityClass
    details: tuple[str, ...]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "time": str(self.time),
            "space": str(self.space),
            "details": list(self.details),
        }


# =============================================================================
# Analyzer
# =============================================================================

class ComplexityAnalyzer:
    """
    Walks a finished AST and classifies it.

    The walk is an explicit-stack post-order traversal: each node is
    revisited after its children, at which point the children's results
    are folded into the parent's.
    """

    def analyze(self, ast: ASTNode) -> ComplexityReport:
        """Classify ast. Never fails for a tree produced by the parser."""
        time = self._time_complexity(ast)
        declarations = count_nodes(ast, NodeKind.VARIABLE_DECLARATION)
        space = ComplexityClass.ON if declarations >= 1 else ComplexityClass.O1

        return ComplexityReport(
            time=time,
            space=space,
            details=(
                self._time_detail(time),
                self._space_detail(space, declarations),
            ),
        )

    def _time_complexity(self, root: ASTNode) -> ComplexityClass:
        # Per finished subtree: (contains a loop, classification)
        finished: list[tuple[bool, ComplexityClass]] = []
        stack: list[tuple[ASTNode, bool]] = [(root, False)]

        while stack:
            node, children_done = stack.pop()
            if not children_done:
                stack.append((node, True))
                for child in reversed(node.children):
                    stack.append((child, False))
                continue

            count = len(node.children)
            child_results = finished[len(finished) - count:]
            del finished[len(finished) - count:]

            loop_below = any(has_loop for has_loop, _ in child_results)
            result = max((cls for _, cls in child_results), default=ComplexityClass.O1)

            if node.kind in LOOP_KINDS:
                own = ComplexityClass.ON2 if loop_below else ComplexityClass.ON
                result = max(result, own)

            finished.append((loop_below or node.kind in LOOP_KINDS, result))

        return finished[0][1]

    @staticmethod
    def _time_detail(time: ComplexityClass) -> str:
        if time == ComplexityClass.ON2:
            return f"Nested loops found: time complexity is {time}"
        if time == ComplexityClass.ON:
            return f"Loop found with no loop nested inside it: time complexity is {time}"
        return f"No loops found: time complexity is {time}"

    @staticmethod
    def _space_detail(space: ComplexityClass, declarations: int) -> str:
        noun = "variable" if declarations == 1 else "variables"
        return f"{declarations} {noun} declared: space complexity is {space}"


def analyze(ast: ASTNode) -> ComplexityReport:
    """Classify the time and space complexity of ast."""
    return ComplexityAnalyzer().analyze(ast)
