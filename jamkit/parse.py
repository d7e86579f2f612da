"""Parse tree nodes of the build language.

A node carries the function that evaluates it, up to three child nodes,
two strings and a number.  Evaluating a node calls its function with the
node itself and the argument lists (``$(<)``, ``$(>)``, ...), and gives
back a list of strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Sequence

__all__ = ["ParseNode"]

Args = Sequence[Sequence[str]]
Evaluator = Callable[["ParseNode", Args], Sequence[str]]


@dataclass(eq=False)
class ParseNode:
    """One node of a parse tree."""

    func: Evaluator
    left: ParseNode | None = None
    right: ParseNode | None = None
    third: ParseNode | None = None
    string: str | None = None
    string1: str | None = None
    num: int = 0

    def evaluate(self, args: Args | None = None) -> list[str]:
        """Run this node; ``args`` defaults to no argument lists at all."""
        return list(self.func(self, [] if args is None else args))

    def children(self) -> Iterator[ParseNode]:
        """Yield the child nodes that are present, left to right."""
        for child in (self.left, self.right, self.third):
            if child is not None:
                yield child

    def walk(self) -> Iterator[ParseNode]:
        """Yield this node and all nodes below it, in pre-order."""
        pending: list[ParseNode] = [self]
        while pending:
            node = pending.pop()
            yield node
            pending.extend(reversed(list(node.children())))