"""Base node class for the expression AST."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes.

    Nodes track their column in the expression text for error reporting.
    Nodes are immutable, so a parsed tree can be shared between passes.

    """

    col_offset: int
