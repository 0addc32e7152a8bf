"""Statement nodes: declarations, assignments, and the marker program."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from easyviewer.nodes.base import Node
from easyviewer.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Declare(Node):
    """Declaration: let x = 5, const y = x, var z = 'a'"""

    keyword: Literal["let", "const", "var"]
    name: str
    value: Expr


@dataclass(frozen=True, slots=True)
class Assign(Node):
    """Assignment to a bare name: x = x + 1"""

    name: str
    value: Expr


@dataclass(frozen=True, slots=True)
class ContextStore(Node):
    """Write into the DataContext: data.x = 5 (rewriter output)."""

    name: str
    value: Expr


Statement = Expr | Declare | Assign | ContextStore


@dataclass(frozen=True, slots=True)
class Program(Node):
    """All statements of one marker, separated by ';'.

    The program's value is the value of its last statement.
    """

    body: Sequence[Statement]
