"""Expression nodes for the marker AST."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal

from easyviewer.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for expressions."""


@dataclass(frozen=True, slots=True)
class Const(Expr):
    """Constant value: string, number, boolean, null, undefined."""

    value: Any


@dataclass(frozen=True, slots=True)
class Name(Expr):
    """Bare identifier: {{ title }}"""

    name: str


@dataclass(frozen=True, slots=True)
class List(Expr):
    """Array literal: [a, b, c]"""

    items: Sequence[Expr]


@dataclass(frozen=True, slots=True)
class Dict(Expr):
    """Object literal: {a: b, "c": d}"""

    keys: Sequence[str]
    values: Sequence[Expr]


@dataclass(frozen=True, slots=True)
class Getattr(Expr):
    """Member access: obj.attr"""

    obj: Expr
    attr: str


@dataclass(frozen=True, slots=True)
class OptionalGetattr(Expr):
    """Optional member access: obj?.attr"""

    obj: Expr
    attr: str


@dataclass(frozen=True, slots=True)
class Getitem(Expr):
    """Subscript access: obj[key]"""

    obj: Expr
    key: Expr


@dataclass(frozen=True, slots=True)
class FuncCall(Expr):
    """Function call: func(args)"""

    func: Expr
    args: Sequence[Expr] = ()


@dataclass(frozen=True, slots=True)
class BinOp(Expr):
    """Arithmetic: left op right (+ - * / %)"""

    op: str
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class UnaryOp(Expr):
    """Unary operation: op operand (! - +)"""

    op: str
    operand: Expr


@dataclass(frozen=True, slots=True)
class Compare(Expr):
    """Comparison: left op right (== != === !== < <= > >=)"""

    op: str
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class BoolOp(Expr):
    """Boolean operation: a && b, a || b"""

    op: Literal["and", "or"]
    values: Sequence[Expr]


@dataclass(frozen=True, slots=True)
class CondExpr(Expr):
    """Conditional expression: test ? if_true : if_false"""

    test: Expr
    if_true: Expr
    if_false: Expr


@dataclass(frozen=True, slots=True)
class NullCoalesce(Expr):
    """Null coalescing: a ?? b"""

    left: Expr
    right: Expr


# Produced by the rewriter, never by the parser.


@dataclass(frozen=True, slots=True)
class ContextLoad(Expr):
    """Read of a DataContext field: data.title"""

    name: str


@dataclass(frozen=True, slots=True)
class ContextRoot(Expr):
    """The DataContext itself: data"""
