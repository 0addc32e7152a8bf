"""Rewrite parsed markers so they read and write the DataContext.

Two rewrites run over the AST, in order:

1. **Declarations**: ``let x = 5`` (and ``const``/``var``/``x = 5``) becomes
   a `ContextStore`, so the variable lands in the shared DataContext and
   later markers in the same pass can see it.
2. **Identifiers**: every `Name` that is a current context key becomes a
   `ContextLoad`. Resolution happens on identifiers in the tree, so a key
   never matches part of another name, a property name, or a string literal.
   A bare ``data`` that is not itself a key refers to the whole context.

Both rewrites are idempotent: rewriter output nodes are left untouched.

Example:
    >>> program = parse_expression("let total = price * qty")
    >>> unparse(rewrite(program, {"price", "qty"}))
    'data.total = data.price * data.qty'

"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable

from easyviewer.nodes import (
    Assign,
    BinOp,
    BoolOp,
    Compare,
    CondExpr,
    Const,
    ContextLoad,
    ContextRoot,
    ContextStore,
    Declare,
    Dict,
    Expr,
    FuncCall,
    Getattr,
    Getitem,
    List,
    Name,
    Node,
    NullCoalesce,
    OptionalGetattr,
    Program,
    Statement,
    UnaryOp,
)
from easyviewer.template.helpers import UNDEFINED, format_number

CONTEXT_NAME = "data"

_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*\Z")


class ExpressionRewriter:
    """Resolve identifiers of one program against a set of context keys.

    Names stored earlier in the same program (``let a = 1; a + 1``) count
    as keys for the statements after them.

    Args:
        context_keys: Keys currently present in the DataContext
    """

    __slots__ = ("_keys",)

    def __init__(self, context_keys: Iterable[str]):
        self._keys = set(context_keys)

    def rewrite(self, program: Program) -> Program:
        body = tuple(self._rewrite_statement(stmt) for stmt in program.body)
        if all(new is old for new, old in zip(body, program.body, strict=True)):
            return program
        return Program(col_offset=program.col_offset, body=body)

    def _rewrite_statement(self, stmt: Statement) -> Statement:
        if isinstance(stmt, (Declare, Assign)):
            value = self._rewrite_expr(stmt.value)
            self._keys.add(stmt.name)
            return ContextStore(col_offset=stmt.col_offset, name=stmt.name, value=value)

        if isinstance(stmt, ContextStore):
            value = self._rewrite_expr(stmt.value)
            self._keys.add(stmt.name)
            if value is stmt.value:
                return stmt
            return ContextStore(col_offset=stmt.col_offset, name=stmt.name, value=value)

        return self._rewrite_expr(stmt)

    def _rewrite_expr(self, expr: Expr) -> Expr:
        if isinstance(expr, Name):
            if expr.name in self._keys:
                return ContextLoad(col_offset=expr.col_offset, name=expr.name)
            if expr.name == CONTEXT_NAME:
                return ContextRoot(col_offset=expr.col_offset)
            return expr

        if isinstance(expr, (Const, ContextLoad, ContextRoot)):
            return expr

        if isinstance(expr, (Getattr, OptionalGetattr)):
            obj = self._rewrite_expr(expr.obj)
            if obj is expr.obj:
                return expr
            return type(expr)(col_offset=expr.col_offset, obj=obj, attr=expr.attr)

        if isinstance(expr, Getitem):
            obj = self._rewrite_expr(expr.obj)
            key = self._rewrite_expr(expr.key)
            if obj is expr.obj and key is expr.key:
                return expr
            return Getitem(col_offset=expr.col_offset, obj=obj, key=key)

        if isinstance(expr, FuncCall):
            func = self._rewrite_expr(expr.func)
            args = self._rewrite_all(expr.args)
            if func is expr.func and args is expr.args:
                return expr
            return FuncCall(col_offset=expr.col_offset, func=func, args=args)

        if isinstance(expr, (BinOp, Compare)):
            left = self._rewrite_expr(expr.left)
            right = self._rewrite_expr(expr.right)
            if left is expr.left and right is expr.right:
                return expr
            return type(expr)(col_offset=expr.col_offset, op=expr.op, left=left, right=right)

        if isinstance(expr, NullCoalesce):
            left = self._rewrite_expr(expr.left)
            right = self._rewrite_expr(expr.right)
            if left is expr.left and right is expr.right:
                return expr
            return NullCoalesce(col_offset=expr.col_offset, left=left, right=right)

        if isinstance(expr, UnaryOp):
            operand = self._rewrite_expr(expr.operand)
            if operand is expr.operand:
                return expr
            return UnaryOp(col_offset=expr.col_offset, op=expr.op, operand=operand)

        if isinstance(expr, BoolOp):
            values = self._rewrite_all(expr.values)
            if values is expr.values:
                return expr
            return BoolOp(col_offset=expr.col_offset, op=expr.op, values=values)

        if isinstance(expr, CondExpr):
            test = self._rewrite_expr(expr.test)
            if_true = self._rewrite_expr(expr.if_true)
            if_false = self._rewrite_expr(expr.if_false)
            if test is expr.test and if_true is expr.if_true and if_false is expr.if_false:
                return expr
            return CondExpr(
                col_offset=expr.col_offset, test=test, if_true=if_true, if_false=if_false
            )

        if isinstance(expr, List):
            items = self._rewrite_all(expr.items)
            if items is expr.items:
                return expr
            return List(col_offset=expr.col_offset, items=items)

        if isinstance(expr, Dict):
            values = self._rewrite_all(expr.values)
            if values is expr.values:
                return expr
            return Dict(col_offset=expr.col_offset, keys=expr.keys, values=values)

        msg = f"Cannot rewrite node {type(expr).__name__}"
        raise TypeError(msg)

    def _rewrite_all(self, exprs: tuple[Expr, ...] | list[Expr]) -> tuple[Expr, ...]:
        new = tuple(self._rewrite_expr(e) for e in exprs)
        if all(n is o for n, o in zip(new, exprs, strict=True)):
            return exprs  # type: ignore[return-value]
        return new


def rewrite(program: Program, context_keys: Iterable[str]) -> Program:
    """Apply the declaration and identifier rewrites to a parsed marker."""
    return ExpressionRewriter(context_keys).rewrite(program)


# ---------------------------------------------------------------------------
# Unparsing
# ---------------------------------------------------------------------------

# Nodes that need parentheses when nested inside an operator
_COMPOUND = (BinOp, Compare, BoolOp, CondExpr, NullCoalesce, UnaryOp)


def _member_access(prefix: str, name: str) -> str:
    if _IDENTIFIER_RE.match(name):
        return f"{prefix}.{name}"
    return f"{prefix}[{json.dumps(name, ensure_ascii=False)}]"


def _const(value: object) -> str:
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return json.dumps(value, ensure_ascii=False)


def _operand(node: Expr) -> str:
    text = unparse(node)
    if isinstance(node, _COMPOUND):
        return f"({text})"
    return text


def unparse(node: Node) -> str:
    """Render an AST back to expression text.

    Rewritten context access shows up as ``data.<name>``. Parsing the
    output yields an equivalent tree.
    """
    if isinstance(node, Program):
        return "; ".join(unparse(stmt) for stmt in node.body)
    if isinstance(node, ContextStore):
        return f"{_member_access(CONTEXT_NAME, node.name)} = {unparse(node.value)}"
    if isinstance(node, Declare):
        return f"{node.keyword} {node.name} = {unparse(node.value)}"
    if isinstance(node, Assign):
        return f"{node.name} = {unparse(node.value)}"
    if isinstance(node, Const):
        return _const(node.value)
    if isinstance(node, Name):
        return node.name
    if isinstance(node, ContextLoad):
        return _member_access(CONTEXT_NAME, node.name)
    if isinstance(node, ContextRoot):
        return CONTEXT_NAME
    if isinstance(node, Getattr):
        return f"{_operand(node.obj)}.{node.attr}"
    if isinstance(node, OptionalGetattr):
        return f"{_operand(node.obj)}?.{node.attr}"
    if isinstance(node, Getitem):
        return f"{_operand(node.obj)}[{unparse(node.key)}]"
    if isinstance(node, FuncCall):
        args = ", ".join(unparse(arg) for arg in node.args)
        return f"{_operand(node.func)}({args})"
    if isinstance(node, (BinOp, Compare)):
        return f"{_operand(node.left)} {node.op} {_operand(node.right)}"
    if isinstance(node, NullCoalesce):
        return f"{_operand(node.left)} ?? {_operand(node.right)}"
    if isinstance(node, BoolOp):
        joiner = " && " if node.op == "and" else " || "
        return joiner.join(_operand(value) for value in node.values)
    if isinstance(node, UnaryOp):
        return f"{node.op}{_operand(node.operand)}"
    if isinstance(node, CondExpr):
        return (
            f"{_operand(node.test)} ? {_operand(node.if_true)} : {_operand(node.if_false)}"
        )
    if isinstance(node, List):
        return "[" + ", ".join(unparse(item) for item in node.items) + "]"
    if isinstance(node, Dict):
        pairs = []
        for key, value in zip(node.keys, node.values, strict=True):
            key_text = key if _IDENTIFIER_RE.match(key) else json.dumps(key, ensure_ascii=False)
            pairs.append(f"{key_text}: {unparse(value)}")
        return "{" + ", ".join(pairs) + "}"

    msg = f"Cannot unparse node {type(node).__name__}"
    raise TypeError(msg)
