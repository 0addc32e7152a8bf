"""Evaluate rewritten marker programs against a DataContext.

The evaluator is total over the marker grammar: it walks the AST with a
type → handler dispatch table and never hands text to the host runtime.
Calls are limited to registered functions, callables stored in the
render data, and allow-listed string/list methods.

Display rules (see `to_display`): strings, numbers and booleans produce
text; null, undefined, objects, arrays and functions produce nothing.
Awaitables are never awaited; they log a warning and produce nothing.

"""

from __future__ import annotations

import functools
import logging
import math
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any

from easyviewer.environment import terminal
from easyviewer.environment.exceptions import ExpressionEvaluationError, UndefinedError
from easyviewer.environment.globals import find_method
from easyviewer.nodes import (
    BinOp,
    BoolOp,
    Compare,
    CondExpr,
    Const,
    ContextLoad,
    ContextRoot,
    ContextStore,
    Dict,
    FuncCall,
    Getattr,
    Getitem,
    List,
    Name,
    Node,
    NullCoalesce,
    OptionalGetattr,
    Program,
    UnaryOp,
)
from easyviewer.rewriter import unparse
from easyviewer.template.helpers import (
    UNDEFINED,
    is_awaitable,
    is_nullish,
    to_display,
    to_text,
    truthy,
)

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float))


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    return type(value).__name__


def _remainder(left: int | float, right: int | float) -> int | float:
    # Sign follows the dividend, as in JavaScript.
    if isinstance(left, int) and isinstance(right, int):
        result = abs(left) % abs(right)
        return -result if left < 0 else result
    return math.fmod(left, right)


def _divide(left: int | float, right: int | float) -> int | float:
    result = left / right
    return int(result) if result.is_integer() and abs(result) < 2**53 else result


_ARITHMETIC: dict[str, Callable[[Any, Any], Any]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _divide,
    "%": _remainder,
}


def _loose_equal(left: Any, right: Any) -> bool:
    if is_nullish(left) or is_nullish(right):
        return is_nullish(left) and is_nullish(right)
    return bool(left == right)


def _strict_equal(left: Any, right: Any) -> bool:
    if _is_number(left) and _is_number(right):
        return isinstance(left, bool) == isinstance(right, bool) and left == right
    if is_nullish(left) or is_nullish(right):
        return left is right
    return type(left) is type(right) and bool(left == right)


_COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "==": _loose_equal,
    "!=": lambda a, b: not _loose_equal(a, b),
    "===": _strict_equal,
    "!==": lambda a, b: not _strict_equal(a, b),
    "<": lambda a, b: a < b,
    "<=": lambda a, b: a <= b,
    ">": lambda a, b: a > b,
    ">=": lambda a, b: a >= b,
}


class Evaluator:
    """Evaluate one marker program.

    Args:
        context: The DataContext; reads and `ContextStore` writes go here
        functions: Allow-listed functions callable by bare name
        expression: Marker text, used in error messages

    Example:
        >>> ctx = {"price": 4}
        >>> program = rewrite(parse_expression("price * 2"), ctx)
        >>> Evaluator(ctx, {}).evaluate(program)
        8
    """

    __slots__ = ("_context", "_dispatch", "_expression", "_functions")

    def __init__(
        self,
        context: MutableMapping[str, Any],
        functions: Mapping[str, Callable[..., Any]],
        *,
        expression: str | None = None,
    ):
        self._context = context
        self._functions = functions
        self._expression = expression
        self._dispatch: dict[type, Callable[[Any], Any]] = {
            Program: self._eval_program,
            ContextStore: self._eval_store,
            Const: lambda node: node.value,
            Name: self._eval_name,
            ContextLoad: lambda node: self._context.get(node.name, UNDEFINED),
            ContextRoot: lambda node: self._context,
            List: lambda node: [self.evaluate(item) for item in node.items],
            Dict: self._eval_dict,
            Getattr: self._eval_getattr,
            OptionalGetattr: self._eval_optional_getattr,
            Getitem: self._eval_getitem,
            FuncCall: self._eval_call,
            BinOp: self._eval_binop,
            UnaryOp: self._eval_unaryop,
            Compare: self._eval_compare,
            BoolOp: self._eval_boolop,
            CondExpr: self._eval_condexpr,
            NullCoalesce: self._eval_null_coalesce,
        }

    def evaluate(self, node: Node) -> Any:
        handler = self._dispatch.get(type(node))
        if handler is None:
            raise self._error(f"Unsupported syntax: {type(node).__name__}")
        return handler(node)

    def _error(self, message: str, suggestion: str | None = None) -> ExpressionEvaluationError:
        return ExpressionEvaluationError(
            message, expression=self._expression, suggestion=suggestion
        )

    # ------------------------------------------------------------------
    # Statements and names
    # ------------------------------------------------------------------

    def _eval_program(self, node: Program) -> Any:
        value: Any = UNDEFINED
        for stmt in node.body:
            value = self.evaluate(stmt)
        return value

    def _eval_store(self, node: ContextStore) -> Any:
        self._context[node.name] = self.evaluate(node.value)
        return UNDEFINED

    def _eval_name(self, node: Name) -> Any:
        # Context first: a view included earlier in this program may have declared it.
        if node.name in self._context:
            return self._context[node.name]
        if node.name in self._functions:
            return self._functions[node.name]
        raise UndefinedError(
            node.name,
            expression=self._expression,
            available_names=frozenset(self._context) | frozenset(self._functions),
        )

    def _eval_dict(self, node: Dict) -> dict[str, Any]:
        return {
            key: self.evaluate(value)
            for key, value in zip(node.keys, node.values, strict=True)
        }

    # ------------------------------------------------------------------
    # Member access
    # ------------------------------------------------------------------

    def get_member(self, obj: Any, name: str) -> Any:
        """Read ``obj.name`` under marker rules."""
        if is_nullish(obj):
            raise self._error(
                f"Cannot read properties of {to_text(obj)} (reading '{name}')",
                suggestion=f"Use ?.{name} for values that may be missing",
            )
        if name.startswith("_"):
            raise self._error(f"Access to private member '{name}' is not allowed")

        if name == "length" and isinstance(obj, (str, list, tuple)):
            return len(obj)

        if isinstance(obj, Mapping):
            return obj.get(name, UNDEFINED)

        method = find_method(obj, name)
        if method is not None:
            return functools.partial(method, obj)

        if isinstance(obj, (str, int, float, list, tuple)):
            return UNDEFINED

        value = getattr(obj, name, UNDEFINED)
        if callable(value) and value is not UNDEFINED:
            raise self._error(
                f"'{name}' is a method of {type(obj).__name__}; only registered functions can be called",
                suggestion="Register a function on the Environment instead",
            )
        return value

    def _eval_getattr(self, node: Getattr) -> Any:
        return self.get_member(self.evaluate(node.obj), node.attr)

    def _eval_optional_getattr(self, node: OptionalGetattr) -> Any:
        obj = self.evaluate(node.obj)
        if is_nullish(obj):
            return UNDEFINED
        return self.get_member(obj, node.attr)

    def _eval_getitem(self, node: Getitem) -> Any:
        obj = self.evaluate(node.obj)
        key = self.evaluate(node.key)
        if isinstance(obj, Mapping):
            if key in obj:
                return obj[key]
            return obj.get(to_text(key), UNDEFINED)
        if isinstance(obj, (str, list, tuple)) and _is_number(key) and not isinstance(key, bool):
            if float(key).is_integer() and 0 <= key < len(obj):
                return obj[int(key)]
            return UNDEFINED
        if isinstance(key, str):
            return self.get_member(obj, key)
        if is_nullish(obj):
            raise self._error(f"Cannot read properties of {to_text(obj)} (reading '{to_text(key)}')")
        return UNDEFINED

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def _eval_call(self, node: FuncCall) -> Any:
        func = self.evaluate(node.func)
        if not callable(func) or isinstance(func, type):
            raise self._error(f"{unparse(node.func)} is not a function")
        args = [self.evaluate(arg) for arg in node.args]
        return func(*args)

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def _eval_binop(self, node: BinOp) -> Any:
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        # "+" concatenates only with a string operand; nothing else is coerced to a number.
        if node.op == "+" and (isinstance(left, str) or isinstance(right, str)):
            return to_text(left) + to_text(right)

        if not (_is_number(left) and _is_number(right)):
            raise self._error(
                f"Unsupported operand types for {node.op}: "
                f"{_type_name(left)} and {_type_name(right)}",
            )
        return _ARITHMETIC[node.op](left, right)

    def _eval_unaryop(self, node: UnaryOp) -> Any:
        operand = self.evaluate(node.operand)
        if node.op == "!":
            return not truthy(operand)
        if isinstance(operand, str):
            try:
                operand = float(operand) if any(c in operand for c in ".eE") else int(operand)
            except ValueError:
                raise self._error(f"Cannot convert {operand!r} to a number") from None
        if not _is_number(operand):
            raise self._error(f"Bad operand type for unary {node.op}: {type(operand).__name__}")
        return -operand if node.op == "-" else +operand

    def _eval_compare(self, node: Compare) -> bool:
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        try:
            return _COMPARISONS[node.op](left, right)
        except TypeError:
            raise self._error(
                f"Cannot compare {type(left).__name__} with {type(right).__name__}"
            ) from None

    def _eval_boolop(self, node: BoolOp) -> Any:
        value: Any = UNDEFINED
        for value_node in node.values:
            value = self.evaluate(value_node)
            if node.op == "and" and not truthy(value):
                return value
            if node.op == "or" and truthy(value):
                return value
        return value

    def _eval_condexpr(self, node: CondExpr) -> Any:
        if truthy(self.evaluate(node.test)):
            return self.evaluate(node.if_true)
        return self.evaluate(node.if_false)

    def _eval_null_coalesce(self, node: NullCoalesce) -> Any:
        left = self.evaluate(node.left)
        if is_nullish(left):
            return self.evaluate(node.right)
        return left


def display(value: Any, expression: str | None = None) -> str | None:
    """Convert a marker result to output text, suppressing awaitables.

    Returns:
        Output text, or None when the marker produces no output.
    """
    if is_awaitable(value):
        logger.warning(
            "%s The expression {{ %s }} returned an awaitable; "
            "markers are evaluated synchronously and its result is discarded.",
            terminal.banner("warning"),
            expression,
        )
        close = getattr(value, "close", None)
        if callable(close):
            close()
        return None
    return to_display(value)
