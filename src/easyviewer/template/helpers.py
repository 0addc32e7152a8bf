"""Runtime value helpers shared by the parser and evaluator.

Pure functions: nothing here touches render state.

"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any


class _Undefined:
    """Singleton for a missing value (``undefined`` in markers)."""

    __slots__ = ()
    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Any = _Undefined()


def is_nullish(value: Any) -> bool:
    """True for ``null`` (None) and ``undefined``."""
    return value is None or value is UNDEFINED


def is_awaitable(value: Any) -> bool:
    return inspect.isawaitable(value)


def format_number(value: int | float) -> str:
    """Render a number the way markup authors expect (``4.0`` → ``4``)."""
    if isinstance(value, float):
        if value != value:
            return "NaN"
        if value in (float("inf"), float("-inf")):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e16:
            return str(int(value))
    return str(value)


def to_display(value: Any) -> str | None:
    """Convert an evaluation result to output text.

    Only scalars are surfaced; everything else renders nothing.

    Returns:
        The text to substitute, or None for "no output".
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return None


def to_text(value: Any) -> str:
    """String conversion used by ``+`` concatenation and ``str()``."""
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, Mapping):
        return "[object Object]"
    if isinstance(value, (list, tuple)):
        return ",".join("" if is_nullish(item) else to_text(item) for item in value)
    return str(value)


def truthy(value: Any) -> bool:
    """Marker truthiness: empty containers are truthy, as in JavaScript."""
    if isinstance(value, (Mapping, list, tuple)):
        return True
    return bool(value)
