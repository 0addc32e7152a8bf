"""Default allow-listed functions and methods for markers.

Markers can only call:
    - functions registered on the Environment (`DEFAULT_FUNCTIONS` to start),
    - callables the caller placed in the render data (``include`` included),
    - the string and list methods in `SAFE_METHODS`.

Usage:
    {{ upper(title) }}
    {{ join(tags, ", ") }}
    {{ title.toUpperCase() }}
    {{ default(subtitle, "Untitled") }}

Method names follow the JavaScript spelling markup authors already use
(``toUpperCase``, ``startsWith``), implemented over Python values.
"""

from __future__ import annotations

import html
import json as _json
from collections.abc import Callable, Mapping
from typing import Any

from easyviewer.template.helpers import UNDEFINED, is_nullish, to_text


def _to_int(value: Any) -> int:
    if isinstance(value, str):
        return int(float(value.strip()))
    return int(value)


def _to_float(value: Any) -> float:
    if isinstance(value, str):
        return float(value.strip())
    return float(value)


def _round(value: float, ndigits: int = 0) -> int | float:
    result = round(float(value), int(ndigits))
    return int(result) if ndigits == 0 else result


def _join(items: Any, separator: str = ",") -> str:
    return separator.join("" if is_nullish(item) else to_text(item) for item in items)


def _default(value: Any, fallback: Any = "") -> Any:
    """Return ``fallback`` when value is null, undefined, or empty string."""
    if is_nullish(value) or value == "":
        return fallback
    return value


def _json_dump(value: Any) -> str:
    def _fallback(obj: Any) -> Any:
        if obj is UNDEFINED:
            return None
        return to_text(obj)

    return _json.dumps(value, default=_fallback, ensure_ascii=False)


def _length(value: Any) -> int:
    if isinstance(value, (str, list, tuple, Mapping)):
        return len(value)
    msg = f"Cannot take the length of {type(value).__name__}"
    raise TypeError(msg)


DEFAULT_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "str": to_text,
    "len": _length,
    "upper": lambda value: to_text(value).upper(),
    "lower": lambda value: to_text(value).lower(),
    "trim": lambda value: to_text(value).strip(),
    "join": _join,
    "round": _round,
    "abs": abs,
    "min": min,
    "max": max,
    "int": _to_int,
    "float": _to_float,
    "default": _default,
    "escape": lambda value: html.escape(to_text(value)),
    "json": _json_dump,
}


# ---------------------------------------------------------------------------
# Receiver methods
# ---------------------------------------------------------------------------


def _slice(value: Any, start: int = 0, end: int | None = None) -> Any:
    return value[int(start):None if end is None else int(end)]


def _split(value: str, separator: str | None = None) -> list[str]:
    if separator is None:
        return [value]
    if separator == "":
        return list(value)
    return value.split(separator)


def _index_of(value: Any, item: Any) -> int:
    if isinstance(value, str):
        return value.find(to_text(item))
    try:
        return value.index(item)
    except ValueError:
        return -1


STRING_METHODS: dict[str, Callable[..., Any]] = {
    "toUpperCase": lambda s: s.upper(),
    "toLowerCase": lambda s: s.lower(),
    "trim": lambda s: s.strip(),
    "includes": lambda s, sub: to_text(sub) in s,
    "startsWith": lambda s, prefix: s.startswith(to_text(prefix)),
    "endsWith": lambda s, suffix: s.endswith(to_text(suffix)),
    "split": _split,
    # JavaScript's String.replace swaps the first occurrence only
    "replace": lambda s, old, new: s.replace(to_text(old), to_text(new), 1),
    "replaceAll": lambda s, old, new: s.replace(to_text(old), to_text(new)),
    "slice": _slice,
    "indexOf": _index_of,
    "concat": lambda s, *parts: s + "".join(to_text(p) for p in parts),
    "repeat": lambda s, count: s * _to_int(count),
}

LIST_METHODS: dict[str, Callable[..., Any]] = {
    "join": _join,
    "includes": lambda items, item: item in items,
    "indexOf": _index_of,
    "slice": _slice,
    "concat": lambda items, *others: [
        *items,
        *(x for other in others for x in (other if isinstance(other, (list, tuple)) else [other])),
    ],
}

SAFE_METHODS: dict[type, dict[str, Callable[..., Any]]] = {
    str: STRING_METHODS,
    list: LIST_METHODS,
    tuple: LIST_METHODS,
}


def find_method(receiver: Any, name: str) -> Callable[..., Any] | None:
    """Return the allow-listed implementation of ``receiver.name``, if any."""
    for receiver_type, methods in SAFE_METHODS.items():
        if isinstance(receiver, receiver_type):
            return methods.get(name)
    return None
