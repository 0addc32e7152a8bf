"""The per-render DataContext.

One DataContext exists per top-level render call. Every nested include
shares it, so a variable declared by one view is visible to the views
rendered after it. The caller's data is copied in; the caller's mapping is
never mutated.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any


class DataContext(MutableMapping[str, Any]):
    """Mutable name → value mapping visible to marker expressions.

    Example:
        >>> ctx = DataContext({"title": "Home"}, file_name="index")
        >>> ctx["title"], ctx["file_name"]
        ('Home', 'index')
        >>> ctx["count"] = 3
        >>> sorted(ctx)
        ['count', 'file_name', 'title']
    """

    __slots__ = ("_values",)

    def __init__(self, data: Mapping[str, Any] | None = None, **extra: Any):
        self._values: dict[str, Any] = dict(data or {})
        self._values.update(extra)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._values[key] = value

    def __delitem__(self, key: str) -> None:
        del self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __repr__(self) -> str:
        return f"DataContext({sorted(self._values)!r})"

    def snapshot(self) -> dict[str, Any]:
        """Shallow copy of the current values."""
        return self._values.copy()
