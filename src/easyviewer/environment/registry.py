"""Function registry for the Environment.

Provides a dict-like interface over the allow-listed functions that
markers may call.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from easyviewer.environment.core import Environment


class FunctionRegistry:
    """Dict-like view of an Environment's callable allow-list.

    Supports:
        - env.functions['name'] = func
        - env.functions.update({'name': func})
        - func = env.functions['name']
        - 'name' in env.functions
        - del env.functions['name']

    All mutations use copy-on-write, so a render already holding the old
    dict is never affected by a registration made during it.
    """

    __slots__ = ("_attr", "_env")

    def __init__(self, env: Environment, attr: str):
        self._env = env
        self._attr = attr

    def _get_dict(self) -> dict[str, Callable]:
        return getattr(self._env, self._attr)

    def _set_dict(self, d: dict[str, Callable]) -> None:
        setattr(self._env, self._attr, d)

    def __getitem__(self, name: str) -> Callable:
        return self._get_dict()[name]

    def __setitem__(self, name: str, func: Callable) -> None:
        if not callable(func):
            msg = f"Function '{name}' must be callable, got {type(func).__name__}"
            raise TypeError(msg)
        new = self._get_dict().copy()
        new[name] = func
        self._set_dict(new)

    def __delitem__(self, name: str) -> None:
        new = self._get_dict().copy()
        del new[name]
        self._set_dict(new)

    def __contains__(self, name: object) -> bool:
        return name in self._get_dict()

    def __len__(self) -> int:
        return len(self._get_dict())

    def get(self, name: str, default: Callable | None = None) -> Callable | None:
        return self._get_dict().get(name, default)

    def update(self, mapping: dict[str, Callable]) -> None:
        """Batch registration."""
        for name, func in mapping.items():
            if not callable(func):
                msg = f"Function '{name}' must be callable, got {type(func).__name__}"
                raise TypeError(msg)
        new = self._get_dict().copy()
        new.update(mapping)
        self._set_dict(new)

    def copy(self) -> dict[str, Callable]:
        return self._get_dict().copy()

    def keys(self):
        return self._get_dict().keys()

    def items(self):
        return self._get_dict().items()
