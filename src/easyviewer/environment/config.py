"""Renderer-wide settings.

A small key → value store with a fixed set of recognized keys. Set once by
the embedding application at startup and read on every render.

Recognized keys:
    views: Directory holding page views and includes
    default_scheme: Scheme used when a render names none
    ignore_errors: Render despite failed markers (default False)
    scripts: Directory of ``.js`` files exposed as ``app.scripts`` tags
    max_include_depth: Maximum include nesting (default 50)
    max_passes: Maximum fixed-point passes per view (default 100)

Example:
    >>> config = ConfigStore()
    >>> _ = config.set("views", "site\\\\views")
    >>> config.get("views")
    'site/views'
    >>> config.get("default_scheme") is UNSET
    True

"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Mapping
from pathlib import PurePath
from typing import Any

from easyviewer.environment import terminal
from easyviewer.environment.exceptions import ConfigValidationWarning
from easyviewer.environment.loaders import normalize_path
from easyviewer.render_context import DEFAULT_MAX_INCLUDE_DEPTH, DEFAULT_MAX_PASSES

logger = logging.getLogger(__name__)


class _Unset:
    """Sentinel returned by `ConfigStore.get` for absent keys."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

RECOGNIZED_KEYS = frozenset(
    {"views", "default_scheme", "ignore_errors", "scripts", "max_include_depth", "max_passes"}
)

_PATH_KEYS = frozenset({"views", "scripts"})

DEFAULTS: dict[str, Any] = {
    "ignore_errors": False,
    "max_include_depth": DEFAULT_MAX_INCLUDE_DEPTH,
    "max_passes": DEFAULT_MAX_PASSES,
}


class ConfigStore:
    """Settings consulted by the render pipeline.

    Args:
        validate: Reject (with a warning) keys outside `RECOGNIZED_KEYS`

    An unrecognized key never raises: it is logged, a
    `ConfigValidationWarning` is issued, and the store is left unchanged.
    """

    __slots__ = ("_validate", "_values")

    def __init__(self, *, validate: bool = True):
        self._validate = validate
        self._values: dict[str, Any] = dict(DEFAULTS)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], *, validate: bool = True) -> ConfigStore:
        store = cls(validate=validate)
        for key, value in mapping.items():
            store.set(key, value)
        return store

    def set(self, key: str, value: Any) -> bool:
        """Store ``value`` under ``key``.

        Returns:
            True if stored, False if the key was rejected.
        """
        if self._validate and key not in RECOGNIZED_KEYS:
            message = (
                f"Unknown config key '{key}'. "
                f"Recognized keys: {', '.join(sorted(RECOGNIZED_KEYS))}"
            )
            logger.warning("%s %s", terminal.banner("warning"), message)
            warnings.warn(message, ConfigValidationWarning, stacklevel=2)
            return False

        if key in _PATH_KEYS and isinstance(value, (str, PurePath)):
            value = normalize_path(value)
        self._values[key] = value
        return True

    def get(self, key: str, default: Any = UNSET) -> Any:
        return self._values.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def as_dict(self) -> dict[str, Any]:
        return self._values.copy()

    @property
    def views(self) -> str | None:
        value = self.get("views")
        return None if value is UNSET else value

    @property
    def default_scheme(self) -> str | None:
        value = self.get("default_scheme")
        return None if value is UNSET else value

    @property
    def ignore_errors(self) -> bool:
        return bool(self.get("ignore_errors", False))

    @property
    def scripts(self) -> str | None:
        value = self.get("scripts")
        return None if value is UNSET else value

    @property
    def max_include_depth(self) -> int:
        return int(self.get("max_include_depth", DEFAULT_MAX_INCLUDE_DEPTH))

    @property
    def max_passes(self) -> int:
        return int(self.get("max_passes", DEFAULT_MAX_PASSES))

    def __repr__(self) -> str:
        return f"ConfigStore({self._values!r})"
