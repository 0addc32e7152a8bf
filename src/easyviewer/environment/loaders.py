"""Scheme registry and view loaders.

Schemes are named outer layouts, loaded once from a directory and cached
immutably. Views are the page bodies and partials that ``include()``
pulls in; loaders provide them through `get_source(name)` returning
``(source, filename)``.

Built-in Loaders:
- `FileSystemLoader`: Load views from a directory (the ``views`` setting)
- `DictLoader`: Load views from an in-memory dictionary (testing/embedded)

Custom Loaders:
Implement the ViewLoader protocol:
    ```python
    class DatabaseLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            row = db.query("SELECT source FROM views WHERE name = ?", name)
            if not row:
                raise IncludeNotFoundError(f"View '{name}' not found")
            return row.source, f"db://{name}"
    ```

Thread-Safety:
Scheme entries are frozen and the registry swaps its dict copy-on-write,
so lookups during concurrent renders never see a half-loaded state.

"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from difflib import get_close_matches
from pathlib import Path
from typing import Any, Protocol

from easyviewer.environment.exceptions import IncludeNotFoundError

logger = logging.getLogger(__name__)

MARKUP_EXTENSION = ".html"


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def normalize_path(path: str | Path) -> str:
    """Render a path with forward slashes regardless of platform."""
    return str(path).replace("\\", "/")


@dataclass(frozen=True, slots=True)
class Scheme:
    """A named, cached outer-layout markup file.

    Attributes:
        name: Filename up to the first '.'
        file_path: Source path (forward slashes)
        markup: File text with line endings normalized
    """

    name: str
    file_path: str
    markup: str


class SchemeRegistry:
    """Named scheme cache.

    Example:
        >>> schemes = SchemeRegistry()
        >>> schemes.load("schemes/")          # schemes/app.html → "app"
        >>> schemes.get("app").file_path
        'schemes/app.html'
        >>> schemes.get("missing") is None
        True

    Name collisions (``app.html`` and ``app.min.html``) resolve to the
    file that sorts last.
    """

    __slots__ = ("_encoding", "_extension", "_schemes")

    def __init__(self, extension: str = MARKUP_EXTENSION, encoding: str = "utf-8"):
        self._extension = extension
        self._encoding = encoding
        self._schemes: dict[str, Scheme] = {}

    def load(self, directory: str | Path) -> list[Scheme]:
        """Load every ``*<extension>`` file directly inside ``directory``.

        Returns:
            The schemes loaded by this call, in sorted filename order.

        Raises:
            FileNotFoundError: If ``directory`` does not exist
        """
        base = Path(directory)
        if not base.is_dir():
            msg = f"Scheme directory not found: {normalize_path(base)}"
            raise FileNotFoundError(msg)

        loaded: list[Scheme] = []
        new = self._schemes.copy()
        for path in sorted(base.iterdir(), key=lambda p: p.name):
            if not path.is_file() or not path.name.endswith(self._extension):
                continue
            scheme = self._read(path.name.split(".", 1)[0], path)
            new[scheme.name] = scheme
            loaded.append(scheme)
            logger.debug("Loaded scheme '%s' from %s", scheme.name, scheme.file_path)
        self._schemes = new
        return loaded

    def set(self, name: str, file_path: str | Path, markup: str | None = None) -> Scheme:
        """Register one scheme, reading ``file_path`` unless markup is given."""
        if markup is None:
            scheme = self._read(name, Path(file_path))
        else:
            scheme = Scheme(name, normalize_path(file_path), normalize_newlines(markup))
        new = self._schemes.copy()
        new[name] = scheme
        self._schemes = new
        return scheme

    def set_all(self, schemes: Iterable[Scheme | Mapping[str, Any]]) -> None:
        """Register several schemes: `Scheme` objects or ``{"name", "file"}`` mappings."""
        for entry in schemes:
            if isinstance(entry, Scheme):
                self.set(entry.name, entry.file_path, entry.markup)
            else:
                self.set(entry["name"], entry["file"], entry.get("markup"))

    def get(self, name: str) -> Scheme | None:
        return self._schemes.get(name)

    def get_all(self) -> tuple[Scheme, ...]:
        return tuple(self._schemes.values())

    def names(self) -> list[str]:
        return sorted(self._schemes)

    def __contains__(self, name: object) -> bool:
        return name in self._schemes

    def __len__(self) -> int:
        return len(self._schemes)

    def _read(self, name: str, path: Path) -> Scheme:
        markup = path.read_text(self._encoding)
        return Scheme(name, normalize_path(path), normalize_newlines(markup))


class ViewLoader(Protocol):
    def get_source(self, name: str) -> tuple[str, str | None]: ...


class FileSystemLoader:
    """Load views from a directory.

    Names are relative paths (``"partials/nav.html"``). A name that would
    resolve outside the directory is treated as not found.

    Example:
        >>> loader = FileSystemLoader("views/")
        >>> source, filename = loader.get_source("index.html")
        >>> filename
        'views/index.html'

    Raises:
        IncludeNotFoundError: If the view is not found
    """

    __slots__ = ("_encoding", "_path")

    def __init__(self, path: str | Path, encoding: str = "utf-8"):
        self._path = Path(path)
        self._encoding = encoding

    @property
    def path(self) -> Path:
        return self._path

    def get_source(self, name: str) -> tuple[str, str]:
        base = self._path.resolve()
        path = (base / name).resolve()
        if path.is_relative_to(base) and path.is_file():
            return normalize_newlines(path.read_text(self._encoding)), normalize_path(self._path / name)

        raise IncludeNotFoundError(f"View '{name}' not found in: {normalize_path(self._path)}")

    def list_templates(self) -> list[str]:
        if not self._path.is_dir():
            return []
        return sorted(
            normalize_path(p.relative_to(self._path)) for p in self._path.rglob(f"*{MARKUP_EXTENSION}")
        )


class DictLoader:
    """Load views from an in-memory dictionary.

    Example:
            >>> loader = DictLoader({"nav.html": "<nav>{{ title }}</nav>"})
            >>> loader.get_source("nav.html")
            ('<nav>{{ title }}</nav>', None)

    Raises:
        IncludeNotFoundError: If view name not in mapping
    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            available = sorted(self._mapping)
            msg = f"View '{name}' not found"
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            raise IncludeNotFoundError(msg)
        return normalize_newlines(self._mapping[name]), None

    def list_templates(self) -> list[str]:
        return sorted(self._mapping)
