"""The render pipeline.

`Environment` is the top-level entry point: it resolves a scheme, seeds a
fresh DataContext for the call, drives the Renderer over the scheme markup
and decides the outcome from the errors collected across the whole include
tree.

Outcomes:
    ```
    SUCCESS            200  text/html         resolved markup
    SCHEME_NOT_FOUND   404  application/json  {"status": 404, "message": "Html scheme not found."}
    EVALUATION_FAILED  500  application/json  {"status": 500, "message": "Internal Server Error."}
    ```

A failed call never carries partial markup. With ``ignore_errors`` set,
failed markers render as empty text and the call still succeeds, except
when resolution hits a depth or pass limit: there is no meaningful partial
output then, so that is always an evaluation failure.

Example:
    >>> env = Environment(config={"views": "views", "default_scheme": "app"})
    >>> _ = env.schemes.load("schemes")
    >>> result = env.render("index", {"title": "Home"})
    >>> result.status, result.content_type
    (200, 'text/html')

Thread-Safety:
Schemes, config and the function registry are read-mostly after startup
and every mutation is copy-on-write. Each render call allocates its own
DataContext and RenderContext, so concurrent calls share nothing mutable.

"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from easyviewer.context import DataContext
from easyviewer.environment import terminal
from easyviewer.environment.config import ConfigStore
from easyviewer.environment.exceptions import (
    IncludeNotFoundError,
    RenderError,
    ResolutionLimitError,
    SchemeNotFoundError,
)
from easyviewer.environment.globals import DEFAULT_FUNCTIONS
from easyviewer.environment.loaders import (
    MARKUP_EXTENSION,
    DictLoader,
    FileSystemLoader,
    Scheme,
    SchemeRegistry,
    ViewLoader,
)
from easyviewer.environment.registry import FunctionRegistry
from easyviewer.lexer import ExpressionMatch
from easyviewer.render_context import RenderContext
from easyviewer.template.core import APP_NAME, Renderer

logger = logging.getLogger(__name__)

SCHEME_NOT_FOUND_MESSAGE = "Html scheme not found."
EVALUATION_FAILED_MESSAGE = "Internal Server Error."
SCRIPTS_URL_PREFIX = "/javascript/"

HTML_CONTENT_TYPE = "text/html"
JSON_CONTENT_TYPE = "application/json"

# A newline and the whitespace run after it; removed from the final output.
_OUTPUT_WHITESPACE_RE = re.compile(r"\n\s*")


class Outcome(Enum):
    SUCCESS = "success"
    SCHEME_NOT_FOUND = "scheme_not_found"
    EVALUATION_FAILED = "evaluation_failed"


@dataclass(frozen=True, slots=True)
class RenderResult:
    """Outcome of one `Environment.render` call.

    Attributes:
        outcome: Which of the three outcomes this is
        status: HTTP-style status (200, 404 or 500)
        body: Resolved markup on success, the error message otherwise
        content_type: ``text/html`` on success, ``application/json`` otherwise
        errors: Every RenderError collected during the call
        matches: Every marker evaluated during the call
    """

    outcome: Outcome
    status: int
    body: str
    content_type: str
    errors: tuple[RenderError, ...] = ()
    matches: tuple[ExpressionMatch, ...] = ()

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    def json(self) -> dict[str, Any] | None:
        """Structured error payload, or None for a successful render."""
        if self.ok:
            return None
        return {"status": self.status, "message": self.body}

    @classmethod
    def success(cls, body: str, render_ctx: RenderContext) -> RenderResult:
        return cls(
            Outcome.SUCCESS,
            200,
            body,
            HTML_CONTENT_TYPE,
            tuple(render_ctx.errors),
            tuple(render_ctx.matches),
        )

    @classmethod
    def scheme_not_found(cls) -> RenderResult:
        return cls(Outcome.SCHEME_NOT_FOUND, 404, SCHEME_NOT_FOUND_MESSAGE, JSON_CONTENT_TYPE)

    @classmethod
    def evaluation_failed(
        cls, errors: list[RenderError], matches: list[ExpressionMatch]
    ) -> RenderResult:
        return cls(
            Outcome.EVALUATION_FAILED,
            500,
            EVALUATION_FAILED_MESSAGE,
            JSON_CONTENT_TYPE,
            tuple(errors),
            tuple(matches),
        )


class Environment:
    """Central configuration and render entry point.

    Args:
        config: A `ConfigStore` or a plain mapping of settings
        schemes: Scheme registry (a new, empty one by default)
        loader: View loader; defaults to a `FileSystemLoader` over ``views``
        functions: Extra functions callable from markers, added to the defaults

    Attributes:
        config: The settings store
        schemes: The scheme registry
        functions: Dict-like view of the callable allow-list
    """

    def __init__(
        self,
        *,
        config: ConfigStore | Mapping[str, Any] | None = None,
        schemes: SchemeRegistry | None = None,
        loader: ViewLoader | None = None,
        functions: Mapping[str, Callable[..., Any]] | None = None,
    ):
        if config is None:
            config = ConfigStore()
        elif not isinstance(config, ConfigStore):
            config = ConfigStore.from_mapping(config)
        self.config: ConfigStore = config
        self.schemes: SchemeRegistry = schemes if schemes is not None else SchemeRegistry()
        self._loader = loader

        self._functions: dict[str, Callable[..., Any]] = dict(DEFAULT_FUNCTIONS)
        self.functions = FunctionRegistry(self, "_functions")
        if functions:
            self.functions.update(dict(functions))

    @property
    def loader(self) -> ViewLoader | None:
        """The explicit loader, else a FileSystemLoader over ``views`` if set."""
        if self._loader is not None:
            return self._loader
        views = self.config.views
        if views:
            return FileSystemLoader(views)
        return None

    def resolve_scheme(self, scheme: Any = None) -> Scheme:
        """Find the registered scheme a reference points to.

        Accepts a name, a `Scheme`, any object with a ``name`` attribute, a
        mapping with a ``"name"`` key, or None for ``default_scheme``.

        Raises:
            SchemeNotFoundError: If no scheme matches or its markup is empty
        """
        if scheme is None:
            name = self.config.default_scheme
        elif isinstance(scheme, str):
            name = scheme
        elif isinstance(scheme, Mapping):
            name = scheme.get("name")
        else:
            name = getattr(scheme, "name", None)

        found = self.schemes.get(name) if isinstance(name, str) else None
        if found is None or not found.markup:
            raise SchemeNotFoundError(name, self.schemes.names())
        return found

    def render(
        self,
        view_name: str,
        data: Mapping[str, Any] | None = None,
        scheme: Any = None,
    ) -> RenderResult:
        """Render a page view inside a scheme.

        Args:
            view_name: Page view, without extension (``"index"``)
            data: Values visible to markers; copied, never mutated
            scheme: Scheme reference (see `resolve_scheme`)

        Returns:
            A RenderResult for one of the three outcomes.
        """
        try:
            found = self.resolve_scheme(scheme)
        except SchemeNotFoundError as exc:
            logger.warning("%s %s", terminal.banner("warning"), exc)
            return RenderResult.scheme_not_found()

        render_ctx = self._new_render_context(found.file_path)
        context = self._build_context(view_name, data, render_ctx)

        try:
            text = self._renderer().run(context, found.markup, render_ctx)
        except ResolutionLimitError as exc:
            logger.error("%s %s", terminal.banner("error"), exc.format_compact())
            errors = [*render_ctx.errors, RenderError("", exc, found.file_path)]
            return RenderResult.evaluation_failed(errors, render_ctx.matches)

        if render_ctx.errors:
            if not self.config.ignore_errors:
                for error in render_ctx.errors:
                    logger.error("%s %s", terminal.banner("error"), error.format_compact())
                return RenderResult.evaluation_failed(render_ctx.errors, render_ctx.matches)
            logger.debug(
                "Ignoring %d failed marker(s) in '%s'", len(render_ctx.errors), view_name
            )

        return RenderResult.success(_OUTPUT_WHITESPACE_RE.sub("", text), render_ctx)

    def render_string(
        self, markup: str, data: Mapping[str, Any] | None = None
    ) -> tuple[str, list[RenderError]]:
        """Resolve ad-hoc markup with the same renderer.

        Whitespace is left as is and no outcome gate applies; the caller
        gets the text and the errors and decides.

        Raises:
            ResolutionLimitError: If resolution does not converge
        """
        render_ctx = self._new_render_context("<string>")
        context = DataContext(data)
        if isinstance(context.get(APP_NAME), Mapping):
            context[APP_NAME] = dict(context[APP_NAME])
        text = self._renderer().run(context, markup, render_ctx)
        return text, render_ctx.errors

    def _renderer(self) -> Renderer:
        return Renderer(self.loader or DictLoader({}), self._functions)

    def _new_render_context(self, template_name: str) -> RenderContext:
        return RenderContext(
            template_name=template_name,
            max_include_depth=self.config.max_include_depth,
            max_passes=self.config.max_passes,
        )

    def _build_context(
        self,
        view_name: str,
        data: Mapping[str, Any] | None,
        render_ctx: RenderContext,
    ) -> DataContext:
        """Seed a fresh DataContext with ``file_name`` and the ``app`` namespace."""
        context = DataContext(data, file_name=view_name)

        app: dict[str, Any] = {}
        caller_app = context.get(APP_NAME)
        if isinstance(caller_app, Mapping):
            app.update(caller_app)

        scripts = self._script_tags()
        if scripts is not None:
            app["scripts"] = scripts

        loader = self.loader
        if loader is not None:
            app["content"] = self._page_content(loader, view_name, render_ctx)

        context[APP_NAME] = app
        return context

    def _page_content(self, loader: ViewLoader, view_name: str, render_ctx: RenderContext) -> str:
        name = view_name if view_name.endswith(MARKUP_EXTENSION) else view_name + MARKUP_EXTENSION
        try:
            source, _filename = loader.get_source(name)
        except IncludeNotFoundError as exc:
            render_ctx.record("app.content", exc)
            return ""
        return source

    def _script_tags(self) -> str | None:
        scripts = self.config.scripts
        if not scripts:
            return None
        directory = Path(scripts)
        if not directory.is_dir():
            logger.warning(
                "%s Scripts directory not found: %s", terminal.banner("warning"), scripts
            )
            return ""
        files = sorted(p.name for p in directory.iterdir() if p.is_file() and p.name.endswith(".js"))
        return "".join(f'<script src="{SCRIPTS_URL_PREFIX}{name}"></script>' for name in files)
