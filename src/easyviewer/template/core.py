"""Fixed-point marker resolution.

The Renderer runs scan → rewrite → evaluate → substitute over a piece of
markup and repeats until a scan finds no markers. Substitutions can add
new markers (a page body placed by ``{{ app.content }}`` brings its own),
which is why a single pass is not enough.

Architecture:
    ```
    Renderer.run(data, markup, render_ctx)
    ├── install include() bound to render_ctx
    ├── pass 1: scan_markers → per match: parse, rewrite, evaluate, display
    │           splice values in by position
    ├── pass 2..n: same, until no markers remain
    └── restore the previous include()
    ```

Includes render the included view to completion with the same DataContext
and a child RenderContext, so declarations flow both ways and errors from
every depth land in one list.

Thread-Safety:
A Renderer holds only its loader and a function mapping. All per-call
state lives in the DataContext and RenderContext passed to `run()`.

"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, MutableMapping
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from easyviewer.environment import terminal
from easyviewer.environment.exceptions import IncludeNotFoundError, ResolutionLimitError
from easyviewer.evaluator import Evaluator, display
from easyviewer.lexer import ExpressionMatch, scan_markers
from easyviewer.parser import parse_expression
from easyviewer.rewriter import rewrite, unparse
from easyviewer.template.helpers import to_text

if TYPE_CHECKING:
    from easyviewer.environment.loaders import ViewLoader
    from easyviewer.nodes import Program
    from easyviewer.render_context import RenderContext

logger = logging.getLogger(__name__)

INCLUDE_NAME = "include"
APP_NAME = "app"

_MISSING = object()


@lru_cache(maxsize=1024)
def _parse(source: str) -> Program:
    # Programs are immutable, so one parse can serve every pass and render.
    return parse_expression(source)


class Renderer:
    """Resolve markers in markup against a DataContext.

    Args:
        loader: Source of included views (``get_source(name)``)
        functions: Allow-listed functions callable by bare name
        extension: Appended to include names that lack it

    Example:
        >>> renderer = Renderer(DictLoader({"nav.html": "<nav>{{ title }}</nav>"}), {})
        >>> ctx = DataContext({"title": "Home"})
        >>> renderer.run(ctx, '{{ include("nav") }}', RenderContext())
        '<nav>Home</nav>'
    """

    __slots__ = ("_extension", "_functions", "_loader")

    def __init__(
        self,
        loader: ViewLoader,
        functions: Mapping[str, Callable[..., Any]],
        *,
        extension: str = ".html",
    ):
        self._loader = loader
        self._functions = functions
        self._extension = extension

    def run(self, data: MutableMapping[str, Any], markup: str, render_ctx: RenderContext) -> str:
        """Resolve ``markup`` to a fixed point.

        Marker failures are recorded on ``render_ctx`` and render as empty
        text.

        Raises:
            ResolutionLimitError: If includes nest too deep or passes do not converge
        """
        include = self._bind_include(data, render_ctx)
        previous = data.get(INCLUDE_NAME, _MISSING)
        app = data.get(APP_NAME)
        previous_app = app.get(INCLUDE_NAME, _MISSING) if isinstance(app, dict) else _MISSING

        data[INCLUDE_NAME] = include
        if isinstance(app, dict):
            app[INCLUDE_NAME] = include
        try:
            return self._resolve(data, markup, render_ctx)
        finally:
            _restore(data, INCLUDE_NAME, previous)
            if isinstance(app, dict):
                _restore(app, INCLUDE_NAME, previous_app)

    def include(
        self,
        data: MutableMapping[str, Any],
        view_name: Any,
        render_ctx: RenderContext,
    ) -> str | None:
        """Render another view into the current pass.

        Returns:
            The fully resolved view, or None if the loader cannot find it.

        Raises:
            ResolutionLimitError: If the include depth limit is reached
        """
        name = to_text(view_name)
        if not name.endswith(self._extension):
            name += self._extension
        render_ctx.check_include_depth(name)

        try:
            source, _filename = self._loader.get_source(name)
        except IncludeNotFoundError as exc:
            logger.warning("%s %s", terminal.banner("warning"), exc)
            return None

        return self.run(data, source, render_ctx.child_context(name))

    def _bind_include(
        self, data: MutableMapping[str, Any], render_ctx: RenderContext
    ) -> Callable[[Any], str | None]:
        def include(view_name: Any) -> str | None:
            return self.include(data, view_name, render_ctx)

        return include

    def _resolve(self, data: MutableMapping[str, Any], markup: str, render_ctx: RenderContext) -> str:
        view_passes = 0
        while True:
            matches = scan_markers(markup)
            if not matches:
                return markup
            render_ctx.check_passes(render_ctx.template_name, view_passes)
            view_passes += 1
            render_ctx.count_pass()
            markup = self._run_pass(data, markup, matches, render_ctx)

    def _run_pass(
        self,
        data: MutableMapping[str, Any],
        markup: str,
        matches: list[ExpressionMatch],
        render_ctx: RenderContext,
    ) -> str:
        # Evaluate in scan order so later markers see earlier declarations,
        # then splice by position so repeated identical markers stay independent.
        parts: list[str] = []
        pos = 0
        for match in matches:
            self._evaluate(data, match, render_ctx)
            parts.append(markup[pos:match.start])
            if match.value:
                parts.append(match.value)
            pos = match.end
        parts.append(markup[pos:])
        return "".join(parts)

    def _evaluate(
        self, data: MutableMapping[str, Any], match: ExpressionMatch, render_ctx: RenderContext
    ) -> None:
        render_ctx.matches.append(match)
        if not match.raw:
            # An empty marker evaluates to undefined: no output, no error.
            match.value = None
            return
        try:
            program = rewrite(_parse(match.raw), data.keys())
            match.rewritten = unparse(program)
            value = Evaluator(data, self._functions, expression=match.raw).evaluate(program)
            match.value = display(value, match.raw)
        except ResolutionLimitError:
            raise
        except Exception as exc:
            match.value = None
            match.error = render_ctx.record(match.raw, exc)


def _restore(mapping: MutableMapping[str, Any], key: str, previous: Any) -> None:
    if previous is _MISSING:
        mapping.pop(key, None)
    else:
        mapping[key] = previous
