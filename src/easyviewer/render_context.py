"""Per-render-call state, threaded explicitly through the renderer.

A RenderContext is created once per top-level render call and a child is
derived for every include. Children share the error list, so failures
from any depth of the include tree reach the pipeline's final decision.
Nothing here is module-global, so concurrent render calls never see each
other's state.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from easyviewer.environment.exceptions import RenderError, ResolutionLimitError

if TYPE_CHECKING:
    from easyviewer.lexer import ExpressionMatch

logger = logging.getLogger(__name__)

# Deep enough for any real view hierarchy while catching circular
# includes early.
DEFAULT_MAX_INCLUDE_DEPTH = 50
DEFAULT_MAX_PASSES = 100


@dataclass
class RenderContext:
    """State for one render call and its include tree.

    Attributes:
        template_name: Scheme or view currently being resolved
        include_depth: Current include nesting (0 for the scheme)
        max_include_depth: Maximum allowed include depth
        max_passes: Maximum fixed-point passes for a single view
        include_stack: Names of the views that led here, outermost first
        errors: RenderErrors for the whole call, shared with children
        matches: Every marker evaluated during the call, in evaluation order
        passes: Total passes run across the include tree (shared counter)
    """

    template_name: str | None = None
    include_depth: int = 0
    max_include_depth: int = DEFAULT_MAX_INCLUDE_DEPTH
    max_passes: int = DEFAULT_MAX_PASSES
    include_stack: list[str] = field(default_factory=list)
    errors: list[RenderError] = field(default_factory=list)
    matches: list[ExpressionMatch] = field(default_factory=list)
    _pass_counter: list[int] = field(default_factory=lambda: [0])

    @property
    def passes(self) -> int:
        return self._pass_counter[0]

    def count_pass(self) -> None:
        self._pass_counter[0] += 1

    def record(self, expression: str, cause: BaseException) -> RenderError:
        """Append a failed marker to the call's error list."""
        error = RenderError(
            expression=expression,
            cause=cause,
            template_name=self.template_name,
            include_stack=list(self.include_stack),
        )
        self.errors.append(error)
        logger.debug("Marker {{ %s }} failed in %s: %s", expression, self.template_name, cause)
        return error

    def check_include_depth(self, template_name: str) -> None:
        """Raise if including ``template_name`` would exceed the depth limit.

        Raises:
            ResolutionLimitError: If depth >= max_include_depth
        """
        if self.include_depth >= self.max_include_depth:
            raise ResolutionLimitError(
                f"Maximum include depth exceeded ({self.max_include_depth}) "
                f"when including '{template_name}'",
                limit=self.max_include_depth,
                include_stack=[*self.include_stack, template_name],
            )

    def check_passes(self, template_name: str | None, view_passes: int) -> None:
        """Raise if a view keeps producing new markers.

        Raises:
            ResolutionLimitError: If view_passes >= max_passes
        """
        if view_passes >= self.max_passes:
            raise ResolutionLimitError(
                f"Resolution did not converge after {self.max_passes} passes "
                f"in '{template_name or '<string>'}'",
                limit=self.max_passes,
                include_stack=list(self.include_stack),
            )

    def child_context(self, template_name: str) -> RenderContext:
        """Create the context for an included view.

        Shares the error list and pass counter with the parent.
        """
        stack = self.include_stack.copy()
        if self.template_name:
            stack.append(self.template_name)
        return RenderContext(
            template_name=template_name,
            include_depth=self.include_depth + 1,
            max_include_depth=self.max_include_depth,
            max_passes=self.max_passes,
            include_stack=stack,
            errors=self.errors,
            matches=self.matches,
            _pass_counter=self._pass_counter,
        )
