"""Exceptions for the easyviewer rendering system.

Exception Hierarchy:
ViewerError (base)
├── SchemeNotFoundError           # Scheme name not in the registry (404)
├── IncludeNotFoundError          # View file missing (include yields "")
├── ExpressionEvaluationError     # Marker failed; accumulated, renders ""
│   ├── ExpressionSyntaxError     # Marker text does not parse
│   └── UndefinedError            # Unknown bare identifier
└── ResolutionLimitError          # Include depth / pass count exceeded

ConfigValidationWarning is a UserWarning: it is logged, never raised.

Error Messages:
All errors render a compact diagnostic via `format_compact()`:

    ```
    E-RUN-002: 'titl' is not defined in page.html
       Expression: {{ titl.toUpperCase() }}
       Hint: Did you mean 'title'?
    ```

"""

from __future__ import annotations

from dataclasses import dataclass, field
from difflib import get_close_matches
from enum import Enum

from easyviewer.environment import terminal

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes for easyviewer errors.

    Format: E-{CATEGORY}-{NUMBER}
    Categories: PAR (parser), RUN (runtime), TPL (scheme/view loading),
    CFG (configuration)
    """

    # Parser errors (E-PAR-xxx)
    INVALID_EXPRESSION = "E-PAR-001"

    # Runtime errors (E-RUN-xxx)
    EVALUATION_ERROR = "E-RUN-001"
    UNDEFINED_VARIABLE = "E-RUN-002"
    RESOLUTION_LIMIT = "E-RUN-003"

    # Scheme/view loading errors (E-TPL-xxx)
    SCHEME_NOT_FOUND = "E-TPL-001"
    VIEW_NOT_FOUND = "E-TPL-002"

    # Configuration (E-CFG-xxx)
    UNKNOWN_CONFIG_KEY = "E-CFG-001"

    @property
    def category(self) -> str:
        """Error category (e.g., 'runtime', 'parser', 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "PAR": "parser",
            "RUN": "runtime",
            "TPL": "template",
            "CFG": "config",
        }.get(prefix, "unknown")


def format_include_stack(stack: list[str] | None) -> str:
    """Format the include chain for error messages.

    Example:
        >>> print(format_include_stack(["app", "header", "nav"]))
        Include stack:
          • app
          • header
          • nav
    """
    if not stack:
        return ""

    lines = [terminal.dim_text("Include stack:")]
    for name in stack:
        lines.append(f"  • {terminal.location(name)}")
    return "\n".join(lines)


class ViewerError(Exception):
    """Base exception for all easyviewer errors.

    Attributes:
        code: ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a one-screen diagnostic without traceback noise."""
        return terminal.format_error_header(self.code.value if self.code else None, str(self))


class SchemeNotFoundError(ViewerError):
    """Requested scheme is not registered.

    Terminal for the render call: the pipeline answers with a 404 outcome
    and no rendering is attempted.
    """

    code: ErrorCode | None = ErrorCode.SCHEME_NOT_FOUND

    def __init__(self, name: str | None, available: list[str] | None = None):
        self.name = name
        self.available = sorted(available or [])
        msg = f"Scheme '{name}' not found"
        matches = get_close_matches(name or "", self.available, n=1, cutoff=0.6)
        if matches:
            msg += f". Did you mean '{matches[0]}'?"
        elif self.available:
            msg += f". Available: {', '.join(self.available[:10])}"
        super().__init__(msg)


class IncludeNotFoundError(ViewerError):
    """A view file could not be found by the configured loader."""

    code: ErrorCode | None = ErrorCode.VIEW_NOT_FOUND


class ExpressionEvaluationError(ViewerError):
    """A marker failed to evaluate.

    Non-fatal: the failing marker renders as empty string, the error is
    appended to the render call's error list, and sibling markers keep
    evaluating.

    Attributes:
        message: Error description
        expression: Marker text that failed
        template_name: View or scheme the marker came from
        suggestion: Actionable fix suggestion
        include_stack: Chain of views leading to the failing marker
    """

    code: ErrorCode | None = ErrorCode.EVALUATION_ERROR

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        template_name: str | None = None,
        suggestion: str | None = None,
        include_stack: list[str] | None = None,
    ):
        self.message = message
        self.expression = expression
        self.template_name = template_name
        self.suggestion = suggestion
        self.include_stack = include_stack or []
        super().__init__(message)

    def format_compact(self) -> str:
        parts: list[str] = []
        header = self.message
        if self.template_name:
            header += f" in {terminal.location(self.template_name)}"
        parts.append(terminal.format_error_header(self.code.value if self.code else None, header))

        if self.expression:
            parts.append(f"  Expression: {{{{ {self.expression} }}}}")

        if self.include_stack:
            parts.append(format_include_stack(self.include_stack))

        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")

        return "\n".join(parts)


class ExpressionSyntaxError(ExpressionEvaluationError):
    """Marker text is not a valid expression.

    When ``col_offset`` is known the compact format points at the column
    with a caret.
    """

    code: ErrorCode | None = ErrorCode.INVALID_EXPRESSION

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        col_offset: int | None = None,
        suggestion: str | None = None,
    ):
        self.col_offset = col_offset
        super().__init__(message, expression=expression, suggestion=suggestion)

    def format_compact(self) -> str:
        parts = [terminal.format_error_header(self.code.value if self.code else None, self.message)]
        if self.expression is not None:
            parts.append(terminal.dim_text("   |"))
            parts.append(f"   | {self.expression}")
            if self.col_offset is not None:
                caret = " " * self.col_offset + "^"
                parts.append(f"   | {terminal.error_line(caret)}")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        return "\n".join(parts)


class UndefinedError(ExpressionEvaluationError):
    """A bare identifier is neither a context key nor a registered function.

    If ``available_names`` is provided, a "Did you mean?" suggestion is
    included when a close match is found.
    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_VARIABLE

    def __init__(
        self,
        name: str,
        *,
        expression: str | None = None,
        available_names: frozenset[str] | None = None,
    ):
        self.name = name
        suggestion = None
        if available_names:
            matches = get_close_matches(name, available_names, n=1, cutoff=0.6)
            if matches:
                suggestion = f"Did you mean '{terminal.suggestion(matches[0])}'?"
        super().__init__(
            f"'{name}' is not defined",
            expression=expression,
            suggestion=suggestion or f"Declare it first with {{{{ let {name} = ... }}}}",
        )


class ResolutionLimitError(ViewerError):
    """Rendering did not converge.

    Raised when the include depth or the number of fixed-point passes
    exceeds its configured maximum, typically because a view includes
    itself. Unlike marker failures this aborts the whole render call.
    """

    code: ErrorCode | None = ErrorCode.RESOLUTION_LIMIT

    def __init__(self, message: str, *, limit: int, include_stack: list[str] | None = None):
        self.limit = limit
        self.include_stack = include_stack or []
        super().__init__(message)

    def format_compact(self) -> str:
        parts = [super().format_compact()]
        if self.include_stack:
            parts.append(format_include_stack(self.include_stack))
        parts.append(f"  {terminal.hint('Hint:')} Check for circular includes: A → B → A")
        return "\n".join(parts)


class ConfigValidationWarning(UserWarning):
    """An unrecognized configuration key was set."""

    code = ErrorCode.UNKNOWN_CONFIG_KEY


@dataclass(slots=True)
class RenderError:
    """One failed marker, accumulated for the whole top-level render call.

    Attributes:
        expression: Raw marker text (without delimiters)
        cause: The exception raised while evaluating it
        template_name: View or scheme that contained the marker
    """

    expression: str
    cause: BaseException
    template_name: str | None = None
    include_stack: list[str] = field(default_factory=list)

    def format_compact(self) -> str:
        if isinstance(self.cause, ViewerError):
            cause = self.cause
            if isinstance(cause, ExpressionEvaluationError):
                if cause.template_name is None:
                    cause.template_name = self.template_name
                if not cause.include_stack:
                    cause.include_stack = self.include_stack
            return cause.format_compact()

        header = f"{type(self.cause).__name__}: {self.cause}"
        if self.template_name:
            header += f" in {terminal.location(self.template_name)}"
        parts = [
            terminal.format_error_header(ErrorCode.EVALUATION_ERROR.value, header),
            f"  Expression: {{{{ {self.expression} }}}}",
        ]
        if self.include_stack:
            parts.append(format_include_stack(self.include_stack))
        return "\n".join(parts)
