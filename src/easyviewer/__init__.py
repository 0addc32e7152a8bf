"""easyviewer: server-side markup with live ``{{ ... }}`` expressions.

Page authors embed small JavaScript-flavoured expressions in otherwise
static HTML. Each render call resolves them against its own data, pulls in
other views with ``include()``, and repeats until no markers remain.

Quickstart:
    >>> from easyviewer import Environment
    >>> env = Environment()
    >>> env.render_string("a{{ 1 + 1 }}b")
    ('a2b', [])
    >>> env.render_string("{{ let x = 5 }}{{ x * 2 }}")
    ('10', [])

Schemes and views:
    >>> env = Environment(config={"views": "views", "default_scheme": "app"})
    >>> _ = env.schemes.load("schemes")        # schemes/app.html → "app"
    >>> result = env.render("index", {"title": "Home"})
    >>> result.status
    200

The scheme places the page body with ``{{ app.content }}``; the page view
``views/index.html`` is resolved in the same pass cycle.

Architecture:
    Markup → scan_markers → Parser → rewrite → Evaluator → splice → (repeat)

Pipeline stages:
1. **Scanner**: Finds ``{{ ... }}`` regions, earliest first
2. **Parser**: Tokenizes and parses each marker into an immutable AST
3. **Rewriter**: Turns declarations into context writes and known names
   into context reads, on the tree rather than on text
4. **Evaluator**: Walks the AST; only allow-listed functions and methods
   can be called
5. **Renderer**: Splices results back and re-scans to a fixed point,
   bounded by an include depth and a pass limit

Errors:
A failing marker renders as empty text and is recorded. The pipeline
decides once, at the end of the call, whether the caller gets the page
(``ignore_errors``) or a structured 500 payload.

"""

from easyviewer._types import Token, TokenType
from easyviewer.context import DataContext
from easyviewer.environment import (
    DEFAULT_FUNCTIONS,
    RECOGNIZED_KEYS,
    UNSET,
    ConfigStore,
    ConfigValidationWarning,
    DictLoader,
    Environment,
    ErrorCode,
    ExpressionEvaluationError,
    ExpressionSyntaxError,
    FileSystemLoader,
    FunctionRegistry,
    IncludeNotFoundError,
    Outcome,
    RenderError,
    RenderResult,
    ResolutionLimitError,
    Scheme,
    SchemeNotFoundError,
    SchemeRegistry,
    UndefinedError,
    ViewerError,
)
from easyviewer.evaluator import Evaluator
from easyviewer.lexer import ExpressionMatch, scan_markers, tokenize
from easyviewer.parser import ParseError, parse_expression
from easyviewer.render_context import RenderContext
from easyviewer.rewriter import rewrite, unparse
from easyviewer.template import UNDEFINED, Renderer, to_display

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_FUNCTIONS",
    "RECOGNIZED_KEYS",
    "UNDEFINED",
    "UNSET",
    "ConfigStore",
    "ConfigValidationWarning",
    "DataContext",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "Evaluator",
    "ExpressionEvaluationError",
    "ExpressionMatch",
    "ExpressionSyntaxError",
    "FileSystemLoader",
    "FunctionRegistry",
    "IncludeNotFoundError",
    "Outcome",
    "ParseError",
    "RenderContext",
    "RenderError",
    "RenderResult",
    "Renderer",
    "ResolutionLimitError",
    "Scheme",
    "SchemeNotFoundError",
    "SchemeRegistry",
    "Token",
    "TokenType",
    "UndefinedError",
    "ViewerError",
    "__version__",
    "parse_expression",
    "rewrite",
    "scan_markers",
    "to_display",
    "tokenize",
    "unparse",
]
