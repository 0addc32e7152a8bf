"""Environment: configuration, schemes, loaders and the render pipeline.

Submodules import each other by full path, so importing any one of them
does not require this package namespace to be initialised first.

"""

from easyviewer.environment.config import DEFAULTS, RECOGNIZED_KEYS, UNSET, ConfigStore
from easyviewer.environment.core import (
    EVALUATION_FAILED_MESSAGE,
    SCHEME_NOT_FOUND_MESSAGE,
    Environment,
    Outcome,
    RenderResult,
)
from easyviewer.environment.exceptions import (
    ConfigValidationWarning,
    ErrorCode,
    ExpressionEvaluationError,
    ExpressionSyntaxError,
    IncludeNotFoundError,
    RenderError,
    ResolutionLimitError,
    SchemeNotFoundError,
    UndefinedError,
    ViewerError,
)
from easyviewer.environment.globals import DEFAULT_FUNCTIONS, SAFE_METHODS
from easyviewer.environment.loaders import (
    DictLoader,
    FileSystemLoader,
    Scheme,
    SchemeRegistry,
    ViewLoader,
)
from easyviewer.environment.registry import FunctionRegistry

__all__ = [
    "DEFAULTS",
    "DEFAULT_FUNCTIONS",
    "EVALUATION_FAILED_MESSAGE",
    "RECOGNIZED_KEYS",
    "SAFE_METHODS",
    "SCHEME_NOT_FOUND_MESSAGE",
    "UNSET",
    "ConfigStore",
    "ConfigValidationWarning",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "ExpressionEvaluationError",
    "ExpressionSyntaxError",
    "FileSystemLoader",
    "FunctionRegistry",
    "IncludeNotFoundError",
    "Outcome",
    "RenderError",
    "RenderResult",
    "ResolutionLimitError",
    "Scheme",
    "SchemeNotFoundError",
    "SchemeRegistry",
    "UndefinedError",
    "ViewLoader",
    "ViewerError",
]
