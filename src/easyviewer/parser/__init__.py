"""Marker expression parser."""

from easyviewer.parser.core import (
    DECLARATION_KEYWORDS,
    RESERVED_WORDS,
    Parser,
    parse_expression,
)
from easyviewer.parser.errors import ParseError

__all__ = [
    "DECLARATION_KEYWORDS",
    "RESERVED_WORDS",
    "ParseError",
    "Parser",
    "parse_expression",
]
