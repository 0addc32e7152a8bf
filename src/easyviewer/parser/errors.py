"""Parser error handling.

Provides ParseError with the offending token and a caret pointer.
"""

from __future__ import annotations

from easyviewer._types import Token, TokenType
from easyviewer.environment.exceptions import ExpressionSyntaxError


class ParseError(ExpressionSyntaxError):
    """Marker text does not match the expression grammar."""

    def __init__(
        self,
        message: str,
        token: Token,
        source: str | None = None,
        suggestion: str | None = None,
    ):
        self.token = token
        super().__init__(
            message,
            expression=source,
            col_offset=token.col_offset,
            suggestion=suggestion,
        )

    @property
    def at_end(self) -> bool:
        """True when the parser ran out of input."""
        return self.token.type is TokenType.EOF
