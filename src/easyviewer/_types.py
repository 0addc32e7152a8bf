"""Token types shared by the expression lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kinds of tokens produced by the expression lexer."""

    NAME = "name"
    NUMBER = "number"
    STRING = "string"
    OPERATOR = "operator"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LBRACE = "{"
    RBRACE = "}"
    COMMA = ","
    COLON = ":"
    SEMICOLON = ";"
    DOT = "."
    OPTIONAL_DOT = "?."
    QUESTION = "?"
    ASSIGN = "="
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token.

    Attributes:
        type: Token kind
        value: Source text (decoded value for strings and numbers)
        col_offset: 0-based offset into the expression text
    """

    type: TokenType
    value: str | int | float
    col_offset: int = 0

    @property
    def lineno(self) -> int:
        # Expressions are normalized to a single line before lexing.
        return 1

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, col={self.col_offset})"
