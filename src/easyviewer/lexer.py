"""Marker scanning and expression tokenizing.

Two stages live here:

1. **Marker scanning** (`scan_markers`): finds ``{{ ... }}`` regions in
   markup, left to right, non-overlapping. The first ``}}`` after an opener
   closes the marker, so a marker cannot contain a literal ``}}`` (not even
   inside a string literal). An opener with no closer after it stays literal
   text.

2. **Tokenizing** (`Lexer`): turns one marker's expression text into a
   token stream for the parser.

Example:
    >>> [m.raw for m in scan_markers("a{{ 1+1 }}b{{ x }}")]
    ['1+1', 'x']
    >>> [t.value for t in tokenize("let x = 5")][:-1]
    ['let', 'x', '=', 5]

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from easyviewer._types import Token, TokenType
from easyviewer.environment.exceptions import ExpressionSyntaxError

if TYPE_CHECKING:
    from easyviewer.environment.exceptions import RenderError

MARKER_OPEN = "{{"
MARKER_CLOSE = "}}"

# A newline plus the indentation run that follows it
_NEWLINE_RUN_RE = re.compile(r"\n\s*")


@dataclass(slots=True)
class ExpressionMatch:
    """One marker found during a scan pass.

    Matches are regenerated every pass; nothing is retained across passes.

    Attributes:
        start: Offset of the opener in the scanned markup
        end: Offset just past the closer
        literal: Marker text including delimiters (the span to replace)
        raw: Normalized expression text between the delimiters
        rewritten: Rewritten expression text, set by the renderer
        value: Display value, or None when the marker renders nothing
        error: Failure recorded for this marker, if any
    """

    start: int
    end: int
    literal: str
    raw: str
    rewritten: str | None = None
    value: str | None = None
    error: RenderError | None = None


def normalize_expression(text: str) -> str:
    """Trim marker text and collapse each newline + indentation to a space."""
    text = text.strip().replace("\r\n", "\n")
    return _NEWLINE_RUN_RE.sub(" ", text).strip()


def scan_markers(markup: str) -> list[ExpressionMatch]:
    """Find every ``{{ ... }}`` marker in markup, earliest first."""
    matches: list[ExpressionMatch] = []
    pos = 0
    while True:
        start = markup.find(MARKER_OPEN, pos)
        if start == -1:
            break
        close = markup.find(MARKER_CLOSE, start + len(MARKER_OPEN))
        if close == -1:
            # No closer anywhere after this opener, so none after later ones either.
            break
        end = close + len(MARKER_CLOSE)
        matches.append(
            ExpressionMatch(
                start=start,
                end=end,
                literal=markup[start:end],
                raw=normalize_expression(markup[start + len(MARKER_OPEN):close]),
            )
        )
        pos = end
    return matches


def has_markers(markup: str) -> bool:
    start = markup.find(MARKER_OPEN)
    return start != -1 and markup.find(MARKER_CLOSE, start + len(MARKER_OPEN)) != -1


# ---------------------------------------------------------------------------
# Expression tokenizer
# ---------------------------------------------------------------------------

# Longest first so "===" wins over "==" and "=".
_OPERATORS = (
    "===", "!==",
    "==", "!=", "<=", ">=", "&&", "||", "??",
    "+", "-", "*", "/", "%", "<", ">", "!",
)

_PUNCTUATION = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    ".": TokenType.DOT,
    "?": TokenType.QUESTION,
    "=": TokenType.ASSIGN,
}

_NAME_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_NUMBER_RE = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


class Lexer:
    """Tokenize a single expression.

    Thread-safe: each instance owns only the text it was created with.
    """

    __slots__ = ("_pos", "_text")

    def __init__(self, text: str):
        self._text = text
        self._pos = 0

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        text = self._text
        while True:
            self._skip_whitespace()
            if self._pos >= len(text):
                tokens.append(Token(TokenType.EOF, "", self._pos))
                return tokens
            tokens.append(self._next_token())

    def _skip_whitespace(self) -> None:
        while self._pos < len(self._text) and self._text[self._pos].isspace():
            self._pos += 1

    def _next_token(self) -> Token:
        text = self._text
        pos = self._pos
        char = text[pos]

        if char in "'\"":
            return self._read_string(char)

        if char.isdigit() or (char == "." and text[pos + 1:pos + 2].isdigit()):
            match = _NUMBER_RE.match(text, pos)
            assert match is not None
            literal = match.group()
            self._pos = match.end()
            value: int | float
            if any(c in literal for c in ".eE"):
                value = float(literal)
            else:
                value = int(literal)
            return Token(TokenType.NUMBER, value, pos)

        match = _NAME_RE.match(text, pos)
        if match:
            self._pos = match.end()
            return Token(TokenType.NAME, match.group(), pos)

        # "?." is optional chaining unless a digit follows ("a ?.5 : 1").
        if text.startswith("?.", pos) and not text[pos + 2:pos + 3].isdigit():
            self._pos += 2
            return Token(TokenType.OPTIONAL_DOT, "?.", pos)

        for op in _OPERATORS:
            if text.startswith(op, pos):
                self._pos += len(op)
                return Token(TokenType.OPERATOR, op, pos)

        if char in _PUNCTUATION:
            self._pos += 1
            return Token(_PUNCTUATION[char], char, pos)

        raise ExpressionSyntaxError(
            f"Unexpected character {char!r}",
            expression=text,
            col_offset=pos,
        )

    def _read_string(self, quote: str) -> Token:
        text = self._text
        start = self._pos
        pos = start + 1
        chars: list[str] = []
        while pos < len(text):
            char = text[pos]
            if char == quote:
                self._pos = pos + 1
                return Token(TokenType.STRING, "".join(chars), start)
            if char == "\\" and pos + 1 < len(text):
                nxt = text[pos + 1]
                if nxt == "u" and pos + 6 <= len(text):
                    try:
                        chars.append(chr(int(text[pos + 2:pos + 6], 16)))
                    except ValueError:
                        raise ExpressionSyntaxError(
                            "Invalid unicode escape",
                            expression=text,
                            col_offset=pos,
                        ) from None
                    pos += 6
                    continue
                chars.append(_ESCAPES.get(nxt, nxt))
                pos += 2
                continue
            chars.append(char)
            pos += 1

        raise ExpressionSyntaxError(
            "Unterminated string literal",
            expression=text,
            col_offset=start,
            suggestion=f"Close the string with {quote}",
        )


def tokenize(text: str) -> list[Token]:
    """Tokenize expression text, ending with an EOF token."""
    return Lexer(text).tokenize()
