"""Recursive-descent parser for marker expressions.

Grammar (lowest precedence first)::

    program     := statement (";" statement)* [";"]
    statement   := ("let"|"const"|"var") NAME "=" expression
                 | NAME "=" expression
                 | expression
    expression  := coalesce ["?" expression ":" expression]
    coalesce    := or ("??" or)*
    or          := and ("||" and)*
    and         := equality ("&&" equality)*
    equality    := compare (("=="|"!="|"==="|"!==") compare)*
    compare     := additive (("<"|"<="|">"|">=") additive)*
    additive    := term (("+"|"-") term)*
    term        := unary (("*"|"/"|"%") unary)*
    unary       := ("!"|"-"|"+") unary | postfix
    postfix     := primary ("." NAME | "?." NAME | "[" expression "]" | "(" args ")")*
    primary     := NUMBER | STRING | "true" | "false" | "null" | "undefined"
                 | NAME | "(" expression ")" | "[" items "]" | "{" pairs "}"

Binary levels share one loop driven by `_BINARY_LEVELS`, so every level is
left-associative.

"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from easyviewer._types import Token, TokenType
from easyviewer.lexer import tokenize
from easyviewer.nodes import (
    Assign,
    BinOp,
    BoolOp,
    Compare,
    CondExpr,
    Const,
    Declare,
    Dict,
    Expr,
    FuncCall,
    Getattr,
    Getitem,
    List,
    Name,
    NullCoalesce,
    OptionalGetattr,
    Program,
    Statement,
    UnaryOp,
)
from easyviewer.parser.errors import ParseError
from easyviewer.template.helpers import UNDEFINED

DECLARATION_KEYWORDS = frozenset({"let", "const", "var"})

_KEYWORD_CONSTANTS: dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": UNDEFINED,
}

RESERVED_WORDS = DECLARATION_KEYWORDS | frozenset(_KEYWORD_CONSTANTS)

# Precedence levels below the ternary, loosest first.
_BINARY_LEVELS: tuple[frozenset[str], ...] = (
    frozenset({"??"}),
    frozenset({"||"}),
    frozenset({"&&"}),
    frozenset({"==", "!=", "===", "!=="}),
    frozenset({"<", "<=", ">", ">="}),
    frozenset({"+", "-"}),
    frozenset({"*", "/", "%"}),
)


class Parser:
    """Parse one marker's expression text into a `Program`.

    Example:
        >>> Parser("let x = 5").parse()
        Program(col_offset=0, body=(Declare(col_offset=0, keyword='let', ...),))
    """

    __slots__ = ("_pos", "_source", "_tokens")

    def __init__(self, source: str):
        self._source = source
        self._tokens: list[Token] = tokenize(source)
        self._pos = 0

    # ─────────────────────────────────────────────────────────────────────
    # Token navigation
    # ─────────────────────────────────────────────────────────────────────

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _peek(self, offset: int = 1) -> Token:
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.type is not TokenType.EOF:
            self._pos += 1
        return token

    def _match(self, *types: TokenType) -> bool:
        return self._current.type in types

    def _match_op(self, ops: frozenset[str]) -> bool:
        token = self._current
        return token.type is TokenType.OPERATOR and token.value in ops

    def _expect(self, token_type: TokenType, suggestion: str | None = None) -> Token:
        if self._current.type is not token_type:
            raise self._error(
                f"Expected '{token_type.value}', got {self._describe(self._current)}",
                suggestion=suggestion,
            )
        return self._advance()

    def _error(
        self,
        message: str,
        token: Token | None = None,
        suggestion: str | None = None,
    ) -> ParseError:
        return ParseError(message, token or self._current, self._source, suggestion)

    @staticmethod
    def _describe(token: Token) -> str:
        if token.type is TokenType.EOF:
            return "end of expression"
        return repr(token.value)

    # ─────────────────────────────────────────────────────────────────────
    # Statements
    # ─────────────────────────────────────────────────────────────────────

    def parse(self) -> Program:
        """Parse the whole expression text."""
        if self._match(TokenType.EOF):
            raise self._error("Empty expression", suggestion="Remove the empty {{ }} marker")

        body: list[Statement] = []
        while True:
            body.append(self._parse_statement())
            if self._match(TokenType.SEMICOLON):
                self._advance()
                if self._match(TokenType.EOF):
                    break
                continue
            if not self._match(TokenType.EOF):
                raise self._error(
                    f"Unexpected {self._describe(self._current)}",
                    suggestion="Separate statements with ';'",
                )
            break
        return Program(col_offset=0, body=tuple(body))

    def _parse_statement(self) -> Statement:
        token = self._current
        if token.type is TokenType.NAME and token.value in DECLARATION_KEYWORDS:
            self._advance()
            name = self._expect_name(f"Expected a variable name after '{token.value}'")
            self._expect(TokenType.ASSIGN, suggestion=f"{token.value} {name.value} = <value>")
            return Declare(
                col_offset=token.col_offset,
                keyword=token.value,  # type: ignore[arg-type]
                name=str(name.value),
                value=self._parse_expression(),
            )

        if (
            token.type is TokenType.NAME
            and token.value not in RESERVED_WORDS
            and self._peek().type is TokenType.ASSIGN
        ):
            self._advance()
            self._advance()  # consume '='
            return Assign(
                col_offset=token.col_offset,
                name=str(token.value),
                value=self._parse_expression(),
            )

        expr = self._parse_expression()
        if self._match(TokenType.ASSIGN):
            raise self._error(
                "Only bare names can be assigned",
                suggestion="Declare a new variable instead: let name = value",
            )
        return expr

    def _expect_name(self, message: str) -> Token:
        token = self._current
        if token.type is not TokenType.NAME or token.value in RESERVED_WORDS:
            raise self._error(message)
        return self._advance()

    # ─────────────────────────────────────────────────────────────────────
    # Expressions
    # ─────────────────────────────────────────────────────────────────────

    def _parse_expression(self) -> Expr:
        test = self._parse_binary(0)
        if not self._match(TokenType.QUESTION):
            return test
        self._advance()
        if_true = self._parse_expression()
        self._expect(TokenType.COLON, suggestion="Ternary syntax: test ? a : b")
        if_false = self._parse_expression()
        return CondExpr(col_offset=test.col_offset, test=test, if_true=if_true, if_false=if_false)

    def _parse_binary(self, level: int) -> Expr:
        if level == len(_BINARY_LEVELS):
            return self._parse_unary()

        ops = _BINARY_LEVELS[level]
        left = self._parse_binary(level + 1)
        while self._match_op(ops):
            op = str(self._advance().value)
            right = self._parse_binary(level + 1)
            left = self._combine(op, left, right)
        return left

    @staticmethod
    def _combine(op: str, left: Expr, right: Expr) -> Expr:
        col = left.col_offset
        if op == "??":
            return NullCoalesce(col_offset=col, left=left, right=right)
        if op in ("&&", "||"):
            bool_op = "and" if op == "&&" else "or"
            # Flatten chains: a && b && c → BoolOp(and, [a, b, c])
            if isinstance(left, BoolOp) and left.op == bool_op:
                return BoolOp(col_offset=col, op=bool_op, values=(*left.values, right))
            return BoolOp(col_offset=col, op=bool_op, values=(left, right))
        if op in ("==", "!=", "===", "!==", "<", "<=", ">", ">="):
            return Compare(col_offset=col, op=op, left=left, right=right)
        return BinOp(col_offset=col, op=op, left=left, right=right)

    def _parse_unary(self) -> Expr:
        token = self._current
        if token.type is TokenType.OPERATOR and token.value in ("!", "-", "+"):
            self._advance()
            operand = self._parse_unary()
            return UnaryOp(col_offset=token.col_offset, op=str(token.value), operand=operand)
        return self._parse_postfix()

    def _parse_postfix(self) -> Expr:
        expr = self._parse_primary()
        while True:
            token = self._current
            if token.type is TokenType.DOT:
                self._advance()
                attr = self._expect_member("Expected a property name after '.'")
                expr = Getattr(col_offset=expr.col_offset, obj=expr, attr=attr)
            elif token.type is TokenType.OPTIONAL_DOT:
                self._advance()
                attr = self._expect_member("Expected a property name after '?.'")
                expr = OptionalGetattr(col_offset=expr.col_offset, obj=expr, attr=attr)
            elif token.type is TokenType.LBRACKET:
                self._advance()
                key = self._parse_expression()
                self._expect(TokenType.RBRACKET)
                expr = Getitem(col_offset=expr.col_offset, obj=expr, key=key)
            elif token.type is TokenType.LPAREN:
                self._advance()
                args = self._parse_sequence(TokenType.RPAREN, self._parse_expression)
                expr = FuncCall(col_offset=expr.col_offset, func=expr, args=tuple(args))
            else:
                return expr

    def _expect_member(self, message: str) -> str:
        # Keywords are valid property names: obj.default, obj.let
        if self._current.type is not TokenType.NAME:
            raise self._error(message)
        return str(self._advance().value)

    def _parse_primary(self) -> Expr:
        token = self._current

        if token.type in (TokenType.NUMBER, TokenType.STRING):
            self._advance()
            return Const(col_offset=token.col_offset, value=token.value)

        if token.type is TokenType.NAME:
            self._advance()
            if token.value in _KEYWORD_CONSTANTS:
                return Const(col_offset=token.col_offset, value=_KEYWORD_CONSTANTS[token.value])
            if token.value in DECLARATION_KEYWORDS:
                raise self._error(
                    f"'{token.value}' is only allowed at the start of a statement",
                    token=token,
                )
            return Name(col_offset=token.col_offset, name=str(token.value))

        if token.type is TokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self._expect(TokenType.RPAREN, suggestion="Close the parenthesis")
            return expr

        if token.type is TokenType.LBRACKET:
            self._advance()
            items = self._parse_sequence(TokenType.RBRACKET, self._parse_expression)
            return List(col_offset=token.col_offset, items=tuple(items))

        if token.type is TokenType.LBRACE:
            self._advance()
            pairs = self._parse_sequence(TokenType.RBRACE, self._parse_pair)
            return Dict(
                col_offset=token.col_offset,
                keys=tuple(key for key, _ in pairs),
                values=tuple(value for _, value in pairs),
            )

        raise self._error(f"Unexpected {self._describe(token)}")

    def _parse_pair(self) -> tuple[str, Expr]:
        token = self._current
        if token.type not in (TokenType.NAME, TokenType.STRING, TokenType.NUMBER):
            raise self._error("Expected a property name in object literal")
        self._advance()
        key = str(token.value)
        if token.type is TokenType.NAME and not self._match(TokenType.COLON):
            # Shorthand: {title} → {title: title}
            return key, Name(col_offset=token.col_offset, name=key)
        self._expect(TokenType.COLON, suggestion="Object syntax: {key: value}")
        return key, self._parse_expression()

    def _parse_sequence(self, closer: TokenType, parse_item: Callable[[], Any]) -> list[Any]:
        items: list[Any] = []
        while not self._match(closer):
            items.append(parse_item())
            if self._match(TokenType.COMMA):
                self._advance()
                continue
            if not self._match(closer):
                raise self._error(
                    f"Expected ',' or '{closer.value}', got {self._describe(self._current)}"
                )
        self._advance()
        return items


def parse_expression(source: str) -> Program:
    """Parse marker expression text into a `Program`.

    Raises:
        ParseError: If the text does not match the grammar
    """
    return Parser(source).parse()
