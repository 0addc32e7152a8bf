"""Tests for the marker expression tokenizer."""

import pytest

from easyviewer._types import TokenType
from easyviewer.environment.exceptions import ExpressionSyntaxError
from easyviewer.lexer import Lexer, tokenize


def _types(text: str) -> list[TokenType]:
    return [token.type for token in tokenize(text)]


def _values(text: str) -> list:
    return [token.value for token in tokenize(text)][:-1]


class TestTokenize:
    def test_ends_with_eof(self):
        assert _types("") == [TokenType.EOF]
        assert _types("a")[-1] is TokenType.EOF

    def test_names(self):
        assert _values("title _private $dollar a1") == ["title", "_private", "$dollar", "a1"]

    def test_integers_and_floats(self):
        tokens = tokenize("42 3.5 .5 1e3")
        assert [t.value for t in tokens[:-1]] == [42, 3.5, 0.5, 1000.0]
        assert isinstance(tokens[0].value, int)
        assert isinstance(tokens[3].value, float)

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("'single'", "single"),
            ('"double"', "double"),
            (r"'it\'s'", "it's"),
            (r'"line\nbreak"', "line\nbreak"),
            (r'"\u0041BC"', "ABC"),
            (r'"back\\slash"', "back\\slash"),
        ],
    )
    def test_strings(self, source, expected):
        (token, _eof) = tokenize(source)
        assert token.type is TokenType.STRING
        assert token.value == expected

    def test_longest_operator_wins(self):
        assert _values("a === b !== c == d") == ["a", "===", "b", "!==", "c", "==", "d"]

    def test_logical_operators(self):
        assert _values("a && b || c ?? d") == ["a", "&&", "b", "||", "c", "??", "d"]

    def test_optional_chaining(self):
        assert _types("a?.b") == [
            TokenType.NAME,
            TokenType.OPTIONAL_DOT,
            TokenType.NAME,
            TokenType.EOF,
        ]

    def test_question_before_decimal_is_ternary(self):
        assert _types("x ?.5 : 1") == [
            TokenType.NAME,
            TokenType.QUESTION,
            TokenType.NUMBER,
            TokenType.COLON,
            TokenType.NUMBER,
            TokenType.EOF,
        ]

    def test_punctuation(self):
        assert _types("f(a, [b], {c: d});") == [
            TokenType.NAME,
            TokenType.LPAREN,
            TokenType.NAME,
            TokenType.COMMA,
            TokenType.LBRACKET,
            TokenType.NAME,
            TokenType.RBRACKET,
            TokenType.COMMA,
            TokenType.LBRACE,
            TokenType.NAME,
            TokenType.COLON,
            TokenType.NAME,
            TokenType.RBRACE,
            TokenType.RPAREN,
            TokenType.SEMICOLON,
            TokenType.EOF,
        ]

    def test_assign_is_not_equality(self):
        assert _types("x = 1")[1] is TokenType.ASSIGN

    def test_col_offsets(self):
        tokens = tokenize("ab + cd")
        assert [t.col_offset for t in tokens[:-1]] == [0, 3, 5]

    def test_lexer_class_matches_function(self):
        assert Lexer("a + 1").tokenize() == tokenize("a + 1")


class TestLexerErrors:
    def test_unexpected_character(self):
        with pytest.raises(ExpressionSyntaxError, match="Unexpected character '@'") as exc_info:
            tokenize("a @ b")
        assert exc_info.value.col_offset == 2

    def test_unterminated_string(self):
        with pytest.raises(ExpressionSyntaxError, match="Unterminated string") as exc_info:
            tokenize("'open")
        assert exc_info.value.suggestion == "Close the string with '"

    def test_invalid_unicode_escape(self):
        with pytest.raises(ExpressionSyntaxError, match="Invalid unicode escape"):
            tokenize(r'"\uZZZZ"')
