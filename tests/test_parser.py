"""Tests for the marker expression parser."""

import pytest

from easyviewer.environment.exceptions import ExpressionSyntaxError
from easyviewer.nodes import (
    Assign,
    BinOp,
    BoolOp,
    Compare,
    CondExpr,
    Const,
    Declare,
    Dict,
    FuncCall,
    Getattr,
    Getitem,
    List,
    Name,
    NullCoalesce,
    OptionalGetattr,
    Program,
    UnaryOp,
)
from easyviewer.parser import DECLARATION_KEYWORDS, ParseError, Parser, parse_expression
from easyviewer.template.helpers import UNDEFINED


def _expr(source: str):
    program = parse_expression(source)
    assert len(program.body) == 1
    return program.body[0]


class TestLiterals:
    @pytest.mark.parametrize(
        ("source", "value"),
        [
            ("42", 42),
            ("2.5", 2.5),
            ("'text'", "text"),
            ("true", True),
            ("false", False),
            ("null", None),
        ],
    )
    def test_constants(self, source, value):
        node = _expr(source)
        assert isinstance(node, Const)
        assert node.value == value

    def test_undefined_constant(self):
        assert _expr("undefined").value is UNDEFINED

    def test_list_literal(self):
        node = _expr("[1, 'a', x]")
        assert isinstance(node, List)
        assert [type(item) for item in node.items] == [Const, Const, Name]

    def test_trailing_comma(self):
        assert len(_expr("[1, 2,]").items) == 2

    def test_object_literal(self):
        node = _expr("{title: 'Home', 'data-id': 3, 7: true}")
        assert isinstance(node, Dict)
        assert list(node.keys) == ["title", "data-id", "7"]

    def test_object_shorthand(self):
        node = _expr("{title}")
        assert list(node.keys) == ["title"]
        assert isinstance(node.values[0], Name)
        assert node.values[0].name == "title"


class TestPrecedence:
    def test_multiplication_binds_tighter(self):
        node = _expr("1 + 2 * 3")
        assert isinstance(node, BinOp) and node.op == "+"
        assert isinstance(node.right, BinOp) and node.right.op == "*"

    def test_left_associative(self):
        node = _expr("10 - 4 - 3")
        assert node.op == "-"
        assert isinstance(node.left, BinOp)
        assert node.right.value == 3

    def test_parentheses(self):
        node = _expr("(1 + 2) * 3")
        assert node.op == "*"
        assert isinstance(node.left, BinOp) and node.left.op == "+"

    def test_comparison_below_arithmetic(self):
        node = _expr("a + 1 < b * 2")
        assert isinstance(node, Compare) and node.op == "<"

    def test_and_chain_is_flattened(self):
        node = _expr("a && b && c")
        assert isinstance(node, BoolOp)
        assert node.op == "and"
        assert len(node.values) == 3

    def test_or_binds_looser_than_and(self):
        node = _expr("a || b && c")
        assert node.op == "or"
        assert isinstance(node.values[1], BoolOp) and node.values[1].op == "and"

    def test_null_coalesce(self):
        node = _expr("a ?? 'fallback'")
        assert isinstance(node, NullCoalesce)

    def test_ternary(self):
        node = _expr("ok ? 'yes' : 'no'")
        assert isinstance(node, CondExpr)
        assert node.if_true.value == "yes"
        assert node.if_false.value == "no"

    def test_nested_ternary_is_right_associative(self):
        node = _expr("a ? 1 : b ? 2 : 3")
        assert isinstance(node.if_false, CondExpr)

    def test_unary(self):
        node = _expr("!-x")
        assert isinstance(node, UnaryOp) and node.op == "!"
        assert isinstance(node.operand, UnaryOp) and node.operand.op == "-"


class TestPostfix:
    def test_member_chain(self):
        node = _expr("user.profile.name")
        assert isinstance(node, Getattr) and node.attr == "name"
        assert isinstance(node.obj, Getattr) and node.obj.attr == "profile"

    def test_optional_member(self):
        node = _expr("user?.name")
        assert isinstance(node, OptionalGetattr)

    def test_keyword_as_property_name(self):
        assert _expr("obj.default").attr == "default"

    def test_subscript(self):
        node = _expr("items[0]")
        assert isinstance(node, Getitem)
        assert node.key.value == 0

    def test_call_with_args(self):
        node = _expr("join(tags, ', ')")
        assert isinstance(node, FuncCall)
        assert node.func.name == "join"
        assert len(node.args) == 2

    def test_method_call(self):
        node = _expr("title.toUpperCase()")
        assert isinstance(node, FuncCall)
        assert isinstance(node.func, Getattr)
        assert node.args == ()


class TestStatements:
    @pytest.mark.parametrize("keyword", sorted(DECLARATION_KEYWORDS))
    def test_declarations(self, keyword):
        node = _expr(f"{keyword} total = 1 + 2")
        assert isinstance(node, Declare)
        assert node.keyword == keyword
        assert node.name == "total"
        assert isinstance(node.value, BinOp)

    def test_bare_assignment(self):
        node = _expr("count = 3")
        assert isinstance(node, Assign)
        assert node.name == "count"

    def test_statement_sequence(self):
        program = parse_expression("let a = 1; let b = 2; a + b")
        assert isinstance(program, Program)
        assert [type(stmt) for stmt in program.body] == [Declare, Declare, BinOp]

    def test_trailing_semicolon(self):
        assert len(parse_expression("let a = 1;").body) == 1

    def test_parser_class(self):
        assert Parser("a").parse() == parse_expression("a")


class TestParseErrors:
    def test_empty_expression(self):
        with pytest.raises(ParseError, match="Empty expression") as exc_info:
            parse_expression("")
        assert exc_info.value.at_end

    def test_parse_error_is_syntax_error(self):
        with pytest.raises(ExpressionSyntaxError):
            parse_expression("1 +")

    def test_unclosed_parenthesis(self):
        with pytest.raises(ParseError, match="Expected '\\)'"):
            parse_expression("(1 + 2")

    def test_missing_separator(self):
        with pytest.raises(ParseError, match="Unexpected") as exc_info:
            parse_expression("a b")
        assert exc_info.value.suggestion == "Separate statements with ';'"
        assert exc_info.value.col_offset == 2

    def test_declaration_needs_name(self):
        with pytest.raises(ParseError, match="Expected a variable name after 'let'"):
            parse_expression("let = 3")

    def test_keyword_mid_expression(self):
        with pytest.raises(ParseError, match="only allowed at the start"):
            parse_expression("1 + let")

    def test_only_names_assignable(self):
        with pytest.raises(ParseError, match="Only bare names can be assigned"):
            parse_expression("a.b = 1")

    def test_reserved_word_not_assignable(self):
        with pytest.raises(ParseError):
            parse_expression("true = 1")

    def test_compact_format_has_caret(self):
        with pytest.raises(ParseError) as exc_info:
            parse_expression("a b")
        assert "^" in exc_info.value.format_compact()
        assert "E-PAR-001" in exc_info.value.format_compact()
