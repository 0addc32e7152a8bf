"""Tests for the custom functions example."""


class TestCustomFunctionsApp:
    """Verify registered functions are callable from markers."""

    def test_single_item(self, example_app) -> None:
        assert example_app.single.body == (
            "<section><p>1 item</p><p>Total: $12.50</p></section>"
        )

    def test_several_items(self, example_app) -> None:
        assert "<p>3 items</p>" in example_app.several.body
        assert "$1,234.00" in example_app.several.body

    def test_both_registration_styles(self, example_app) -> None:
        assert "money" in example_app.env.functions
        assert "pluralize" in example_app.env.functions

    def test_private_member_blocked(self, example_app) -> None:
        text, errors = example_app.blocked
        assert text == ""
        assert "private member" in str(errors[0].cause)
