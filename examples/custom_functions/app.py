"""Custom functions -- extending the marker allow-list.

Markers may only call registered functions. Register domain helpers on the
Environment through ``env.functions`` (or the ``functions=`` argument) and
call them by bare name. Views come from a DictLoader and the scheme is
registered inline, so the example needs no files on disk.

Run:
    python app.py
"""

from easyviewer import DictLoader, Environment


def money(amount: float, currency: str = "$") -> str:
    """Format amount as currency."""
    return f"{currency}{amount:,.2f}"


def pluralize(n: int, singular: str, plural: str) -> str:
    """Return singular or plural form based on count."""
    return singular if n == 1 else plural


env = Environment(
    config={"default_scheme": "shop"},
    loader=DictLoader(
        {
            "cart.html": (
                "<p>{{ items.length }} {{ pluralize(items.length, 'item', 'items') }}</p>"
                "<p>Total: {{ money(total) }}</p>"
            ),
        }
    ),
    functions={"money": money},
)
env.functions["pluralize"] = pluralize
env.schemes.set("shop", "shop.html", "<section>{{ app.content }}</section>")

single = env.render("cart", {"items": ["book"], "total": 12.5})
several = env.render("cart", {"items": ["book", "pen", "lamp"], "total": 1234})

# Python methods are not callable from markers; only registered functions are.
blocked = env.render_string("{{ money.__call__(1) }}")


def main() -> None:
    print(single.body)
    print(several.body)
    for error in blocked[1]:
        print(error.format_compact())


if __name__ == "__main__":
    main()
