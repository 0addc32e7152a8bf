from __future__ import annotations

import pytest

from easyviewer import DictLoader, Environment

VIEWS = {
    "minimal.html": "<p>{{ name }}</p>",
    "small.html": (
        "{{ let heading = title.toUpperCase() }}\n"
        "<h1>{{ heading }}</h1>\n"
        "<p>{{ user.name }} has {{ user.items.length }} items</p>\n"
        "<p>{{ user.items.join(', ') }}</p>\n"
    ),
    "nav.html": "<nav>{{ links.join(' | ') }}</nav>",
    "footer.html": "<footer>{{ site_name }} {{ year }}</footer>",
    "nested.html": (
        '{{ include("nav") }}\n'
        "<main>{{ title }}</main>\n"
        '{{ include("footer") }}\n'
    ),
}

SCHEME = (
    "<html>\n"
    "  <head><title>{{ title + ' | ' + site_name }}</title>{{ app.scripts }}</head>\n"
    "  <body>{{ app.content }}</body>\n"
    "</html>\n"
)


@pytest.fixture(scope="session")
def viewer_env() -> Environment:
    env = Environment(config={"default_scheme": "app"}, loader=DictLoader(VIEWS))
    env.schemes.set("app", "app.html", SCHEME)
    return env


@pytest.fixture(scope="session")
def small_context() -> dict[str, object]:
    return {
        "title": "Dashboard",
        "site_name": "Bench",
        "user": {"name": "Ada", "items": ["a", "b", "c", "d", "e"]},
    }


@pytest.fixture(scope="session")
def nested_context() -> dict[str, object]:
    return {
        "title": "Nested",
        "site_name": "Bench",
        "year": 2026,
        "links": [f"link-{i}" for i in range(10)],
    }


@pytest.fixture(scope="session")
def large_markup() -> str:
    return "".join(f"<li>{{{{ item_{i} }}}}</li>\n" for i in range(500))


@pytest.fixture(scope="session")
def large_context() -> dict[str, object]:
    return {f"item_{i}": i for i in range(500)}
