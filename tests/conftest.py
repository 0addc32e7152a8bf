"""Pytest configuration and fixtures for easyviewer tests."""

from pathlib import Path

import pytest

from easyviewer import ConfigStore, DictLoader, Environment, SchemeRegistry


@pytest.fixture
def env():
    """Create a basic Environment with no schemes and no views."""
    return Environment()


@pytest.fixture
def env_with_loader():
    """Create an Environment whose includes come from a DictLoader."""
    loader = DictLoader(
        {
            "nav.html": "<nav>{{ title }}</nav>",
            "header.html": '<header>{{ include("nav") }}</header>',
            "declare.html": '{{ let section = "docs" }}',
            "partial.html": "<p>Partial content</p>",
        }
    )
    return Environment(loader=loader)


def write_files(base: Path, files: dict[str, str]) -> Path:
    """Write ``{relative path: text}`` under base and return base."""
    for name, text in files.items():
        path = base / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8", newline="")
    return base


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """A small site: two schemes, a few views and a scripts directory."""
    return write_files(
        tmp_path,
        {
            "schemes/app.html": (
                "<html>\n"
                "  <head><title>{{ title }}</title>{{ app.scripts }}</head>\n"
                "  <body>{{ app.content }}</body>\n"
                "</html>\n"
            ),
            "schemes/bare.html": "{{ app.content }}",
            "schemes/empty.html": "",
            "views/index.html": "<h1>{{ title }}</h1>\n<p>{{ file_name }}</p>",
            "views/greeting.html": "{{ let greeting = 'Hello, ' + name }}<p>{{ greeting }}</p>",
            "views/nav.html": "<nav>{{ title }}</nav>",
            "views/with_nav.html": '{{ include("nav") }}<main>{{ title }}</main>',
            "views/broken.html": "<p>{{ missing.prop }}</p><p>ok</p>",
            "scripts/b.js": "",
            "scripts/a.js": "",
            "scripts/style.css": "",
        },
    )


@pytest.fixture
def site(site_dir: Path) -> Environment:
    """Environment configured over ``site_dir``, default scheme ``app``."""
    config = ConfigStore.from_mapping(
        {
            "views": site_dir / "views",
            "scripts": site_dir / "scripts",
            "default_scheme": "app",
        }
    )
    schemes = SchemeRegistry()
    schemes.load(site_dir / "schemes")
    return Environment(config=config, schemes=schemes)


def render_text(env: Environment, markup: str, **data) -> str:
    """Render ad-hoc markup and assert that no marker failed."""
    text, errors = env.render_string(markup, data)
    assert not errors, [error.format_compact() for error in errors]
    return text
