"""Tests for the file-based site example."""

import logging


class TestWebsiteApp:
    """Verify schemes, page views, includes and scripts from disk."""

    def test_home_renders(self, example_app) -> None:
        assert example_app.home.status == 200
        assert example_app.home.content_type == "text/html"

    def test_home_has_title(self, example_app) -> None:
        assert "<title>Welcome | My Site</title>" in example_app.home.body

    def test_home_has_content(self, example_app) -> None:
        body = example_app.home.body
        assert "<h1>Welcome, Ada</h1>" in body
        assert "<p>You have 2 new notifications.</p>" in body

    def test_scripts_sorted_by_name(self, example_app) -> None:
        body = example_app.home.body
        analytics = body.index('<script src="/javascript/analytics.js"></script>')
        main = body.index('<script src="/javascript/main.js"></script>')
        assert analytics < main

    def test_about_includes_team(self, example_app) -> None:
        body = example_app.about.body
        assert "<h1>ABOUT</h1>" in body
        assert "<li>Ada, Grace, Linus</li>" in body

    def test_nav_included_in_both(self, example_app) -> None:
        for result in [example_app.home, example_app.about]:
            assert '<a href="/about">About</a>' in result.body

    def test_newlines_removed(self, example_app) -> None:
        assert "\n" not in example_app.home.body

    def test_print_scheme_has_no_nav(self, example_app) -> None:
        assert example_app.printable.ok
        assert "<nav>" not in example_app.printable.body
        assert "<h1>ABOUT</h1>" in example_app.printable.body

    def test_missing_scheme(self, example_app) -> None:
        assert example_app.missing_scheme.json() == {
            "status": 404,
            "message": "Html scheme not found.",
        }

    def test_broken_page_reports_error(self, example_app) -> None:
        broken = example_app.broken
        assert broken.status == 500
        assert broken.body == "Internal Server Error."
        assert any(error.expression.startswith("let greeting") for error in broken.errors)

    def test_paths_relative_to_example_dir(self, example_app) -> None:
        assert example_app.env.schemes.get("app").file_path == "schemes/app.html"
        assert example_app.env.config.views == "./views"

    def test_broken_page_errors_logged(self, example_app, caplog) -> None:
        logged = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert logged
        assert any("'user' is not defined" in r.getMessage() for r in logged)
