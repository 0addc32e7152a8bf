"""A file-based site -- the most common real-world pattern.

Schemes (page layouts) live in ``schemes/``, page views and includes in
``views/`` and client scripts in ``javascript/``. Each page view is placed
into the scheme through ``{{ app.content }}`` and the scripts through
``{{ app.scripts }}``.

Run:
    python app.py
"""

from easyviewer import Environment

env = Environment(
    config={
        "views": "./views",
        "scripts": "./javascript",
        "default_scheme": "app",
    }
)
env.schemes.load("./schemes")

shared = {"site_name": "My Site"}

home = env.render(
    "home",
    {
        **shared,
        "title": "Welcome",
        "message": "Rendered by easyviewer.",
        "user": {"name": "Ada", "notifications": ["build passed", "new comment"]},
    },
)

about = env.render(
    "about",
    {
        **shared,
        "title": "About",
        "description": "A small team building small tools.",
        "team": ["Ada", "Grace", "Linus"],
    },
)

printable = env.render("about", {"title": "About", "description": "", "team": []}, "print")

missing_scheme = env.render("home", shared, "does-not-exist")

broken = env.render("home", {**shared, "title": "Broken"})


def main() -> None:
    for label, result in [("Home", home), ("About", about), ("Print", printable)]:
        print(f"=== {label} ({result.status}) ===")
        print(result.body)
        print()
    print("=== Missing scheme ===")
    print(missing_scheme.json())
    print()
    print("=== Broken page ===")
    print(broken.json())
    for error in broken.errors:
        print(error.format_compact())


if __name__ == "__main__":
    main()
