"""Starlette integration -- serving rendered views over HTTP.

``ViewRenderer`` turns each RenderResult into a response: resolved markup
becomes a 200 ``text/html`` response, a missing scheme a 404 JSON body and
a failed marker a 500 JSON body.

Requires: pip install easyviewer[web] uvicorn

Run:
    uvicorn app:app --reload
"""

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from easyviewer import DictLoader, Environment
from easyviewer.integrations.starlette import ViewRenderer

env = Environment(
    config={"default_scheme": "main"},
    loader=DictLoader(
        {
            "dashboard.html": (
                "<h1>{{ title }}</h1>"
                "<ul>{{ include('stat') }}</ul>"
                "<p>{{ stats.length }} metrics</p>"
            ),
            "stat.html": "<li>{{ stats.join('</li><li>') }}</li>",
            "crash.html": "<p>{{ missing.value }}</p>",
        }
    ),
)
env.schemes.set("main", "main.html", "<html><body>{{ app.content }}</body></html>")

views = ViewRenderer(env)

STATS = ["Revenue: $1.2M", "Users: 45K", "Orders: 8.9K"]


async def dashboard(request: Request) -> Response:
    return views.render("dashboard", {"title": "Dashboard", "stats": STATS})


async def crash(request: Request) -> Response:
    return views.render("crash")


async def themed(request: Request) -> Response:
    return views.render(
        "dashboard",
        {"title": "Dashboard", "stats": STATS},
        scheme=request.path_params["scheme"],
    )


app = Starlette(
    routes=[
        Route("/", dashboard),
        Route("/crash", crash),
        Route("/themed/{scheme}", themed),
    ]
)
