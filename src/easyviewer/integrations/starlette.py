"""Starlette responses for render results.

Example:
    ```python
    from starlette.applications import Starlette
    from starlette.routing import Route

    from easyviewer import Environment
    from easyviewer.integrations.starlette import ViewRenderer

    env = Environment(config={"views": "views", "default_scheme": "app"})
    env.schemes.load("schemes")
    views = ViewRenderer(env)

    async def index(request):
        return views.render("index", {"title": "Home"})

    app = Starlette(routes=[Route("/", index)])
    ```

Rendering is synchronous; inside an async endpoint it runs inline, the
same way Starlette renders its own templates.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from starlette.responses import HTMLResponse, JSONResponse, Response

if TYPE_CHECKING:
    from easyviewer.environment.core import Environment, RenderResult


def to_response(result: RenderResult) -> Response:
    """Convert a RenderResult into an HTMLResponse or a JSONResponse.

    Success becomes a 200 ``text/html`` response with the resolved markup.
    Scheme-not-found and evaluation-failed become JSON bodies of the form
    ``{"status": ..., "message": ...}`` with the matching status code.
    """
    if result.ok:
        return HTMLResponse(result.body, status_code=result.status)
    return JSONResponse(result.json(), status_code=result.status)


class ViewRenderer:
    """Render views straight to Starlette responses.

    Args:
        env: The Environment holding schemes, config and functions
    """

    __slots__ = ("_env",)

    def __init__(self, env: Environment):
        self._env = env

    @property
    def env(self) -> Environment:
        return self._env

    def render(
        self,
        view_name: str,
        data: Mapping[str, Any] | None = None,
        scheme: Any = None,
    ) -> Response:
        return to_response(self._env.render(view_name, data, scheme))
