"""
Documentation routes - Project index page and per-project static mounts
"""

import html
import os

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException
from starlette.responses import Response
from starlette.types import Scope

from docserver.engine.registry import ProjectRegistry

router = APIRouter()

INDEX_FILE = "index.html"

INDEX_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <title>Documentation Server</title>
    <style>
        body {{ font-family: sans-serif; max-width: 800px; margin: 2em auto; }}
        h1 {{ text-align: center; }}
        ul {{ list-style: none; padding: 0; }}
        li {{ margin: 0.5em 0; padding: 0.5em; background: #f5f5f5; border-radius: 4px; }}
        a {{ text-decoration: none; color: #0366d6; font-weight: 500; }}
    </style>
</head>
<body>
    <h1>Documentation Server</h1>
    <ul>{items}</ul>
</body>
</html>
"""


def render_index(registry: ProjectRegistry) -> str:
    """HTML page linking to every registered project"""
    items = "\n".join(
        f'<li><a href="/{html.escape(slug)}/">{html.escape(project.config.path)}</a></li>'
        for slug, project in registry.items()
    )
    return INDEX_TEMPLATE.format(items=items)


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """List all projects"""
    return HTMLResponse(render_index(request.app.state.registry))


class DocsStaticFiles(StaticFiles):
    """
    Static files for one project's generated docs.

    The docs directory may not exist yet (nothing built); requests then get
    404 instead of a server error. With `fallback_url` set, missing files
    redirect there instead of returning 404.
    """

    def __init__(self, directory: os.PathLike | str, fallback_url: str | None = None):
        super().__init__(directory=directory, html=True, check_dir=False)
        self.fallback_url = fallback_url

    async def check_config(self) -> None:
        if self.directory is not None and not os.path.isdir(self.directory):
            return
        await super().check_config()

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except HTTPException as e:
            # The project root itself is missing: redirecting would loop
            if e.status_code != 404 or self.fallback_url is None or path in ("", "."):
                raise
            return RedirectResponse(self.fallback_url, status_code=302)


def _redirect_to(url: str):
    async def redirect() -> RedirectResponse:
        return RedirectResponse(url, status_code=302)

    return redirect


def mount_projects(app: FastAPI, registry: ProjectRegistry, redirect_missing: bool = False) -> None:
    """
    Add a redirect `/{slug}` -> `/{slug}/` and a static mount at `/{slug}/`
    for every project.
    """
    for slug, project in registry.items():
        root_url = f"/{slug}/"

        app.add_api_route(
            f"/{slug}",
            _redirect_to(root_url),
            methods=["GET", "HEAD"],
            include_in_schema=False,
            name=f"{slug}-redirect",
        )
        app.mount(
            f"/{slug}",
            DocsStaticFiles(
                project.docs_path,
                fallback_url=root_url if redirect_missing else None,
            ),
            name=slug,
        )
