"""
Status API endpoints - Registered projects and update results as JSON
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from docserver import __version__
from docserver.models.config import BuildSystem

router = APIRouter()


class ProjectInfo(BaseModel):
    """A registered project as reported by /api/projects"""

    slug: str
    path: str
    build_system: BuildSystem
    repo: str | None = None
    docs_path: str
    docs_available: bool


@router.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "ok", "name": "docserver", "version": __version__}


@router.get("/projects")
async def list_projects(request: Request):
    """List registered projects and whether their docs have been built"""
    registry = request.app.state.registry
    projects = [
        ProjectInfo(
            slug=slug,
            path=project.config.path,
            build_system=project.config.build_system,
            repo=project.config.repo,
            docs_path=str(project.docs_path),
            docs_available=project.docs_path.is_dir(),
        )
        for slug, project in registry.items()
    ]
    return {"projects": projects}


@router.get("/updates")
async def update_status(request: Request):
    """Result of the most recent update-and-build run"""
    task = getattr(request.app.state, "update_task", None)
    if task is not None and not task.done():
        return {"status": "running"}

    report = getattr(request.app.state, "update_report", None)
    if report is None:
        return {"status": "never_run"}

    return {"status": "finished", "report": report}
