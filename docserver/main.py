"""
docserver - FastAPI Application Entry Point
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from docserver import __version__
from docserver.api import docs, status
from docserver.engine.driver import UpdateDriver
from docserver.engine.registry import ProjectRegistry
from docserver.models.config import DocServerConfig


logger = logging.getLogger(__name__)


async def _run_updates(app: FastAPI, driver: UpdateDriver) -> None:
    app.state.update_report = await driver.run(app.state.registry)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the update run in the background, cancel it on shutdown"""
    config: DocServerConfig = app.state.config
    if config.update_on_start:
        logger.info("Updating and building projects...")
        app.state.update_task = asyncio.create_task(_run_updates(app, app.state.driver))

    yield

    task = app.state.update_task
    if task is not None and not task.done():
        logger.info("Cancelling unfinished project updates")
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


def create_app(
    config: DocServerConfig,
    registry: ProjectRegistry | None = None,
    driver: UpdateDriver | None = None,
) -> FastAPI:
    """
    Build the application for a loaded configuration.

    Args:
        config: Validated configuration
        registry: Prebuilt registry (built from config when None)
        driver: Update driver used when update_on_start is set

    Raises:
        ConfigError: If the project registry cannot be built
    """
    if registry is None:
        registry = ProjectRegistry.from_config(config)
    if driver is None:
        driver = UpdateDriver(config.libs_path, config.update)

    app = FastAPI(
        title="docserver",
        description="Serves generated documentation for configured projects",
        version=__version__,
        lifespan=lifespan,
        # Keep the root namespace free for project slugs
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )
    app.state.config = config
    app.state.registry = registry
    app.state.driver = driver
    app.state.update_task = None
    app.state.update_report = None

    app.include_router(status.router, prefix="/api", tags=["status"])
    app.include_router(docs.router, tags=["docs"])
    docs.mount_projects(app, registry, redirect_missing=config.redirect_missing_to_index)

    return app


def get_app() -> FastAPI:
    """App factory for `uvicorn docserver.main:get_app --factory`"""
    from docserver.config import load_config

    return create_app(load_config())
