"""
Update driver - Synchronize and build every registered project

Each project is synchronized and then built, and the build runs even if
synchronization failed. Errors are caught per project and recorded in a
ProjectResult, so one broken project never stops the others.

Projects run as asyncio tasks gated by a semaphore of `max_workers`. With
the default of one worker they run strictly one after another in registry
order.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable

from docserver.engine.dispatcher import build_docs
from docserver.engine.registry import ProjectRegistry, project_dir
from docserver.engine.synchronizer import update_project
from docserver.errors import BuildFailedError, CommandTimeoutError, DocServerError
from docserver.models.config import ProjectConfig, UpdateSettings
from docserver.models.project import Project
from docserver.models.result import (
    BatchReport,
    BuildOutcome,
    ProjectResult,
    ProjectStatus,
    StepResult,
    StepStatus,
    SyncOutcome,
)


logger = logging.getLogger(__name__)

SyncFn = Callable[..., Awaitable[SyncOutcome]]
BuildFn = Callable[..., Awaitable[BuildOutcome]]


class UpdateDriver:
    """Runs the synchronize-then-build pipeline over a project registry"""

    def __init__(
        self,
        libs_path: Path,
        settings: UpdateSettings | None = None,
        sync_fn: SyncFn = update_project,
        build_fn: BuildFn = build_docs,
    ):
        self.libs_path = Path(libs_path)
        self.settings = settings or UpdateSettings()
        self.sync_fn = sync_fn
        self.build_fn = build_fn

    async def run(
        self,
        registry: ProjectRegistry,
        only: Iterable[str] | None = None,
    ) -> BatchReport:
        """
        Update and build projects.

        Args:
            registry: Projects to process
            only: Restrict the run to these slugs (all projects when None)

        Returns:
            BatchReport with one result per processed project, in registry order
        """
        selected = set(only) if only is not None else None
        projects = [p for slug, p in registry.items() if selected is None or slug in selected]

        report = BatchReport(started_at=datetime.now())
        logger.info(
            f"Updating and building {len(projects)} project(s) "
            f"with {self.settings.max_workers} worker(s)..."
        )

        semaphore = asyncio.Semaphore(self.settings.max_workers)

        async def guarded(project: Project) -> ProjectResult:
            async with semaphore:
                return await self.process_project(project)

        report.results = list(await asyncio.gather(*(guarded(p) for p in projects)))
        report.finished_at = datetime.now()

        logger.info(
            f"Update finished: {report.succeeded} succeeded, "
            f"{report.failed} failed, {report.skipped} skipped"
        )
        return report

    async def process_project(self, project: Project) -> ProjectResult:
        """Synchronize then build a single project, never raising for its failures"""
        path_str = project.config.path
        repo_url = project.config.repo

        if not repo_url:
            logger.warning(f"Skipping {path_str} (no repo URL)")
            return ProjectResult(
                slug=project.url_path,
                path=path_str,
                status=ProjectStatus.SKIPPED,
                reason="no repo URL configured",
            )

        started = time.monotonic()

        logger.info(f"Updating {path_str} from {repo_url}")
        sync = await self._sync_step(project.config, repo_url)

        logger.info(f"Building docs for {path_str}")
        build = await self._build_step(project.config)

        failed = not (sync.ok and build.ok)
        return ProjectResult(
            slug=project.url_path,
            path=path_str,
            status=ProjectStatus.FAILED if failed else ProjectStatus.SUCCESS,
            sync=sync,
            build=build,
            duration_seconds=time.monotonic() - started,
        )

    async def _sync_step(self, config: ProjectConfig, repo_url: str) -> StepResult:
        try:
            outcome = await self.sync_fn(
                project_dir(config, self.libs_path),
                repo_url,
                branches=self.settings.branches,
                timeout=self.settings.git_timeout,
            )
        except CommandTimeoutError as e:
            logger.error(f"Timed out updating {config.path}: {e}")
            return StepResult(status=StepStatus.TIMEOUT, error=str(e))
        except DocServerError as e:
            logger.error(f"Failed to update {config.path}: {e}")
            return StepResult(status=StepStatus.FAILED, error=str(e))
        except Exception as e:
            logger.exception(f"Failed to update {config.path}: {e}")
            return StepResult(status=StepStatus.FAILED, error=str(e))

        return StepResult(
            status=StepStatus.OK,
            sync_action=outcome.action,
            commit=outcome.commit,
        )

    async def _build_step(self, config: ProjectConfig) -> StepResult:
        try:
            outcome = await self.build_fn(
                config,
                self.libs_path,
                timeout=self.settings.build_timeout,
            )
        except CommandTimeoutError as e:
            logger.error(f"Timed out building {config.path}: {e}")
            return StepResult(status=StepStatus.TIMEOUT, error=str(e))
        except BuildFailedError as e:
            logger.error(f"Failed to build {config.path}: {e}")
            return StepResult(status=StepStatus.FAILED, error=str(e), exit_code=e.returncode)
        except DocServerError as e:
            logger.error(f"Failed to build {config.path}: {e}")
            return StepResult(status=StepStatus.FAILED, error=str(e))
        except Exception as e:
            logger.exception(f"Failed to build {config.path}: {e}")
            return StepResult(status=StepStatus.FAILED, error=str(e))

        if not outcome.ran:
            return StepResult(status=StepStatus.SKIPPED)
        return StepResult(status=StepStatus.OK, exit_code=outcome.exit_code)


async def update_all(
    registry: ProjectRegistry,
    settings: UpdateSettings | None = None,
    only: Iterable[str] | None = None,
) -> BatchReport:
    """Convenience wrapper running a default UpdateDriver over the registry"""
    driver = UpdateDriver(registry.libs_path, settings)
    return await driver.run(registry, only=only)
