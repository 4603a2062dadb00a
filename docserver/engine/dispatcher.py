"""
Build dispatcher - Run a project's documentation build tool
"""

from __future__ import annotations

import logging
from pathlib import Path

from docserver.engine.process import run_command
from docserver.engine.registry import DOCS_SUBDIRS, project_dir
from docserver.engine.sanitize import sanitize_path
from docserver.engine.zig import find_root_file
from docserver.errors import BuildError, BuildFailedError, BuildSpawnError
from docserver.models.config import BuildSystem, ProjectConfig
from docserver.models.result import BuildOutcome


logger = logging.getLogger(__name__)

GRADLE_TASKS = ["clean", "javadoc"]


def build_command_for(config: ProjectConfig, project_path: Path) -> list[str] | None:
    """
    Work out the command line for a project's build system.

    Returns:
        argv to run in the project directory, or None if there is nothing to
        run (a custom project without a command)

    Raises:
        BuildError: If a Zig project has no root source file
    """
    if config.build_system == BuildSystem.GRADLE:
        gradlew = project_path / "gradlew"
        if gradlew.exists():
            return [str(gradlew), *GRADLE_TASKS]
        return ["gradle", *GRADLE_TASKS]

    if config.build_system == BuildSystem.CARGO:
        return ["cargo", "doc"]

    if config.build_system == BuildSystem.ZIG:
        root_file = find_root_file(project_path)
        if root_file is None:
            raise BuildError(f"No .zig root file found under {project_path / 'src'}")
        return [
            "zig",
            "build-lib",
            f"-femit-docs={DOCS_SUBDIRS[BuildSystem.ZIG].as_posix()}",
            "-fno-emit-bin",
            str(root_file.relative_to(project_path)),
        ]

    # BuildSystem.CUSTOM: plain whitespace split, no shell quoting
    parts = (config.build_command or "").split()
    return parts or None


async def build_docs(
    config: ProjectConfig,
    libs_path: Path,
    timeout: float | None = None,
) -> BuildOutcome:
    """
    Build a project's documentation and wait for the build to finish.

    Args:
        config: The project entry
        libs_path: Shared root the project path is relative to
        timeout: Seconds before the build is killed (None waits forever)

    Returns:
        BuildOutcome; `argv` is None when nothing needed to run

    Raises:
        BuildSpawnError: If the project directory or the program is missing
        BuildFailedError: If the build exited with a non-zero status
        BuildError: If the build command cannot be determined
        CommandTimeoutError: If the build ran past the timeout
    """
    project_path = project_dir(config, libs_path)
    if config.build_system == BuildSystem.CUSTOM and not (config.build_command or "").split():
        logger.info(f"No build command configured for {config.path}, skipping build")
        return BuildOutcome()

    if not project_path.is_dir():
        raise BuildSpawnError(f"Project directory {project_path} does not exist")

    argv = build_command_for(config, project_path)
    if argv is None:
        return BuildOutcome()

    build_log = logging.getLogger(f"{__name__}.{sanitize_path(config.path)}")
    try:
        result = await run_command(
            argv,
            project_path,
            timeout=timeout,
            on_line=build_log.debug,
        )
    except OSError as e:
        raise BuildSpawnError(f"Cannot run '{argv[0]}' in {project_path}: {e}") from e

    if not result.ok:
        if result.stdout:
            logger.warning(f"Last build output for {config.path}:\n{result.stdout[-2000:]}")
        raise BuildFailedError(argv, result.returncode)

    logger.info(f"Built docs for {config.path} in {result.duration_seconds:.1f}s")
    return BuildOutcome(argv=argv, exit_code=result.returncode)
