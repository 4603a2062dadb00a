#!/usr/bin/env python3
"""
docserver command line
Serve project documentation, or update and build it without serving.
"""
import asyncio
import logging
import sys
from pathlib import Path

import click

from docserver import __version__
from docserver.config import load_config
from docserver.errors import ConfigError
from docserver.logging_setup import setup_logging


config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: $DOCSERVER_CONFIG or ./config.yaml)",
)
debug_option = click.option("--debug", is_flag=True, help="Enable debug logging")
log_file_option = click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write debug logs to this file",
)


def _load(config_path: Path | None):
    try:
        return load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=__version__, prog_name="docserver")
def main():
    """Serve generated documentation for a set of git projects."""


@main.command()
@config_option
@click.option("--update/--no-update", default=None, help="Override update_on_start")
@click.option("--host", default=None, help="Listen address (default from config)")
@click.option("--port", type=int, default=None, help="Listen port (default from config)")
@debug_option
@log_file_option
def serve(
    config_path: Path | None,
    update: bool | None,
    host: str | None,
    port: int | None,
    debug: bool,
    log_file: Path | None,
):
    """Start the documentation server."""
    setup_logging(debug=debug, log_file=log_file)
    logger = logging.getLogger(__name__)

    config = _load(config_path)
    overrides = {}
    if update is not None:
        overrides["update_on_start"] = update
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if overrides:
        config = config.model_copy(update=overrides)

    import uvicorn

    from docserver.main import create_app

    try:
        app = create_app(config)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    logger.info(f"Starting server on port {config.port}")
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


@main.command()
@config_option
@click.option(
    "--project",
    "projects",
    multiple=True,
    help="Only update this project slug (repeatable)",
)
@debug_option
@log_file_option
def update(config_path: Path | None, projects: tuple[str, ...], debug: bool, log_file: Path | None):
    """Synchronize and build projects once, then exit."""
    setup_logging(debug=debug, log_file=log_file)

    from docserver.engine.driver import UpdateDriver
    from docserver.engine.registry import ProjectRegistry

    config = _load(config_path)
    try:
        registry = ProjectRegistry.from_config(config)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    unknown = [slug for slug in projects if slug not in registry]
    if unknown:
        raise click.BadParameter(
            f"Unknown project(s): {', '.join(unknown)}. Known: {', '.join(registry)}",
            param_hint="--project",
        )

    driver = UpdateDriver(config.libs_path, config.update)
    report = asyncio.run(driver.run(registry, only=projects or None))

    for result in report.results:
        line = f"{result.status.value:<8} {result.path}"
        for name, step in (("sync", result.sync), ("build", result.build)):
            if step is not None:
                line += f"  {name}={step.status.value}"
                if step.error:
                    line += f" ({step.error})"
        if result.reason:
            line += f"  ({result.reason})"
        click.echo(line)

    click.echo(
        f"{report.succeeded} succeeded, {report.failed} failed, {report.skipped} skipped"
    )
    if not report.ok:
        sys.exit(1)


@main.command(name="projects")
@config_option
def list_projects(config_path: Path | None):
    """List configured projects with their URL and docs directory."""
    from docserver.engine.registry import ProjectRegistry

    config = _load(config_path)
    try:
        registry = ProjectRegistry.from_config(config)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    for slug, project in registry.items():
        click.echo(f"/{slug}/\t{project.config.path}\t{project.docs_path}")


if __name__ == "__main__":
    main()
