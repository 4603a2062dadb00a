"""
Project registry - Map URL slugs to configured projects

The registry is built once from configuration and never mutated. The
update driver and the HTTP routes share the same instance.
"""

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from docserver.engine.sanitize import sanitize_path
from docserver.errors import ConfigError, SlugCollisionError
from docserver.models.config import BuildSystem, DocServerConfig, ProjectConfig
from docserver.models.project import Project


logger = logging.getLogger(__name__)


# Slugs that would shadow the JSON API routes
RESERVED_SLUGS = frozenset({"api"})

# Where each build system leaves its generated docs, relative to the project
DOCS_SUBDIRS: dict[BuildSystem, Path] = {
    BuildSystem.GRADLE: Path("build") / "docs" / "javadoc",
    BuildSystem.CARGO: Path("target") / "doc",
    BuildSystem.CUSTOM: Path("docs"),
    BuildSystem.ZIG: Path("zig-out") / "docs",
}


def project_dir(config: ProjectConfig, libs_path: Path) -> Path:
    """Absolute directory of a project's working copy"""
    return Path(libs_path) / config.path


def docs_path_for(config: ProjectConfig, libs_path: Path) -> Path:
    """Directory the project's build is expected to write docs into"""
    return project_dir(config, libs_path) / DOCS_SUBDIRS[config.build_system]


class ProjectRegistry(Mapping[str, Project]):
    """Read-only mapping of URL slug to Project, in configuration order"""

    def __init__(self, projects: Mapping[str, Project], libs_path: Path):
        self._projects = MappingProxyType(dict(projects))
        self.libs_path = Path(libs_path)

    def __getitem__(self, slug: str) -> Project:
        return self._projects[slug]

    def __iter__(self) -> Iterator[str]:
        return iter(self._projects)

    def __len__(self) -> int:
        return len(self._projects)

    def __repr__(self) -> str:
        return f"ProjectRegistry({list(self._projects)!r}, libs_path={str(self.libs_path)!r})"

    @classmethod
    def from_config(cls, config: DocServerConfig) -> "ProjectRegistry":
        return build_registry(config.projects, config.libs_path)


def build_registry(projects: list[ProjectConfig], libs_path: Path) -> ProjectRegistry:
    """
    Build the slug -> Project table.

    Args:
        projects: Project entries in configuration order
        libs_path: Shared root directory the project paths are relative to

    Returns:
        ProjectRegistry keyed by sanitized slug

    Raises:
        SlugCollisionError: If two different paths produce the same slug
    """
    table: dict[str, Project] = {}

    for project_cfg in projects:
        url_path = sanitize_path(project_cfg.path)
        if not url_path:
            raise ConfigError(f"Project path '{project_cfg.path}' has no letters or digits to build a URL from")
        if url_path in RESERVED_SLUGS:
            raise ConfigError(f"Project path '{project_cfg.path}' maps to reserved URL path '/{url_path}/'")

        existing = table.get(url_path)
        if existing is not None:
            raise SlugCollisionError(url_path, existing.config.path, project_cfg.path)

        table[url_path] = Project(
            config=project_cfg,
            docs_path=docs_path_for(project_cfg, libs_path),
            url_path=url_path,
        )

    logger.debug(f"Registered {len(table)} project(s) under {libs_path}")
    return ProjectRegistry(table, libs_path)
