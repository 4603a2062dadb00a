"""
Project model - A configured project with its derived URL slug and docs directory
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from docserver.models.config import BuildSystem, ProjectConfig


class Project(BaseModel):
    """A registered project.

    Attributes:
        config: The project entry as loaded from configuration
        docs_path: Absolute directory where generated docs are expected
        url_path: Sanitized slug the docs are served under (`/{url_path}/`)
    """

    model_config = ConfigDict(frozen=True)

    config: ProjectConfig
    docs_path: Path
    url_path: str

    @property
    def path(self) -> str:
        return self.config.path

    @property
    def repo(self) -> str | None:
        return self.config.repo

    @property
    def build_system(self) -> BuildSystem:
        return self.config.build_system
