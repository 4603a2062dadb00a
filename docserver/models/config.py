"""
Configuration models - Pydantic models for the docserver config file
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path, PurePath

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_PORT = 8080
DEFAULT_BRANCHES = ["main", "master"]


class BuildSystem(str, Enum):
    """Documentation build conventions a project can declare.

    Attributes:
        GRADLE: `gradle clean javadoc`, output in build/docs/javadoc
        CARGO: `cargo doc`, output in target/doc
        CUSTOM: user supplied command, output expected in docs/
        ZIG: `zig build-lib -femit-docs`, output in zig-out/docs
    """

    GRADLE = "gradle"
    CARGO = "cargo"
    CUSTOM = "custom"
    ZIG = "zig"


class ProjectConfig(BaseModel):
    """A single project entry from the config file"""

    model_config = ConfigDict(frozen=True)

    path: str  # Relative to libs_path
    repo: str | None = None
    build_system: BuildSystem
    build_command: str | None = None  # Only used by BuildSystem.CUSTOM

    @field_validator("path")
    @classmethod
    def path_stays_under_root(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("project path must not be empty")
        pure = PurePath(value)
        if pure.is_absolute() or pure.anchor:
            raise ValueError(f"project path '{value}' must be relative to libs_path")
        if ".." in pure.parts:
            raise ValueError(f"project path '{value}' must not contain '..'")
        return value

    @field_validator("repo")
    @classmethod
    def blank_repo_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value


class UpdateSettings(BaseModel):
    """Tuning for the update-and-build pipeline"""

    model_config = ConfigDict(frozen=True)

    max_workers: int = Field(default=1, ge=1)
    git_timeout: float | None = Field(default=None, gt=0)
    build_timeout: float | None = Field(default=None, gt=0)
    branches: list[str] = Field(default_factory=lambda: list(DEFAULT_BRANCHES), min_length=1)


class DocServerConfig(BaseModel):
    """Top-level configuration document"""

    model_config = ConfigDict(frozen=True)

    libs_path: Path
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    host: str = "0.0.0.0"
    update_on_start: bool = False
    redirect_missing_to_index: bool = False
    update: UpdateSettings = Field(default_factory=UpdateSettings)
    projects: list[ProjectConfig] = Field(default_factory=list)
