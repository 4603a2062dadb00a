"""
Shared pytest fixtures for docserver tests.

This module provides:
- libs_path: Empty projects root in a temp directory
- sample_config / sample_registry: Small configuration with one project per build system
- git helpers: Isolated git environment and an upstream repository factory
- Custom markers for test categorization
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add repo root to path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from docserver.engine.registry import ProjectRegistry, build_registry  # noqa: E402
from docserver.models.config import (  # noqa: E402
    BuildSystem,
    DocServerConfig,
    ProjectConfig,
)
from tests.helpers import git  # noqa: E402


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests that run real git and subprocesses"
    )


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def libs_path(tmp_path: Path) -> Path:
    """Empty projects root."""
    path = tmp_path / "libs"
    path.mkdir()
    return path


@pytest.fixture
def sample_projects() -> list[ProjectConfig]:
    """One project per build system, the last without a repo."""
    return [
        ProjectConfig(
            path="java/widgets",
            repo="https://example.com/widgets.git",
            build_system=BuildSystem.GRADLE,
        ),
        ProjectConfig(
            path="libs/foo",
            repo="https://example.com/foo.git",
            build_system=BuildSystem.CARGO,
        ),
        ProjectConfig(
            path="My Handbook",
            repo="https://example.com/handbook.git",
            build_system=BuildSystem.CUSTOM,
            build_command="make html",
        ),
        ProjectConfig(
            path="zig/ringbuf",
            build_system=BuildSystem.ZIG,
        ),
    ]


@pytest.fixture
def sample_config(libs_path: Path, sample_projects: list[ProjectConfig]) -> DocServerConfig:
    """Configuration rooted at libs_path."""
    return DocServerConfig(libs_path=libs_path, projects=sample_projects)


@pytest.fixture
def sample_registry(sample_config: DocServerConfig) -> ProjectRegistry:
    """Registry built from sample_config."""
    return build_registry(sample_config.projects, sample_config.libs_path)


# =============================================================================
# Git Fixtures
# =============================================================================


@pytest.fixture
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate git from the user's configuration and give it an identity."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("GIT_CONFIG_GLOBAL", raising=False)
    monkeypatch.delenv("GIT_DIR", raising=False)
    monkeypatch.delenv("GIT_WORK_TREE", raising=False)
    for var in ("AUTHOR", "COMMITTER"):
        monkeypatch.setenv(f"GIT_{var}_NAME", "Doc Server Tests")
        monkeypatch.setenv(f"GIT_{var}_EMAIL", "tests@example.com")


@pytest.fixture
def make_upstream(tmp_path: Path, git_env: None):
    """Factory creating an upstream repository with one commit.

    Usage:
        upstream = make_upstream("widgets", branch="main", files={"README.md": "v1"})
    """

    def _make(
        name: str = "upstream",
        branch: str = "main",
        files: dict[str, str] | None = None,
    ) -> Path:
        repo = tmp_path / "remotes" / name
        repo.mkdir(parents=True)
        git(repo, "init", "-q")
        git(repo, "symbolic-ref", "HEAD", f"refs/heads/{branch}")
        for file_name, content in (files or {"README.md": "v1\n"}).items():
            target = repo / file_name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
            git(repo, "add", file_name)
        git(repo, "commit", "-q", "-m", "Initial commit")
        return repo

    return _make
