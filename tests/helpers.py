"""Git helpers shared by the integration tests."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(cwd: Path, *args: str) -> str:
    """Run git in cwd and return its stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


def commit_file(repo: Path, name: str, content: str, message: str | None = None) -> str:
    """Write a file, commit it and return the new commit id."""
    target = repo / name
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    git(repo, "add", name)
    git(repo, "commit", "-q", "-m", message or f"Update {name}")
    return head(repo)


def remove_file(repo: Path, name: str, message: str | None = None) -> str:
    """Delete a tracked file, commit and return the new commit id."""
    git(repo, "rm", "-q", name)
    git(repo, "commit", "-q", "-m", message or f"Remove {name}")
    return head(repo)


def head(repo: Path) -> str:
    return git(repo, "rev-parse", "HEAD")


def status(repo: Path) -> str:
    """Porcelain status, empty for a clean working tree."""
    return git(repo, "status", "--porcelain")
