"""
Repository synchronizer - Bring a working copy up to date with its remote

Only fast-forward updates are performed. A working copy whose branch has
commits the remote lacks while the remote has also moved on is reported as
diverged and left untouched. A branch that is only ahead is already up to date.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from docserver.engine.process import CommandResult, run_command
from docserver.errors import GitCommandError, NonFastForwardError, SyncError
from docserver.models.config import DEFAULT_BRANCHES
from docserver.models.result import SyncAction, SyncOutcome


logger = logging.getLogger(__name__)

REMOTE_NAME = "origin"


def _git_env() -> dict[str, str]:
    env = dict(os.environ)
    # Fail instead of waiting for credentials on a terminal nobody watches
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


class GitRepository:
    """Thin wrapper running git commands against one working copy"""

    def __init__(self, path: Path, timeout: float | None = None):
        self.path = Path(path)
        self.timeout = timeout

    async def run(self, *args: str, cwd: Path | None = None) -> CommandResult:
        """Run git and return the result whatever the exit status"""
        argv = ["git", *args]
        try:
            return await run_command(
                argv,
                cwd or self.path,
                timeout=self.timeout,
                env=_git_env(),
            )
        except OSError as e:
            raise SyncError(f"Cannot run git in {cwd or self.path}: {e}") from e

    async def git(self, *args: str, cwd: Path | None = None) -> str:
        """Run git, raise GitCommandError on failure, return stripped stdout"""
        result = await self.run(*args, cwd=cwd)
        if not result.ok:
            raise GitCommandError(result.argv, result.returncode, result.stderr)
        return result.stdout.strip()

    async def exists(self) -> bool:
        """True if self.path is the top level of a git working copy"""
        if not self.path.is_dir():
            return False
        result = await self.run("rev-parse", "--show-toplevel")
        if not result.ok:
            return False
        return Path(result.stdout.strip()).resolve() == self.path.resolve()

    async def clone(self, url: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        await self.git("clone", url, str(self.path), cwd=self.path.parent)

    async def resolve(self, ref: str) -> str | None:
        """Commit id a ref points to, or None if it does not exist"""
        result = await self.run("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}")
        if not result.ok:
            return None
        return result.stdout.strip()

    async def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        result = await self.run("merge-base", "--is-ancestor", ancestor, descendant)
        if result.returncode == 0:
            return True
        if result.returncode == 1:
            return False
        raise GitCommandError(result.argv, result.returncode, result.stderr)

    async def fetch(self, branches: list[str]) -> str:
        """
        Fetch the first branch the remote has.

        Returns:
            Name of the branch that was fetched into FETCH_HEAD

        Raises:
            GitCommandError: If none of the branches could be fetched
            SyncError: If no branch names were given
        """
        if not branches:
            raise SyncError(f"No branches to fetch for {self.path}")

        errors: list[GitCommandError] = []
        for branch in branches:
            try:
                await self.git("fetch", REMOTE_NAME, branch)
                return branch
            except GitCommandError as e:
                logger.debug(f"Fetching {branch} for {self.path} failed: {e}")
                errors.append(e)
        raise errors[-1]


async def update_project(
    path: Path,
    repo_url: str,
    branches: list[str] | None = None,
    timeout: float | None = None,
) -> SyncOutcome:
    """
    Clone or fast-forward the working copy at `path` from `repo_url`.

    Args:
        path: Local working copy (created by cloning if missing)
        repo_url: Remote to clone from; fetches use the `origin` remote
        branches: Branch names to try, in order (default main, then master)
        timeout: Seconds allowed per git command

    Returns:
        SyncOutcome describing what changed

    Raises:
        NonFastForwardError: If local and remote histories have diverged
        SyncError: If cloning, fetching or inspecting the repository failed
        CommandTimeoutError: If a git command ran past the timeout
    """
    repo = GitRepository(path, timeout=timeout)
    cloned = False

    if not await repo.exists():
        logger.info(f"Cloning {repo_url} into {path}")
        await repo.clone(repo_url)
        cloned = True

    branch = await repo.fetch(branches or DEFAULT_BRANCHES)
    fetched = await repo.resolve("FETCH_HEAD")
    if fetched is None:
        raise SyncError(f"Fetched {branch} for {path} but FETCH_HEAD is not a commit")

    local = await repo.resolve(f"refs/heads/{branch}")
    if local is None:
        local = await repo.resolve("HEAD")

    if local is not None and (local == fetched or await repo.is_ancestor(fetched, local)):
        logger.info(f"Repository at {path} is up-to-date")
        action = SyncAction.CLONED if cloned else SyncAction.UP_TO_DATE
        return SyncOutcome(action=action, branch=branch, commit=local, previous_commit=local)

    if local is not None and not await repo.is_ancestor(local, fetched):
        raise NonFastForwardError()

    # Move the branch to the fetched commit and force the working tree to match
    await repo.git("checkout", "--force", "-B", branch, fetched)
    logger.info(f"Fast-forwarded repository at {path}")

    action = SyncAction.CLONED if cloned else SyncAction.FAST_FORWARDED
    return SyncOutcome(action=action, branch=branch, commit=fetched, previous_commit=local)
