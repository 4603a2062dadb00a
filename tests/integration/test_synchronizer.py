"""Integration tests for repository synchronization against real git repositories.

Each test builds an upstream repository in a temp directory and points the
synchronizer at it with a plain path URL.
"""

from pathlib import Path

import pytest

from docserver.engine.synchronizer import update_project
from docserver.errors import NonFastForwardError, SyncError
from docserver.models.result import SyncAction
from tests.helpers import commit_file, head, remove_file, requires_git, status


pytestmark = [pytest.mark.integration, requires_git]


@pytest.fixture
def checkout(libs_path: Path) -> Path:
    """Where the working copy lives."""
    return libs_path / "libs" / "widgets"


class TestClone:
    """First synchronization of a missing working copy."""

    @pytest.mark.asyncio
    async def test_clones_missing(self, make_upstream, checkout: Path) -> None:
        """A missing directory is cloned, parents included."""
        upstream = make_upstream(files={"README.md": "v1\n", "src/lib.rs": "// lib\n"})

        outcome = await update_project(checkout, str(upstream))

        assert outcome.action == SyncAction.CLONED
        assert outcome.branch == "main"
        assert outcome.commit == head(upstream)
        assert head(checkout) == head(upstream)
        assert (checkout / "src" / "lib.rs").read_text() == "// lib\n"

    @pytest.mark.asyncio
    async def test_master_fallback(self, make_upstream, checkout: Path) -> None:
        """Repositories without main use master."""
        upstream = make_upstream(branch="master")

        outcome = await update_project(checkout, str(upstream))

        assert outcome.branch == "master"
        assert head(checkout) == head(upstream)

    @pytest.mark.asyncio
    async def test_unreachable_remote(self, git_env: None, tmp_path: Path, checkout: Path) -> None:
        """A remote that does not exist fails with SyncError."""
        with pytest.raises(SyncError):
            await update_project(checkout, str(tmp_path / "no-such-remote"))


class TestUpdate:
    """Synchronizing an existing working copy."""

    @pytest.mark.asyncio
    async def test_up_to_date(self, make_upstream, checkout: Path) -> None:
        """A second run with no upstream changes does nothing."""
        upstream = make_upstream()
        await update_project(checkout, str(upstream))

        outcome = await update_project(checkout, str(upstream))

        assert outcome.action == SyncAction.UP_TO_DATE
        assert outcome.commit == head(upstream)

    @pytest.mark.asyncio
    async def test_fast_forward(self, make_upstream, checkout: Path) -> None:
        """Upstream changes are applied and local edits to tracked files discarded."""
        upstream = make_upstream(files={"README.md": "v1\n", "old.txt": "old\n"})
        await update_project(checkout, str(upstream))
        before = head(checkout)

        (checkout / "README.md").write_text("local edit\n")
        commit_file(upstream, "README.md", "v2\n")
        commit_file(upstream, "new.txt", "new\n")
        remove_file(upstream, "old.txt")

        outcome = await update_project(checkout, str(upstream))

        assert outcome.action == SyncAction.FAST_FORWARDED
        assert outcome.previous_commit == before
        assert head(checkout) == head(upstream)
        assert (checkout / "README.md").read_text() == "v2\n"
        assert (checkout / "new.txt").read_text() == "new\n"
        assert not (checkout / "old.txt").exists()
        assert status(checkout) == ""

    @pytest.mark.asyncio
    async def test_diverged(self, make_upstream, checkout: Path, git_env: None) -> None:
        """Diverged histories are reported and the working copy left alone."""
        upstream = make_upstream()
        await update_project(checkout, str(upstream))

        local = commit_file(checkout, "local.txt", "mine\n")
        commit_file(upstream, "remote.txt", "theirs\n")

        with pytest.raises(NonFastForwardError, match="Non-fast-forward update required"):
            await update_project(checkout, str(upstream))

        assert head(checkout) == local
        assert (checkout / "local.txt").exists()
        assert not (checkout / "remote.txt").exists()

    @pytest.mark.asyncio
    async def test_local_ahead(self, make_upstream, checkout: Path, git_env: None) -> None:
        """A branch with only local commits on top of upstream is up to date."""
        upstream = make_upstream()
        await update_project(checkout, str(upstream))
        local = commit_file(checkout, "local.txt", "mine\n")

        outcome = await update_project(checkout, str(upstream))

        assert outcome.action == SyncAction.UP_TO_DATE
        assert outcome.commit == local
        assert head(checkout) == local
        assert (checkout / "local.txt").read_text() == "mine\n"
        assert status(checkout) == ""

    @pytest.mark.asyncio
    async def test_non_repository_directory_cloned_into(
        self, make_upstream, checkout: Path
    ) -> None:
        """An empty existing directory is cloned into."""
        upstream = make_upstream()
        checkout.mkdir(parents=True)

        outcome = await update_project(checkout, str(upstream))

        assert outcome.action == SyncAction.CLONED
        assert head(checkout) == head(upstream)
