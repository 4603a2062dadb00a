"""
Error types raised by the update pipeline and the configuration loader.

Configuration errors are fatal at startup. Sync and build errors are caught
per project by the update driver and recorded in that project's result.
"""


class DocServerError(Exception):
    """Base class for all docserver errors"""


class ConfigError(DocServerError):
    """Missing, unreadable or invalid configuration"""


class SlugCollisionError(ConfigError):
    """Two configured project paths sanitize to the same URL slug"""

    def __init__(self, slug: str, first_path: str, second_path: str):
        self.slug = slug
        self.first_path = first_path
        self.second_path = second_path
        super().__init__(
            f"Projects '{first_path}' and '{second_path}' both map to URL path '/{slug}/'"
        )


class CommandTimeoutError(DocServerError):
    """An external command exceeded its time limit and was killed"""

    def __init__(self, argv: list[str], timeout: float):
        self.argv = argv
        self.timeout = timeout
        super().__init__(f"'{' '.join(argv)}' timed out after {timeout:g}s")


class SyncError(DocServerError):
    """Repository synchronization failed"""


class GitCommandError(SyncError):
    """A git command exited with a non-zero status"""

    def __init__(self, argv: list[str], returncode: int, stderr: str = ""):
        self.argv = argv
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no output"
        super().__init__(f"'{' '.join(argv)}' failed ({returncode}): {detail}")


class NonFastForwardError(SyncError):
    """Local and remote branches have diverged"""

    def __init__(self, message: str = "Non-fast-forward update required"):
        super().__init__(message)


class BuildError(DocServerError):
    """Documentation build could not be run"""


class BuildSpawnError(BuildError):
    """The build program could not be started"""


class BuildFailedError(BuildError):
    """The build program exited with a non-zero status"""

    def __init__(self, argv: list[str], returncode: int):
        self.argv = argv
        self.returncode = returncode
        super().__init__(f"'{' '.join(argv)}' exited with status {returncode}")
