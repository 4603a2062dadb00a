"""
Update result models - Structured outcome of an update-and-build run

Each project processed by the update driver produces a ProjectResult with
one StepResult for synchronization and one for the build. A BatchReport
collects them in registry order.

Example:
    >>> result = ProjectResult(
    ...     slug="libs-foo",
    ...     path="libs/foo",
    ...     status=ProjectStatus.FAILED,
    ...     sync=StepResult(status=StepStatus.FAILED, error="Non-fast-forward update required"),
    ...     build=StepResult(status=StepStatus.OK, exit_code=0),
    ... )
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, computed_field


class StepStatus(str, Enum):
    """Outcome of a single pipeline step"""

    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"
    TIMEOUT = "timeout"


class ProjectStatus(str, Enum):
    """Overall outcome for a project"""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class SyncAction(str, Enum):
    """What the synchronizer did to the working copy"""

    CLONED = "cloned"
    UP_TO_DATE = "up_to_date"
    FAST_FORWARDED = "fast_forwarded"


class SyncOutcome(BaseModel):
    """Successful synchronization details"""

    action: SyncAction
    branch: str
    commit: str
    previous_commit: str | None = None


class BuildOutcome(BaseModel):
    """Details of a dispatched build; `argv` is None when nothing was run"""

    argv: list[str] | None = None
    exit_code: int | None = None

    @property
    def ran(self) -> bool:
        return self.argv is not None


class StepResult(BaseModel):
    """Result of the sync or build step for one project"""

    status: StepStatus
    error: str | None = None
    sync_action: SyncAction | None = None
    commit: str | None = None
    exit_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.status in (StepStatus.OK, StepStatus.SKIPPED)


class ProjectResult(BaseModel):
    """Outcome of synchronizing and building one project"""

    slug: str
    path: str
    status: ProjectStatus
    sync: StepResult | None = None
    build: StepResult | None = None
    reason: str | None = None  # Why the project was skipped
    duration_seconds: float = 0.0


class BatchReport(BaseModel):
    """All project results of one update run"""

    started_at: datetime
    finished_at: datetime | None = None
    results: list[ProjectResult] = Field(default_factory=list)

    def count(self, status: ProjectStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @computed_field
    @property
    def succeeded(self) -> int:
        return self.count(ProjectStatus.SUCCESS)

    @computed_field
    @property
    def skipped(self) -> int:
        return self.count(ProjectStatus.SKIPPED)

    @computed_field
    @property
    def failed(self) -> int:
        return self.count(ProjectStatus.FAILED)

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def get(self, slug: str) -> ProjectResult | None:
        for result in self.results:
            if result.slug == slug:
                return result
        return None
