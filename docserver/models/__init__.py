"""Pydantic models for docserver"""

from docserver.models.config import (
    BuildSystem,
    DocServerConfig,
    ProjectConfig,
    UpdateSettings,
)
from docserver.models.project import Project
from docserver.models.result import (
    BatchReport,
    BuildOutcome,
    ProjectResult,
    ProjectStatus,
    StepResult,
    StepStatus,
    SyncAction,
    SyncOutcome,
)

__all__ = [
    # Configuration models
    "BuildSystem",
    "DocServerConfig",
    "ProjectConfig",
    "UpdateSettings",
    # Registry models
    "Project",
    # Update result models
    "BatchReport",
    "BuildOutcome",
    "ProjectResult",
    "ProjectStatus",
    "StepResult",
    "StepStatus",
    "SyncAction",
    "SyncOutcome",
]
