"""Data models for the change-review engine."""

from change_review.models.changeset_models import (
    ChangeSet,
    ChangeSetStatus,
    FileModification,
    ReviewStatus,
    aggregate_status,
)
from change_review.models.diff_models import (
    DiffHunk,
    DiffResult,
    DiffStats,
    Modification,
    ModificationStatus,
    ModificationType,
)

__all__ = [
    "ChangeSet",
    "ChangeSetStatus",
    "DiffHunk",
    "DiffResult",
    "DiffStats",
    "FileModification",
    "Modification",
    "ModificationStatus",
    "ModificationType",
    "ReviewStatus",
    "aggregate_status",
]
