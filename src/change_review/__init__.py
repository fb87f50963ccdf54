"""Line-level change review: diff proposed edits, review them, apply or roll back."""

from change_review.changeset import ChangeSetStore
from change_review.models import (
    ChangeSet,
    ChangeSetStatus,
    FileModification,
    Modification,
    ModificationStatus,
    ModificationType,
    ReviewStatus,
)
from change_review.utils import (
    apply_modifications,
    compute_diff,
    diff_to_modifications,
    make_file_modification,
)

__all__ = [
    "ChangeSet",
    "ChangeSetStatus",
    "ChangeSetStore",
    "FileModification",
    "Modification",
    "ModificationStatus",
    "ModificationType",
    "ReviewStatus",
    "apply_modifications",
    "compute_diff",
    "diff_to_modifications",
    "make_file_modification",
]
