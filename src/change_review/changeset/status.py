"""Pure helper functions for change-set lookup and status reporting.

All functions are stateless and perform no storage access.
"""

from change_review.changeset.exceptions import (
    ChangeSetValidationError,
    ModificationNotFoundError,
)
from change_review.models import (
    ChangeSet,
    ChangeSetStatus,
    FileModification,
    Modification,
    ModificationStatus,
    aggregate_status,
)

__all__ = [
    "aggregate_status",
    "build_status",
    "find_file",
    "find_modification",
    "validate_unique",
]


def find_modification(
    change_set: ChangeSet,
    modification_id: str,
) -> tuple[FileModification, Modification]:
    """Locate a modification and the file that owns it.

    Args:
        change_set: Change set to search.
        modification_id: Id of the wanted modification.

    Returns:
        Tuple of (owning file, modification).

    Raises:
        ModificationNotFoundError: If no file holds that id.
    """
    for file, mod in change_set.iter_modifications():
        if mod.id == modification_id:
            return file, mod
    raise ModificationNotFoundError(change_set.id, modification_id)


def find_file(change_set: ChangeSet, file_path: str) -> FileModification | None:
    for file in change_set.files:
        if file.file_path == file_path:
            return file
    return None


def validate_unique(files: list[FileModification]) -> None:
    """Reject duplicate file paths or modification ids within one batch."""
    seen_paths: set[str] = set()
    seen_ids: set[str] = set()
    for file in files:
        if file.file_path in seen_paths:
            raise ChangeSetValidationError(
                f"File {file.file_path} appears more than once in the change set"
            )
        seen_paths.add(file.file_path)
        for mod in file.modifications:
            if mod.id in seen_ids:
                raise ChangeSetValidationError(
                    f"Modification id {mod.id} appears more than once in the change set"
                )
            seen_ids.add(mod.id)


def build_status(change_set: ChangeSet) -> ChangeSetStatus:
    """Count modifications per status across a change set."""
    counts = {status: 0 for status in ModificationStatus}
    total = 0
    for _, mod in change_set.iter_modifications():
        counts[mod.status] += 1
        total += 1

    return ChangeSetStatus(
        id=change_set.id,
        status=change_set.status,
        total_modifications=total,
        accepted_modifications=counts[ModificationStatus.ACCEPTED],
        rejected_modifications=counts[ModificationStatus.REJECTED],
        pending_modifications=counts[ModificationStatus.PENDING],
        files_affected=len(change_set.files),
    )
