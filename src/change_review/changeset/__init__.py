"""Change-set review lifecycle."""

from change_review.changeset.exceptions import (
    AcceptAllError,
    ChangeSetError,
    ChangeSetNotFoundError,
    ChangeSetValidationError,
    InvalidStateError,
    ModificationNotFoundError,
    NotFoundError,
    StorageIOError,
)
from change_review.changeset.store import ChangeSetStore

__all__ = [
    "AcceptAllError",
    "ChangeSetError",
    "ChangeSetNotFoundError",
    "ChangeSetStore",
    "ChangeSetValidationError",
    "InvalidStateError",
    "ModificationNotFoundError",
    "NotFoundError",
    "StorageIOError",
]
