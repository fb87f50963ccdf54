"""Exceptions for change-set operations."""


class ChangeSetError(Exception):
    """Base exception for all change-set operations."""


class NotFoundError(ChangeSetError):
    """Raised when a change set or modification id is unknown."""


class ChangeSetNotFoundError(NotFoundError):
    """Raised when no change set has the requested id."""

    def __init__(self, change_set_id: str) -> None:
        self.change_set_id = change_set_id
        super().__init__(f"ChangeSet with id {change_set_id} not found")


class ModificationNotFoundError(NotFoundError):
    """Raised when a change set has no modification with the requested id."""

    def __init__(self, change_set_id: str, modification_id: str) -> None:
        self.change_set_id = change_set_id
        self.modification_id = modification_id
        super().__init__(
            f"Modification with id {modification_id} not found in ChangeSet {change_set_id}"
        )


class InvalidStateError(ChangeSetError):
    """Raised when a status transition is not allowed."""


class ChangeSetValidationError(ChangeSetError):
    """Raised when files passed to create_change_set are inconsistent."""


class StorageIOError(ChangeSetError):
    """Raised when the storage capability fails to read or write a file.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, path: str, operation: str, message: str) -> None:
        self.path = path
        self.operation = operation
        super().__init__(message)

    @classmethod
    def wrap(cls, path: str, operation: str, exc: BaseException) -> "StorageIOError":
        return cls(path, operation, f"Failed to {operation} file {path}: {exc}")


class AcceptAllError(StorageIOError):
    """Raised when accept_all fails part-way through a change set."""

    def __init__(
        self,
        path: str,
        operation: str,
        message: str,
        rolled_back: bool,
        restored_files: list[str] | None = None,
        unrestored_files: list[str] | None = None,
    ) -> None:
        super().__init__(path, operation, message)
        self.rolled_back = rolled_back
        self.restored_files = restored_files or []
        self.unrestored_files = unrestored_files or []
