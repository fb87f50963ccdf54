"""Tests for change-set exception classes."""

import pytest

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


class TestChangeSetExceptions:
    """Tests for the change-set exception hierarchy."""

    @pytest.mark.parametrize(
        "exc_class",
        [NotFoundError, InvalidStateError, ChangeSetValidationError],
    )
    def test_simple_errors_inherit_from_base(self, exc_class):
        exc = exc_class("Something went wrong")
        assert isinstance(exc, ChangeSetError)
        assert str(exc) == "Something went wrong"

    def test_change_set_not_found_names_id(self):
        exc = ChangeSetNotFoundError("changeset-1-abc")
        assert isinstance(exc, NotFoundError)
        assert exc.change_set_id == "changeset-1-abc"
        assert "changeset-1-abc" in str(exc)

    def test_modification_not_found_names_both_ids(self):
        exc = ModificationNotFoundError("cs-1", "mod-9")
        assert isinstance(exc, NotFoundError)
        assert exc.modification_id == "mod-9"
        assert "mod-9" in str(exc)
        assert "cs-1" in str(exc)

    def test_storage_io_error_wrap_includes_cause(self):
        cause = PermissionError("read-only filesystem")
        exc = StorageIOError.wrap("ch1.md", "write", cause)
        assert isinstance(exc, ChangeSetError)
        assert exc.path == "ch1.md"
        assert exc.operation == "write"
        assert str(exc) == "Failed to write file ch1.md: read-only filesystem"

    def test_accept_all_error_is_storage_error(self):
        exc = AcceptAllError("b.md", "write", "boom", rolled_back=True, restored_files=["a.md"])
        assert isinstance(exc, StorageIOError)
        assert exc.rolled_back is True
        assert exc.restored_files == ["a.md"]
        assert exc.unrestored_files == []
