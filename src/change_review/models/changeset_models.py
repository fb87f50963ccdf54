"""Change-set models: per-file modification groups and reviewable batches."""

from collections.abc import Iterable, Iterator
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, computed_field

from change_review.models.diff_models import Modification, ModificationStatus


class ReviewStatus(str, Enum):
    """Aggregate status of a file or a change set."""

    PENDING = "pending"
    PARTIAL = "partial"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


def aggregate_status(
    statuses: Iterable[ModificationStatus | ReviewStatus | str],
) -> ReviewStatus:
    """Derive a parent status from its children's statuses.

    All accepted -> accepted, all rejected -> rejected, all pending -> pending,
    any mix (including partial children) -> partial. No children -> pending.

    Args:
        statuses: Child status values (ModificationStatus or ReviewStatus).

    Returns:
        The aggregated ReviewStatus.
    """
    values = {ReviewStatus(getattr(status, "value", status)) for status in statuses}
    if not values:
        return ReviewStatus.PENDING
    if len(values) == 1:
        (only,) = values
        return only
    return ReviewStatus.PARTIAL


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FileModification(BaseModel):
    """All modifications proposed for one file."""

    model_config = ConfigDict(frozen=False)

    file_path: str = Field(min_length=1)  # Storage path, as passed to read_text/write_text
    original_content: str = Field(frozen=True)  # Snapshot at change-set creation
    modifications: list[Modification] = Field(default_factory=list)  # Diff order

    # Batch review outcome; only read when there are no modifications
    _unchanged_status: ModificationStatus = PrivateAttr(default=ModificationStatus.PENDING)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> ReviewStatus:
        if not self.modifications:
            return aggregate_status([self._unchanged_status])
        return aggregate_status([mod.status for mod in self.modifications])

    @property
    def is_unchanged(self) -> bool:
        return not self.modifications

    def mark_unchanged(self, status: ModificationStatus) -> None:
        """Record the batch review outcome of a file that has no modifications.

        accept_all and reject_all resolve such files like any other, so a
        fully accepted change set reports accepted even when one of its
        files was left identical.
        """
        self._unchanged_status = status

    def find_modification(self, modification_id: str) -> Modification | None:
        for mod in self.modifications:
            if mod.id == modification_id:
                return mod
        return None

    def accepted_modifications(self) -> list[Modification]:
        return [
            mod for mod in self.modifications
            if mod.status == ModificationStatus.ACCEPTED
        ]


class ChangeSet(BaseModel):
    """A batch of file modifications reviewed and applied together."""

    model_config = ConfigDict(frozen=False)

    id: str = Field(frozen=True)
    timestamp: datetime = Field(default_factory=_utcnow, frozen=True)
    files: list[FileModification] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> ReviewStatus:
        return aggregate_status([file.status for file in self.files])

    def iter_modifications(self) -> Iterator[tuple[FileModification, Modification]]:
        """Yield (file, modification) pairs in file then diff order."""
        for file in self.files:
            for mod in file.modifications:
                yield file, mod


class ChangeSetStatus(BaseModel):
    """Read-only projection of a change set's review progress."""

    model_config = ConfigDict(frozen=True)

    id: str
    status: ReviewStatus
    total_modifications: int = 0
    accepted_modifications: int = 0
    rejected_modifications: int = 0
    pending_modifications: int = 0
    files_affected: int = 0
