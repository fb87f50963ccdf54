"""Models for representing line diffs and reviewable modifications."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ModificationType(str, Enum):
    """Kind of line-range edit."""

    ADD = "add"
    DELETE = "delete"
    MODIFY = "modify"


class ModificationStatus(str, Enum):
    """Review status of a single modification."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class DiffHunk(BaseModel):
    """One contiguous region that differs between two texts."""

    model_config = ConfigDict(frozen=False)

    type: ModificationType
    line_start: int = Field(ge=1)  # 1-based, original line space
    line_end: int = Field(ge=1)  # Inclusive
    original_text: str | None = None  # Lines removed or replaced
    modified_text: str | None = None  # Lines inserted


class DiffStats(BaseModel):
    """Line counts per hunk type."""

    model_config = ConfigDict(frozen=False)

    additions: int = 0
    deletions: int = 0
    modifications: int = 0


class DiffResult(BaseModel):
    """Ordered hunks plus aggregate counts."""

    model_config = ConfigDict(frozen=False)

    hunks: list[DiffHunk] = Field(default_factory=list)
    stats: DiffStats = Field(default_factory=DiffStats)


class Modification(BaseModel):
    """A diff hunk carrying an id and a review status."""

    model_config = ConfigDict(frozen=False)

    id: str = Field(min_length=1)
    type: ModificationType
    line_start: int = Field(ge=1)
    line_end: int = Field(ge=1)
    original_text: str | None = None
    modified_text: str | None = None
    status: ModificationStatus = ModificationStatus.PENDING

    @model_validator(mode="after")
    def _check_line_range(self) -> "Modification":
        if self.line_end < self.line_start:
            raise ValueError(
                f"line_end ({self.line_end}) must be >= line_start ({self.line_start})"
            )
        return self

    @property
    def line_count(self) -> int:
        return self.line_end - self.line_start + 1
