import pytest

from change_review.changeset import ChangeSetStore
from change_review.models import FileModification, Modification, ModificationStatus, ModificationType
from change_review.storage import MemoryStorage


class FlakyStorage(MemoryStorage):
    """MemoryStorage that fails on chosen call numbers and counts calls.

    Call numbers are 1-based and counted separately for reads and writes.
    With truncate_on_failure a failing write empties the file first, like a
    host that opens for writing before the write itself fails.
    """

    def __init__(
        self,
        files: dict[str, str] | None = None,
        fail_writes: set[int] | None = None,
        fail_reads: set[int] | None = None,
        truncate_on_failure: bool = False,
    ) -> None:
        super().__init__(files)
        self.truncate_on_failure = truncate_on_failure
        self.fail_writes = fail_writes or set()
        self.fail_reads = fail_reads or set()
        self.read_calls = 0
        self.write_calls = 0

    async def read_text(self, path: str) -> str:
        self.read_calls += 1
        if self.read_calls in self.fail_reads:
            raise OSError(f"read error on {path}")
        return await super().read_text(path)

    async def write_text(self, path: str, text: str) -> None:
        self.write_calls += 1
        if self.write_calls in self.fail_writes:
            if self.truncate_on_failure:
                self.files[path] = ""
            raise OSError("disk full")
        await super().write_text(path, text)


def make_mod(
    mod_id: str,
    mod_type: ModificationType = ModificationType.MODIFY,
    line_start: int = 1,
    line_end: int | None = None,
    original_text: str | None = None,
    modified_text: str | None = None,
    status: ModificationStatus = ModificationStatus.PENDING,
) -> Modification:
    """Helper to create a Modification with sensible defaults."""
    return Modification(
        id=mod_id,
        type=mod_type,
        line_start=line_start,
        line_end=line_end if line_end is not None else line_start,
        original_text=original_text,
        modified_text=modified_text,
        status=status,
    )


@pytest.fixture
def chapter_text():
    return "line 1\nline 2\nline 3"


@pytest.fixture
def chapter_file(chapter_text):
    """One file with two independent edits: line 1 and line 3."""
    return FileModification(
        file_path="chapters/01.md",
        original_content=chapter_text,
        modifications=[
            make_mod("m1", line_start=1, original_text="line 1", modified_text="line 1 updated"),
            make_mod("m3", line_start=3, original_text="line 3", modified_text="line 3 updated"),
        ],
    )


@pytest.fixture
def notes_file():
    return FileModification(
        file_path="notes.md",
        original_content="alpha\nbeta",
        modifications=[
            make_mod(
                "n1",
                ModificationType.ADD,
                line_start=3,
                modified_text="gamma",
            ),
        ],
    )


@pytest.fixture
def storage(chapter_file, notes_file):
    return FlakyStorage({
        chapter_file.file_path: chapter_file.original_content,
        notes_file.file_path: notes_file.original_content,
    })


@pytest.fixture
def store(storage):
    return ChangeSetStore(storage)


@pytest.fixture
def mod_factory():
    return make_mod


@pytest.fixture
def flaky_store():
    """Factory building a store over a FlakyStorage: (files, fail_writes, fail_reads)."""

    def _build(files, fail_writes=None, fail_reads=None, truncate_on_failure=False):
        storage = FlakyStorage(
            files,
            fail_writes=fail_writes,
            fail_reads=fail_reads,
            truncate_on_failure=truncate_on_failure,
        )
        return ChangeSetStore(storage), storage

    return _build
