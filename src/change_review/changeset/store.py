"""Change-set lifecycle: review state, storage writes and rollback."""

import logging
import time
import uuid

from change_review.changeset.exceptions import (
    AcceptAllError,
    ChangeSetNotFoundError,
    InvalidStateError,
    NotFoundError,
    StorageIOError,
)
from change_review.changeset.status import (
    build_status,
    find_file,
    find_modification,
    validate_unique,
)
from change_review.models import (
    ChangeSet,
    ChangeSetStatus,
    FileModification,
    Modification,
    ModificationStatus,
    ReviewStatus,
)
from change_review.storage.base import TextStorage
from change_review.utils.diff_engine import apply_modification, apply_modifications

logger = logging.getLogger(__name__)


def generate_change_set_id() -> str:
    """Return an id of the form changeset-<epoch ms>-<7 hex chars>."""
    return f"changeset-{time.time_ns() // 1_000_000}-{uuid.uuid4().hex[:7]}"


class ChangeSetStore:
    """Owns change sets and their backups, and mediates every storage write.

    One store per review session. The store assumes a single writer: callers
    must not run two mutating operations on the same change set concurrently.
    Status changes happen synchronously between storage awaits, never across
    one.
    """

    def __init__(self, storage: TextStorage) -> None:
        """Initialize the store.

        Args:
            storage: Host capability used to read and write file contents.
        """
        self.storage = storage
        self._change_sets: dict[str, ChangeSet] = {}
        self._backups: dict[str, dict[str, str]] = {}  # change_set_id -> file_path -> content

    def __len__(self) -> int:
        return len(self._change_sets)

    # ------------------------------------------------------------------
    # Creation, lookup, teardown
    # ------------------------------------------------------------------

    def create_change_set(self, files: list[FileModification]) -> ChangeSet:
        """Group file modifications into a new pending change set.

        Every modification is reset to pending whatever status the caller
        supplied. The caller's records are copied, not adopted.

        Args:
            files: One FileModification per affected file.

        Returns:
            The stored ChangeSet.

        Raises:
            ChangeSetValidationError: If a file path or modification id repeats.
        """
        validate_unique(files)

        change_set_id = generate_change_set_id()
        while change_set_id in self._change_sets:
            change_set_id = generate_change_set_id()

        change_set = ChangeSet(
            id=change_set_id,
            files=[
                FileModification(
                    file_path=file.file_path,
                    original_content=file.original_content,
                    modifications=[
                        mod.model_copy(update={"status": ModificationStatus.PENDING})
                        for mod in file.modifications
                    ],
                )
                for file in files
            ],
        )

        self._change_sets[change_set.id] = change_set
        self._backups[change_set.id] = {
            file.file_path: file.original_content for file in change_set.files
        }

        logger.info(
            "Created %s with %d file(s), %d modification(s)",
            change_set.id,
            len(change_set.files),
            sum(len(file.modifications) for file in change_set.files),
        )
        return change_set

    def get_change_set(self, change_set_id: str) -> ChangeSet:
        return self._require(change_set_id)

    def has_change_set(self, change_set_id: str) -> bool:
        return change_set_id in self._change_sets

    def list_change_sets(self) -> list[ChangeSet]:
        """Return all change sets in creation order."""
        return list(self._change_sets.values())

    def delete_change_set(self, change_set_id: str) -> None:
        """Drop a change set and its backups. Storage is left untouched."""
        self._require(change_set_id)
        del self._change_sets[change_set_id]
        self._backups.pop(change_set_id, None)
        logger.info("Deleted %s", change_set_id)

    def clear(self) -> None:
        """Drop every change set and backup, ending the review session."""
        self._change_sets.clear()
        self._backups.clear()

    def get_change_set_status(self, change_set_id: str) -> ChangeSetStatus:
        return build_status(self._require(change_set_id))

    def preview_file(self, change_set_id: str, file_path: str) -> str:
        """Return a file's snapshot with its accepted modifications applied.

        Raises:
            ChangeSetNotFoundError: If the change set is unknown.
            NotFoundError: If the change set does not cover file_path.
        """
        change_set = self._require(change_set_id)
        file = find_file(change_set, file_path)
        if file is None:
            raise NotFoundError(f"File {file_path} not found in ChangeSet {change_set_id}")
        return apply_modifications(file.original_content, file.modifications)

    # ------------------------------------------------------------------
    # Single-modification review
    # ------------------------------------------------------------------

    async def accept_modification(self, change_set_id: str, modification_id: str) -> None:
        """Accept one modification and splice it into the file's current content.

        The modification is applied to what storage holds now, not to the
        snapshot. If the write fails the modification goes back to pending
        and the content read before the write is put back.

        Raises:
            ChangeSetNotFoundError: If the change set is unknown.
            ModificationNotFoundError: If the modification is unknown.
            InvalidStateError: If the modification is not pending.
            StorageIOError: If reading or writing the file fails.
        """
        change_set = self._require(change_set_id)
        file, mod = find_modification(change_set, modification_id)
        self._expect_status(mod, ModificationStatus.PENDING, "accept")

        current = await self._read(file.file_path)
        updated = apply_modification(current, mod)

        mod.status = ModificationStatus.ACCEPTED
        try:
            await self._write(file.file_path, updated)
        except StorageIOError:
            mod.status = ModificationStatus.PENDING
            await self._restore(file.file_path, current)
            raise

        logger.info("Accepted %s in %s (%s)", mod.id, change_set_id, file.file_path)

    def reject_modification(self, change_set_id: str, modification_id: str) -> None:
        """Reject one pending modification. Storage is not touched.

        Raises:
            ChangeSetNotFoundError: If the change set is unknown.
            ModificationNotFoundError: If the modification is unknown.
            InvalidStateError: If the modification is not pending.
        """
        change_set = self._require(change_set_id)
        _, mod = find_modification(change_set, modification_id)
        self._expect_status(mod, ModificationStatus.PENDING, "reject")
        mod.status = ModificationStatus.REJECTED
        logger.info("Rejected %s in %s", mod.id, change_set_id)

    async def undo_modification(self, change_set_id: str, modification_id: str) -> None:
        """Undo an accepted modification by restoring the whole file.

        The file is rewritten from the change-set backup. Other accepted
        modifications in the same file keep their status even though their
        edits are gone from storage.

        Raises:
            ChangeSetNotFoundError: If the change set is unknown.
            ModificationNotFoundError: If the modification is unknown.
            InvalidStateError: If the modification is not accepted.
            StorageIOError: If writing the backup fails; the status is kept.
        """
        change_set = self._require(change_set_id)
        file, mod = find_modification(change_set, modification_id)
        self._expect_status(mod, ModificationStatus.ACCEPTED, "undo")

        await self._write(file.file_path, self._backup(change_set_id, file.file_path))
        mod.status = ModificationStatus.PENDING

        logger.info("Undid %s in %s, restored %s", mod.id, change_set_id, file.file_path)

    # ------------------------------------------------------------------
    # Batch review
    # ------------------------------------------------------------------

    async def accept_all(self, change_set_id: str) -> None:
        """Accept every pending modification and write all files atomically.

        Each file is rebuilt from its snapshot with all accepted modifications
        applied. Files whose modifications are all rejected are not written;
        pending files without modifications are marked accepted. If any read
        or write fails, every file this call wrote or tried to write is
        restored and the statuses promoted by this call revert to pending.

        Raises:
            ChangeSetNotFoundError: If the change set is unknown.
            AcceptAllError: If storage fails; ``rolled_back`` tells whether
                every written file was restored.
        """
        change_set = self._require(change_set_id)
        promoted: list[Modification] = []
        resolved: list[FileModification] = []
        written: list[tuple[str, str]] = []  # (file_path, content to restore)

        try:
            for file in change_set.files:
                if file.is_unchanged:
                    if file.status == ReviewStatus.PENDING:
                        file.mark_unchanged(ModificationStatus.ACCEPTED)
                        resolved.append(file)
                    continue

                if file.accepted_modifications():
                    # Storage already differs from the backup; restore exactly this
                    restore_to = await self._read(file.file_path)
                else:
                    restore_to = self._backup(change_set_id, file.file_path)

                for mod in file.modifications:
                    if mod.status == ModificationStatus.PENDING:
                        mod.status = ModificationStatus.ACCEPTED
                        promoted.append(mod)

                if not file.accepted_modifications():
                    continue

                content = apply_modifications(file.original_content, file.modifications)
                # Registered before the write so a half-written file is restored too
                written.append((file.file_path, restore_to))
                await self._write(file.file_path, content)
        except StorageIOError as exc:
            for mod in promoted:
                mod.status = ModificationStatus.PENDING
            for file in resolved:
                file.mark_unchanged(ModificationStatus.PENDING)
            restored, unrestored = await self._rollback(change_set_id, written)
            rolled_back = not unrestored
            raise AcceptAllError(
                exc.path,
                exc.operation,
                f"Failed to accept all modifications in ChangeSet {change_set_id}: {exc} "
                f"(rollback {'completed' if rolled_back else 'incomplete'}, "
                f"{len(restored)} file(s) restored)",
                rolled_back=rolled_back,
                restored_files=restored,
                unrestored_files=unrestored,
            ) from exc

        logger.info(
            "Accepted all in %s, wrote %d file(s)", change_set_id, len(written)
        )

    def reject_all(self, change_set_id: str) -> None:
        """Reject every pending modification and every pending unchanged file.

        Storage is not touched.
        """
        change_set = self._require(change_set_id)
        for file in change_set.files:
            if file.is_unchanged and file.status == ReviewStatus.PENDING:
                file.mark_unchanged(ModificationStatus.REJECTED)
        count = 0
        for _, mod in change_set.iter_modifications():
            if mod.status == ModificationStatus.PENDING:
                mod.status = ModificationStatus.REJECTED
                count += 1
        logger.info("Rejected %d modification(s) in %s", count, change_set_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require(self, change_set_id: str) -> ChangeSet:
        change_set = self._change_sets.get(change_set_id)
        if change_set is None:
            raise ChangeSetNotFoundError(change_set_id)
        return change_set

    def _backup(self, change_set_id: str, file_path: str) -> str:
        backups = self._backups.get(change_set_id, {})
        if file_path not in backups:
            raise NotFoundError(
                f"No backup found for file {file_path} in ChangeSet {change_set_id}"
            )
        return backups[file_path]

    @staticmethod
    def _expect_status(
        mod: Modification,
        expected: ModificationStatus,
        action: str,
    ) -> None:
        if mod.status != expected:
            raise InvalidStateError(
                f"Cannot {action} modification {mod.id}: "
                f"status is {mod.status.value}, expected {expected.value}"
            )

    async def _rollback(
        self,
        change_set_id: str,
        written: list[tuple[str, str]],
    ) -> tuple[list[str], list[str]]:
        """Rewrite files to their pre-call content, newest write first."""
        logger.warning(
            "Rolling back %d file(s) in %s", len(written), change_set_id
        )
        restored: list[str] = []
        unrestored: list[str] = []
        for file_path, content in reversed(written):
            try:
                await self._write(file_path, content)
                restored.append(file_path)
            except StorageIOError as exc:
                logger.error("Rollback of %s failed: %s", file_path, exc)
                unrestored.append(file_path)
        return restored, unrestored

    async def _restore(self, path: str, content: str) -> None:
        try:
            await self._write(path, content)
        except StorageIOError as exc:
            logger.error("Restoring %s after a failed write failed: %s", path, exc)

    async def _read(self, path: str) -> str:
        try:
            return await self.storage.read_text(path)
        except Exception as exc:
            raise StorageIOError.wrap(path, "read", exc) from exc

    async def _write(self, path: str, text: str) -> None:
        try:
            await self.storage.write_text(path, text)
        except Exception as exc:
            raise StorageIOError.wrap(path, "write", exc) from exc
