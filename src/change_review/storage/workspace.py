"""Filesystem storage rooted at a workspace directory."""

import asyncio
import logging
import os
import stat
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"


class WorkspaceStorage:
    """Reads and writes text files relative to a workspace root.

    Blocking file I/O runs in a worker thread so the event loop only
    suspends around the actual read or write. Writes go to a temporary file
    beside the target and are moved into place, so a failed write leaves the
    previous content intact.
    """

    def __init__(self, root: str | Path, encoding: str = DEFAULT_ENCODING) -> None:
        """Initialize the storage.

        Args:
            root: Workspace directory. Relative paths are resolved against it.
            encoding: Text encoding for every read and write.

        Raises:
            NotADirectoryError: If root is not an existing directory.
        """
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            raise NotADirectoryError(f"Workspace root '{root}' is not a directory")
        self.encoding = encoding

    def resolve(self, relative_path: str) -> Path:
        """Resolve a workspace-relative path, refusing anything outside root."""
        # Reject paths with traversal sequences
        if ".." in Path(relative_path).parts:
            raise PermissionError(f"Path '{relative_path}' escapes the workspace")
        file_path = (self.root / relative_path).resolve()
        if not file_path.is_relative_to(self.root):
            raise PermissionError(f"Path '{relative_path}' escapes the workspace")
        return file_path

    async def read_text(self, path: str) -> str:
        file_path = self.resolve(path)
        logger.debug("Reading %s", file_path)
        return await asyncio.to_thread(self._read, file_path)

    async def write_text(self, path: str, text: str) -> None:
        file_path = self.resolve(path)
        logger.debug("Writing %d chars to %s", len(text), file_path)
        await asyncio.to_thread(self._write, file_path, text)

    def _read(self, file_path: Path) -> str:
        # newline="" keeps \r\n intact so line splitting sees the real content
        with file_path.open("r", encoding=self.encoding, newline="") as handle:
            return handle.read()

    def _write(self, file_path: Path, text: str) -> None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{file_path.name}.", suffix=".tmp", dir=file_path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding=self.encoding, newline="") as handle:
                handle.write(text)
            if file_path.exists():
                os.chmod(temp_name, stat.S_IMODE(file_path.stat().st_mode))
            os.replace(temp_name, file_path)
        except Exception:
            os.unlink(temp_name)
            raise
