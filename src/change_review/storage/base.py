"""Storage capability consumed by the change-set store."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextStorage(Protocol):
    """Host-provided text file access, addressed by path.

    Implementations raise whatever exception fits the failure; the store
    wraps it in StorageIOError.
    """

    async def read_text(self, path: str) -> str:
        ...

    async def write_text(self, path: str, text: str) -> None:
        ...
