"""Storage capabilities the change-set store reads and writes through."""

from change_review.storage.base import TextStorage
from change_review.storage.memory import MemoryStorage
from change_review.storage.workspace import WorkspaceStorage

__all__ = [
    "MemoryStorage",
    "TextStorage",
    "WorkspaceStorage",
]
