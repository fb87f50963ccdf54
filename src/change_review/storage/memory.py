"""In-memory storage for editor buffers and tests."""


class MemoryStorage:
    """Dict-backed TextStorage."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files: dict[str, str] = dict(files or {})

    async def read_text(self, path: str) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(f"No such file: {path}") from None

    async def write_text(self, path: str, text: str) -> None:
        self.files[path] = text
