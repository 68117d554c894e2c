"""Resolve logical file names to text content."""

from pathlib import Path
from typing import Protocol

from ..errors import DistributionFileNotFoundError


class FileSource(Protocol):
    """Anything that can return the text of a named file."""

    def read_text(self, name: str) -> str: ...


class DirectoryFileSource:
    """Files under a root directory; names are relative to the root."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def path_for(self, name: str) -> Path:
        return self.root / name

    def read_text(self, name: str) -> str:
        path = self.path_for(name)
        if not path.is_file():
            raise DistributionFileNotFoundError(f"Distribution file not found: {path}")
        return path.read_text(encoding="utf-8")

    def __repr__(self) -> str:
        return f"DirectoryFileSource({str(self.root)!r})"


class InMemoryFileSource:
    """Named text blobs held in memory (embedded configuration, tests)."""

    def __init__(self, files: dict[str, str] | None = None):
        self.files = dict(files or {})

    def read_text(self, name: str) -> str:
        try:
            return self.files[name]
        except KeyError:
            raise DistributionFileNotFoundError(f"Distribution file not found: {name}") from None
