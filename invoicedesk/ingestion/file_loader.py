import mimetypes
from pathlib import Path

from invoicedesk.ingestion.models import RawFile


def guess_content_type(path: Path) -> str:
    """Declared content type of a file, from its extension."""
    content_type, _ = mimetypes.guess_type(path.name)
    return content_type or "application/octet-stream"


class FileLoader:
    """Reads files from disk into RawFile uploads."""

    def load(self, path: Path) -> RawFile:
        """Read a single file.

        Raises:
            FileNotFoundError: if the path does not exist or is not a file.
        """
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return RawFile(
            file_name=path.name,
            content_type=guess_content_type(path),
            content=path.read_bytes(),
        )

    def load_many(self, paths: list[Path]) -> list[RawFile]:
        return [self.load(path) for path in paths]

    def load_directory(self, directory: Path) -> list[RawFile]:
        """Read every regular file in a directory, sorted by name."""
        if not directory.is_dir():
            raise FileNotFoundError(f"Directory not found: {directory}")
        return self.load_many(sorted(p for p in directory.iterdir() if p.is_file()))
