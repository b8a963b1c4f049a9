from collections.abc import Mapping
from pathlib import Path

from casedraft.storage.exceptions import StoreError


class FileLoader:
    """Reads the bytes behind a document row's ``file_path``.

    Paths are resolved under ``files_root`` and may not escape it.
    """

    def __init__(self, files_root: Path | str) -> None:
        self._files_root = Path(files_root).resolve()

    def load(self, document: Mapping[str, object]) -> bytes:
        """Read document bytes from disk.

        Raises:
            FileNotFoundError: if the file does not exist at the resolved path.
            StoreError: if the row has no usable file path.
        """
        path = self.resolve_path(document)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return path.read_bytes()

    def resolve_path(self, document: Mapping[str, object]) -> Path:
        relative = document.get("file_path")
        if not isinstance(relative, str) or not relative:
            raise StoreError(f"Document {document.get('id')} has no file_path")
        path = (self._files_root / relative).resolve()
        if not path.is_relative_to(self._files_root):
            raise StoreError(f"File path escapes the files root: {relative}")
        return path
