import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any

from casedraft.storage.exceptions import StoreError

_KEY_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class JsonBlobStore:
    """String-keyed JSON collections, one file per key.

    Reads and writes always cover the whole collection. Writes go through a
    temporary file and a rename so a crash never leaves half a collection.
    """

    def __init__(self, directory: Path | str) -> None:
        self._directory = Path(directory)

    def read(self, key: str) -> list[dict[str, Any]]:
        path = self._path(key)
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Failed to read collection '{key}': {exc}") from exc
        if not isinstance(data, list):
            raise StoreError(f"Collection '{key}' is not a JSON array")
        return data

    def replace(self, key: str, records: list[dict[str, Any]]) -> None:
        path = self._path(key)
        tmp_name: str | None = None
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(records, handle, ensure_ascii=False, indent=2, default=str)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreError(f"Failed to write collection '{key}': {exc}") from exc

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise StoreError(f"Invalid collection key: {key!r}")
        return self._directory / f"{key}.json"
