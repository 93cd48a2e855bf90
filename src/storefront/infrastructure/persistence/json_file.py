"""A JSON document on disk shared by the JSON-backed repositories.

Every read-modify-write of one file happens under that file's lock, so
repositories running in different threads never lose each other's
updates.  Writes go to a temporary file first and are moved into place.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator

from storefront.domain.service.keyed_lock import KeyedLock

# One lock per resolved path, shared by every JsonFile in the process.
_file_locks = KeyedLock()


class JsonFile:

    def __init__(self, file_path: Path, empty: Callable[[], Any] = list) -> None:
        self._file_path = file_path
        self._empty = empty
        self._key = str(file_path.resolve())
        self._ensure_file()

    def read(self) -> Any:
        with _file_locks.hold(self._key):
            return self._load()

    @contextmanager
    def update(self) -> Iterator[Any]:
        """Yield the parsed document; persist it if the block succeeds."""
        with _file_locks.hold(self._key):
            data = self._load()
            yield data
            self._persist(data)

    # --- File helpers ---------------------------------------------------------

    def _load(self) -> Any:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist(self, data: Any) -> None:
        tmp = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        tmp.replace(self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(self._empty()), encoding="utf-8")
