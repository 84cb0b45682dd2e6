"""Directory-backed key/value storage.

Each key is stored as one UTF-8 text file named after the key. Writes go to a
temporary file in the same directory and are moved into place with
``os.replace``, so a reader never sees a half-written value.
"""

import json
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Any, List, Optional, Union

from infrastructure.logging import get_module_logger

logger = get_module_logger()

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
_SUFFIX = ".value"


class LocalStorage:
    """Persistent string store keyed by simple names.

    Usage:
        storage = LocalStorage(".datasync")
        storage.set_item("last_sync_time", "2024-05-01T12:00:00+00:00")
        storage.get_item("last_sync_time")
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self._lock = threading.Lock()

    @staticmethod
    def _check_key(key: str) -> None:
        if not _KEY_PATTERN.match(key) or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")

    def _path(self, key: str) -> Path:
        self._check_key(key)
        return self.directory / f"{key}{_SUFFIX}"

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored text for ``key`` or None."""
        path = self._path(key)
        with self._lock:
            try:
                return path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return None

    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        path = self._path(key)
        with self._lock:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        logger.debug("local_storage_item_written", key=key, size=len(value))

    def remove_item(self, key: str) -> bool:
        """Delete ``key``. Returns True if it existed."""
        path = self._path(key)
        with self._lock:
            try:
                path.unlink()
            except FileNotFoundError:
                return False
        return True

    def keys(self) -> List[str]:
        """Stored keys, sorted."""
        with self._lock:
            if not self.directory.is_dir():
                return []
            return sorted(
                path.name[: -len(_SUFFIX)]
                for path in self.directory.iterdir()
                if path.name.endswith(_SUFFIX) and not path.name.startswith(".")
            )

    def get_json(self, key: str) -> Optional[Any]:
        """Decode the stored value as JSON; None if the key is missing."""
        raw = self.get_item(key)
        return None if raw is None else json.loads(raw)

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value, ensure_ascii=False))
