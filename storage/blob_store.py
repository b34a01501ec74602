"""
Key-value blob stores backing the local storage collections

Each key holds one JSON document as text. Capacity is finite, like browser
local storage, and an over-quota write fails with StorageFullError.
"""

import errno
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from exceptions import StorageFullError, StorageWriteError

logger = logging.getLogger(__name__)

DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024
_FULL_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


def _size(value: str) -> int:
    return len(value.encode("utf-8"))


class BlobStore(ABC):
    """Key -> text blob storage with a byte quota"""

    def __init__(self, quota_bytes: Optional[int] = DEFAULT_QUOTA_BYTES):
        self.quota_bytes = quota_bytes

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the blob for key, or None if absent"""

    @abstractmethod
    def _write(self, key: str, value: str) -> None:
        """Persist a blob that already passed the quota check"""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key; missing keys are ignored"""

    @abstractmethod
    def keys(self) -> List[str]:
        """All stored keys"""

    @abstractmethod
    def size_of(self, key: str) -> int:
        """Stored size of key in bytes (0 if absent)"""

    def used_bytes(self) -> int:
        return sum(self.size_of(key) for key in self.keys())

    def set(self, key: str, value: str) -> None:
        """Store value under key, enforcing the quota"""
        if self.quota_bytes is not None:
            required = self.used_bytes() - self.size_of(key) + _size(value)
            if required > self.quota_bytes:
                logger.warning(f"Refusing write of '{key}': {required} bytes exceeds quota {self.quota_bytes}")
                raise StorageFullError(key, required, self.quota_bytes)
        self._write(key, value)


class MemoryBlobStore(BlobStore):
    """In-process blob store"""

    def __init__(self, quota_bytes: Optional[int] = DEFAULT_QUOTA_BYTES):
        super().__init__(quota_bytes)
        self._blobs: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def _write(self, key: str, value: str) -> None:
        self._blobs[key] = value

    def remove(self, key: str) -> None:
        self._blobs.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._blobs)

    def size_of(self, key: str) -> int:
        value = self._blobs.get(key)
        return _size(value) if value is not None else 0


class FileBlobStore(BlobStore):
    """Local JSON file storage, one <key>.json file per key"""

    def __init__(self, data_directory: str = "storage/data", quota_bytes: Optional[int] = DEFAULT_QUOTA_BYTES):
        super().__init__(quota_bytes)
        self.data_directory = Path(data_directory)
        self.data_directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.data_directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        file_path = self._path(key)
        if not file_path.exists():
            return None
        try:
            return file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {file_path}: {e}")
            return None

    def _write(self, key: str, value: str) -> None:
        file_path = self._path(key)
        tmp_path = file_path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(value)
            tmp_path.replace(file_path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            if e.errno in _FULL_ERRNOS:
                raise StorageFullError(key) from e
            raise StorageWriteError(key, str(e)) from e

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> List[str]:
        return [path.stem for path in self.data_directory.glob("*.json")]

    def size_of(self, key: str) -> int:
        file_path = self._path(key)
        return file_path.stat().st_size if file_path.exists() else 0

    def get_data_directory(self) -> Path:
        """Get the data directory path"""
        return self.data_directory
