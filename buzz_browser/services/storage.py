from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict


class StorageBackend(ABC):
    """
    Abstract key/value byte storage for persisted store snapshots.
    """

    @abstractmethod
    def write_bytes(self, key: str, data: bytes) -> None:
        pass

    @abstractmethod
    def read_bytes(self, key: str) -> bytes:
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""
        pass


class LocalFileSystemStorage(StorageBackend):
    """
    One file per key under a root directory.
    """

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _resolve(self, key: str) -> Path:
        # Prevent path traversal
        full_path = (self.root / key).resolve()
        if not full_path.is_relative_to(self.root):
            raise ValueError(f"Access denied: {key}")
        return full_path

    def write_bytes(self, key: str, data: bytes) -> None:
        p = self._resolve(key)
        p.parent.mkdir(parents=True, exist_ok=True)
        # Readers see either the old or the new payload, never a partial one
        tmp = p.with_name(p.name + ".tmp")
        tmp.write_bytes(data)
        tmp.replace(p)

    def read_bytes(self, key: str) -> bytes:
        return self._resolve(key).read_bytes()

    def exists(self, key: str) -> bool:
        return self._resolve(key).exists()

    def delete(self, key: str) -> None:
        self._resolve(key).unlink(missing_ok=True)


class InMemoryStorage(StorageBackend):
    """Process-local storage; handy for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._data: Dict[str, bytes] = {}

    def write_bytes(self, key: str, data: bytes) -> None:
        self._data[key] = bytes(data)

    def read_bytes(self, key: str) -> bytes:
        try:
            return self._data[key]
        except KeyError:
            raise FileNotFoundError(key) from None

    def exists(self, key: str) -> bool:
        return key in self._data

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
