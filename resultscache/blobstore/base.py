"""Base interfaces for key/attribute blob stores."""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional, Set


class BlobStoreError(Exception):
    """Raised when a blob store operation fails."""
    pass


class BlobReader(ABC):
    """Read-only view of a blob store."""

    @abstractmethod
    def get(self, key: str, attr: str) -> Optional[bytes]:
        """Return the blob stored for `attr` under `key`, or None if it is not set."""
        raise NotImplementedError

    @abstractmethod
    def get_all(self, attr: str) -> Dict[str, Optional[bytes]]:
        """Return a mapping of every key holding `attr` to its blob."""
        raise NotImplementedError

    @abstractmethod
    def ids(self, attr: str) -> Set[str]:
        """Return the set of keys that currently hold `attr`."""
        raise NotImplementedError

    def __getitem__(self, item):
        key, attr = item
        return self.get(key, attr)


class BlobWriter(ABC):
    """
    Mutating view of a blob store.

    Changes made through a writer are staged until `commit()` is called and
    can be discarded with `rollback()`.
    """

    @abstractmethod
    def write(self, key: str, attr: str, blob: bytes) -> bool:
        """
        Create `attr` under `key`.

        Returns:
            True if the blob was written, False if the attribute already exists
        """
        raise NotImplementedError

    @abstractmethod
    def update(self, key: str, attr: str, blob: bytes) -> bool:
        """Create or replace `attr` under `key`. Returns True once staged."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove every attribute stored under `key`. Returns True if anything was removed."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError


class BlobStore(ABC):
    """
    A store of binary blobs addressed by key and attribute name.

    Each store is configured with the set of attributes it accepts; using any
    other attribute raises BlobStoreError.
    """

    def __init__(self, attributes: Iterable[str]):
        self.attributes: Set[str] = set(attributes)

    @property
    @abstractmethod
    def reader(self) -> BlobReader:
        raise NotImplementedError

    @property
    @abstractmethod
    def writer(self) -> BlobWriter:
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        """Release the resources held by the store."""
        raise NotImplementedError

    def _check_attr(self, attr: str) -> None:
        if attr not in self.attributes:
            raise BlobStoreError(f"Unknown attribute '{attr}'. Available: {sorted(self.attributes)}")
