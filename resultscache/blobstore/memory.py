"""In-memory blob store with staged commits."""
import threading
from typing import Dict, Iterable, Optional, Set, Tuple

from .base import BlobReader, BlobStore, BlobStoreError, BlobWriter

# Marks a staged delete of an attribute in the pending change set.
_DELETED = object()


class MemoryBlobStore(BlobStore):
    """
    Thread-safe in-process blob store.

    Writes go into a pending change set and only become visible to the reader
    once committed.

    Example:
        >>> store = MemoryBlobStore({"results"})
        >>> store.writer.write("k", "results", b"abc")
        True
        >>> store.writer.commit()
        >>> store.reader.get("k", "results")
        b'abc'
    """

    def __init__(self, attributes: Iterable[str]):
        super().__init__(attributes)
        self._data: Dict[Tuple[str, str], bytes] = {}
        self._pending: Dict[Tuple[str, str], object] = {}
        self._lock = threading.Lock()
        self._closed = False
        self._reader = _MemoryReader(self)
        self._writer = _MemoryWriter(self)

    @property
    def reader(self) -> BlobReader:
        return self._reader

    @property
    def writer(self) -> BlobWriter:
        return self._writer

    def close(self) -> None:
        with self._lock:
            self._pending.clear()
            self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise BlobStoreError("Blob store has been closed")

    def _current(self, slot: Tuple[str, str]) -> Optional[bytes]:
        """Value of `slot` as seen by the writer, pending changes included."""
        if slot in self._pending:
            value = self._pending[slot]
            return None if value is _DELETED else value
        return self._data.get(slot)


class _MemoryReader(BlobReader):

    def __init__(self, store: MemoryBlobStore):
        self._store = store

    def get(self, key: str, attr: str) -> Optional[bytes]:
        with self._store._lock:
            self._store._check_open()
            self._store._check_attr(attr)
            return self._store._data.get((key, attr))

    def get_all(self, attr: str) -> Dict[str, Optional[bytes]]:
        with self._store._lock:
            self._store._check_open()
            self._store._check_attr(attr)
            return {key: value for (key, a), value in self._store._data.items() if a == attr}

    def ids(self, attr: str) -> Set[str]:
        with self._store._lock:
            self._store._check_open()
            self._store._check_attr(attr)
            return {key for (key, a) in self._store._data if a == attr}


class _MemoryWriter(BlobWriter):

    def __init__(self, store: MemoryBlobStore):
        self._store = store

    def write(self, key: str, attr: str, blob: bytes) -> bool:
        with self._store._lock:
            self._store._check_open()
            self._store._check_attr(attr)
            if self._store._current((key, attr)) is not None:
                return False
            self._store._pending[(key, attr)] = bytes(blob)
            return True

    def update(self, key: str, attr: str, blob: bytes) -> bool:
        with self._store._lock:
            self._store._check_open()
            self._store._check_attr(attr)
            self._store._pending[(key, attr)] = bytes(blob)
            return True

    def delete(self, key: str) -> bool:
        with self._store._lock:
            self._store._check_open()
            removed = False
            for attr in self._store.attributes:
                if self._store._current((key, attr)) is not None:
                    self._store._pending[(key, attr)] = _DELETED
                    removed = True
            return removed

    def commit(self) -> None:
        with self._store._lock:
            self._store._check_open()
            for slot, value in self._store._pending.items():
                if value is _DELETED:
                    self._store._data.pop(slot, None)
                else:
                    self._store._data[slot] = value
            self._store._pending.clear()

    def rollback(self) -> None:
        with self._store._lock:
            self._store._check_open()
            self._store._pending.clear()
