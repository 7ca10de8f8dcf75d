"""Blob store collaborators: interfaces plus in-memory and SQLAlchemy backends."""
from .base import BlobStore, BlobReader, BlobWriter, BlobStoreError
from .memory import MemoryBlobStore
from .sqlalchemy_store import SqlAlchemyBlobStore

__all__ = [
    "BlobStore",
    "BlobReader",
    "BlobWriter",
    "BlobStoreError",
    "MemoryBlobStore",
    "SqlAlchemyBlobStore",
]
