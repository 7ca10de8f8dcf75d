"""Blob store persisted through SQLAlchemy."""
from contextlib import contextmanager
from typing import Dict, Iterable, Optional, Set
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from resultscache.db.database import create_engine_for, init_db, make_session_factory
from resultscache.db.models import BlobAttribute
from .base import BlobReader, BlobStore, BlobStoreError, BlobWriter

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(action: str):
    """Convert SQLAlchemy failures into BlobStoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Blob store {action} failed: {e}")
        raise BlobStoreError(f"Blob store {action} failed: {e}") from e


class SqlAlchemyBlobStore(BlobStore):
    """
    Blob store keeping one `blob_attributes` row per (key, attribute).

    A single session backs both the reader and the writer, so staged writes
    are visible to this store's reader before they are committed.

    Args:
        attributes: attribute names the store accepts
        engine: SQLAlchemy engine to use. Ignored when `database_url` is given.
        database_url: URL to build a private engine from; the engine is
            disposed when the store is closed.
    """

    def __init__(self, attributes: Iterable[str], engine: Optional[Engine] = None,
                 database_url: Optional[str] = None):
        super().__init__(attributes)
        if database_url is not None:
            with _store_errors("initialisation"):
                engine = create_engine_for(database_url)
            self._owns_engine = True
        elif engine is not None:
            self._owns_engine = False
        else:
            raise ValueError("Either engine or database_url must be provided")

        self.engine = engine
        try:
            with _store_errors("initialisation"):
                init_db(engine)
        except BlobStoreError:
            if self._owns_engine:
                engine.dispose()
            raise
        self._session: Optional[Session] = make_session_factory(engine)()
        self._reader = _SqlAlchemyReader(self)
        self._writer = _SqlAlchemyWriter(self)

    @property
    def reader(self) -> BlobReader:
        return self._reader

    @property
    def writer(self) -> BlobWriter:
        return self._writer

    @property
    def session(self) -> Session:
        if self._session is None:
            raise BlobStoreError("Blob store has been closed")
        return self._session

    def close(self) -> None:
        if self._session is None:
            return
        with _store_errors("close"):
            self._session.close()
            self._session = None
            if self._owns_engine:
                self.engine.dispose()

    def _rows(self, attr: str):
        self._check_attr(attr)
        return self.session.query(BlobAttribute).filter(BlobAttribute.attribute == attr)

    def _row(self, key: str, attr: str) -> Optional[BlobAttribute]:
        return self._rows(attr).filter(BlobAttribute.entity_id == key).first()


class _SqlAlchemyReader(BlobReader):

    def __init__(self, store: SqlAlchemyBlobStore):
        self._store = store

    def get(self, key: str, attr: str) -> Optional[bytes]:
        with _store_errors("read"):
            row = self._store._row(key, attr)
            return row.value if row is not None else None

    def get_all(self, attr: str) -> Dict[str, Optional[bytes]]:
        with _store_errors("read"):
            return {row.entity_id: row.value for row in self._store._rows(attr).all()}

    def ids(self, attr: str) -> Set[str]:
        with _store_errors("read"):
            return {entity_id for (entity_id,) in self._store._rows(attr).with_entities(BlobAttribute.entity_id)}


class _SqlAlchemyWriter(BlobWriter):

    def __init__(self, store: SqlAlchemyBlobStore):
        self._store = store

    def write(self, key: str, attr: str, blob: bytes) -> bool:
        with _store_errors("write"):
            if self._store._row(key, attr) is not None:
                return False
            session = self._store.session
            try:
                with session.begin_nested():
                    session.add(BlobAttribute(entity_id=key, attribute=attr, value=bytes(blob)))
            except IntegrityError:
                # Another connection created the row first.
                return False
            return True

    def update(self, key: str, attr: str, blob: bytes) -> bool:
        with _store_errors("update"):
            row = self._store._row(key, attr)
            if row is None:
                self._store.session.add(BlobAttribute(entity_id=key, attribute=attr, value=bytes(blob)))
            else:
                row.value = bytes(blob)
            self._store.session.flush()
            return True

    def delete(self, key: str) -> bool:
        with _store_errors("delete"):
            count = (
                self._store.session.query(BlobAttribute)
                .filter(BlobAttribute.entity_id == key)
                .delete(synchronize_session="fetch")
            )
            return count > 0

    def commit(self) -> None:
        with _store_errors("commit"):
            self._store.session.commit()

    def rollback(self) -> None:
        with _store_errors("rollback"):
            self._store.session.rollback()
