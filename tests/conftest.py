import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Ensure project root is on sys.path for `import resultscache`
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from resultscache.blobstore import BlobReader, BlobStore, BlobWriter, MemoryBlobStore, SqlAlchemyBlobStore
from resultscache.cache import REQUIRED_ATTRS


@pytest.fixture
def mock_store():
    """Blob store double whose reader and writer record every call."""
    reader = Mock(spec=BlobReader)
    reader.ids.return_value = set()
    reader.get.return_value = None
    reader.get_all.return_value = {}

    writer = Mock(spec=BlobWriter)
    writer.write.return_value = True
    writer.update.return_value = True
    writer.delete.return_value = True

    store = Mock(spec=BlobStore)
    store.reader = reader
    store.writer = writer
    return store


@pytest.fixture
def memory_store():
    store = MemoryBlobStore(REQUIRED_ATTRS)
    yield store
    store.close()


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite:///{tmp_path / 'results_cache.db'}"


@pytest.fixture
def sqlite_store(sqlite_url):
    store = SqlAlchemyBlobStore(REQUIRED_ATTRS, database_url=sqlite_url)
    yield store
    store.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request):
    """Run a test against both store backends."""
    return request.getfixturevalue(f"{request.param}_store")
