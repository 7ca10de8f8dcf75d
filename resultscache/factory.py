"""Build blob stores and caches from settings."""
from typing import Optional
import logging

from resultscache.blobstore import BlobStore, MemoryBlobStore, SqlAlchemyBlobStore
from resultscache.cache import BlobStoreResultsCache, REQUIRED_ATTRS
from resultscache.config import MEMORY_DATABASE_URL, CacheSettings, get_settings

logger = logging.getLogger(__name__)


def create_blob_store(settings: Optional[CacheSettings] = None) -> BlobStore:
    """Create the blob store named by `settings.database_url`, accepting the cache's attributes."""
    settings = settings or get_settings()
    if settings.database_url == MEMORY_DATABASE_URL:
        return MemoryBlobStore(REQUIRED_ATTRS)

    store = SqlAlchemyBlobStore(REQUIRED_ATTRS, database_url=settings.database_url)
    logger.info(f"Opened blob store at {store.engine.url}")
    return store


def create_results_cache(settings: Optional[CacheSettings] = None) -> BlobStoreResultsCache:
    """
    Create a results cache over the configured blob store.

    Example:
        >>> with create_results_cache(CacheSettings(database_url="memory://")) as cache:
        ...     key = cache.put(b"result")
    """
    settings = settings or get_settings()
    return BlobStoreResultsCache(create_blob_store(settings), max_key_attempts=settings.max_key_attempts)
