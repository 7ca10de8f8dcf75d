"""Results cache with time to live processing over a blob store."""
from .base import ResultsCache
from .blobstore_cache import (
    BlobStoreResultsCache,
    CacheState,
    BYTE_ENCODING,
    RESULTS_ATTR,
    TTL_ATTR,
    REQUIRED_ATTRS,
)
from .cache_key import generate_cache_key

__all__ = [
    "ResultsCache",
    "BlobStoreResultsCache",
    "CacheState",
    "BYTE_ENCODING",
    "RESULTS_ATTR",
    "TTL_ATTR",
    "REQUIRED_ATTRS",
    "generate_cache_key",
]
