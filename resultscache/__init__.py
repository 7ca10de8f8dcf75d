"""Keyed results cache with time to live processing over a blob store."""
from .cache import BlobStoreResultsCache, ResultsCache, REQUIRED_ATTRS, RESULTS_ATTR, TTL_ATTR
from .exceptions import CacheError, ResultsCacheError
from .factory import create_blob_store, create_results_cache

__all__ = [
    "BlobStoreResultsCache",
    "ResultsCache",
    "REQUIRED_ATTRS",
    "RESULTS_ATTR",
    "TTL_ATTR",
    "CacheError",
    "ResultsCacheError",
    "create_blob_store",
    "create_results_cache",
]
