"""Results cache backed by a blob store."""
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Union
import logging
import re

from resultscache.blobstore.base import BlobStore, BlobStoreError
from resultscache.exceptions import CLOSED_MESSAGE, ResultsCacheError
from .base import ResultsCache
from .cache_key import generate_cache_key

logger = logging.getLogger(__name__)

BYTE_ENCODING = "utf-8"

RESULTS_ATTR = "results"
TTL_ATTR = "ttl"

# Attributes a blob store must accept to back the cache.
REQUIRED_ATTRS = frozenset({RESULTS_ATTR, TTL_ATTR})

DEFAULT_MAX_KEY_ATTEMPTS = 16

_FRACTION = re.compile(r"\.(\d+)")


class CacheState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


def format_instant(instant: datetime) -> str:
    """Format an instant as UTC ISO-8601 with millisecond precision, e.g. 2020-05-01T03:04:05.123Z."""
    instant = instant.astimezone(timezone.utc)
    return instant.strftime("%Y-%m-%dT%H:%M:%S.") + f"{instant.microsecond // 1000:03d}Z"


def parse_instant(value: str) -> datetime:
    """
    Parse an ISO-8601 instant written by `format_instant` or any other writer.

    Accepts a `Z` suffix or a numeric offset; values without an offset are UTC.
    Fractions are padded or truncated to microseconds.
    """
    value = value.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    value = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value)
    instant = datetime.fromisoformat(value)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BlobStoreResultsCache(ResultsCache):
    """
    Results cache backed by a blob store.

    Each result is kept under a generated key in the `results` attribute, and
    its time to live marker in the `ttl` attribute of the same key. The marker
    is the instant the result was last declared alive; `process_time_to_live`
    removes the whole key once the marker plus the grace duration has passed.

    The cache takes ownership of the store and closes it on `close()`.

    Example:
        >>> cache = BlobStoreResultsCache(MemoryBlobStore(REQUIRED_ATTRS))
        >>> key = cache.put(b"result")
        >>> cache.add_time_to_live(key)
        >>> cache.get(key)
        b'result'
        >>> cache.process_time_to_live(timedelta(hours=1))
    """

    def __init__(self, blob_store: BlobStore, max_key_attempts: int = DEFAULT_MAX_KEY_ATTEMPTS):
        if max_key_attempts < 1:
            raise ValueError("max_key_attempts must be at least 1")
        self._blob_store = blob_store
        self.max_key_attempts = max_key_attempts
        self.state = CacheState.OPEN

    @property
    def closed(self) -> bool:
        return self.state is CacheState.CLOSED

    def _ensure_open(self) -> None:
        if self.state is CacheState.CLOSED:
            raise ResultsCacheError(CLOSED_MESSAGE)

    def get(self, key: str) -> Optional[bytes]:
        self._ensure_open()

        try:
            return self._blob_store.reader.get(key, RESULTS_ATTR)
        except BlobStoreError as e:
            raise ResultsCacheError(str(e), e) from e

    def put(self, result: bytes) -> str:
        self._ensure_open()

        try:
            ids = self._blob_store.reader.ids(RESULTS_ATTR)
            key = self._new_key(ids)

            if self._blob_store.writer.write(key, RESULTS_ATTR, result):
                self._blob_store.writer.commit()
                logger.debug(f"Stored {len(result)} bytes under {key}")
                return key

            logger.warning(f"Blob store refused to store result under {key}")
            return ""
        except BlobStoreError as e:
            raise ResultsCacheError(str(e), e) from e

    def add_time_to_live(self, key: str) -> None:
        self._ensure_open()

        try:
            self._blob_store.writer.write(key, TTL_ATTR, self._build_ttl_value())
            self._blob_store.writer.commit()
        except BlobStoreError as e:
            raise ResultsCacheError(str(e), e) from e

    def update_time_to_live(self, key: str) -> None:
        self._ensure_open()

        try:
            self._blob_store.writer.update(key, TTL_ATTR, self._build_ttl_value())
            self._blob_store.writer.commit()
        except BlobStoreError as e:
            raise ResultsCacheError(str(e), e) from e

    def process_time_to_live(self, duration: Union[timedelta, int, float]) -> None:
        self._ensure_open()

        if not isinstance(duration, timedelta):
            try:
                duration = timedelta(seconds=duration)
            except OverflowError as e:
                raise ResultsCacheError(f"Time to live duration out of range: {duration}", e) from e

        removed = 0
        try:
            now = _utc_now()
            for key, value in self._blob_store.reader.get_all(TTL_ATTR).items():
                if value is None:
                    continue

                try:
                    instant = parse_instant(value.decode(BYTE_ENCODING))
                except (UnicodeDecodeError, ValueError) as e:
                    raise ResultsCacheError(f"Invalid time to live marker for {key}: {e}", e) from e

                try:
                    expire_time = instant + duration
                except OverflowError:
                    # Expiry lies outside the representable range of instants.
                    if duration > timedelta(0):
                        continue
                    expire_time = datetime.min.replace(tzinfo=timezone.utc)

                if now > expire_time:
                    self._blob_store.writer.delete(key)
                    self._blob_store.writer.commit()
                    removed += 1
                    logger.info(f"Removed expired result {key}")
        except BlobStoreError as e:
            logger.error(f"Time to live processing aborted after removing {removed} results: {e}")
            raise ResultsCacheError(str(e), e) from e

        logger.info(f"Time to live processing removed {removed} results")

    def close(self) -> None:
        if self.state is CacheState.CLOSED:
            return

        self.state = CacheState.CLOSED
        try:
            self._blob_store.close()
        except Exception as e:
            raise ResultsCacheError(str(e), e) from e

    def _new_key(self, ids) -> str:
        for attempt in range(1, self.max_key_attempts + 1):
            key = generate_cache_key()
            if key not in ids:
                if attempt > 1:
                    logger.warning(f"Generated key collided {attempt - 1} time(s) before finding {key}")
                return key
        raise ResultsCacheError(f"Unable to generate a unique key after {self.max_key_attempts} attempts")

    @staticmethod
    def _build_ttl_value() -> bytes:
        return format_instant(_utc_now()).encode(BYTE_ENCODING)
