"""Tests for settings, store wiring and the sweep entry point."""
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from resultscache import create_blob_store, create_results_cache
from resultscache.blobstore import BlobStoreError, MemoryBlobStore, SqlAlchemyBlobStore
from resultscache.cache import BYTE_ENCODING, REQUIRED_ATTRS, RESULTS_ATTR, TTL_ATTR
from resultscache.cache.blobstore_cache import format_instant
from resultscache.config import CacheSettings, load_settings
from resultscache import sweep


class TestSettings:

    def test_defaults(self, monkeypatch):
        for var in ("RESULTS_CACHE_DATABASE_URL", "RESULTS_CACHE_TTL_SECONDS", "RESULTS_CACHE_MAX_KEY_ATTEMPTS"):
            monkeypatch.delenv(var, raising=False)

        settings = load_settings()

        assert settings.database_url == "sqlite:///./results_cache.db"
        assert settings.ttl_seconds == 3600
        assert settings.max_key_attempts == 16

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("RESULTS_CACHE_DATABASE_URL", "memory://")
        monkeypatch.setenv("RESULTS_CACHE_TTL_SECONDS", "90")
        monkeypatch.setenv("RESULTS_CACHE_MAX_KEY_ATTEMPTS", "4")

        settings = load_settings()

        assert settings.database_url == "memory://"
        assert settings.ttl_seconds == 90
        assert settings.max_key_attempts == 4

    def test_invalid_values_rejected(self):
        with pytest.raises(ValidationError):
            CacheSettings(max_key_attempts=0)
        with pytest.raises(ValidationError):
            CacheSettings(ttl_seconds=-1)


class TestFactory:

    def test_memory_store(self):
        store = create_blob_store(CacheSettings(database_url="memory://"))
        assert isinstance(store, MemoryBlobStore)
        assert store.attributes == set(REQUIRED_ATTRS)

    def test_sqlalchemy_store(self, sqlite_url):
        store = create_blob_store(CacheSettings(database_url=sqlite_url))
        try:
            assert isinstance(store, SqlAlchemyBlobStore)
            assert store.attributes == set(REQUIRED_ATTRS)
        finally:
            store.close()

    def test_unreachable_database_raises(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'missing' / 'results_cache.db'}"

        with pytest.raises(BlobStoreError, match="initialisation failed"):
            create_blob_store(CacheSettings(database_url=url))

    def test_create_results_cache(self):
        with create_results_cache(CacheSettings(database_url="memory://", max_key_attempts=3)) as cache:
            assert cache.max_key_attempts == 3
            key = cache.put(b"value")
            assert cache.get(key) == b"value"


class TestSweep:
    """Test the command line sweep."""

    def _seed(self, sqlite_url):
        store = SqlAlchemyBlobStore(REQUIRED_ATTRS, database_url=sqlite_url)
        now = datetime.now(timezone.utc)
        for key, instant in (("old", now - timedelta(hours=2)), ("new", now)):
            store.writer.write(key, RESULTS_ATTR, key.encode(BYTE_ENCODING))
            store.writer.write(key, TTL_ATTR, format_instant(instant).encode(BYTE_ENCODING))
        store.writer.commit()
        store.close()

    def test_sweep_removes_expired(self, sqlite_url):
        self._seed(sqlite_url)

        assert sweep.main(["--database-url", sqlite_url, "--ttl-seconds", "3600"]) == 0

        store = SqlAlchemyBlobStore(REQUIRED_ATTRS, database_url=sqlite_url)
        try:
            assert store.reader.ids(RESULTS_ATTR) == {"new"}
            assert store.reader.ids(TTL_ATTR) == {"new"}
        finally:
            store.close()

    def test_sweep_reports_failure(self, sqlite_url):
        store = SqlAlchemyBlobStore(REQUIRED_ATTRS, database_url=sqlite_url)
        store.writer.write("bad", TTL_ATTR, b"not a time")
        store.writer.commit()
        store.close()

        assert sweep.main(["--database-url", sqlite_url]) == 1

    def test_sweep_reports_malformed_url(self):
        assert sweep.main(["--database-url", "not a database url"]) == 1
