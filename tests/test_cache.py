"""Tests for cache module."""

import json
import logging

import pytest

from cachemigrate.cache.loader import DEFAULT_CACHE_KEY, CacheLoader
from cachemigrate.cache.memory import FileStore, InMemoryStore
from cachemigrate.core.exceptions import CacheStoreError, MigrationTransformError
from cachemigrate.core.settings import CacheMigrateSettings
from cachemigrate.migrations.base import MigrationTable, migration
from cachemigrate.migrations.runner import NO_CACHE, MigrationRunner

USER_ID = "0f8fad5b-d9cb-469f-a165-70867728950e"


def _stored(blob):
    return InMemoryStore({DEFAULT_CACHE_KEY: json.dumps(blob)})


def _snapshot(version="0.0.28", **fields):
    return {
        "version": version,
        "theme": "dark",
        "tags": [],
        "authors": [],
        "postPreviews": [],
        "user": USER_ID,
        **fields,
    }


class TestInMemoryStore:
    """Tests for InMemoryStore."""

    def test_set_and_get(self):
        """Test basic set and get."""
        store = InMemoryStore()

        store.set_item("key1", "value1")

        assert store.get_item("key1") == "value1"
        assert store.has_item("key1")

    def test_get_nonexistent(self):
        """Test getting a nonexistent key."""
        assert InMemoryStore().get_item("missing") is None

    def test_remove(self):
        """Test removing a key."""
        store = InMemoryStore({"key1": "value1"})

        assert store.remove_item("key1") is True
        assert store.remove_item("key1") is False
        assert store.get_item("key1") is None

    def test_clear(self):
        """Test clearing all keys."""
        store = InMemoryStore({"a": "1", "b": "2"})

        store.clear()

        assert len(store) == 0


class TestFileStore:
    """Tests for FileStore."""

    def test_missing_file_is_empty(self, tmp_path):
        """Test a store whose file does not exist yet."""
        store = FileStore(tmp_path / "store.json")

        assert store.get_item("anything") is None

    def test_persists_across_instances(self, tmp_path):
        """Test values survive re-opening the store."""
        path = tmp_path / "nested" / "store.json"
        FileStore(path).set_item("key1", "value1")

        assert FileStore(path).get_item("key1") == "value1"
        assert json.loads(path.read_text(encoding="utf-8")) == {"key1": "value1"}

    def test_remove(self, tmp_path):
        """Test removing a persisted key."""
        store = FileStore(tmp_path / "store.json")
        store.set_item("a", "1")
        store.set_item("b", "2")

        assert store.remove_item("a") is True
        assert store.remove_item("a") is False
        assert FileStore(tmp_path / "store.json").get_item("b") == "2"

    def test_no_temp_files_left(self, tmp_path):
        """Test atomic writes clean up after themselves."""
        store = FileStore(tmp_path / "store.json")
        store.set_item("a", "1")
        store.set_item("a", "2")

        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]", '"text"'])
    def test_unreadable_file_treated_as_empty(self, tmp_path, caplog, content):
        """Test corrupt store files do not crash reads."""
        path = tmp_path / "store.json"
        path.write_text(content, encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            assert FileStore(path).get_item("key") is None

        assert "Ignoring" in caplog.text

    def test_undecodable_bytes_treated_as_empty(self, tmp_path, caplog):
        """Test a store file that is not valid UTF-8 reads as empty."""
        path = tmp_path / "store.json"
        path.write_bytes(b'{"app-cache": "\xff\xfe"}')

        with caplog.at_level(logging.WARNING):
            assert FileStore(path).get_item(DEFAULT_CACHE_KEY) is None
            assert CacheLoader(FileStore(path)).load() is None

        assert "Ignoring unreadable store file" in caplog.text

    def test_non_string_values_ignored(self, tmp_path):
        """Test values that are not strings are skipped."""
        path = tmp_path / "store.json"
        path.write_text(json.dumps({"a": 1, "b": "two"}), encoding="utf-8")

        store = FileStore(path)

        assert store.get_item("a") is None
        assert store.get_item("b") == "two"

    def test_directory_path_raises(self, tmp_path):
        """Test an unusable path raises CacheStoreError."""
        store = FileStore(tmp_path)

        with pytest.raises(CacheStoreError):
            store.get_item("key")


class TestCacheLoaderRead:
    """Tests for CacheLoader.read."""

    def test_read_valid(self):
        """Test reading a stored object."""
        loader = CacheLoader(_stored({"version": "0.0.1"}))

        assert loader.read().value == {"version": "0.0.1"}

    def test_read_missing(self):
        """Test a missing key is no cache."""
        result = CacheLoader(InMemoryStore()).read()

        assert result.reason == NO_CACHE

    @pytest.mark.parametrize("text", ["", "{broken", "null", "[]", '"0.0.1"', "3"])
    def test_read_unusable_text(self, text):
        """Test text that is not a JSON object is no cache, not a crash."""
        loader = CacheLoader(InMemoryStore({DEFAULT_CACHE_KEY: text}))

        result = loader.read()

        assert result.is_err()
        assert result.reason == NO_CACHE

    def test_read_deeply_nested_text(self):
        """Test nesting too deep for the JSON decoder is no cache."""
        text = "[" * 200000 + "]" * 200000
        loader = CacheLoader(InMemoryStore({DEFAULT_CACHE_KEY: text}))

        assert loader.read().reason == NO_CACHE
        assert loader.load() is None


class TestCacheLoaderLoad:
    """Tests for CacheLoader.load and friends."""

    def test_load_migrates(self):
        """Test an old cache is migrated on load."""
        loader = CacheLoader(_stored(_snapshot("0.0.26")))

        cache = loader.load()

        assert cache["version"] == "0.0.36"
        assert cache["user"] == USER_ID

    def test_load_missing_returns_default(self, caplog):
        """Test no stored cache falls back to the default."""
        loader = CacheLoader(InMemoryStore())

        with caplog.at_level(logging.WARNING, logger="cachemigrate.cache.loader"):
            assert loader.load() is None

        assert "Starting without cache: no cache" in caplog.text

    def test_custom_default(self):
        """Test the default factory is used for fallback."""
        loader = CacheLoader(InMemoryStore({DEFAULT_CACHE_KEY: "{bad"}), default_factory=dict)

        assert loader.load() == {}

    def test_bad_version_returns_default(self):
        """Test a malformed version falls back to the default."""
        loader = CacheLoader(_stored({"version": "zero"}), default_factory=dict)

        assert loader.load() == {}
        assert "malformed" in loader.load_result().reason

    def test_stalled_kept_by_default(self):
        """Test a stalled cache is returned when not discarding."""
        loader = CacheLoader(_stored(_snapshot("9.9.9")))

        assert loader.load()["version"] == "9.9.9"

    def test_discard_stalled(self):
        """Test an incomplete migration can be replaced by the default."""
        loader = CacheLoader(
            _stored(_snapshot("9.9.9")),
            default_factory=dict,
            discard_stalled=True,
        )

        assert loader.load() == {}
        assert "stopped at 9.9.9" in loader.load_result().reason

    def test_validate_schema_accepts_current_shape(self):
        """Test a well-formed migrated cache passes validation."""
        loader = CacheLoader(_stored(_snapshot("0.0.30")), validate_schema=True)

        assert loader.load()["version"] == "0.0.36"

    def test_validate_schema_rejects_bad_shape(self):
        """Test a migrated cache of the wrong shape is replaced."""
        loader = CacheLoader(
            _stored({"version": "0.0.30", "tags": "not-a-list"}),
            default_factory=dict,
            validate_schema=True,
        )

        assert loader.load() == {}
        assert "does not match" in loader.load_result().reason

    def test_transform_failure_propagates(self):
        """Test a broken step is not hidden behind the default state."""
        table = MigrationTable.of([migration("0.0.1", "0.0.2", lambda data: 1 / 0)])
        loader = CacheLoader(_stored({"version": "0.0.1"}), runner=MigrationRunner(table))

        with pytest.raises(MigrationTransformError):
            loader.load()

    def test_save_then_load(self):
        """Test a saved cache is read back unchanged."""
        loader = CacheLoader(InMemoryStore())
        cache = _snapshot("0.0.36")

        loader.save(cache)

        assert loader.load() == cache

    def test_clear(self):
        """Test clearing removes the stored cache."""
        loader = CacheLoader(_stored(_snapshot()))

        assert loader.clear() is True
        assert loader.load() is None

    def test_startup_flags(self):
        """Test the cache is merged into startup flags."""
        loader = CacheLoader(_stored(_snapshot("0.0.35")))
        flags = {"online": True}

        result = loader.startup_flags(flags)

        assert result["online"] is True
        assert result["cache"]["version"] == "0.0.36"
        assert "cache" not in flags

    def test_startup_flags_without_cache(self):
        """Test startup flags carry the default when there is no cache."""
        result = CacheLoader(InMemoryStore()).startup_flags()

        assert result == {"cache": None}


class TestCacheLoaderFromSettings:
    """Tests for building a loader from settings."""

    def test_from_settings(self, tmp_path):
        """Test settings choose the store file, key and lookup mode."""
        settings = CacheMigrateSettings(
            store_path=tmp_path / "store.json",
            cache_key="my-cache",
            lookup_mode="successor",
        )
        FileStore(settings.store_path).set_item("my-cache", json.dumps({"version": "0.0.31"}))

        loader = CacheLoader.from_settings(settings)

        assert loader.key == "my-cache"
        assert loader.load()["version"] == "0.0.36"
