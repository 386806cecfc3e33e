"""Startup loading and persistence of the application cache."""

import json
import logging
from typing import Any, Callable

from pydantic import ValidationError

from cachemigrate.cache.base import CacheStore
from cachemigrate.cache.memory import FileStore
from cachemigrate.core.result import Result
from cachemigrate.core.settings import CacheMigrateSettings
from cachemigrate.migrations.base import MigrationTable
from cachemigrate.migrations.registry import APP_MIGRATIONS
from cachemigrate.migrations.runner import NO_CACHE, MigrationRunner
from cachemigrate.schema import CacheSnapshot

logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "app-cache"


def _empty_cache() -> dict | None:
    return None


class CacheLoader:
    """Reads, migrates and writes the cache kept in a CacheStore.

    ``load`` never fails on bad stored data: a missing, unparseable or
    unmigratable cache is logged and replaced by the default state. A
    broken migration step still raises MigrationTransformError.
    """

    def __init__(
        self,
        store: CacheStore,
        runner: MigrationRunner | None = None,
        key: str = DEFAULT_CACHE_KEY,
        default_factory: Callable[[], Any] = _empty_cache,
        discard_stalled: bool = False,
        validate_schema: bool = False,
    ):
        """Initialize the loader.

        Args:
            store: Where the serialized cache lives
            runner: Migration runner; defaults to the application table
            key: Store key of the cache
            default_factory: Builds the state used when there is no cache
            discard_stalled: Use the default state when migration stops
                short of the newest version
            validate_schema: Use the default state when the migrated
                cache does not match CacheSnapshot
        """
        self.store = store
        self.runner = runner or MigrationRunner(APP_MIGRATIONS)
        self.key = key
        self.default_factory = default_factory
        self.discard_stalled = discard_stalled
        self.validate_schema = validate_schema

    @classmethod
    def from_settings(
        cls,
        settings: CacheMigrateSettings,
        table: MigrationTable = APP_MIGRATIONS,
        **kwargs,
    ) -> "CacheLoader":
        """Build a file-backed loader from settings."""
        return cls(
            store=FileStore(settings.store_path),
            runner=MigrationRunner(table, lookup=settings.lookup_mode),
            key=settings.cache_key,
            discard_stalled=settings.discard_stalled,
            validate_schema=settings.validate_schema,
            **kwargs,
        )

    def read(self) -> Result[dict]:
        """Read and decode the stored cache without migrating it.

        Returns:
            Ok(dict) or Err("no cache") if the key is absent, the text is
            not valid JSON, or it does not decode to an object
        """
        text = self.store.get_item(self.key)
        if text is None:
            return Result.err(NO_CACHE)

        try:
            data = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as e:
            logger.warning(f"Stored cache under '{self.key}' is not valid JSON: {e}")
            return Result.err(NO_CACHE)

        if not isinstance(data, dict):
            logger.warning(f"Stored cache under '{self.key}' is not a JSON object")
            return Result.err(NO_CACHE)

        return Result.ok(data)

    def _check(self, blob: dict) -> Result[dict]:
        if not self.validate_schema:
            return Result.ok(blob)
        try:
            CacheSnapshot.model_validate(blob)
        except ValidationError as e:
            return Result.err(f"cache does not match current shape: {e.error_count()} errors")
        return Result.ok(blob)

    def load_result(self) -> Result[dict]:
        """Read and migrate the cache, reporting why it is unusable."""
        stored = self.read()
        if stored.is_err():
            return stored

        migrated = self.runner.run(stored.value)
        if migrated.is_err():
            return Result.err(migrated.reason)

        outcome = migrated.value
        if self.discard_stalled and not outcome.complete:
            return Result.err(
                f"migration stopped at {outcome.version}, expected {outcome.latest}"
            )
        return self._check(outcome.blob)

    def load(self) -> Any:
        """Return the migrated cache, or the default state."""
        return self.load_result().match(
            on_ok=lambda cache: cache,
            on_err=self._fallback,
        )

    def _fallback(self, reason: str) -> Any:
        logger.warning(f"Starting without cache: {reason}")
        return self.default_factory()

    def save(self, cache: Any) -> None:
        """Serialize and store the cache, e.g. whenever the app changes it."""
        self.store.set_item(self.key, json.dumps(cache))

    def clear(self) -> bool:
        return self.store.remove_item(self.key)

    def startup_flags(self, flags: dict | None = None) -> dict:
        """Return a copy of ``flags`` with the loaded cache under "cache"."""
        return {**(flags or {}), "cache": self.load()}
