"""Runtime configuration for cachemigrate."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheMigrateSettings(BaseSettings):
    """Settings loaded from ``CACHEMIGRATE_*`` environment variables or ``.env``.

    Attributes:
        store_path: JSON file backing the local key-value store
        cache_key: Key the serialized cache lives under
        lookup_mode: "exact" matches steps on the blob's own version only;
            "successor" also tries the patch/minor/major successors
        discard_stalled: Replace an incompletely migrated cache with the
            default state instead of returning it
        validate_schema: Validate the migrated cache against CacheSnapshot
        log_level: Logging level used by the CLI
    """

    model_config = SettingsConfigDict(
        env_prefix="CACHEMIGRATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    store_path: Path = Path("cache-store.json")
    cache_key: str = Field(default="app-cache", min_length=1)
    lookup_mode: Literal["exact", "successor"] = "exact"
    discard_stalled: bool = False
    validate_schema: bool = False
    log_level: str = "WARNING"
