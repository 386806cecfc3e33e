"""cachemigrate: versioned migrations for persisted application caches."""

__version__ = "0.1.0"

# Core components
from cachemigrate.core.exceptions import (
    CacheMigrateError,
    CacheStoreError,
    DuplicateMigrationError,
    InvalidMigrationError,
    MigrationTransformError,
    ResultAccessError,
)
from cachemigrate.core.result import Result
from cachemigrate.core.settings import CacheMigrateSettings
from cachemigrate.core.version import Version

# Migration components
from cachemigrate.migrations import (
    APP_MIGRATIONS,
    CURRENT_VERSION,
    NO_CACHE,
    AddField,
    BlobOperation,
    LookupMode,
    MigrationOutcome,
    MigrationRunner,
    MigrationState,
    MigrationStep,
    MigrationTable,
    RemoveField,
    RenameField,
    TransformField,
    migration,
)

# Cache components
from cachemigrate.cache import CacheLoader, CacheStore, FileStore, InMemoryStore
from cachemigrate.schema import CacheSnapshot

__all__ = [
    # Version
    "__version__",
    # Core
    "Result",
    "Version",
    "CacheMigrateSettings",
    "CacheMigrateError",
    "CacheStoreError",
    "DuplicateMigrationError",
    "InvalidMigrationError",
    "MigrationTransformError",
    "ResultAccessError",
    # Migrations
    "APP_MIGRATIONS",
    "CURRENT_VERSION",
    "NO_CACHE",
    "BlobOperation",
    "MigrationStep",
    "MigrationTable",
    "migration",
    "LookupMode",
    "MigrationOutcome",
    "MigrationRunner",
    "MigrationState",
    "AddField",
    "RemoveField",
    "RenameField",
    "TransformField",
    # Cache
    "CacheStore",
    "InMemoryStore",
    "FileStore",
    "CacheLoader",
    "CacheSnapshot",
]
