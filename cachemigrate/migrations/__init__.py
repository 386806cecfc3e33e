"""Migration system for cachemigrate.

Cached blobs carry a ``version`` field. Migrations are registered per
source version and applied one after another until no step matches,
bringing a cache written by an older release up to the current shape.
"""

from cachemigrate.migrations.base import (
    BlobOperation,
    MigrationStep,
    MigrationTable,
    migration,
)
from cachemigrate.migrations.runner import (
    NO_CACHE,
    LookupMode,
    MigrationOutcome,
    MigrationRunner,
    MigrationState,
)
from cachemigrate.migrations.operations import (
    AddField,
    RemoveField,
    RenameField,
    TransformField,
)
from cachemigrate.migrations.registry import APP_MIGRATIONS, CURRENT_VERSION

__all__ = [
    "BlobOperation",
    "MigrationStep",
    "MigrationTable",
    "migration",
    "NO_CACHE",
    "LookupMode",
    "MigrationOutcome",
    "MigrationRunner",
    "MigrationState",
    "AddField",
    "RemoveField",
    "RenameField",
    "TransformField",
    "APP_MIGRATIONS",
    "CURRENT_VERSION",
]
