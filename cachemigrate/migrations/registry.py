"""Migration table for the application cache.

Every release that changed the cache bumped its version. Most of those
releases only changed fields the application rebuilds on its own, so
their steps just restamp the version. There was never a 0.0.31 cache;
0.0.30 migrates straight to 0.0.32.
"""

from cachemigrate.migrations.base import MigrationTable, migration
from cachemigrate.migrations.operations import AddField

# 0.0.1 through 0.0.27
_EARLY_STEPS = [
    migration(f"0.0.{n}", f"0.0.{n + 1}") for n in range(1, 27)
]

# Shape as of 0.0.28:
#
#   version       str
#   theme         str
#   tags          list of tags
#   authors       list of authors
#   postPreviews  list of post previews
#   user          UUID string or null
_SNAPSHOT_STEPS = [
    migration(
        "0.0.27",
        "0.0.28",
        AddField("tags", default_factory=list),
        AddField("authors", default_factory=list),
        AddField("postPreviews", default_factory=list),
        AddField("user", default=None),
        description="fill in the list fields and optional user",
    ),
    migration("0.0.28", "0.0.29"),
    migration("0.0.29", "0.0.30"),
    migration("0.0.30", "0.0.32"),
    migration("0.0.32", "0.0.33"),
    migration("0.0.33", "0.0.34"),
    migration("0.0.34", "0.0.35"),
    migration("0.0.35", "0.0.36"),
]

APP_MIGRATIONS = MigrationTable.of(_EARLY_STEPS + _SNAPSHOT_STEPS)

CURRENT_VERSION = str(APP_MIGRATIONS.latest)
