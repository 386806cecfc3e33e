"""Core building blocks: versions, results, settings and exceptions."""

from cachemigrate.core.result import Result
from cachemigrate.core.settings import CacheMigrateSettings
from cachemigrate.core.version import Version

__all__ = ["Result", "Version", "CacheMigrateSettings"]
