"""Cache storage for cachemigrate.

This module provides the key-value stores the application cache is
persisted in and the loader that migrates it at startup.
"""

from cachemigrate.cache.base import CacheStore
from cachemigrate.cache.memory import FileStore, InMemoryStore
from cachemigrate.cache.loader import DEFAULT_CACHE_KEY, CacheLoader

__all__ = [
    "CacheStore",
    "InMemoryStore",
    "FileStore",
    "CacheLoader",
    "DEFAULT_CACHE_KEY",
]
