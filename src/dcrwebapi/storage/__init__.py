"""
Storage layer: the in-memory shared state store.

Holds the latest record per provider instance and the aggregate cache, both
behind a single reader/writer lock. Nothing is persisted.
"""

from .locks import ReadWriteLock
from .store import CacheEntry, SharedStateStore

__all__ = ["CacheEntry", "ReadWriteLock", "SharedStateStore"]
