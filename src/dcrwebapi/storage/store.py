"""
Shared State Store

Single source of truth for everything the query surface serves:

- one record per configured provider instance (fixed id set, default-valued
  until the first successful refresh, replaced wholesale afterwards);
- the aggregate cache: keyed values with an absolute expiry, filled lazily.

All access goes through one writer-preferring reader/writer lock. Reads hand
out deep copies so serialization never races a concurrent ``put``.
"""

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from dcrwebapi.exceptions import StoreError
from dcrwebapi.observability import get_storage_logger
from dcrwebapi.shared.models.enums import ProviderFamily
from dcrwebapi.shared.models.records import ProviderInstance, ProviderRecord
from dcrwebapi.storage.locks import ReadWriteLock


@dataclass(frozen=True)
class CacheEntry:
    """Cached aggregate value with its absolute expiry (Unix seconds)."""

    value: Any
    expiry: float

    def is_valid(self, now: float) -> bool:
        return now < self.expiry


class SharedStateStore:
    """Concurrently readable/writable provider records plus aggregate cache.

    Args:
        instances: Provider instances known for the service lifetime
        clock: Time source in Unix seconds (injectable for tests)

    Raises:
        StoreError: If two instances share an id
    """

    def __init__(
        self,
        instances: Iterable[ProviderInstance],
        clock: Callable[[], float] = time.time,
    ):
        self._instances: dict[str, ProviderInstance] = {}
        for instance in instances:
            if instance.instance_id in self._instances:
                raise StoreError(f"duplicate provider instance: {instance.instance_id}")
            self._instances[instance.instance_id] = instance

        self._records: dict[str, ProviderRecord] = {
            instance_id: instance.default_record()
            for instance_id, instance in self._instances.items()
        }
        self._cache: dict[str, CacheEntry] = {}
        # bumped by clear(); writes computed before a clear are dropped
        self._generation = 0
        self._lock = ReadWriteLock()
        self._clock = clock
        self.log = get_storage_logger("state-store")

    # ---------- identity ----------

    @property
    def instances(self) -> list[ProviderInstance]:
        return list(self._instances.values())

    def instance(self, instance_id: str) -> ProviderInstance:
        try:
            return self._instances[instance_id]
        except KeyError:
            raise StoreError(f"unknown provider instance: {instance_id}") from None

    def now(self) -> float:
        return self._clock()

    # ---------- provider records ----------

    async def get(self, instance_id: str) -> ProviderRecord:
        """Last known record for an instance (possibly stale or default)."""
        async with self._lock.read():
            record = self._records.get(instance_id)
            if record is None:
                raise StoreError(f"unknown provider instance: {instance_id}")
            return record.model_copy(deep=True)

    async def put(self, instance_id: str, record: ProviderRecord) -> ProviderRecord:
        """
        Atomically replace an instance's record.

        ``last_updated`` is stamped here, at acceptance time, and is strictly
        greater than the stamp of the record it replaces.

        Returns:
            Copy of the stored record
        """
        instance = self.instance(instance_id)
        expected = type(instance.default_record())
        if not isinstance(record, expected):
            raise StoreError(
                f"{instance_id}: expected {expected.__name__}, got {type(record).__name__}"
            )

        async with self._lock.write():
            previous = self._records[instance_id]
            stamp = max(int(self._clock()), previous.last_updated + 1)
            stored = record.model_copy(update={"last_updated": stamp}, deep=True)
            self._records[instance_id] = stored

        return stored.model_copy(deep=True)

    async def snapshot_all(
        self, family: ProviderFamily | None = None
    ) -> dict[str, ProviderRecord]:
        """
        Point-in-time copy of the records.

        Args:
            family: Restrict to one family; keys are then instance names
                (the published shape). Without it keys are instance ids.
        """
        async with self._lock.read():
            if family is None:
                return {
                    instance_id: record.model_copy(deep=True)
                    for instance_id, record in self._records.items()
                }
            return {
                self._instances[instance_id].name: record.model_copy(deep=True)
                for instance_id, record in self._records.items()
                if self._instances[instance_id].family is family
            }

    # ---------- aggregate cache ----------

    async def get_entry(self, key: str) -> CacheEntry | None:
        async with self._lock.read():
            return self._cache.get(key)

    async def get_if_valid(self, key: str) -> Any | None:
        """Cached value for ``key`` while ``now < expiry``, else None."""
        async with self._lock.read():
            entry = self._cache.get(key)
            if entry is None or not entry.is_valid(self._clock()):
                return None
            return entry.value

    @property
    def generation(self) -> int:
        """Cache generation; read it before computing a value to cache."""
        return self._generation

    async def set(
        self, key: str, value: Any, expiry: float, generation: int | None = None
    ) -> CacheEntry | None:
        """
        Replace the cache slot for ``key``.

        Args:
            generation: Cache generation the value was computed under. If the
                cache has been cleared since, the write is dropped.

        Returns:
            The stored entry, or None when the write was dropped
        """
        entry = CacheEntry(value=value, expiry=expiry)
        async with self._lock.write():
            stale = generation is not None and generation != self._generation
            if not stale:
                self._cache[key] = entry
        if stale:
            self.log.info(
                "cache_write_dropped",
                key=key,
                generation=generation,
                current=self._generation,
            )
            return None
        return entry

    async def set_for(
        self, key: str, value: Any, ttl: float, generation: int | None = None
    ) -> CacheEntry | None:
        """Replace the cache slot for ``key``, expiring ``ttl`` seconds from now."""
        return await self.set(key, value, self._clock() + ttl, generation)

    async def clear(self) -> int:
        """Drop every cache entry. Provider records are untouched."""
        async with self._lock.write():
            dropped = len(self._cache)
            self._cache = {}
            self._generation += 1
        self.log.info("cache_cleared", entries=dropped)
        return dropped
