"""
Refresh Orchestrator

Periodically refreshes every configured provider instance:

    Idle -> FanOut -> AwaitAll -> Idle

FanOut starts one asyncio task per instance; AwaitAll gathers them all. Each
unit runs its family's attempt strategies in order (stakepools: v2 then v1)
and commits its own record to the store as soon as an attempt succeeds, so one
slow or failing provider never delays or blocks another. Failures are logged
and reported, never raised.
"""

import asyncio
import contextlib
import time
from dataclasses import dataclass, field
from typing import Any

from dcrwebapi.exceptions import DecodeError, FetchTimeoutError, payload_excerpt
from dcrwebapi.ingestion.ports.http import IFetcher
from dcrwebapi.ingestion.strategies import AttemptStrategy, AttemptStrategyRegistry
from dcrwebapi.observability import get_ingestion_logger
from dcrwebapi.shared.models.records import ProviderInstance, ProviderRecord
from dcrwebapi.storage.store import SharedStateStore

UNIT_UPDATED = "updated"
UNIT_FAILED = "failed"


@dataclass
class UnitResult:
    """Outcome of one instance's fetch+decode unit within a cycle."""

    instance_id: str
    status: str = UNIT_FAILED
    attempt: str | None = None  # label of the attempt that succeeded
    errors: list[str] = field(default_factory=list)
    last_updated: int | None = None


@dataclass
class RefreshReport:
    """Result of one refresh cycle."""

    started_at: float
    duration_seconds: float
    results: dict[str, UnitResult]

    @property
    def updated(self) -> list[str]:
        return [key for key, r in self.results.items() if r.status == UNIT_UPDATED]

    @property
    def failed(self) -> list[str]:
        return [key for key, r in self.results.items() if r.status == UNIT_FAILED]


class RefreshOrchestrator:
    """
    Fan-out/fan-in refresh of all provider instances, on a fixed interval.

    Responsibilities:
    - Launch one concurrent unit per instance and wait for all of them
    - Apply the attempt strategies of the instance's family, in order
    - Commit successful records to the store, leave failed ones untouched
    - Run the cycle on a timer until stopped
    - NOT responsible for: HTTP transport, payload decoding (delegated)
    """

    def __init__(
        self,
        store: SharedStateStore,
        fetcher: IFetcher,
        strategies: AttemptStrategyRegistry,
        interval: float = 300.0,
        default_timeout: float = 10.0,
        deadline_grace: float = 5.0,
        logger: Any = None,
    ):
        """
        Args:
            store: Shared state store holding the provider records
            fetcher: Remote fetcher
            strategies: Ordered attempt strategies per family
            interval: Seconds between cycles
            default_timeout: Fetch timeout for strategies without their own
            deadline_grace: Extra seconds before an attempt is abandoned
            logger: structlog logger (ingestion "refresh" logger if None)
        """
        self.store = store
        self.fetcher = fetcher
        self.strategies = strategies
        self.interval = interval
        self.default_timeout = default_timeout
        self.deadline_grace = deadline_grace
        self.log = logger or get_ingestion_logger("refresh")

        self.cycles = 0
        self.last_report: RefreshReport | None = None
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task | None = None

    # ---------- single cycle ----------

    async def refresh_once(self) -> RefreshReport:
        """Run one full cycle and return its report."""
        instances = self.store.instances
        started_at = time.time()
        started = time.monotonic()

        self.log.info("refresh_started", instances=len(instances))

        outcomes = await asyncio.gather(
            *(self._refresh_instance(instance) for instance in instances),
            return_exceptions=True,
        )

        results: dict[str, UnitResult] = {}
        for instance, outcome in zip(instances, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                self.log.error(
                    "refresh_unit_crashed",
                    instance=instance.instance_id,
                    error=repr(outcome),
                )
                outcome = UnitResult(instance.instance_id, errors=[repr(outcome)])
            results[instance.instance_id] = outcome

        report = RefreshReport(
            started_at=started_at,
            duration_seconds=time.monotonic() - started,
            results=results,
        )
        self.cycles += 1
        self.last_report = report

        self.log.info(
            "refresh_completed",
            updated=len(report.updated),
            failed=len(report.failed),
            duration_seconds=round(report.duration_seconds, 3),
        )
        return report

    async def _refresh_instance(self, instance: ProviderInstance) -> UnitResult:
        """One unit: attempts in order, commit on first success."""
        result = UnitResult(instance_id=instance.instance_id)
        strategies = self.strategies.get_strategies(instance.family)

        for strategy in strategies:
            url = strategy.build_url(instance)
            try:
                record = await self._attempt(strategy, instance, url)
            except Exception as e:
                result.errors.append(f"{strategy.label}: {e}")
                self.log.warning(
                    "refresh_attempt_failed",
                    instance=instance.instance_id,
                    attempt=strategy.label,
                    url=url,
                    error=str(e),
                    error_type=type(e).__name__,
                    **self._error_context(e),
                )
                continue

            stored = await self.store.put(instance.instance_id, record)
            result.status = UNIT_UPDATED
            result.attempt = strategy.label
            result.last_updated = stored.last_updated
            self.log.debug(
                "refresh_unit_updated",
                instance=instance.instance_id,
                attempt=strategy.label,
            )
            return result

        self.log.error(
            "refresh_unit_failed",
            instance=instance.instance_id,
            url=instance.url,
            attempts=[s.label for s in strategies],
            errors=result.errors,
        )
        return result

    async def _attempt(
        self, strategy: AttemptStrategy, instance: ProviderInstance, url: str
    ) -> ProviderRecord:
        timeout = strategy.timeout or self.default_timeout
        deadline = timeout + self.deadline_grace
        try:
            body = await asyncio.wait_for(
                self.fetcher.fetch(url, timeout=timeout), timeout=deadline
            )
        except TimeoutError as e:
            raise FetchTimeoutError(
                f"{url}: abandoned after {deadline}s", url=url, timeout=deadline
            ) from e
        return strategy.adapter.decode(body, instance, url=url)

    @staticmethod
    def _error_context(error: Exception) -> dict[str, Any]:
        if isinstance(error, DecodeError) and error.payload is not None:
            return {"payload": payload_excerpt(error.payload)}
        return {}

    # ---------- scheduling ----------

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Launch the background loop (idempotent). First cycle after one interval."""
        if self.running:
            return self._task
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="dcrwebapi-refresh")
        self.log.info("refresh_loop_started", interval=self.interval)
        return self._task

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except TimeoutError:
                try:
                    await self.refresh_once()
                except Exception:
                    self.log.exception("refresh_cycle_crashed")

    async def stop(self) -> None:
        """Signal the loop to stop; an in-flight cycle is abandoned."""
        if self._task is None:
            return
        self._stop_event.set()
        if not self._task.done():
            self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        self.log.info("refresh_loop_stopped", cycles=self.cycles)
