"""
Dependency injection container for the dcrwebapi service.

Wires together:
- Remote fetcher (aiohttp wrapper)
- Shared state store (provider records + aggregate cache)
- Attempt strategy registry (per-family URL builders and adapters)
- Refresh orchestrator (periodic fan-out/fan-in)
- Aggregate service (lazy coin supply, price, downloads)
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from dcrwebapi.config.state import ConfigState
from dcrwebapi.ingestion.aggregates import AggregateService
from dcrwebapi.ingestion.connectors.aiohttp_client import AiohttpFetcher
from dcrwebapi.ingestion.orchestrator import RefreshOrchestrator
from dcrwebapi.ingestion.ports.http import IFetcher
from dcrwebapi.ingestion.strategies import (
    AttemptStrategyRegistry,
    create_attempt_strategy_registry,
)
from dcrwebapi.storage.store import SharedStateStore

logger = logging.getLogger(__name__)


@dataclass
class ServiceContext:
    """Fully wired runtime objects shared by the HTTP layer and the refresh loop."""

    config: ConfigState
    fetcher: IFetcher
    store: SharedStateStore
    orchestrator: RefreshOrchestrator
    aggregates: AggregateService

    @property
    def ready(self) -> bool:
        """True once the first refresh cycle has completed."""
        return self.orchestrator.cycles > 0

    async def close(self) -> None:
        await self.orchestrator.stop()
        await self.fetcher.close()


class ServiceDependencyContainer:
    """
    Single place where all concrete implementations are chosen.

    Tests pass a fake fetcher and a fixed clock; production uses the aiohttp
    fetcher and wall-clock time.

    Usage:
        container = ServiceDependencyContainer(config)
        context = container.build_context()
    """

    def __init__(
        self,
        config: ConfigState | None = None,
        fetcher: IFetcher | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            config: Service configuration (defaults if None)
            fetcher: Remote fetcher override (AiohttpFetcher if None)
            clock: Time source in Unix seconds
        """
        self.config = config or ConfigState()
        self._fetcher = fetcher
        self.clock = clock

    def create_fetcher(self) -> IFetcher:
        if self._fetcher is None:
            self._fetcher = AiohttpFetcher(config=self.config.http)
        return self._fetcher

    def create_store(self) -> SharedStateStore:
        return SharedStateStore(self.config.provider_instances(), clock=self.clock)

    def create_strategy_registry(self) -> AttemptStrategyRegistry:
        return create_attempt_strategy_registry(timeout=self.config.http.timeout)

    def create_orchestrator(self, store: SharedStateStore) -> RefreshOrchestrator:
        return RefreshOrchestrator(
            store=store,
            fetcher=self.create_fetcher(),
            strategies=self.create_strategy_registry(),
            interval=self.config.refresh.interval,
            default_timeout=self.config.http.timeout,
            deadline_grace=self.config.http.deadline_grace,
        )

    def create_aggregate_service(self, store: SharedStateStore) -> AggregateService:
        return AggregateService(store=store, fetcher=self.create_fetcher(), config=self.config)

    def build_context(self) -> ServiceContext:
        """Create every component, sharing one store and one fetcher."""
        store = self.create_store()
        context = ServiceContext(
            config=self.config,
            fetcher=self.create_fetcher(),
            store=store,
            orchestrator=self.create_orchestrator(store),
            aggregates=self.create_aggregate_service(store),
        )
        logger.info(
            f"Service context built: {len(store.instances)} provider instances"
        )
        return context
