"""Attempt strategies per provider family.

Each family maps to an ordered list of attempts (URL builder + adapter). The
orchestrator tries them in order within one refresh unit until one succeeds.
Adding an API version means registering an attempt, not nesting retry code
inside an adapter.
"""

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial

from dcrwebapi.ingestion.adapters.stakepool import (
    STAKEPOOL_API_CURRENT_VERSION,
    STAKEPOOL_API_INITIAL_VERSION,
    StakepoolStatsAdapter,
    stakepool_stats_url,
)
from dcrwebapi.ingestion.adapters.vsp import (
    VSP_API_VERSION,
    VspInfoAdapter,
    vsp_info_url,
)
from dcrwebapi.ingestion.ports.adapters import IProviderAdapter
from dcrwebapi.shared.models.enums import ProviderFamily
from dcrwebapi.shared.models.records import ProviderInstance


@dataclass(frozen=True)
class AttemptStrategy:
    """One way of fetching and decoding a provider.

    Attributes:
        label: Short name used in logs and reports (e.g. "v2")
        build_url: Instance -> URL to GET
        adapter: Decoder for the response body
        timeout: Fetch timeout override in seconds (fetcher default if None)
    """

    label: str
    build_url: Callable[[ProviderInstance], str]
    adapter: IProviderAdapter
    timeout: float | None = None


class AttemptStrategyRegistry:
    """Ordered attempt strategies per provider family."""

    def __init__(self):
        """Initialize empty registry."""
        self._strategies: dict[ProviderFamily, list[AttemptStrategy]] = {}

    def register(self, family: ProviderFamily, strategy: AttemptStrategy) -> None:
        """Append a strategy for a family.

        Strategies are tried in registration order; first success wins.
        """
        self._strategies.setdefault(family, []).append(strategy)

    def get_strategies(self, family: ProviderFamily) -> list[AttemptStrategy]:
        """Get the ordered strategies for a family.

        Raises:
            KeyError: If no strategy is registered for the family
        """
        if family not in self._strategies:
            raise KeyError(f"No attempt strategy registered for family: {family.value}")
        return list(self._strategies[family])

    def families(self) -> list[ProviderFamily]:
        return list(self._strategies)


def create_attempt_strategy_registry(
    timeout: float | None = None,
) -> AttemptStrategyRegistry:
    """Factory to create the standard registry.

    Stakepools: current API version, then the initial version as the single
    fallback. VSPs: vspinfo v3 only.

    Args:
        timeout: Fetch timeout for every attempt (fetcher default if None)
    """
    registry = AttemptStrategyRegistry()

    stakepool_adapter = StakepoolStatsAdapter()
    for version in (STAKEPOOL_API_CURRENT_VERSION, STAKEPOOL_API_INITIAL_VERSION):
        registry.register(
            ProviderFamily.STAKEPOOL,
            AttemptStrategy(
                label=f"v{version}",
                build_url=partial(stakepool_stats_url, api_version=version),
                adapter=stakepool_adapter,
                timeout=timeout,
            ),
        )

    registry.register(
        ProviderFamily.VSP,
        AttemptStrategy(
            label=f"v{VSP_API_VERSION}",
            build_url=vsp_info_url,
            adapter=VspInfoAdapter(),
            timeout=timeout,
        ),
    )
    return registry
