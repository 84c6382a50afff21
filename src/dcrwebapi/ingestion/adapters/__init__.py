"""Provider adapters: raw response bytes -> validated records."""

from .coin_supply import CoinSupplyAdapter
from .github_releases import ReleaseDownloadsAdapter, releases_url
from .price import PriceAdapter
from .stakepool import (
    STAKEPOOL_API_CURRENT_VERSION,
    STAKEPOOL_API_INITIAL_VERSION,
    StakepoolStatsAdapter,
    stakepool_stats_url,
)
from .vsp import VSP_API_VERSION, VspInfoAdapter, vsp_info_url

__all__ = [
    "CoinSupplyAdapter",
    "PriceAdapter",
    "ReleaseDownloadsAdapter",
    "STAKEPOOL_API_CURRENT_VERSION",
    "STAKEPOOL_API_INITIAL_VERSION",
    "StakepoolStatsAdapter",
    "VSP_API_VERSION",
    "VspInfoAdapter",
    "releases_url",
    "stakepool_stats_url",
    "vsp_info_url",
]
