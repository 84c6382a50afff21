"""
Domain models: provider identities, provider records and aggregate values.
"""

from .aggregates import CoinSupply, DownloadCount, PriceInfo
from .enums import Network, ProviderFamily
from .records import (
    ProviderInstance,
    ProviderRecord,
    StakepoolRecord,
    VspRecord,
)

__all__ = [
    "CoinSupply",
    "DownloadCount",
    "Network",
    "PriceInfo",
    "ProviderFamily",
    "ProviderInstance",
    "ProviderRecord",
    "StakepoolRecord",
    "VspRecord",
]
