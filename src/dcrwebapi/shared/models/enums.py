"""
Foundational enums for provider identities.
"""

from enum import Enum


class ProviderFamily(str, Enum):
    """
    Provider family polled by the refresh loop.

    Each family has its own record type, adapter and ordered attempt
    strategies (see ``dcrwebapi.ingestion.strategies``).
    """

    STAKEPOOL = "stakepool"  # Legacy stakepool /api/v{N}/stats
    VSP = "vsp"  # vspd /api/v3/vspinfo


class Network(str, Enum):
    """Decred network a provider serves."""

    MAINNET = "mainnet"
    TESTNET = "testnet"
