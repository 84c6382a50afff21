"""Configuration models and loader."""

from .state import (
    ConfigLoader,
    ConfigState,
    CoinSupplyConfig,
    DownloadsConfig,
    HttpConfig,
    LoggingConfig,
    PriceConfig,
    ProviderEntry,
    RefreshConfig,
    ServerConfig,
    get_config,
)

__all__ = [
    "ConfigLoader",
    "ConfigState",
    "CoinSupplyConfig",
    "DownloadsConfig",
    "HttpConfig",
    "LoggingConfig",
    "PriceConfig",
    "ProviderEntry",
    "RefreshConfig",
    "ServerConfig",
    "get_config",
]
