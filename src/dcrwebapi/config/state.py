"""
Unified configuration state for dcrwebapi.

Single source of truth for the service configuration, combining YAML files
with environment overrides, type validation and sensible defaults. The
provider lists (stakepools, vsps) are static: they are read once at startup
and never change while the process runs.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from dcrwebapi.exceptions import ConfigurationError
from dcrwebapi.shared.models.enums import Network, ProviderFamily
from dcrwebapi.shared.models.records import ProviderInstance

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "decred/dcrweb bot"


# =============================================================================
# PYDANTIC MODELS - Type-Safe Configuration
# =============================================================================


class ServerConfig(BaseModel):
    """HTTP listener configuration."""

    model_config = ConfigDict(extra="allow")

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8089, ge=1, le=65535)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class HttpConfig(BaseModel):
    """Outbound HTTP (remote fetcher) configuration."""

    model_config = ConfigDict(extra="allow")

    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    timeout: float = Field(default=10.0, gt=0)
    github_timeout: float = Field(default=30.0, gt=0)
    max_connections_per_host: int = Field(default=2, ge=1)
    # Extra time the orchestrator waits past the fetch timeout before it
    # abandons a unit.
    deadline_grace: float = Field(default=5.0, ge=0)


class RefreshConfig(BaseModel):
    """Refresh loop scheduling."""

    model_config = ConfigDict(extra="allow")

    interval: float = Field(default=300.0, gt=0)
    warm_up: bool = Field(default=True)


class CoinSupplyConfig(BaseModel):
    """Coin supply aggregate: dcrdata endpoint and issuance constants (DCR)."""

    model_config = ConfigDict(extra="allow")

    url: str = Field(default="https://dcrdata.decred.org/api/supply")
    airdrop: float = Field(default=840000.0, ge=0)
    premine: float = Field(default=840000.0, ge=0)
    total: float = Field(default=21000000.0, gt=0)
    ttl: float = Field(default=60.0, gt=0)


class PriceConfig(BaseModel):
    """Price aggregate endpoint."""

    model_config = ConfigDict(extra="allow")

    url: str = Field(
        default="https://api.coingecko.com/api/v3/simple/price?ids=decred&vs_currencies=usd,btc"
    )
    coin_id: str = Field(default="decred")
    ttl: float = Field(default=60.0, gt=0)


class DownloadsConfig(BaseModel):
    """Download count aggregate: GitHub repositories whose release assets are summed."""

    model_config = ConfigDict(extra="allow")

    api_base_url: str = Field(default="https://api.github.com")
    repositories: list[str] = Field(
        default_factory=lambda: ["decred/decred-binaries", "decred/decred-release"]
    )
    ttl: float = Field(default=4 * 60 * 60, gt=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="allow")

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=True)


class ProviderEntry(BaseModel):
    """One provider as listed in stakepools.yaml / vsps.yaml."""

    name: str
    url: str
    network: Network = Network.MAINNET
    launched: Any

    def to_instance(self, family: ProviderFamily) -> ProviderInstance:
        return ProviderInstance(
            name=self.name,
            family=family,
            url=self.url,
            network=self.network,
            launched=self.launched,
        )


class ConfigState(BaseModel):
    """
    Root configuration state - single source of truth for all app config.
    """

    model_config = ConfigDict(extra="allow")

    server: ServerConfig = Field(default_factory=ServerConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    refresh: RefreshConfig = Field(default_factory=RefreshConfig)
    coin_supply: CoinSupplyConfig = Field(default_factory=CoinSupplyConfig)
    price: PriceConfig = Field(default_factory=PriceConfig)
    downloads: DownloadsConfig = Field(default_factory=DownloadsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    stakepools: list[ProviderEntry] = Field(default_factory=list)
    vsps: list[ProviderEntry] = Field(default_factory=list)

    # Environment metadata
    env: str = Field(default="dev")
    config_dir: str = Field(default="./config")

    @model_validator(mode="after")
    def check_unique_names(self) -> "ConfigState":
        for section in ("stakepools", "vsps"):
            names = [entry.name for entry in getattr(self, section)]
            duplicates = sorted({name for name in names if names.count(name) > 1})
            if duplicates:
                raise ValueError(f"duplicate {section} names: {', '.join(duplicates)}")
        return self

    def provider_instances(self) -> list[ProviderInstance]:
        """Build the fixed ProviderInstance set for the service lifetime."""
        instances = [
            entry.to_instance(ProviderFamily.STAKEPOOL) for entry in self.stakepools
        ]
        instances.extend(entry.to_instance(ProviderFamily.VSP) for entry in self.vsps)
        return instances


# =============================================================================
# CONFIG LOADER - Clean, Validated Loading
# =============================================================================


class ConfigLoader:
    """
    Load and validate configuration from YAML files.

    Merges:
      1. Global defaults (hardcoded in the models)
      2. YAML files from config_dir (service, stakepools, vsps)
      3. env/<env>.yaml overrides
      4. Environment variable overrides
    """

    CONFIG_FILES = ("service.yaml", "stakepools.yaml", "vsps.yaml")

    def __init__(self, config_dir: str = "./config"):
        self.config_dir = Path(config_dir)
        self._yaml_cache: dict[Path, Any] = {}
        self.env = os.getenv("DCRWEBAPI_ENV", "dev")

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load YAML file with caching."""
        if path in self._yaml_cache:
            return self._yaml_cache[path]

        if not path.exists():
            logger.debug(f"Config file not found (using defaults): {path}")
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"{path}: top level must be a mapping")

        self._yaml_cache[path] = data
        logger.debug(f"Loaded config: {path}")
        return data

    def _apply_env_overrides(self, config: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to config."""
        if port := os.getenv("DCRWEBAPI_PORT"):
            config.setdefault("server", {})["port"] = port

        if interval := os.getenv("DCRWEBAPI_REFRESH_INTERVAL"):
            config.setdefault("refresh", {})["interval"] = interval

        if user_agent := os.getenv("DCRWEBAPI_USER_AGENT"):
            config.setdefault("http", {})["user_agent"] = user_agent

        if log_level := os.getenv("LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level

        if json_logs := os.getenv("DCRWEBAPI_JSON_LOGS"):
            config.setdefault("logging", {})["json_logs"] = json_logs.lower() in (
                "1",
                "true",
                "yes",
            )

        return config

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        """Deep merge override into base dict. Lists are replaced, not merged."""
        result = base.copy()
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result

    def load(self) -> ConfigState:
        """
        Load complete configuration state.

        Returns:
            ConfigState: Validated configuration object

        Raises:
            ConfigurationError: If a file cannot be parsed or validation fails
        """
        logger.info(f"Loading configuration from {self.config_dir} (env: {self.env})")

        config: dict[str, Any] = {}

        for config_file in self.CONFIG_FILES:
            file_config = self._load_yaml(self.config_dir / config_file)
            config = self._merge_dicts(config, file_config)

        env_config = self._load_yaml(self.config_dir / "env" / f"{self.env}.yaml")
        config = self._merge_dicts(config, env_config)

        config = self._apply_env_overrides(config)

        try:
            state = ConfigState(env=self.env, config_dir=str(self.config_dir), **config)
        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        logger.info(
            f"Configuration loaded: stakepools={len(state.stakepools)}, "
            f"vsps={len(state.vsps)}, refresh_interval={state.refresh.interval}s"
        )
        return state


def get_config(config_dir: str | None = None) -> ConfigState:
    """
    Load and return the configuration state.

    Args:
        config_dir: Override config directory. Defaults to
            $DCRWEBAPI_CONFIG_DIR, then ./config

    Returns:
        ConfigState: Validated configuration object
    """
    if config_dir is None:
        config_dir = os.getenv("DCRWEBAPI_CONFIG_DIR", "./config")
        if not Path(config_dir).exists():
            logger.warning(f"Config directory not found at {config_dir}, using defaults")

    loader = ConfigLoader(config_dir=config_dir)
    return loader.load()


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
