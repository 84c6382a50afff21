"""
Provider identities and the records decoded from their responses.

Records keep the JSON key spelling published by the original web API
(PascalCase for stakepools, lowercase for vsps) through field aliases, so
``model_dump(by_alias=True)`` is the wire shape.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dcrwebapi.common.utils.date_utils import to_unix_seconds
from dcrwebapi.shared.models.enums import Network, ProviderFamily


class ProviderInstance(BaseModel):
    """One configured remote data source. Immutable for the service lifetime."""

    model_config = ConfigDict(frozen=True)

    name: str
    family: ProviderFamily
    url: str
    network: Network = Network.MAINNET
    launched: int = Field(description="Unix seconds the provider was listed")

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("launched", mode="before")
    @classmethod
    def coerce_launched(cls, v: Any) -> Any:
        """Accept ISO-8601 datetimes from YAML as well as Unix seconds."""
        if isinstance(v, datetime):
            return to_unix_seconds(v)
        if isinstance(v, str) and not v.strip().lstrip("-").isdigit():
            return to_unix_seconds(datetime.fromisoformat(v.replace("Z", "+00:00")))
        return v

    @property
    def instance_id(self) -> str:
        return f"{self.family.value}:{self.name}"

    def default_record(self) -> "ProviderRecord":
        """Record served before the first successful refresh."""
        if self.family is ProviderFamily.STAKEPOOL:
            return StakepoolRecord(
                network=self.network.value, url=self.url, launched=self.launched
            )
        return VspRecord(
            network=self.network.value, url=self.url, launched=self.launched
        )


class StakepoolRecord(BaseModel):
    """Legacy stakepool statistics (``/api/v{N}/stats``)."""

    model_config = ConfigDict(populate_by_name=True)

    api_enabled: bool = Field(default=False, alias="APIEnabled")
    api_versions_supported: list[Any] = Field(
        default_factory=list, alias="APIVersionsSupported"
    )
    network: str = Field(alias="Network")
    url: str = Field(alias="URL")
    launched: int = Field(alias="Launched")
    last_updated: int = Field(default=0, alias="LastUpdated")

    immature: int = Field(default=0, alias="Immature")
    live: int = Field(default=0, alias="Live")
    voted: int = Field(default=0, alias="Voted")
    missed: int = Field(default=0, alias="Missed")
    pool_fees: float = Field(default=0.0, alias="PoolFees")
    proportion_live: float = Field(default=0.0, alias="ProportionLive")
    proportion_missed: float = Field(default=0.0, alias="ProportionMissed")
    user_count: int = Field(default=0, alias="UserCount")
    user_count_active: int = Field(default=0, alias="UserCountActive")
    version: str = Field(default="", alias="Version")


class VspRecord(BaseModel):
    """vspd information (``/api/v3/vspinfo``)."""

    model_config = ConfigDict(populate_by_name=True)

    network: str
    url: str
    launched: int
    last_updated: int = Field(default=0, alias="lastupdated")

    api_versions: list[int] = Field(default_factory=list, alias="apiversions")
    fee_percentage: float = Field(default=0.0, alias="feepercentage")
    closed: bool = False
    voting: int = 0
    voted: int = 0
    revoked: int = 0
    vspd_version: str = Field(default="", alias="vspdversion")
    block_height: int = Field(default=0, alias="blockheight")
    estimated_network_proportion: float = Field(
        default=0.0, alias="estimatednetworkproportion"
    )


ProviderRecord = StakepoolRecord | VspRecord
