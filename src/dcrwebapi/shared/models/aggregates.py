"""
Aggregate values computed on demand and held in the aggregate cache.
"""

from pydantic import BaseModel, ConfigDict, Field


class CoinSupply(BaseModel):
    """DCR coin supply breakdown (mainnet)."""

    model_config = ConfigDict(populate_by_name=True)

    airdrop: float = Field(alias="Airdrop")
    coin_supply_mined: float = Field(alias="CoinSupplyMined")
    coin_supply_mined_raw: float = Field(alias="CoinSupplyMinedRaw")
    coin_supply_total: float = Field(alias="CoinSupplyTotal")
    percent_mined: float = Field(alias="PercentMined")
    pos: float = Field(alias="Pos")
    pow: float = Field(alias="Pow")
    premine: float = Field(alias="Premine")
    subsidy: float = Field(alias="Subsidy")


class PriceInfo(BaseModel):
    """DCR spot price."""

    model_config = ConfigDict(populate_by_name=True)

    usd: float
    btc: float
    last_updated: int = Field(default=0, alias="lastupdated")


class DownloadCount(BaseModel):
    """Cumulative download count over the binaries and release repositories."""

    total: int

    @property
    def label(self) -> str:
        """Thousands, truncated: 12345 -> '12k'."""
        return f"{self.total // 1000}k"

    def as_response(self) -> list[str]:
        return ["DownloadsCount", self.label]
