"""
Coin Supply Adapter

Canonical upstream contract: dcrdata ``GET /api/supply``, field
``supply_mined`` expressed in atoms (1 DCR = 1e8 atoms). Every published
figure is derived from that single freshly fetched total and the issuance
constants, rounded half-up to one decimal place.
"""

from dcrwebapi.common.utils.numeric import round_half_up
from dcrwebapi.exceptions import DecodeError
from dcrwebapi.ingestion.adapters.base import FieldReader, parse_document
from dcrwebapi.shared.models.aggregates import CoinSupply

ATOMS_PER_COIN = 1e8

# Block reward split after the genesis block.
POS_SHARE = 0.3
POW_SHARE = 0.6
SUBSIDY_SHARE = 0.1


class CoinSupplyAdapter:
    """dcrdata supply -> CoinSupply.

    Args:
        airdrop: Airdropped coins in the genesis block (DCR)
        premine: Premined coins in the genesis block (DCR)
        total: Maximum coin supply (DCR)
    """

    def __init__(
        self,
        airdrop: float = 840000.0,
        premine: float = 840000.0,
        total: float = 21000000.0,
    ):
        self.airdrop = airdrop
        self.premine = premine
        self.total = total

    def decode(self, body: bytes, url: str | None = None) -> CoinSupply:
        supply = FieldReader(parse_document(body, dict, url), url=url, payload=body)
        supply.require(["supply_mined"])

        mined_raw = round_half_up(supply.number("supply_mined"), 1)
        mined = round_half_up(mined_raw / ATOMS_PER_COIN, 1)
        if mined <= 0:
            raise DecodeError(
                f"non-positive mined supply: {mined}", url=url, payload=body
            )

        after_genesis = mined - self.airdrop - self.premine

        def share(amount: float) -> float:
            return round_half_up(amount / mined * 100, 1)

        return CoinSupply(
            percent_mined=round_half_up(mined / self.total * 100, 1),
            coin_supply_mined=mined,
            coin_supply_mined_raw=mined_raw,
            coin_supply_total=self.total,
            airdrop=share(self.airdrop),
            premine=share(self.premine),
            pos=share(after_genesis * POS_SHARE),
            pow=share(after_genesis * POW_SHARE),
            subsidy=share(after_genesis * SUBSIDY_SHARE),
        )
