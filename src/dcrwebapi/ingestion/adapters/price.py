"""
Price Adapter

Decodes the CoinGecko simple price payload:

    {"decred": {"usd": 15.27, "btc": 0.00024311}}
"""

from dcrwebapi.common.utils.numeric import round_half_up
from dcrwebapi.ingestion.adapters.base import FieldReader, parse_document
from dcrwebapi.shared.models.aggregates import PriceInfo


class PriceAdapter:
    """Simple price -> PriceInfo (usd to cents, btc to satoshis)."""

    def __init__(self, coin_id: str = "decred"):
        self.coin_id = coin_id

    def decode(self, body: bytes, url: str | None = None) -> PriceInfo:
        document = FieldReader(parse_document(body, dict, url), url=url, payload=body)
        document.require([self.coin_id])

        quote = document.child(self.coin_id)
        quote.require(["usd", "btc"])

        return PriceInfo(
            usd=round_half_up(quote.number("usd"), 2),
            btc=round_half_up(quote.number("btc"), 8),
        )
