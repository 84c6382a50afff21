"""
Aggregate Service

Lazily computed values served next to the provider snapshots. Each value is
fetched on the first request after its cache slot expired, decoded, and kept
in the store's aggregate cache:

    gcs    coin supply        (coin_supply.ttl, 1 min)
    price  DCR spot price     (price.ttl, 1 min)
    dc     download count     (downloads.ttl, 4 h)
    dic    downloads badge    (downloads.ttl, 4 h; reuses a valid dc entry)

Errors propagate to the caller (the query surface answers 500).
"""

from typing import Any

from dcrwebapi.config.state import ConfigState
from dcrwebapi.exceptions import StoreError
from dcrwebapi.ingestion.adapters.coin_supply import CoinSupplyAdapter
from dcrwebapi.ingestion.adapters.github_releases import (
    ReleaseDownloadsAdapter,
    releases_url,
)
from dcrwebapi.ingestion.adapters.price import PriceAdapter
from dcrwebapi.ingestion.ports.http import IFetcher
from dcrwebapi.observability import get_ingestion_logger
from dcrwebapi.shared.models.aggregates import CoinSupply, DownloadCount, PriceInfo
from dcrwebapi.storage.store import SharedStateStore

COIN_SUPPLY_KEY = "gcs"
PRICE_KEY = "price"
DOWNLOAD_COUNT_KEY = "dc"
DOWNLOADS_BADGE_KEY = "dic"

SVG_TEMPLATE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="128" height="20">'
    '<linearGradient id="b" x2="0" y2="100%">'
    '<stop offset="0" stop-color="#bbb" stop-opacity=".1"/>'
    '<stop offset="1" stop-opacity=".1"/></linearGradient>'
    '<mask id="a"><rect width="128" height="20" rx="3" fill="#fff"/></mask>'
    '<g mask="url(#a)"><path fill="#555" d="M0 0h69v20H0z"/>'
    '<path fill="#4c1" d="M69 0h59v20H69z"/>'
    '<path fill="url(#b)" d="M0 0h128v20H0z"/></g>'
    '<g fill="#fff" text-anchor="middle" '
    'font-family="DejaVu Sans,Verdana,Geneva,sans-serif" font-size="11">'
    '<text x="34.5" y="15" fill="#010101" fill-opacity=".3">downloads</text>'
    '<text x="34.5" y="14">downloads</text>'
    '<text x="97.5" y="15" fill="#010101" fill-opacity=".3">__COUNT__ total</text>'
    '<text x="97.5" y="14">__COUNT__ total</text></g></svg>'
)


def render_downloads_badge(label: str) -> str:
    return SVG_TEMPLATE.replace("__COUNT__", label)


class AggregateService:
    """
    Read-through cache over the aggregate sources.

    A value fetched across a ``clear_cache`` is returned to its caller but
    not cached, so the next read fetches again.

    Args:
        store: Shared state store owning the aggregate cache
        fetcher: Remote fetcher
        config: Service configuration (endpoints, constants, TTLs, timeouts)
    """

    def __init__(
        self,
        store: SharedStateStore,
        fetcher: IFetcher,
        config: ConfigState | None = None,
    ):
        self.store = store
        self.fetcher = fetcher
        self.config = config or ConfigState()

        supply = self.config.coin_supply
        self.coin_supply_adapter = CoinSupplyAdapter(
            airdrop=supply.airdrop, premine=supply.premine, total=supply.total
        )
        self.price_adapter = PriceAdapter(coin_id=self.config.price.coin_id)
        self.downloads_adapter = ReleaseDownloadsAdapter()
        self.log = get_ingestion_logger("aggregates")

    async def _cached(self, key: str, expected: type) -> Any | None:
        """Valid cached value for ``key``; StoreError if the slot holds another type."""
        entry = await self.store.get_entry(key)
        if entry is None:
            return None
        if not isinstance(entry.value, expected):
            raise StoreError(
                f"bad item in {key} cache: expected {expected.__name__}, "
                f"got {type(entry.value).__name__}"
            )
        if not entry.is_valid(self.store.now()):
            return None
        return entry.value

    async def coin_supply(self) -> CoinSupply:
        cached = await self._cached(COIN_SUPPLY_KEY, CoinSupply)
        if cached is not None:
            return cached

        generation = self.store.generation
        url = self.config.coin_supply.url
        body = await self.fetcher.fetch(url, timeout=self.config.http.timeout)
        supply = self.coin_supply_adapter.decode(body, url=url)

        await self.store.set_for(
            COIN_SUPPLY_KEY, supply, self.config.coin_supply.ttl, generation
        )
        self.log.info(
            "aggregate_refreshed",
            key=COIN_SUPPLY_KEY,
            coin_supply_mined=supply.coin_supply_mined,
        )
        return supply

    async def price(self) -> PriceInfo:
        cached = await self._cached(PRICE_KEY, PriceInfo)
        if cached is not None:
            return cached

        generation = self.store.generation
        url = self.config.price.url
        body = await self.fetcher.fetch(url, timeout=self.config.http.timeout)
        price = self.price_adapter.decode(body, url=url)
        price = price.model_copy(update={"last_updated": int(self.store.now())})

        await self.store.set_for(PRICE_KEY, price, self.config.price.ttl, generation)
        self.log.info("aggregate_refreshed", key=PRICE_KEY, usd=price.usd, btc=price.btc)
        return price

    async def download_count(self) -> DownloadCount:
        """Summed asset downloads over every configured repository."""
        cached = await self._cached(DOWNLOAD_COUNT_KEY, DownloadCount)
        if cached is not None:
            return cached

        generation = self.store.generation
        downloads = self.config.downloads
        total = 0
        for repository in downloads.repositories:
            url = releases_url(downloads.api_base_url, repository)
            body = await self.fetcher.fetch(url, timeout=self.config.http.github_timeout)
            total += self.downloads_adapter.decode(body, url=url)

        count = DownloadCount(total=total)
        await self.store.set_for(DOWNLOAD_COUNT_KEY, count, downloads.ttl, generation)
        self.log.info("aggregate_refreshed", key=DOWNLOAD_COUNT_KEY, total=total)
        return count

    async def downloads_badge(self) -> str:
        """SVG badge showing the download count label."""
        cached = await self._cached(DOWNLOADS_BADGE_KEY, str)
        if cached is not None:
            return cached

        generation = self.store.generation
        count = await self.download_count()
        badge = render_downloads_badge(count.label)

        await self.store.set_for(
            DOWNLOADS_BADGE_KEY, badge, self.config.downloads.ttl, generation
        )
        return badge

    async def clear_cache(self) -> int:
        """Drop every cached aggregate; the next request recomputes it."""
        return await self.store.clear()
