"""
Tests for the lazily cached aggregates (coin supply, price, downloads).
"""

import asyncio

import pytest

from dcrwebapi.config.state import ConfigState
from dcrwebapi.exceptions import RemoteError, StoreError
from dcrwebapi.ingestion.aggregates import (
    COIN_SUPPLY_KEY,
    DOWNLOAD_COUNT_KEY,
    DOWNLOADS_BADGE_KEY,
    PRICE_KEY,
    AggregateService,
    render_downloads_badge,
)
from dcrwebapi.shared.models.aggregates import DownloadCount
from dcrwebapi.storage.store import SharedStateStore
from tests.fixtures import FakeClock, FakeFetcher, load_fixture

SUPPLY_URL = "https://dcrdata.decred.org/api/supply"
PRICE_URL = (
    "https://api.coingecko.com/api/v3/simple/price?ids=decred&vs_currencies=usd,btc"
)
BINARIES_URL = (
    "https://api.github.com/repos/decred/decred-binaries/releases?per_page=100"
)
RELEASE_URL = "https://api.github.com/repos/decred/decred-release/releases?per_page=100"


@pytest.fixture
def clock():
    return FakeClock(1_700_000_000)


@pytest.fixture
def fetcher():
    return FakeFetcher(
        {
            SUPPLY_URL: load_fixture("coin_supply"),
            PRICE_URL: load_fixture("price"),
            BINARIES_URL: load_fixture("github_releases_binaries"),
            RELEASE_URL: load_fixture("github_releases_release"),
        }
    )


@pytest.fixture
def store(clock):
    return SharedStateStore([], clock=clock)


@pytest.fixture
def service(store, fetcher):
    return AggregateService(store, fetcher, ConfigState())


# ============================================================================
# COIN SUPPLY
# ============================================================================


class TestCoinSupply:
    @pytest.mark.asyncio
    async def test_fetches_once_within_ttl(self, service, fetcher, clock):
        first = await service.coin_supply()
        clock.advance(59)
        second = await service.coin_supply()

        assert first == second
        assert first.percent_mined == pytest.approx(56.7)
        assert fetcher.urls == [SUPPLY_URL]
        assert fetcher.calls[0][1] == 10.0

    @pytest.mark.asyncio
    async def test_refetches_after_expiry(self, service, fetcher, clock):
        await service.coin_supply()
        clock.advance(60)
        await service.coin_supply()

        assert fetcher.urls == [SUPPLY_URL, SUPPLY_URL]

    @pytest.mark.asyncio
    async def test_cached_entry_expiry(self, service, store, clock):
        await service.coin_supply()
        entry = await store.get_entry(COIN_SUPPLY_KEY)
        assert entry.expiry == clock.now + 60

    @pytest.mark.asyncio
    async def test_upstream_error_propagates_and_is_not_cached(self, service, fetcher, store):
        fetcher.responses[SUPPLY_URL] = RemoteError("503", status=503, url=SUPPLY_URL)

        with pytest.raises(RemoteError):
            await service.coin_supply()
        assert await store.get_entry(COIN_SUPPLY_KEY) is None

    @pytest.mark.asyncio
    async def test_wrong_type_in_slot(self, service, store):
        await store.set_for(COIN_SUPPLY_KEY, ["not", "a", "supply"], 60)

        with pytest.raises(StoreError, match="gcs"):
            await service.coin_supply()


# ============================================================================
# PRICE
# ============================================================================


class TestPrice:
    @pytest.mark.asyncio
    async def test_price_is_stamped_and_cached(self, service, fetcher, clock):
        price = await service.price()
        assert price.usd == pytest.approx(15.28)
        assert price.btc == pytest.approx(0.00024311)
        assert price.last_updated == 1_700_000_000
        assert price.model_dump(by_alias=True)["lastupdated"] == 1_700_000_000

        clock.advance(30)
        assert await service.price() == price
        assert fetcher.urls == [PRICE_URL]

        clock.advance(30)
        refreshed = await service.price()
        assert refreshed.last_updated == 1_700_000_060
        assert (await service.store.get_entry(PRICE_KEY)).value == refreshed


# ============================================================================
# DOWNLOADS
# ============================================================================


class TestDownloads:
    @pytest.mark.asyncio
    async def test_download_count_sums_repositories(self, service, fetcher):
        count = await service.download_count()

        assert count.total == 86000
        assert count.as_response() == ["DownloadsCount", "86k"]
        assert fetcher.urls == [BINARIES_URL, RELEASE_URL]
        assert all(timeout == 30.0 for _, timeout in fetcher.calls)

    @pytest.mark.asyncio
    async def test_download_count_cached_for_four_hours(self, service, fetcher, clock):
        await service.download_count()
        clock.advance(4 * 60 * 60 - 1)
        await service.download_count()
        assert len(fetcher.calls) == 2

        clock.advance(1)
        await service.download_count()
        assert len(fetcher.calls) == 4

    @pytest.mark.asyncio
    async def test_badge_reuses_valid_count(self, service, fetcher, store):
        await store.set_for(DOWNLOAD_COUNT_KEY, DownloadCount(total=123456), 600)

        badge = await service.downloads_badge()

        assert fetcher.calls == []
        assert badge.startswith("<svg")
        assert "123k total" in badge
        assert "__COUNT__" not in badge

    @pytest.mark.asyncio
    async def test_badge_fetches_count_when_missing(self, service, fetcher, store):
        badge = await service.downloads_badge()

        assert "86k total" in badge
        assert len(fetcher.calls) == 2
        assert (await store.get_entry(DOWNLOADS_BADGE_KEY)).value == badge
        assert (await store.get_entry(DOWNLOAD_COUNT_KEY)).value.total == 86000

    def test_render_replaces_every_placeholder(self):
        badge = render_downloads_badge("7k")
        assert badge.count("7k total") == 2

    def test_label_truncates_thousands(self):
        assert DownloadCount(total=999).label == "0k"
        assert DownloadCount(total=12999).label == "12k"


# ============================================================================
# CACHE CLEARING
# ============================================================================


class TestClearCache:
    @pytest.mark.asyncio
    async def test_clear_forces_recompute(self, service, fetcher):
        await service.coin_supply()
        await service.price()

        assert await service.clear_cache() == 2
        await service.coin_supply()

        assert fetcher.urls == [SUPPLY_URL, PRICE_URL, SUPPLY_URL]

    @pytest.mark.asyncio
    async def test_clear_during_fetch_discards_in_flight_value(
        self, service, fetcher, store
    ):
        """Um fetch iniciado antes do clear não pode repovoar o cache."""
        fetcher.responses[SUPPLY_URL] = ("delay", 0.2, load_fixture("coin_supply"))

        in_flight = asyncio.create_task(service.coin_supply())
        while not fetcher.calls:
            await asyncio.sleep(0)
        await service.clear_cache()

        supply = await in_flight
        assert supply.coin_supply_mined == pytest.approx(11915785.4)
        assert await store.get_entry(COIN_SUPPLY_KEY) is None

        fetcher.responses[SUPPLY_URL] = load_fixture("coin_supply")
        await service.coin_supply()

        assert fetcher.urls == [SUPPLY_URL, SUPPLY_URL]
        assert await store.get_entry(COIN_SUPPLY_KEY) is not None

    @pytest.mark.asyncio
    async def test_clear_during_badge_render_discards_badge(
        self, service, fetcher, store
    ):
        fetcher.responses[RELEASE_URL] = (
            "delay",
            0.2,
            load_fixture("github_releases_release"),
        )

        in_flight = asyncio.create_task(service.downloads_badge())
        while RELEASE_URL not in fetcher.urls:
            await asyncio.sleep(0)
        await service.clear_cache()
        await in_flight

        assert await store.get_entry(DOWNLOAD_COUNT_KEY) is None
        assert await store.get_entry(DOWNLOADS_BADGE_KEY) is None
