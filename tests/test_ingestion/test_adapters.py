"""
Tests for the provider adapters (raw bytes -> validated records/aggregates).

Cobrem:
1. Decodificação bem-sucedida de cada contrato (stakepool, vsp, supply, preço, releases)
2. Campos ausentes: MissingFieldsError nomeia exatamente os campos que faltam
3. Tipos errados: FieldTypeError, nunca um registro com zeros
4. Payloads malformados
"""

import json

import pytest

from dcrwebapi.exceptions import (
    DecodeError,
    FieldTypeError,
    MalformedPayloadError,
    MissingFieldsError,
    ProviderStatusError,
)
from dcrwebapi.ingestion.adapters import (
    CoinSupplyAdapter,
    PriceAdapter,
    ReleaseDownloadsAdapter,
    StakepoolStatsAdapter,
    VspInfoAdapter,
    releases_url,
    stakepool_stats_url,
    vsp_info_url,
)
from dcrwebapi.shared.models.enums import Network
from dcrwebapi.shared.models.records import StakepoolRecord, VspRecord
from tests.fixtures import (
    DEFAULT_LAUNCHED,
    fixture_body,
    load_fixture,
    make_stakepool,
    make_vsp,
)


def encode(document) -> bytes:
    return json.dumps(document).encode("utf-8")


# ============================================================================
# STAKEPOOL STATS
# ============================================================================


class TestStakepoolStatsAdapter:
    """Legacy stakepool /api/v{N}/stats."""

    @pytest.fixture
    def adapter(self):
        return StakepoolStatsAdapter()

    @pytest.fixture
    def instance(self):
        return make_stakepool(network=Network.TESTNET)

    def test_stats_url(self, instance):
        assert stakepool_stats_url(instance, 2) == "https://stakey.net/api/v2/stats"
        assert stakepool_stats_url(instance, 1) == "https://stakey.net/api/v1/stats"

    def test_decode_success(self, adapter, instance):
        record = adapter.decode(fixture_body("stakepool_stats"), instance)

        assert isinstance(record, StakepoolRecord)
        assert record.api_enabled is True
        assert record.api_versions_supported == [1, 2]
        assert record.live == 120
        assert record.voted == 4021
        assert record.pool_fees == 7.5
        assert record.proportion_live == 0.0031
        assert record.user_count_active == 98
        assert record.version == "1.2.0-pre+dev"
        # Identity comes from configuration, not from the provider
        assert record.network == "testnet"
        assert record.url == "https://stakey.net"
        assert record.launched == DEFAULT_LAUNCHED

    def test_wire_shape_uses_published_keys(self, adapter, instance):
        dumped = adapter.decode(fixture_body("stakepool_stats"), instance).model_dump(
            by_alias=True
        )
        assert {
            "APIEnabled",
            "APIVersionsSupported",
            "Network",
            "URL",
            "Launched",
            "LastUpdated",
            "Immature",
            "Live",
            "Voted",
            "Missed",
            "PoolFees",
            "ProportionLive",
            "ProportionMissed",
            "UserCount",
            "UserCountActive",
            "Version",
        } == set(dumped)

    def test_float_counts_are_truncated(self, adapter, instance):
        record = adapter.decode(fixture_body("stakepool_stats_float_counts"), instance)
        assert record.live == 57
        assert record.user_count == 41
        assert record.pool_fees == 5.0

    def test_missing_version_is_empty(self, adapter, instance):
        record = adapter.decode(fixture_body("stakepool_stats_float_counts"), instance)
        assert record.version == ""

    def test_version_is_sanitized(self, adapter, instance):
        payload = load_fixture("stakepool_stats")
        payload["data"]["Version"] = "1.6.0-pre (build 2c7a1b)"
        record = adapter.decode(encode(payload), instance)
        assert record.version == "1.6.0-prebuil"

    def test_missing_field_names_exactly_that_field(self, adapter, instance):
        """Um único campo ausente -> MissingFieldsError com exatamente esse campo."""
        url = stakepool_stats_url(instance, 2)
        body = fixture_body("stakepool_stats_missing_user_count_active")

        with pytest.raises(MissingFieldsError) as exc_info:
            adapter.decode(body, instance, url=url)

        assert exc_info.value.keys == ["UserCountActive"]
        assert exc_info.value.url == url
        assert exc_info.value.payload == body

    def test_missing_fields_listed_in_declared_order(self, adapter, instance):
        payload = load_fixture("stakepool_stats")
        del payload["data"]["UserCount"]
        del payload["data"]["Live"]

        with pytest.raises(MissingFieldsError) as exc_info:
            adapter.decode(encode(payload), instance)

        assert exc_info.value.keys == ["Live", "UserCount"]
        assert "Live, UserCount" in str(exc_info.value)

    def test_non_success_status(self, adapter, instance):
        with pytest.raises(ProviderStatusError) as exc_info:
            adapter.decode(fixture_body("stakepool_stats_error_status"), instance)
        assert exc_info.value.status == "error"

    def test_missing_envelope(self, adapter, instance):
        with pytest.raises(MissingFieldsError) as exc_info:
            adapter.decode(encode({"status": "success"}), instance)
        assert exc_info.value.keys == ["data"]

    def test_string_count_is_type_error(self, adapter, instance):
        payload = load_fixture("stakepool_stats")
        payload["data"]["Live"] = "120"

        with pytest.raises(FieldTypeError) as exc_info:
            adapter.decode(encode(payload), instance)
        assert exc_info.value.field == "Live"

    def test_boolean_is_not_a_number(self, adapter, instance):
        payload = load_fixture("stakepool_stats")
        payload["data"]["Missed"] = True

        with pytest.raises(FieldTypeError):
            adapter.decode(encode(payload), instance)

    def test_null_is_type_error(self, adapter, instance):
        payload = load_fixture("stakepool_stats")
        payload["data"]["PoolFees"] = None

        with pytest.raises(FieldTypeError):
            adapter.decode(encode(payload), instance)

    def test_non_string_version(self, adapter, instance):
        payload = load_fixture("stakepool_stats")
        payload["data"]["Version"] = 12

        with pytest.raises(FieldTypeError):
            adapter.decode(encode(payload), instance)

    def test_integer_too_large_for_float(self, adapter, instance):
        payload = load_fixture("stakepool_stats")
        payload["data"]["Immature"] = "HUGE"
        body = encode(payload).replace(b'"HUGE"', b"9" * 400)

        with pytest.raises(FieldTypeError) as exc_info:
            adapter.decode(body, instance)
        assert exc_info.value.field == "Immature"
        assert exc_info.value.expected == "finite number"

    @pytest.mark.parametrize("body", [b"<html>502</html>", b"", b"[1, 2]", b'"ok"'])
    def test_malformed(self, adapter, instance, body):
        with pytest.raises(MalformedPayloadError):
            adapter.decode(body, instance)


# ============================================================================
# VSP INFO
# ============================================================================


class TestVspInfoAdapter:
    @pytest.fixture
    def adapter(self):
        return VspInfoAdapter()

    @pytest.fixture
    def instance(self):
        return make_vsp()

    def test_info_url(self, instance):
        assert vsp_info_url(instance) == "https://stakey.net/api/v3/vspinfo"

    def test_decode_success(self, adapter, instance):
        record = adapter.decode(fixture_body("vsp_info"), instance)

        assert isinstance(record, VspRecord)
        assert record.api_versions == [3]
        assert record.fee_percentage == 0.5
        assert record.closed is False
        assert record.voting == 812
        assert record.voted == 20411
        assert record.revoked == 31
        assert record.block_height == 812345
        assert record.estimated_network_proportion == 0.0193
        assert record.vspd_version == "1.2.0+release"
        assert record.network == "mainnet"

    def test_wire_shape(self, adapter, instance):
        dumped = adapter.decode(fixture_body("vsp_info"), instance).model_dump(
            by_alias=True
        )
        assert dumped["feepercentage"] == 0.5
        assert dumped["vspdversion"] == "1.2.0+release"
        assert dumped["apiversions"] == [3]
        assert dumped["lastupdated"] == 0

    def test_missing_field(self, adapter, instance):
        payload = load_fixture("vsp_info")
        del payload["blockheight"]

        with pytest.raises(MissingFieldsError) as exc_info:
            adapter.decode(encode(payload), instance)
        assert exc_info.value.keys == ["blockheight"]

    def test_closed_must_be_boolean(self, adapter, instance):
        payload = load_fixture("vsp_info")
        payload["vspclosed"] = 0

        with pytest.raises(FieldTypeError) as exc_info:
            adapter.decode(encode(payload), instance)
        assert exc_info.value.field == "vspclosed"

    def test_api_versions_must_be_numbers(self, adapter, instance):
        payload = load_fixture("vsp_info")
        payload["apiversions"] = [3, "4"]

        with pytest.raises(FieldTypeError) as exc_info:
            adapter.decode(encode(payload), instance)
        assert exc_info.value.field == "apiversions[1]"

    def test_api_version_too_large_for_float(self, adapter, instance):
        payload = load_fixture("vsp_info")
        payload["apiversions"] = [3, "HUGE"]
        body = encode(payload).replace(b'"HUGE"', b"9" * 400)

        with pytest.raises(FieldTypeError) as exc_info:
            adapter.decode(body, instance)
        assert exc_info.value.field == "apiversions[1]"


# ============================================================================
# COIN SUPPLY
# ============================================================================


class TestCoinSupplyAdapter:
    @pytest.fixture
    def adapter(self):
        return CoinSupplyAdapter(airdrop=840000, premine=840000, total=21000000)

    def test_worked_example(self, adapter):
        """supply_mined = 1191578535131039 atoms."""
        supply = adapter.decode(fixture_body("coin_supply"))

        assert supply.coin_supply_mined_raw == 1191578535131039.0
        assert supply.coin_supply_mined == pytest.approx(11915785.4)
        assert supply.percent_mined == pytest.approx(56.7)
        assert supply.airdrop == pytest.approx(7.0)
        assert supply.premine == pytest.approx(7.0)
        assert supply.pos == pytest.approx(25.8)
        assert supply.pow == pytest.approx(51.5)
        assert supply.subsidy == pytest.approx(8.6)
        assert supply.coin_supply_total == 21000000

    def test_wire_shape(self, adapter):
        dumped = adapter.decode(fixture_body("coin_supply")).model_dump(by_alias=True)
        assert set(dumped) == {
            "Airdrop",
            "CoinSupplyMined",
            "CoinSupplyMinedRaw",
            "CoinSupplyTotal",
            "PercentMined",
            "Pos",
            "Pow",
            "Premine",
            "Subsidy",
        }

    def test_missing_supply(self, adapter):
        with pytest.raises(MissingFieldsError) as exc_info:
            adapter.decode(encode({"supply_ultimate": 1}))
        assert exc_info.value.keys == ["supply_mined"]

    def test_zero_supply_is_decode_error(self, adapter):
        with pytest.raises(DecodeError):
            adapter.decode(encode({"supply_mined": 0}))

    def test_integer_too_large_for_float(self, adapter):
        with pytest.raises(FieldTypeError) as exc_info:
            adapter.decode(b'{"supply_mined": ' + b"9" * 400 + b"}")
        assert exc_info.value.field == "supply_mined"

    def test_integer_beyond_digit_limit_is_malformed(self, adapter):
        with pytest.raises(MalformedPayloadError):
            adapter.decode(b'{"supply_mined": ' + b"9" * 5000 + b"}")

    def test_float_near_max_still_decodes(self, adapter):
        supply = adapter.decode(encode({"supply_mined": 1e308}))
        assert supply.coin_supply_mined_raw == 1e308


# ============================================================================
# PRICE
# ============================================================================


class TestPriceAdapter:
    def test_decode(self):
        price = PriceAdapter().decode(fixture_body("price"))
        assert price.usd == pytest.approx(15.28)
        assert price.btc == pytest.approx(0.00024311)

    def test_missing_quote(self):
        with pytest.raises(MissingFieldsError) as exc_info:
            PriceAdapter().decode(encode({"decred": {"usd": 15.0}}))
        assert exc_info.value.keys == ["btc"]

    def test_missing_coin(self):
        with pytest.raises(MissingFieldsError) as exc_info:
            PriceAdapter().decode(encode({"bitcoin": {"usd": 1, "btc": 1}}))
        assert exc_info.value.keys == ["decred"]


# ============================================================================
# GITHUB RELEASES
# ============================================================================


class TestReleaseDownloadsAdapter:
    def test_releases_url(self):
        assert (
            releases_url("https://api.github.com/", "decred/decred-binaries")
            == "https://api.github.com/repos/decred/decred-binaries/releases?per_page=100"
        )

    def test_sums_asset_downloads(self):
        adapter = ReleaseDownloadsAdapter()
        assert adapter.decode(fixture_body("github_releases_binaries")) == 76250
        assert adapter.decode(fixture_body("github_releases_release")) == 9750

    def test_empty_list(self):
        assert ReleaseDownloadsAdapter().decode(b"[]") == 0

    def test_object_instead_of_list(self):
        with pytest.raises(MalformedPayloadError):
            ReleaseDownloadsAdapter().decode(encode({"message": "API rate limit exceeded"}))

    def test_release_without_assets(self):
        with pytest.raises(MissingFieldsError):
            ReleaseDownloadsAdapter().decode(encode([{"tag_name": "v1.0.0"}]))
