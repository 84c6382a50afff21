"""
Legacy Stakepool Stats Adapter

Decodes ``GET <pool>/api/v{N}/stats``:

    {
        "status": "success",
        "data": {
            "APIVersionsSupported": [1, 2],
            "Immature": 3, "Live": 120, "Voted": 4021, "Missed": 12,
            "PoolFees": 7.5, "ProportionLive": 0.0031, "ProportionMissed": 0.0029,
            "UserCount": 310, "UserCountActive": 98,
            "Version": "1.2.0-pre"
        }
    }

The same shape is served by API v1 and v2; the orchestrator tries v2 first and
falls back to v1 (see ``dcrwebapi.ingestion.strategies``).
"""

from dcrwebapi.common.utils.versions import sanitize_version
from dcrwebapi.exceptions import ProviderStatusError
from dcrwebapi.ingestion.adapters.base import FieldReader, parse_document
from dcrwebapi.shared.models.enums import ProviderFamily
from dcrwebapi.shared.models.records import ProviderInstance, StakepoolRecord

STAKEPOOL_API_INITIAL_VERSION = 1
STAKEPOOL_API_CURRENT_VERSION = 2

REQUIRED_FIELDS = (
    "Immature",
    "Live",
    "Voted",
    "Missed",
    "PoolFees",
    "ProportionLive",
    "ProportionMissed",
    "UserCount",
    "UserCountActive",
    "APIVersionsSupported",
)


def stakepool_stats_url(instance: ProviderInstance, api_version: int) -> str:
    return f"{instance.url}/api/v{api_version}/stats"


class StakepoolStatsAdapter:
    """Stakepool stats -> StakepoolRecord."""

    family = ProviderFamily.STAKEPOOL

    def decode(
        self, body: bytes, instance: ProviderInstance, url: str | None = None
    ) -> StakepoolRecord:
        envelope = FieldReader(parse_document(body, dict, url), url=url, payload=body)

        envelope.require(["status"])
        status = envelope.data["status"]
        if status != "success":
            raise ProviderStatusError(status, url=url, payload=body)

        envelope.require(["data"])
        data = envelope.child("data")
        data.require(REQUIRED_FIELDS)

        return StakepoolRecord(
            api_enabled=True,
            api_versions_supported=data.array("APIVersionsSupported"),
            network=instance.network.value,
            url=instance.url,
            launched=instance.launched,
            immature=data.integer("Immature"),
            live=data.integer("Live"),
            voted=data.integer("Voted"),
            missed=data.integer("Missed"),
            pool_fees=data.number("PoolFees"),
            proportion_live=data.number("ProportionLive"),
            proportion_missed=data.number("ProportionMissed"),
            user_count=data.integer("UserCount"),
            user_count_active=data.integer("UserCountActive"),
            version=sanitize_version(data.string("Version", default="")),
        )
