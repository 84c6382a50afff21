"""
VSP Info Adapter

Decodes ``GET <vsp>/api/v3/vspinfo`` as served by vspd:

    {
        "apiversions": [3], "timestamp": 1700000000, "pubkey": "...",
        "feepercentage": 0.5, "vspclosed": false, "network": "mainnet",
        "vspdversion": "1.2.0+release", "voting": 812, "voted": 20411,
        "revoked": 31, "blockheight": 812345,
        "estimatednetworkproportion": 0.0193
    }
"""

from dcrwebapi.common.utils.versions import sanitize_version
from dcrwebapi.ingestion.adapters.base import FieldReader, parse_document
from dcrwebapi.shared.models.enums import ProviderFamily
from dcrwebapi.shared.models.records import ProviderInstance, VspRecord

VSP_API_VERSION = 3

REQUIRED_FIELDS = (
    "apiversions",
    "feepercentage",
    "vspclosed",
    "voting",
    "voted",
    "revoked",
    "vspdversion",
    "blockheight",
    "estimatednetworkproportion",
)


def vsp_info_url(instance: ProviderInstance, api_version: int = VSP_API_VERSION) -> str:
    return f"{instance.url}/api/v{api_version}/vspinfo"


class VspInfoAdapter:
    """vspinfo -> VspRecord."""

    family = ProviderFamily.VSP

    def decode(
        self, body: bytes, instance: ProviderInstance, url: str | None = None
    ) -> VspRecord:
        info = FieldReader(parse_document(body, dict, url), url=url, payload=body)
        info.require(REQUIRED_FIELDS)

        return VspRecord(
            network=instance.network.value,
            url=instance.url,
            launched=instance.launched,
            api_versions=info.integer_array("apiversions"),
            fee_percentage=info.number("feepercentage"),
            closed=info.boolean("vspclosed"),
            voting=info.integer("voting"),
            voted=info.integer("voted"),
            revoked=info.integer("revoked"),
            vspd_version=sanitize_version(info.string("vspdversion")),
            block_height=info.integer("blockheight"),
            estimated_network_proportion=info.number("estimatednetworkproportion"),
        )
