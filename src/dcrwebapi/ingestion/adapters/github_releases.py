"""
GitHub Releases Adapter

Sums asset download counts from ``GET /repos/{owner}/{repo}/releases``:

    [{"tag_name": "v1.8.0", "assets": [{"name": "...", "download_count": 1234}]}]
"""

from dcrwebapi.exceptions import MalformedPayloadError
from dcrwebapi.ingestion.adapters.base import FieldReader, parse_document


def releases_url(api_base_url: str, repository: str) -> str:
    return f"{api_base_url.rstrip('/')}/repos/{repository}/releases?per_page=100"


class ReleaseDownloadsAdapter:
    """Release list -> total asset download count."""

    def decode(self, body: bytes, url: str | None = None) -> int:
        releases = parse_document(body, list, url)

        total = 0
        for release in releases:
            if not isinstance(release, dict):
                raise MalformedPayloadError(
                    f"release entry must be an object, got {type(release).__name__}",
                    url=url,
                    payload=body,
                )
            reader = FieldReader(release, url=url, payload=body)
            reader.require(["assets"])
            for asset in reader.array("assets"):
                if not isinstance(asset, dict):
                    raise MalformedPayloadError(
                        f"asset entry must be an object, got {type(asset).__name__}",
                        url=url,
                        payload=body,
                    )
                total += FieldReader(asset, url=url, payload=body).integer(
                    "download_count", default=0
                )
        return total
