"""
Test fixtures package.

Provides recorded provider responses, a fake remote fetcher and helpers to
build provider instances.
"""

import asyncio
import copy
import json
from pathlib import Path
from typing import Any

from dcrwebapi.exceptions import RemoteError
from dcrwebapi.shared.models.enums import Network, ProviderFamily
from dcrwebapi.shared.models.records import ProviderInstance

# 2018-01-22 21:04 UTC
DEFAULT_LAUNCHED = 1516655040


def load_fixture(fixture_name: str) -> Any:
    """
    Load fixture data from provider_responses.json.

    Args:
        fixture_name: Name of the fixture to load

    Returns:
        Fixture data (dict, list, etc.), a fresh copy on every call

    Example:
        >>> stats = load_fixture("stakepool_stats")
    """
    fixtures_path = Path(__file__).parent / "provider_responses.json"

    with open(fixtures_path) as f:
        all_fixtures = json.load(f)

    if fixture_name not in all_fixtures:
        raise KeyError(f"Fixture '{fixture_name}' not found")

    return copy.deepcopy(all_fixtures[fixture_name])


def fixture_body(fixture_name: str) -> bytes:
    """Fixture serialized the way a provider would send it."""
    return json.dumps(load_fixture(fixture_name)).encode("utf-8")


def make_stakepool(
    name: str = "Papa",
    url: str = "https://stakey.net",
    network: Network = Network.MAINNET,
    launched: int = DEFAULT_LAUNCHED,
) -> ProviderInstance:
    return ProviderInstance(
        name=name,
        family=ProviderFamily.STAKEPOOL,
        url=url,
        network=network,
        launched=launched,
    )


def make_vsp(
    name: str = "stakey.net",
    url: str = "https://stakey.net",
    network: Network = Network.MAINNET,
    launched: int = DEFAULT_LAUNCHED,
) -> ProviderInstance:
    return ProviderInstance(
        name=name,
        family=ProviderFamily.VSP,
        url=url,
        network=network,
        launched=launched,
    )


class FakeFetcher:
    """
    In-memory IFetcher.

    ``responses`` maps URL -> one of:
      - bytes: returned as the body
      - dict / list: JSON-encoded and returned
      - an exception instance: raised
      - ("delay", seconds, response): sleeps, then handles ``response``

    Unknown URLs answer like a provider returning HTTP 404.
    """

    def __init__(self, responses: dict[str, Any] | None = None):
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, float | None]] = []
        self.closed = False

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]

    async def fetch(self, url: str, timeout: float | None = None) -> bytes:
        self.calls.append((url, timeout))
        if url not in self.responses:
            raise RemoteError(f"{url}: non-success status: 404", status=404, url=url)
        return await self._resolve(self.responses[url])

    async def _resolve(self, response: Any) -> bytes:
        if isinstance(response, tuple) and response and response[0] == "delay":
            _, seconds, inner = response
            await asyncio.sleep(seconds)
            return await self._resolve(inner)
        if isinstance(response, BaseException):
            raise response
        if isinstance(response, dict | list):
            return json.dumps(response).encode("utf-8")
        return response

    async def close(self) -> None:
        self.closed = True


class FakeClock:
    """Settable time source in Unix seconds."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


__all__ = [
    "DEFAULT_LAUNCHED",
    "FakeClock",
    "FakeFetcher",
    "fixture_body",
    "load_fixture",
    "make_stakepool",
    "make_vsp",
]
