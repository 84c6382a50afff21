"""Ports for the ingestion layer."""

from .adapters import IProviderAdapter  # noqa: F401
from .http import IFetcher  # noqa: F401

__all__ = [
    "IFetcher",
    "IProviderAdapter",
]
