"""HTTP connectors."""

from .aiohttp_client import AiohttpFetcher

__all__ = ["AiohttpFetcher"]
