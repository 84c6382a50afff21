"""
Observability layer: structured logging for the refresh loop, the store and the
HTTP surface. Every entry carries the application identifier plus the layer and
component that emitted it, so a provider-side contract change can be traced
from a single log line (instance, URL, payload excerpt).
"""

from .logging import (
    # Layer-specific logger factories
    get_api_logger,
    get_infrastructure_logger,
    get_ingestion_logger,
    # Base logger factory
    get_logger,
    get_storage_logger,
    # Setup
    setup_logging,
)

__all__ = [
    # Setup
    "setup_logging",
    # Base
    "get_logger",
    # Layer-specific
    "get_infrastructure_logger",
    "get_ingestion_logger",
    "get_storage_logger",
    "get_api_logger",
]
