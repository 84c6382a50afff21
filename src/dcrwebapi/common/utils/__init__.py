"""
Utilities Module - Shared Helper Functions
===========================================

Provides shared utilities used across multiple layers:
- Date/time utilities
- Numeric rounding
- Version string sanitizing
"""

from dcrwebapi.common.utils.date_utils import (
    to_unix_seconds,
    unix_time,
)
from dcrwebapi.common.utils.numeric import round_half_up
from dcrwebapi.common.utils.versions import (
    MAX_VERSION_LENGTH,
    SEMANTIC_BUILD_ALPHABET,
    normalize_build_string,
    sanitize_version,
)

__all__ = [
    # Date utilities
    "to_unix_seconds",
    "unix_time",
    # Numeric
    "round_half_up",
    # Versions
    "MAX_VERSION_LENGTH",
    "SEMANTIC_BUILD_ALPHABET",
    "normalize_build_string",
    "sanitize_version",
]
