"""
Version String Sanitizing

Provider-advertised software versions are free text; they are reduced to the
semantic-versioning build-metadata alphabet and capped in length before being
published.
"""

SEMANTIC_BUILD_ALPHABET = (
    "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-.+"
)

MAX_VERSION_LENGTH = 13

_ALLOWED = frozenset(SEMANTIC_BUILD_ALPHABET)


def normalize_build_string(value: str) -> str:
    """Strip every character outside the semver build-metadata alphabet."""
    return "".join(ch for ch in value if ch in _ALLOWED)


def sanitize_version(value: str) -> str:
    """
    Normalize and truncate a provider version string.

    Idempotent: ``sanitize_version(sanitize_version(s)) == sanitize_version(s)``.

    Example:
        >>> sanitize_version("1.6.0-pre (build 2c7a1b)")
        '1.6.0-prebuil'
    """
    return normalize_build_string(value)[:MAX_VERSION_LENGTH]
