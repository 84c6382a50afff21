"""
dcrwebapi Exception Hierarchy

Provides specific exception types for the failure classes of the refresh
pipeline (network, remote status, payload shape, store invariants), enabling
the orchestrator to contain them per provider and the HTTP layer to report them.
"""

from typing import Any

# Payload excerpts attached to decode errors are capped so a misbehaving
# provider cannot flood the logs.
MAX_PAYLOAD_EXCERPT = 512


def payload_excerpt(payload: Any) -> str:
    """Render a payload for log/error context, truncated."""
    if isinstance(payload, bytes):
        text = payload.decode("utf-8", errors="replace")
    else:
        text = str(payload)
    if len(text) > MAX_PAYLOAD_EXCERPT:
        return text[:MAX_PAYLOAD_EXCERPT] + "..."
    return text


class DcrWebApiError(Exception):
    """Base exception for all dcrwebapi errors."""

    pass


# ============================================================================
# Fetch errors (network level)
# ============================================================================


class FetchError(DcrWebApiError):
    """Base exception for failures while retrieving a provider URL."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class TransportError(FetchError):
    """DNS, connection reset, TLS and other transport-level failures."""

    pass


class FetchTimeoutError(FetchError):
    """Request exceeded its timeout."""

    def __init__(self, message: str, url: str | None = None, timeout: float | None = None):
        super().__init__(message, url=url)
        self.timeout = timeout


class RemoteError(FetchError):
    """Non-success HTTP status returned by the provider."""

    def __init__(self, message: str, status: int, url: str | None = None):
        super().__init__(message, url=url)
        self.status = status


# ============================================================================
# Decode errors (payload level)
# ============================================================================


class DecodeError(DcrWebApiError):
    """Response shape did not match the provider contract."""

    def __init__(self, message: str, url: str | None = None, payload: Any = None):
        super().__init__(message)
        self.url = url
        self.payload = payload


class MalformedPayloadError(DecodeError):
    """Body is not valid JSON, or the top-level JSON type is wrong."""

    pass


class MissingFieldsError(DecodeError):
    """One or more required keys are absent."""

    def __init__(
        self,
        keys: list[str],
        url: str | None = None,
        payload: Any = None,
    ):
        super().__init__(
            f"missing required fields: {', '.join(keys)}", url=url, payload=payload
        )
        self.keys = list(keys)


class FieldTypeError(DecodeError):
    """A required key is present but carries the wrong JSON type."""

    def __init__(
        self,
        field: str,
        expected: str,
        actual: Any,
        url: str | None = None,
        payload: Any = None,
    ):
        super().__init__(
            f"field '{field}' expected {expected}, got {type(actual).__name__}",
            url=url,
            payload=payload,
        )
        self.field = field
        self.expected = expected
        self.actual = actual


class ProviderStatusError(DecodeError):
    """Provider answered 200 but reported a non-success status in its envelope."""

    def __init__(self, status: Any, url: str | None = None, payload: Any = None):
        super().__init__(
            f"non-success status '{status}'", url=url, payload=payload
        )
        self.status = status


# ============================================================================
# Internal errors
# ============================================================================


class StoreError(DcrWebApiError):
    """Store invariant violated (unknown instance id, bad cache slot type)."""

    pass


class ConfigurationError(DcrWebApiError):
    """Static configuration is invalid."""

    pass
