"""Provider adapter abstraction."""

from typing import Protocol

from dcrwebapi.shared.models.records import ProviderInstance, ProviderRecord


class IProviderAdapter(Protocol):
    """Decodes one provider family's response into its record type.

    Single Responsibility: bytes -> validated record.
    Does NOT:
    - Perform I/O
    - Stamp ``last_updated`` (the store does, at acceptance time)
    """

    def decode(
        self, body: bytes, instance: ProviderInstance, url: str | None = None
    ) -> ProviderRecord:
        """Decode and validate a response body.

        Args:
            body: Raw response body
            instance: Provider the body came from (identity fields)
            url: Requested URL, attached to errors for diagnosis

        Raises:
            DecodeError: On malformed JSON, missing or mistyped fields
        """
        ...
