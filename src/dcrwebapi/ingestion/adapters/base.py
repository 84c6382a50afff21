"""
Two-phase JSON decoding for provider adapters.

Phase 1 parses the body into a generic document. Phase 2 checks the required
keys, then reads each field through a typed accessor. A missing key surfaces
as MissingFieldsError before any coercion; a present key with the wrong JSON
type surfaces as FieldTypeError. Neither ever produces a zero-valued record.
"""

import json
import math
from collections.abc import Sequence
from typing import Any

from dcrwebapi.exceptions import (
    FieldTypeError,
    MalformedPayloadError,
    MissingFieldsError,
)

_MISSING = object()


def parse_document(
    body: bytes, expected: type = dict, url: str | None = None
) -> Any:
    """
    Parse a JSON body and check its top-level type.

    Args:
        body: Raw response body
        expected: Required top-level type (dict or list)
        url: Requested URL for error context

    Raises:
        MalformedPayloadError: Invalid JSON or wrong top-level type
    """
    try:
        document = json.loads(body)
    except ValueError as e:
        # JSONDecodeError, UnicodeDecodeError and the int digit limit
        raise MalformedPayloadError(
            f"unmarshal failed: {e}", url=url, payload=body
        ) from e

    if not isinstance(document, expected):
        raise MalformedPayloadError(
            f"expected JSON {expected.__name__}, got {type(document).__name__}",
            url=url,
            payload=body,
        )
    return document


class FieldReader:
    """Typed, validating accessor over one JSON object.

    Usage:
        reader = FieldReader(data, url=url, payload=body)
        reader.require(["Live", "Voted"])
        live = reader.integer("Live")
    """

    def __init__(self, data: dict[str, Any], url: str | None = None, payload: Any = None):
        self.data = data
        self.url = url
        self.payload = payload

    def require(self, keys: Sequence[str]) -> None:
        """Raise MissingFieldsError naming every absent key, in declared order."""
        missing = [key for key in keys if key not in self.data]
        if missing:
            raise MissingFieldsError(missing, url=self.url, payload=self.payload)

    def _type_error(self, key: str, expected: str, value: Any) -> FieldTypeError:
        return FieldTypeError(key, expected, value, url=self.url, payload=self.payload)

    def _get(self, key: str, default: Any) -> Any:
        value = self.data.get(key, _MISSING)
        if value is _MISSING:
            if default is _MISSING:
                raise MissingFieldsError([key], url=self.url, payload=self.payload)
            return default
        return value

    def _finite(self, key: str, value: Any) -> float:
        # bool is an int subclass; never accept it as a number
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise self._type_error(key, "number", value)
        try:
            number = float(value)
        except OverflowError:
            raise self._type_error(key, "finite number", value) from None
        if not math.isfinite(number):
            raise self._type_error(key, "finite number", value)
        return number

    def number(self, key: str, default: Any = _MISSING) -> float:
        return self._finite(key, self._get(key, default))

    def integer(self, key: str, default: Any = _MISSING) -> int:
        """Integer field; JSON numbers may arrive as floats and are truncated."""
        return int(self.number(key, default))

    def string(self, key: str, default: Any = _MISSING) -> str:
        value = self._get(key, default)
        if not isinstance(value, str):
            raise self._type_error(key, "string", value)
        return value

    def boolean(self, key: str, default: Any = _MISSING) -> bool:
        value = self._get(key, default)
        if not isinstance(value, bool):
            raise self._type_error(key, "boolean", value)
        return value

    def array(self, key: str, default: Any = _MISSING) -> list[Any]:
        value = self._get(key, default)
        if not isinstance(value, list):
            raise self._type_error(key, "array", value)
        return value

    def integer_array(self, key: str, default: Any = _MISSING) -> list[int]:
        result = []
        for index, value in enumerate(self.array(key, default)):
            result.append(int(self._finite(f"{key}[{index}]", value)))
        return result

    def mapping(self, key: str, default: Any = _MISSING) -> dict[str, Any]:
        value = self._get(key, default)
        if not isinstance(value, dict):
            raise self._type_error(key, "object", value)
        return value

    def child(self, key: str) -> "FieldReader":
        """Reader over a nested object, sharing the error context."""
        return FieldReader(self.mapping(key), url=self.url, payload=self.payload)
