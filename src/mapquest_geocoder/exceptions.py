"""
MapQuest Geocoder — Exception Hierarchy
========================================
Every error raised by the client, the batch tool, and the CLI comes from
this module so callers can catch at the level of granularity they need.

Hierarchy::

    GeocoderError                        ← catch-all base
    ├── ConfigError                      ← missing key, bad session, no TLS
    ├── ValidationError                  ← bad caller input
    │   ├── TooManyLocationsError        ← batch larger than the service limit
    │   └── ColumnNotFoundError          ← CSV column missing
    ├── GeocodingError                   ← service / response failures
    │   ├── ServiceError                 ← non-success HTTP status, no connection
    │   └── ResponseParseError           ← body is not usable JSON
    └── OutputWriteError                 ← cannot write to output path

``GeocodingError`` and its subclasses are only raised by a client built
with ``strict=True``; by default those failures come back as empty results.

Usage::

    from mapquest_geocoder.exceptions import ConfigError

    raise ConfigError("'api_key' is required")
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


class GeocoderError(Exception):
    """Base exception for the MapQuest geocoder package.

    Args:
        message: Human-readable description of the error.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigError(GeocoderError):
    """Raised when the geocoder is constructed or reconfigured with
    unusable settings: no API key, a transport that is not a
    ``requests.Session``, or HTTPS without TLS support.
    """


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class ValidationError(GeocoderError):
    """Raised when caller input fails validation before any request is made.

    This is the parent class for more specific input problems.
    """


class TooManyLocationsError(ValidationError):
    """Raised when a batch holds more locations than the service accepts.

    Args:
        count: Number of locations supplied.
        limit: Maximum the batch endpoint accepts.

    Example::

        raise TooManyLocationsError(count=101, limit=100)
    """

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(
            f"too many locations - limit is {limit}, got {count}"
        )
        self.count: int = count
        self.limit: int = limit


class ColumnNotFoundError(ValidationError):
    """Raised when an expected column is absent from the input CSV.

    Args:
        column: The name of the missing column.
        available: Column names that ARE present, listed in the message.
    """

    def __init__(self, column: str, available: list[str]) -> None:
        available_str = ", ".join(f"'{c}'" for c in available)
        super().__init__(
            f"Column '{column}' not found. Available columns: {available_str}"
        )
        self.column: str = column
        self.available: list[str] = available


# ---------------------------------------------------------------------------
# Geocoding (strict mode only)
# ---------------------------------------------------------------------------


class GeocodingError(GeocoderError):
    """Raised when a geocoding request fails and the client is strict."""


class ServiceError(GeocodingError):
    """Raised when the service answers with a non-success status or the
    request never completes.

    Args:
        url: The request URL (including the key).
        status_code: HTTP status, or ``None`` if no response arrived.
        reason: Short description of the failure.
    """

    def __init__(self, url: str, status_code: int | None, reason: str) -> None:
        status = f"HTTP {status_code}" if status_code is not None else "no response"
        super().__init__(f"Geocoding request failed ({status}): {reason}")
        self.url: str = url
        self.status_code: int | None = status_code
        self.reason: str = reason


class ResponseParseError(GeocodingError):
    """Raised when the response body cannot be decoded into the expected
    JSON structure.
    """


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class OutputWriteError(GeocoderError):
    """Raised when the batch tool cannot write its output to disk.

    Args:
        output_path: String representation of the path that failed.
        reason: Underlying OS error message.
    """

    def __init__(self, output_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to write output to '{output_path}': {reason}"
        )
        self.output_path: str = output_path
        self.reason: str = reason
