"""Exceptions raised by the InfluxDB v2 client.

Every failure is surfaced to the caller on first occurrence; none of these
are retried by the client.
"""

from __future__ import annotations


class InfluxDBError(Exception):
    """Base class for all InfluxDB client errors."""


class InvalidHeaderError(InfluxDBError):
    """Raised when the auth token cannot be encoded as an HTTP header value."""


class InvalidQueryError(InfluxDBError):
    """Raised when a query cannot be rendered to request text."""


class UrlConstructionError(InfluxDBError):
    """Raised when the HTTP request cannot be assembled from the rendered query."""


class InfluxDBConnectionError(InfluxDBError):
    """Raised when the server cannot be reached while sending a query."""


class ProtocolError(InfluxDBError):
    """Raised when a ping request fails at the transport level."""


class AuthorizationError(InfluxDBError):
    """HTTP 401 from the server."""

    def __init__(self, message: str = "authorization error") -> None:
        super().__init__(message)


class AuthenticationError(InfluxDBError):
    """HTTP 403 from the server."""

    def __init__(self, message: str = "authentication error") -> None:
        super().__init__(message)


class DeserializationError(InfluxDBError):
    """Raised when the response body is not valid text."""


class DatabaseError(InfluxDBError):
    """The server answered with an error payload.

    ``body`` holds the raw response text for diagnostics.
    """

    def __init__(self, body: str) -> None:
        super().__init__(f'influxdb error: "{body}"')
        self.body = body
