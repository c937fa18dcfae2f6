"""InfluxDB v2 HTTP client.

Reads go to the ``/query`` endpoint and writes (line protocol) to
``/api/v2/write`` via httpx.  Responses are passed through as text; the
client only classifies failures into the exceptions of
:mod:`influxdb_v2.errors`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType

import httpx

from influxdb_v2.errors import (
    AuthenticationError,
    AuthorizationError,
    DatabaseError,
    DeserializationError,
    InfluxDBConnectionError,
    InvalidHeaderError,
    InvalidQueryError,
    ProtocolError,
    UrlConstructionError,
)
from influxdb_v2.models import Query, QueryType

logger = logging.getLogger(__name__)

# Only visible ASCII and horizontal tab may appear in a header value.
_INVALID_HEADER_CHARS = re.compile(r"[^\t\x20-\x7e]")


class InfluxDBClient:
    """Async client for one InfluxDB v2 server, organization and bucket.

    All configuration is fixed at construction time, so one instance can be
    shared freely between concurrent tasks.  Every call opens its own
    short-lived ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        url: str,
        token: str,
        org: str,
        bucket: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            url:       Where InfluxDB is running, e.g. ``http://localhost:8086``.
            token:     API token; sent as ``Authorization: Token <token>``.
            org:       Organization the bucket belongs to.
            bucket:    Bucket all reads and writes go to.
            timeout:   Per-request timeout in seconds.
            transport: Optional httpx transport (mainly for tests).

        Raises:
            InvalidHeaderError: if *token* contains characters that are not
                allowed in an HTTP header value.
        """
        auth_header = f"Token {token}"
        if _INVALID_HEADER_CHARS.search(auth_header):
            raise InvalidHeaderError(
                "token contains characters not allowed in an HTTP header value"
            )

        self._url = url
        self._headers: Mapping[str, str] = MappingProxyType(
            {"Authorization": auth_header}
        )
        self._parameters: Mapping[str, str] = MappingProxyType(
            {"org": org, "bucket": bucket}
        )
        self._timeout = timeout
        self._transport = transport

    # ── Accessors ────────────────────────────────────────────────────────────

    def database_url(self) -> str:
        """Return the URL of the InfluxDB server this client talks to."""
        return self._url

    def token(self) -> str:
        """Return the stored Authorization value, ``Token`` prefix included."""
        return self._headers["Authorization"]

    @property
    def parameters(self) -> Mapping[str, str]:
        """Read-only ``org``/``bucket`` query parameters sent with every query."""
        return self._parameters

    # ── Requests ─────────────────────────────────────────────────────────────

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self._timeout)

    async def ping(self) -> tuple[str, str]:
        """Ping the server.

        Returns:
            ``(build, version)`` from the ``X-Influxdb-Build`` and
            ``X-Influxdb-Version`` response headers; a missing header yields ``""``.

        Raises:
            ProtocolError: if the request could not be sent.
        """
        try:
            async with self._http_client() as client:
                resp = await client.get(f"{self._url}/ping")
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ProtocolError(str(exc)) from exc

        build = resp.headers.get("X-Influxdb-Build", "")
        version = resp.headers.get("X-Influxdb-Version", "")
        logger.debug("InfluxDB ping: build=%s version=%s", build, version)
        return build, version

    async def query(self, q: Query) -> str:
        """Send a read or write query and return the raw response body.

        Read queries whose text contains ``SELECT`` or ``SHOW`` are sent as
        GET, any other read as POST.  Write queries are POSTed to
        ``/api/v2/write`` with the rendered line protocol as the body.

        Args:
            q: A :class:`~influxdb_v2.models.ReadQuery`,
               :class:`~influxdb_v2.models.WriteQuery` or any object
               implementing the ``Query`` protocol.

        Returns:
            The response body, unparsed.

        Raises:
            InvalidQueryError:       the query could not be rendered.
            UrlConstructionError:    the request could not be assembled.
            InfluxDBConnectionError: the server could not be reached.
            AuthorizationError:      HTTP 401.
            AuthenticationError:     HTTP 403.
            DeserializationError:    the response body is not valid text.
            DatabaseError:           the response body reports an error.
        """
        try:
            text = q.build()
        except InvalidQueryError:
            raise
        except Exception as exc:
            raise InvalidQueryError(str(exc)) from exc

        headers = dict(self._headers)
        parameters = dict(self._parameters)

        async with self._http_client() as client:
            try:
                if q.query_type == QueryType.WRITE:
                    parameters["precision"] = q.get_precision()  # type: ignore[attr-defined]
                    headers["Content-Type"] = "text/plain; charset=utf-8"
                    request = client.build_request(
                        "POST",
                        f"{self._url}/api/v2/write",
                        params=parameters,
                        headers=headers,
                        content=text.encode(),
                    )
                else:
                    method = "GET" if "SELECT" in text or "SHOW" in text else "POST"
                    request = client.build_request(
                        method,
                        f"{self._url}/query",
                        params=parameters,
                        headers=headers,
                    )
            except (httpx.InvalidURL, ValueError) as exc:
                raise UrlConstructionError(str(exc)) from exc

            logger.debug("InfluxDB %s %s", request.method, request.url)
            try:
                resp = await client.send(request)
            except httpx.TransportError as exc:
                raise InfluxDBConnectionError(str(exc)) from exc

        if resp.status_code == 401:
            raise AuthorizationError()
        if resp.status_code == 403:
            raise AuthenticationError()

        try:
            body = resp.content.decode(resp.encoding or "utf-8")
        except (UnicodeDecodeError, LookupError) as exc:
            raise DeserializationError(
                "response could not be converted to UTF-8"
            ) from exc

        # Substring check, not JSON parsing: any body carrying the error key
        # is treated as a failure.
        if '"error"' in body:
            raise DatabaseError(body)

        return body
