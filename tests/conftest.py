"""Shared pytest fixtures and helpers.

HTTP traffic is intercepted with ``httpx.MockTransport`` so tests run without
a live InfluxDB server.  Every request the client sends is recorded in
``requests`` for later assertions.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

import httpx
import pytest

from influxdb_v2.clients.influxdb import InfluxDBClient
from influxdb_v2.deps import get_settings

# ── Constants ─────────────────────────────────────────────────────────────────

INFLUX_URL = "http://localhost:8086"
INFLUX_TOKEN = "YOURAUTHTOKEN"

Handler = Callable[[httpx.Request], httpx.Response]

# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture()
def requests() -> list[httpx.Request]:
    return []


@pytest.fixture()
def make_client(
    requests: list[httpx.Request],
) -> Callable[[Handler], InfluxDBClient]:
    """Return a factory building a client whose traffic goes to *handler*."""

    def factory(handler: Handler) -> InfluxDBClient:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        return InfluxDBClient(
            INFLUX_URL,
            INFLUX_TOKEN,
            "org",
            "bucket",
            transport=httpx.MockTransport(recording_handler),
        )

    return factory


@pytest.fixture()
def ok_client(make_client: Callable[[Handler], InfluxDBClient]) -> InfluxDBClient:
    """A client whose server answers every request with an empty 204."""
    return make_client(lambda request: httpx.Response(204))


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
