"""Client providers.

Settings are read once and cached; ``get_influxdb_client`` builds a client
from them.  Tests clear the cache with ``get_settings.cache_clear()``.
"""

from functools import lru_cache

from influxdb_v2.clients.influxdb import InfluxDBClient
from influxdb_v2.config import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def get_influxdb_client(settings: Settings | None = None) -> InfluxDBClient:
    settings = settings or get_settings()
    return InfluxDBClient(
        url=settings.influx_url,
        token=settings.influx_token,
        org=settings.influx_org,
        bucket=settings.influx_bucket,
        timeout=settings.influx_timeout,
    )
