"""Client configuration loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All settings are read from environment variables (case-insensitive)."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ── InfluxDB ──────────────────────────────────────────────────────────────
    influx_url: str = "http://localhost:8086"
    # API token with read/write access to the bucket.  Empty means unset.
    influx_token: str = ""
    influx_org: str = "my-org"
    influx_bucket: str = "my-bucket"

    # ── HTTP ──────────────────────────────────────────────────────────────────
    # Per-request timeout in seconds; applies to ping, reads and writes.
    influx_timeout: float = 10.0
