"""Query models sent through the InfluxDB v2 client.

Each query renders itself to request-ready text via ``build()`` and tells the
client which endpoint it belongs to via ``query_type``.  Write queries render a
single line of InfluxDB line protocol and additionally declare the timestamp
``precision`` sent alongside the payload.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Protocol

from pydantic import BaseModel, Field

from influxdb_v2.errors import InvalidQueryError

FieldValue = bool | int | float | str


class QueryType(str, Enum):
    READ = "read"
    WRITE = "write"


class Precision(str, Enum):
    """Timestamp units accepted by ``/api/v2/write``."""

    NANOSECONDS = "ns"
    MICROSECONDS = "us"
    MILLISECONDS = "ms"
    SECONDS = "s"


class Query(Protocol):
    """Anything the client can send: renders to text and names its variant."""

    @property
    def query_type(self) -> QueryType: ...

    def build(self) -> str: ...


# ── Read ──────────────────────────────────────────────────────────────────────


class ReadQuery(BaseModel):
    """One or more statements sent to the ``/query`` endpoint."""

    queries: list[str] = Field(default_factory=list)

    def __init__(self, query: str | None = None, **data: object) -> None:
        super().__init__(**data)
        if query is not None:
            self.queries.append(query)

    @property
    def query_type(self) -> QueryType:
        return QueryType.READ

    def add_query(self, query: str) -> ReadQuery:
        """Append another statement; statements are joined with ``;``."""
        self.queries.append(query)
        return self

    def build(self) -> str:
        statements = [q for q in self.queries if q.strip()]
        if not statements:
            raise InvalidQueryError("query cannot be empty")
        return ";".join(statements)


# ── Write ─────────────────────────────────────────────────────────────────────


def _escape_measurement(value: str) -> str:
    return value.replace("\\", "\\\\").replace(",", "\\,").replace(" ", "\\ ")


def _escape_key(value: str) -> str:
    """Escape a tag key, tag value or field key."""
    return (
        value.replace("\\", "\\\\")
        .replace(",", "\\,")
        .replace("=", "\\=")
        .replace(" ", "\\ ")
    )


def _format_field_value(value: FieldValue) -> str:
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return f"{value}i"
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidQueryError(f"field value must be finite, got {value}")
        return repr(value)
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    raise InvalidQueryError(f"unsupported field type: {type(value).__name__}")


class WriteQuery(BaseModel):
    """A single point rendered as InfluxDB line protocol.

    Example::

        query = (
            WriteQuery(measurement="weather", precision=Precision.MILLISECONDS, time=ts)
            .add_tag("location", "us-midwest")
            .add_field("temperature", 82)
        )
    """

    measurement: str
    precision: Precision = Precision.NANOSECONDS
    time: int | None = None
    tag_set: dict[str, str] = Field(default_factory=dict)
    field_set: dict[str, FieldValue] = Field(default_factory=dict)

    @property
    def query_type(self) -> QueryType:
        return QueryType.WRITE

    def add_tag(self, key: str, value: str) -> WriteQuery:
        self.tag_set[key] = value
        return self

    def add_field(self, key: str, value: FieldValue) -> WriteQuery:
        self.field_set[key] = value
        return self

    def get_precision(self) -> str:
        """Return the precision as sent in the ``precision`` query parameter."""
        return self.precision.value

    def build(self) -> str:
        """Render the point as one line of line protocol.

        Raises:
            InvalidQueryError: if the measurement is blank, no field is set or
                a field value has an unsupported type.
        """
        if not self.measurement.strip():
            raise InvalidQueryError("measurement cannot be empty")
        if not self.field_set:
            raise InvalidQueryError("fields cannot be empty")

        field_str = ",".join(
            f"{_escape_key(k)}={_format_field_value(v)}" for k, v in self.field_set.items()
        )
        tag_str = "".join(
            f",{_escape_key(k)}={_escape_key(v)}"
            for k, v in sorted(self.tag_set.items())
            if v
        )
        ts_suffix = f" {self.time}" if self.time is not None else ""
        return f"{_escape_measurement(self.measurement)}{tag_str} {field_str}{ts_suffix}"
