"""FastAPI dependency providers for external clients."""

from __future__ import annotations

from functools import lru_cache

from gateway import (
    INFLUXDB_DATABASE,
    INFLUXDB_HOST,
    INFLUXDB_PASSWORD,
    INFLUXDB_PORT,
    INFLUXDB_SSL,
    INFLUXDB_TIMEOUT,
    INFLUXDB_USERNAME,
)
from gateway.utils.store import EventStore, influx_client_factory


@lru_cache(maxsize=1)
def _build_store() -> EventStore:
    factory = influx_client_factory(
        INFLUXDB_HOST,
        INFLUXDB_PORT,
        INFLUXDB_DATABASE,
        INFLUXDB_USERNAME,
        INFLUXDB_PASSWORD,
        ssl=INFLUXDB_SSL,
        timeout=INFLUXDB_TIMEOUT,
    )
    return EventStore(factory)


def get_store() -> EventStore:
    """FastAPI dependency returning the process-wide event store.

    The store holds no connection of its own (each operation opens and
    closes a session), so sharing one instance is safe.  Tests replace it via
    ``app.dependency_overrides[get_store]``.
    """
    return _build_store()
