"""Event store backed by InfluxDB 1.x.

The store composes the translation core (points, queries, results) around a
narrow backend interface.  Every operation opens its own backend session and
closes it before returning, whatever the outcome; nothing is kept between
calls, so one ``EventStore`` can be shared by concurrent requests.
"""

from __future__ import annotations

from contextlib import contextmanager
from functools import partial
from typing import Any, Callable, Dict, Iterator, List, Mapping, Protocol, Sequence

from influxdb import InfluxDBClient
from influxdb.exceptions import InfluxDBClientError, InfluxDBServerError
from requests.exceptions import RequestException

from gateway.models.events import EventRecord, TimeRange
from gateway.utils.errors import ConnectivityError, ReadError, WriteError
from gateway.utils.logger import logger
from gateway.utils.points import MEASUREMENT, TIME_PRECISION, encode_points
from gateway.utils.queries import RangeQuery, build_range_query
from gateway.utils.results import decode_results

__all__ = ["Backend", "EventStore", "influx_client_factory"]

# Transport failures surface from requests, backend-reported ones from the client.
BACKEND_ERRORS = (InfluxDBClientError, InfluxDBServerError, RequestException)


class Backend(Protocol):
    """The slice of ``influxdb.InfluxDBClient`` the store relies on."""

    def ping(self) -> Any: ...

    def write_points(self, points: List[Dict[str, Any]], time_precision: str | None = None) -> Any: ...

    def query(self, query: str, bind_params: Dict[str, Any] | None = None) -> Any: ...

    def close(self) -> None: ...


def influx_client_factory(
    host: str,
    port: int,
    database: str,
    username: str,
    password: str,
    *,
    ssl: bool = False,
    timeout: float = 5.0,
) -> Callable[[], Backend]:
    """Return a zero-arg factory building a fresh InfluxDB client per call.

    ``timeout`` bounds every HTTP round-trip; ``retries=1`` means a single
    attempt, retrying is left to whoever calls the gateway.
    """
    return partial(
        InfluxDBClient,
        host=host,
        port=port,
        username=username,
        password=password,
        database=database,
        ssl=ssl,
        verify_ssl=ssl,
        timeout=timeout,
        retries=1,
    )


def _raw_results(response: Any) -> List[Mapping[str, Any]]:
    # ``InfluxDBClient.query`` returns a ResultSet, or a list of them for
    # multi-statement queries.
    if isinstance(response, list):
        return [result_set.raw for result_set in response]
    return [response.raw]


class EventStore:
    def __init__(self, client_factory: Callable[[], Backend], measurement: str = MEASUREMENT):
        self._client_factory = client_factory
        self._measurement = measurement

    @contextmanager
    def _session(self) -> Iterator[Backend]:
        client = self._client_factory()
        try:
            yield client
        finally:
            client.close()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def ping(self) -> None:
        """Raise ``ConnectivityError`` unless the backend answers."""
        logger.info("store.ping")
        try:
            with self._session() as client:
                client.ping()
        except BACKEND_ERRORS as exc:
            logger.warning("store.ping.failed", extra={"error": str(exc)})
            raise ConnectivityError(str(exc)) from exc

    def save(self, records: Sequence[EventRecord]) -> None:
        """Write ``records`` in one batch.

        Encoding happens before a session is opened, so an ``EncodeError``
        means nothing was sent.
        """
        points = encode_points(records, measurement=self._measurement)
        logger.info("store.save", extra={"points": len(points)})
        if not points:
            return

        try:
            with self._session() as client:
                client.write_points(points, time_precision=TIME_PRECISION)
        except BACKEND_ERRORS as exc:
            logger.error("store.save.failed", extra={"error": str(exc)})
            raise WriteError(str(exc)) from exc

    def fetch_all(self, time_range: TimeRange) -> List[EventRecord]:
        return self._fetch(build_range_query(time_range, measurement=self._measurement))

    def fetch_by_type(self, event_type: str, time_range: TimeRange) -> List[EventRecord]:
        return self._fetch(build_range_query(time_range, event_type, measurement=self._measurement))

    def _fetch(self, query: RangeQuery) -> List[EventRecord]:
        logger.info("store.fetch", extra={"query": query.command, "bind_params": query.bind_params})
        try:
            with self._session() as client:
                response = client.query(query.command, bind_params=query.bind_params or None)
        except BACKEND_ERRORS as exc:
            logger.error("store.fetch.failed", extra={"error": str(exc)})
            raise ReadError(str(exc)) from exc

        return decode_results(_raw_results(response))
