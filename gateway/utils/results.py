"""InfluxDB query results → event records.

A query answers with one result per statement.  Each result holds zero or
more series, and each series a column list plus rows aligned to it::

    {"statement_id": 0,
     "series": [{"name": "events",
                 "columns": ["time", "event_type", "url", "clicks"],
                 "values": [["2019-05-26T17:44:20Z", "link_clicked", "localhost:5000/app", None]]}]}

Column 0 is always the row time (RFC3339) and column 1 the event type tag;
the remaining columns are the union of field keys seen in the series, so a
row carries ``None`` for every field its point did not have.  Those nulls are
dropped rather than returned as present-but-null params.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Sequence

from gateway.models.events import EventRecord
from gateway.utils.errors import DecodeError

__all__ = ["decode_results"]

# RFC3339 date-time prefix; fromisoformat alone also takes bare dates and week dates.
_RFC3339_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}[Tt][0-9]{2}:[0-9]{2}:[0-9]{2}")


def _epoch_seconds(value: Any) -> int:
    if not isinstance(value, str) or not _RFC3339_RE.match(value):
        raise DecodeError(f"row time {value!r} is not an RFC3339 string")
    try:
        moment = datetime.fromisoformat(value)
    except ValueError as exc:
        raise DecodeError(f"row time {value!r} is not an RFC3339 string") from exc
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp())


def _decode_row(columns: Sequence[str], row: Sequence[Any]) -> EventRecord:
    if len(row) < 2:
        raise DecodeError(f"row {row!r} is missing the time or event type column")

    event_type = row[1]
    if not isinstance(event_type, str) or not event_type:
        raise DecodeError(f"row event type {event_type!r} is not a string")

    fields = {
        key: value
        for key, value in zip(columns[2:], row[2:])
        if value is not None
    }
    return EventRecord(event_type=event_type, timestamp=_epoch_seconds(row[0]), fields=fields)


def decode_results(results: Iterable[Mapping[str, Any]]) -> List[EventRecord]:
    """Flatten every row of every series into records, in backend order.

    Any malformed row aborts the whole decode with ``DecodeError``.
    """
    events: List[EventRecord] = []
    for result in results:
        for series in result.get("series") or []:
            columns = series.get("columns") or []
            for row in series.get("values") or []:
                events.append(_decode_row(columns, row))
    return events
