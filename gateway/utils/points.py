"""Event records → InfluxDB points."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Sequence

from gateway.models.events import EventRecord
from gateway.utils.errors import EncodeError

__all__ = ["MEASUREMENT", "EVENT_TYPE_TAG", "TIME_PRECISION", "encode_points"]

MEASUREMENT = "events"
EVENT_TYPE_TAG = "event_type"
# Points carry unix seconds; the write call must use the same precision.
TIME_PRECISION = "s"

_RESERVED_KEYS = frozenset({"time", EVENT_TYPE_TAG})
# InfluxDB integer fields are int64.
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1


def _check_value(index: int, key: str, value: Any) -> None:
    if key in _RESERVED_KEYS:
        raise EncodeError(f"event {index}: param {key!r} is reserved", key=key, index=index)
    # bool is an int subclass; checked first so it skips the int64 bound.
    if isinstance(value, (str, bool)):
        return
    if isinstance(value, int):
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise EncodeError(
                f"event {index}: param {key!r} does not fit in a 64-bit integer", key=key, index=index
            )
        return
    if isinstance(value, float):
        if not math.isfinite(value):
            raise EncodeError(
                f"event {index}: param {key!r} is not a finite number", key=key, index=index
            )
        return
    raise EncodeError(
        f"event {index}: param {key!r} has unsupported type {type(value).__name__}",
        key=key,
        index=index,
    )


def encode_points(records: Sequence[EventRecord], measurement: str = MEASUREMENT) -> List[Dict[str, Any]]:
    """Build one point per record, in input order.

    The whole batch is validated before anything is returned so a bad event
    can never lead to a partial write.
    """
    points: List[Dict[str, Any]] = []
    for index, record in enumerate(records):
        if not record.event_type:
            raise EncodeError(f"event {index}: event_type must not be empty", index=index)
        if not record.fields:
            raise EncodeError(f"event {index}: at least one param is required", index=index)

        for key, value in record.fields.items():
            _check_value(index, key, value)

        points.append(
            {
                "measurement": measurement,
                "tags": {EVENT_TYPE_TAG: record.event_type},
                "time": record.timestamp,
                "fields": dict(record.fields),
            }
        )
    return points
