"""InfluxQL range queries over the events measurement."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from gateway.models.events import TimeRange
from gateway.utils.points import EVENT_TYPE_TAG, MEASUREMENT

__all__ = ["RangeQuery", "build_range_query"]


@dataclass(frozen=True)
class RangeQuery:
    command: str
    bind_params: Dict[str, str] = field(default_factory=dict)


def build_range_query(
    time_range: TimeRange,
    event_type: str | None = None,
    measurement: str = MEASUREMENT,
) -> RangeQuery:
    """Select events between ``NOW() - start`` and ``NOW() - end`` (inclusive).

    The tag is selected explicitly ahead of the fields so every series comes
    back as ``time, event_type, <field>...``.  The event type filter travels
    as a bound parameter and is never spliced into the command text.
    """
    command = (
        f'SELECT "{EVENT_TYPE_TAG}", *::field FROM "{measurement}" '
        f"WHERE time >= NOW() - {time_range.start}s AND time <= NOW() - {time_range.end}s"
    )
    if event_type is None:
        return RangeQuery(command)

    command += f' AND "{EVENT_TYPE_TAG}" = ${EVENT_TYPE_TAG}'
    return RangeQuery(command, {EVENT_TYPE_TAG: event_type})
