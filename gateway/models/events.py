from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Union

from gateway.utils.errors import ValidationError

# Scalar values a point field can hold.
FieldValue = Union[str, int, float, bool]


@dataclass(frozen=True)
class EventRecord:
    """One telemetry event as it flows through the translation core."""

    event_type: str
    timestamp: int  # unix seconds
    fields: Dict[str, FieldValue] = field(default_factory=dict)


@dataclass(frozen=True)
class TimeRange:
    """Query window expressed as seconds ago from the backend's ``NOW()``.

    ``start`` is the bound further back in time, ``end`` the closer one.
    """

    start: int
    end: int = 0

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < 0:
            raise ValidationError("time range offsets must be non-negative")
        if self.start < self.end:
            raise ValidationError("`start` must be further back in time than `end`")
