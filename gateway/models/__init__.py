from __future__ import annotations

"""Unified models namespace – API (request/response) models and core records.

Call-sites can simply::

    from gateway.models import EventModel, EventRecord, TimeRange
"""

from typing import Any, Dict

from pydantic import BaseModel, Field

from gateway.models.events import EventRecord, FieldValue, TimeRange

__all__ = [
    "EventModel",
    "EventRecord",
    "FieldValue",
    "TimeRange",
    "HealthResponse",
    "ErrorResponse",
]

# ---------------------------------------------------------------------------
# Event payloads
# ---------------------------------------------------------------------------


class EventModel(BaseModel):
    """Event JSON as accepted by the ingest endpoint and returned on fetch.

    ``params`` is deliberately loose here; unsupported value types are
    rejected by the point encoder so the error names the offending key.
    """

    event_type: str = Field(..., min_length=1, examples=["link_clicked"])
    ts: int = Field(..., description="Unix epoch seconds", examples=[1558892660])
    params: Dict[str, Any] = Field(default_factory=dict, examples=[{"url": "localhost:5000/app"}])

    def to_record(self) -> EventRecord:
        return EventRecord(event_type=self.event_type, timestamp=self.ts, fields=dict(self.params))

    @classmethod
    def from_record(cls, record: EventRecord) -> "EventModel":
        return cls(event_type=record.event_type, ts=record.timestamp, params=dict(record.fields))


# ---------------------------------------------------------------------------
# Health / errors
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    app_status: str = Field("ok", examples=["ok"])
    db_status: str = Field("ok", examples=["ok"])


class ErrorResponse(BaseModel):
    error: str = Field(..., examples=["`start` param should be present"])
