"""Event ingest and range reads – stored in InfluxDB via the event store."""

from __future__ import annotations

from typing import Callable, TypeVar

from fastapi import APIRouter, Depends, Query, Response, status
from starlette.concurrency import run_in_threadpool

from gateway.models import ErrorResponse, EventModel, TimeRange
from gateway.utils.dependencies import get_store
from gateway.utils.errors import ParseError, ReadError, ValidationError, WriteError
from gateway.utils.logger import logger
from gateway.utils.period import parse_period
from gateway.utils.store import EventStore

router = APIRouter(tags=["events"])

T = TypeVar("T")

_ERRORS = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def _query_param(name: str, value: str | None, mandatory: bool, fn: Callable[[str], T] | None = None):
    """Validate a raw query parameter and optionally map it through ``fn``.

    A missing optional parameter is read as ``"0"`` before mapping.
    """
    logger.debug("Validate query param", extra={"param": name, "value": value})

    if not value:
        if mandatory:
            raise ValidationError(f"`{name}` param should be present")
        value = "0"
    if fn is None:
        return value
    try:
        return fn(value)
    except ParseError as exc:
        raise ValidationError(f"`{name}` param is invalid") from exc


def _time_range(start: str | None, end: str | None) -> TimeRange:
    return TimeRange(
        start=_query_param("start", start, True, parse_period),
        end=_query_param("end", end, False, parse_period),
    )


@router.post(
    "/events",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    responses=_ERRORS,
)
async def save_events(
    events: list[EventModel],
    store: EventStore = Depends(get_store),
):
    records = [event.to_record() for event in events]
    try:
        await run_in_threadpool(store.save, records)
    except WriteError as exc:
        raise WriteError(f"Error while saving events to DB: '{exc.message}'") from exc
    return Response(status_code=status.HTTP_201_CREATED)


@router.get("/events", response_model=list[EventModel], responses=_ERRORS)
async def get_events(
    start: str | None = Query(None, description="Relative period, e.g. `10m`, `2h`, or seconds"),
    end: str | None = Query(None, description="Relative period; defaults to now"),
    store: EventStore = Depends(get_store),
):
    time_range = _time_range(start, end)
    try:
        records = await run_in_threadpool(store.fetch_all, time_range)
    except ReadError as exc:
        raise ReadError(f"Error while fetching events from DB: '{exc.message}'") from exc
    return [EventModel.from_record(record) for record in records]


@router.get("/events/relative", response_model=list[EventModel], responses=_ERRORS)
async def get_events_by_type(
    type_: str | None = Query(None, alias="type", description="Event type to filter on"),
    start: str | None = Query(None, description="Relative period, e.g. `10m`, `2h`, or seconds"),
    end: str | None = Query(None, description="Relative period; defaults to now"),
    store: EventStore = Depends(get_store),
):
    time_range = _time_range(start, end)
    event_type = _query_param("type", type_, True)
    try:
        records = await run_in_threadpool(store.fetch_by_type, event_type, time_range)
    except ReadError as exc:
        raise ReadError(f"Error while fetching events from DB: '{exc.message}'") from exc
    return [EventModel.from_record(record) for record in records]
