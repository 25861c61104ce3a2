"""Health check – app liveness plus backend reachability."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from starlette.concurrency import run_in_threadpool

from gateway.models import ErrorResponse, HealthResponse
from gateway.utils.dependencies import get_store
from gateway.utils.errors import ConnectivityError
from gateway.utils.store import EventStore

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
async def health(store: EventStore = Depends(get_store)) -> HealthResponse:
    try:
        await run_in_threadpool(store.ping)
    except ConnectivityError as exc:
        raise ConnectivityError(f"Error while pinging DB: '{exc.message}'") from exc
    return HealthResponse(app_status="ok", db_status="ok")
