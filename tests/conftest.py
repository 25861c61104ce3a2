from __future__ import annotations

"""Pytest fixtures for FastAPI integration tests.

InfluxDB is replaced by the in-memory ``InfluxStub`` behind the ``get_store``
dependency, so the request pipeline runs end-to-end without a network or a
time-series server.
"""

import os
import sys
from pathlib import Path

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

# ---------------------------------------------------------------------------
# Runtime env for the application
# ---------------------------------------------------------------------------

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("INFLUXDB_HOST", "influx.test")
os.environ.setdefault("INFLUXDB_DATABASE", "telemetry_test")
os.environ.setdefault("FRONTEND_ORIGIN", "https://dashboard.test")

# Ensure project root on PYTHONPATH so `import gateway` and `import tests` work
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Boot the app once
from gateway.main import create_app, limiter  # noqa: E402, WPS433
from gateway.utils.dependencies import get_store  # noqa: E402
from gateway.utils.store import EventStore  # noqa: E402
from tests.influx_stub import InfluxStub  # noqa: E402

app: FastAPI = create_app()
client = TestClient(app)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture()
def influx() -> InfluxStub:
    return InfluxStub()


@pytest.fixture()
def store(influx) -> EventStore:
    return EventStore(influx.session)


@pytest.fixture()
def api_client(store):  # noqa: D401 – simple alias
    """TestClient whose event store talks to the ``influx`` stub."""
    app.dependency_overrides[get_store] = lambda: store
    yield client
    app.dependency_overrides.pop(get_store, None)
