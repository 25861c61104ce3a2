from fastapi import status
from requests.exceptions import ConnectionError as RequestsConnectionError

CLICK = {"event_type": "link_clicked", "ts": 1558892660, "params": {"url": "localhost:5000/app"}}

# ---------------------------------------------------------------------------
# /health
# ---------------------------------------------------------------------------

def test_health_ok(api_client):
    resp = api_client.get("/health")
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json() == {"app_status": "ok", "db_status": "ok"}


def test_health_backend_down(api_client, influx):
    influx.error = RequestsConnectionError("can't connect to DB")

    resp = api_client.get("/health")

    assert resp.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert resp.json() == {"error": "Error while pinging DB: 'can't connect to DB'"}


# ---------------------------------------------------------------------------
# POST /events
# ---------------------------------------------------------------------------

def test_save_events_created(api_client, influx):
    body = [CLICK, {"event_type": "link_clicked", "ts": 1558892797, "params": {"url": "localhost:6000/app"}}]

    resp = api_client.post("/events", json=body)

    assert resp.status_code == status.HTTP_201_CREATED
    assert resp.content == b""
    assert len(influx.writes) == 1
    assert [p["fields"]["url"] for p in influx.writes[0]] == ["localhost:5000/app", "localhost:6000/app"]


def test_save_events_unsupported_param_rejects_batch(api_client, influx):
    body = [CLICK, {"event_type": "x", "ts": 1, "params": {"nested": {"a": 1}}}]

    resp = api_client.post("/events", json=body)

    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert "nested" in resp.json()["error"]
    assert influx.writes == []


def test_save_events_malformed_body(api_client, influx):
    resp = api_client.post("/events", json={"event_type": "not-a-list"})

    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert "error" in resp.json()
    assert influx.writes == []


def test_save_events_backend_error(api_client, influx):
    influx.error = RequestsConnectionError("refused")

    resp = api_client.post("/events", json=[CLICK])

    assert resp.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert resp.json() == {"error": "Error while saving events to DB: 'refused'"}


# ---------------------------------------------------------------------------
# GET /events, /events/relative
# ---------------------------------------------------------------------------

def test_saved_event_round_trips_through_api(api_client):
    assert api_client.post("/events", json=[CLICK]).status_code == status.HTTP_201_CREATED

    resp = api_client.get("/events/relative", params={"type": "link_clicked", "start": "1000w"})

    assert resp.status_code == status.HTTP_200_OK
    assert resp.json() == [CLICK]
    assert api_client.get("/events", params={"start": "1000w"}).json() == [CLICK]


def test_relative_periods_become_time_predicate(api_client, influx):
    resp = api_client.get("/events/relative", params={"type": "session_created", "start": "10m", "end": "5m"})

    assert resp.status_code == status.HTTP_200_OK
    assert resp.json() == []
    command, params = influx.queries[-1]
    assert "time >= NOW() - 600s AND time <= NOW() - 300s" in command
    assert params == {"event_type": "session_created"}


def test_end_defaults_to_now(api_client, influx):
    api_client.get("/events", params={"start": "3600"})

    command, params = influx.queries[-1]
    assert "time >= NOW() - 3600s AND time <= NOW() - 0s" in command
    assert params is None


def test_missing_start(api_client):
    resp = api_client.get("/events")
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert resp.json() == {"error": "`start` param should be present"}


def test_invalid_end(api_client):
    resp = api_client.get("/events", params={"start": "1h", "end": "soon"})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert resp.json() == {"error": "`end` param is invalid"}


def test_missing_type(api_client):
    resp = api_client.get("/events/relative", params={"start": "1h"})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert resp.json() == {"error": "`type` param should be present"}


def test_inverted_range(api_client, influx):
    resp = api_client.get("/events", params={"start": "5m", "end": "10m"})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert influx.queries == []


def test_fetch_backend_error(api_client, influx):
    influx.error = RequestsConnectionError("refused")

    resp = api_client.get("/events", params={"start": "1h"})

    assert resp.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert resp.json() == {"error": "Error while fetching events from DB: 'refused'"}


def test_fetch_undecodable_row(api_client, influx):
    influx.raw = {"series": [{"columns": ["time", "event_type", "a"], "values": [["later", "x", 1]]}]}

    resp = api_client.get("/events", params={"start": "1h"})

    assert resp.status_code == status.HTTP_502_BAD_GATEWAY
    assert "later" in resp.json()["error"]


def test_oversized_start_is_rejected_before_querying(api_client, influx):
    for start in ("9" * 5000, "99999999999999999999", "99999999999999999999w"):
        resp = api_client.get("/events", params={"start": start})

        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp.json() == {"error": "`start` param is invalid"}
    assert influx.queries == []
