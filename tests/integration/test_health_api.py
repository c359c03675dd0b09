# tests/integration/test_health_api.py
import time
from unittest.mock import PropertyMock


def test_hello(client):
    assert client.get("/").json() == {"message": "Hello, World!"}


def test_health_connected(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["uptime"] >= 0
    assert body["timestamp"].endswith("Z")
    assert body["services"]["queue"] == {"connected": True, "status": "healthy"}


def test_health_broker_down_is_still_ok(client, queue):
    queue.is_connected = False
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["services"]["queue"] == {"connected": False, "status": "disconnected"}


def test_health_internal_failure_is_500(client, queue):
    type(queue).is_connected = PropertyMock(side_effect=RuntimeError("state unreadable"))
    r = client.get("/health")
    assert r.status_code == 500
    body = r.json()
    assert body["status"] == "error"
    assert body["services"]["queue"] == {"connected": False, "status": "error", "error": "state unreadable"}


def test_startup_tries_to_connect_queue(client, queue):
    queue.ensure_initialized.assert_awaited_once()


def test_uptime_counts_from_process_start_not_app_creation(client, monkeypatch):
    from authgateway.app.api.routes import health

    monkeypatch.setattr(health, "PROCESS_STARTED_AT", time.monotonic() - 120)
    assert client.get("/health").json()["uptime"] >= 120
