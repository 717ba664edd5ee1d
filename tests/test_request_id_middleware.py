from __future__ import annotations

from fastapi.testclient import TestClient

from faucet.main import app


client = TestClient(app)


def test_preserves_incoming_request_id_header():
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing():
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID")
    assert resp.headers.get("X-Request-Duration-ms") is not None


def test_error_body_carries_request_id():
    resp = client.post(
        "/api/claim",
        json={"address": "nope"},
        headers={"X-Request-ID": "req-err-1"},
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["request_id"] == "req-err-1"
