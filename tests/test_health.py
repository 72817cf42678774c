import logging


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "message": "Server is running"}


def test_request_id_and_security_headers(client):
    r = client.get("/health", headers={"X-Request-Id": "abc123"})
    assert r.headers["X-Request-Id"] == "abc123"
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "SAMEORIGIN"


def test_unknown_route_uses_error_body(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    body = r.json()
    assert body["message"] == "Not Found"
    assert "request_id" in body


def test_every_request_is_logged(client, caplog):
    with caplog.at_level(logging.INFO, logger="notiq.request"):
        client.get("/health", headers={"X-Request-Id": "req-7"})
    lines = [rec.getMessage() for rec in caplog.records if rec.name == "notiq.request"]
    assert len(lines) == 1
    assert "method=GET path=/health status=200" in lines[0]
    assert "request_id=req-7" in lines[0]
