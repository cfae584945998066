import json

import httpx
from fastapi.testclient import TestClient

import cloud_kitchen.api.routes.dashboard as dashboard_routes
from cloud_kitchen.services.notifications import FcmClient, get_fcm_client


def test_error_log_lifecycle(client):
    r = client.post(
        "/api/errors/",
        json={
            "message": "TypeError: cart is undefined",
            "stack": "at Cart (cart.js:10)",
            "url": "https://kitchen.example/cart",
            "additional_info": {"type": "unhandledrejection", "cartSize": 3},
        },
        headers={"User-Agent": "Mozilla/5.0 (iPhone)"},
    )
    assert r.status_code == 201
    first = r.json()
    assert first["user_agent"] == "Mozilla/5.0 (iPhone)"
    assert first["additional_info"]["cartSize"] == 3

    second = client.post("/api/errors/", json={"message": "second", "user_agent": "explicit"}).json()
    assert second["user_agent"] == "explicit"

    logs = client.get("/api/errors/").json()
    assert [log["id"] for log in logs] == [second["id"], first["id"]]
    assert len(client.get("/api/errors/", params={"limit": 1}).json()) == 1

    assert client.get(f"/api/errors/{first['id']}").json()["message"] == "TypeError: cart is undefined"
    assert client.delete(f"/api/errors/{first['id']}").status_code == 204
    assert client.get(f"/api/errors/{first['id']}").status_code == 404

    assert client.delete("/api/errors/").json() == {"deleted": 1}
    assert client.get("/api/errors/").json() == []


def test_unhandled_error_is_logged(app, monkeypatch):
    async def broken_counts(db):
        raise RuntimeError("counter exploded")

    monkeypatch.setattr(dashboard_routes, "get_counts", broken_counts)

    with TestClient(app, raise_server_exceptions=False) as c:
        r = c.get("/api/dashboard/", headers={"X-Request-ID": "req-500"})
        assert r.status_code == 500
        assert r.json() == {"detail": "Internal Server Error"}

        logs = c.get("/api/errors/").json()

    assert len(logs) == 1
    assert logs[0]["message"] == "counter exploded"
    assert "RuntimeError" in logs[0]["stack"]
    assert logs[0]["url"].endswith("/api/dashboard/")
    assert logs[0]["additional_info"] == {"source": "server", "method": "GET", "request_id": "req-500"}


def test_device_tokens(client):
    r = client.post("/api/notifications/tokens", json={"token": "device-1", "user_id": "admin-a"})
    assert r.status_code == 201
    again = client.post("/api/notifications/tokens", json={"token": "device-1", "user_id": "admin-b"}).json()
    assert again["id"] == r.json()["id"]
    assert again["user_id"] == "admin-b"

    assert client.post("/api/notifications/tokens", json={"token": "  "}).status_code == 422
    assert client.delete("/api/notifications/tokens/device-1").status_code == 204
    assert client.delete("/api/notifications/tokens/device-1").status_code == 404


def test_send_without_tokens(client):
    r = client.post("/api/notifications/send", json={"order_details": {"order_number": "ORD-1", "total": "10"}})
    assert r.status_code == 200
    assert r.json()["success"] is False
    assert r.json()["message"] == "No admin tokens found"


def test_send_to_registered_devices(client, app):
    sent = []

    def handler(request: httpx.Request) -> httpx.Response:
        token = json.loads(request.content)["message"]["token"]
        sent.append(token)
        return httpx.Response(410 if token == "gone" else 200, json={})

    app.dependency_overrides[get_fcm_client] = lambda: FcmClient(
        "kitchen-test", lambda: "access-token", transport=httpx.MockTransport(handler)
    )
    client.post("/api/notifications/tokens", json={"token": "phone"})
    client.post("/api/notifications/tokens", json={"token": "gone"})

    body = {"order_details": {"id": 5, "order_number": "ORD-5", "total": "99.5"}}
    r = client.post("/api/notifications/send", json=body)
    assert r.status_code == 200
    assert r.json() == {"success": True, "success_count": 1, "failure_count": 1, "message": None}
    assert sent == ["phone", "gone"]

    r = client.post("/api/notifications/send", json={**body, "fcm_token": "tablet"})
    assert r.json()["success_count"] == 1
    assert sent[-1] == "tablet"


def test_send_without_credentials_is_503(client, app):
    app.dependency_overrides[get_fcm_client] = lambda: FcmClient(
        "kitchen-test", lambda: None, transport=httpx.MockTransport(lambda request: httpx.Response(200))
    )
    r = client.post(
        "/api/notifications/send",
        json={"order_details": {"order_number": "ORD-1", "total": "10"}, "fcm_token": "phone"},
    )
    assert r.status_code == 503
