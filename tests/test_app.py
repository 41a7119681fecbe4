from fastapi.testclient import TestClient


def test_api_index_lists_endpoints(client):
    response = client.get("/api")

    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["status"] == "operational"
    assert payload["data"]["endpoints"]["users"] == "http://testserver/api/users"
    assert payload["data"]["endpoints"]["images"] == "http://testserver/api/images"
    assert "PATCH" in payload["data"]["documentation"]["methods"]
    assert payload["meta"]["path"] == "/api"


def test_health_reports_store_sizes(client):
    client.post("/api/users", json={"name": "Ada", "email": "ada@example.com"})

    payload = client.get("/api/health").json()

    assert payload["data"]["status"] == "ok"
    assert payload["data"]["stores"] == {"users": 1, "images": 0}
    assert payload["data"]["uptime_seconds"] >= 0


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"]["code"] == "NOT_FOUND"


def test_method_not_allowed_uses_error_envelope(client):
    response = client.delete("/api/users")

    assert response.status_code == 405
    assert response.json()["success"] is False


def test_unhandled_exception_is_wrapped(app):
    @app.get("/api/explode")
    async def explode():  # pragma: no cover - behaviour checked via response
        raise RuntimeError("boom")

    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/api/explode", headers={"Origin": "http://localhost:3000"})

    assert response.status_code == 500
    assert response.json()["error"] == {"message": "boom", "code": "INTERNAL_SERVER_ERROR"}
    assert response.headers.get("access-control-allow-origin") == "http://localhost:3000"


def test_cors_preflight_allows_configured_origin(client):
    response = client.options(
        "/api/users",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )

    assert response.status_code == 200
    assert response.headers.get("access-control-allow-origin") == "http://localhost:3000"


def test_settings_derive_upload_dir(settings, tmp_path):
    assert settings.upload_dir == tmp_path / "public" / "uploads" / "images"
    assert settings.allowed_origins == ["http://localhost:3000"]
