def test_health_sets_security_headers(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_ready_reports_supabase_configuration(client):
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ready"
    assert "supabase_configured" in response.json()


def test_routes_mounted_under_api_prefix(client):
    paths = client.app.openapi()["paths"]
    for prefix in ("auth", "users", "tickets", "documents", "announcements",
                   "tasks", "calendar", "reports", "dashboard"):
        assert any(p.startswith(f"/api/v1/{prefix}") for p in paths), prefix
