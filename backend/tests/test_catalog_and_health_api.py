from __future__ import annotations


def test_symptoms_endpoint_groups_catalog(client):
    response = client.get("/api/symptoms")
    assert response.status_code == 200
    data = response.json()["data"]
    assert list(data["categories"]) == ["menstrual", "physical", "energy_mood", "other"]
    assert data["categories"]["menstrual"]["title"] == "Menstrual Health"
    assert data["categories"]["physical"]["symptoms"]["acne"] == "persistent acne or skin issues"
    assert data["totalSymptoms"] == 14


def test_health_reports_speech_reachability(client, backend_module, monkeypatch):
    async def reachable():
        return True

    monkeypatch.setattr(backend_module.container.speech, "check_connection", reachable)
    payload = client.get("/api/health").json()
    assert payload["status"] == "healthy"
    assert payload["services"] == {"completion": True, "speech": True, "speechConnection": True}
    assert payload["features"]["audioTTS"] is True
    assert payload["region"] == "eastus"


def test_health_is_partial_when_speech_unreachable(client, backend_module, monkeypatch):
    async def unreachable():
        return False

    monkeypatch.setattr(backend_module.container.speech, "check_connection", unreachable)
    payload = client.get("/api/health").json()
    assert payload["status"] == "partial"
    assert payload["features"]["audioTTS"] is False
    assert payload["features"]["generalChat"] is True


def test_liveness_endpoint(client):
    payload = client.get("/health").json()
    assert payload["status"] == "ok"
    assert payload["port"] == 3000


def test_voices_endpoint_maps_modes(client):
    data = client.get("/api/voices").json()["data"]
    assert len(data["voices"]) == 3
    assert data["modes"]["general"].startswith("Aria")
    assert data["modes"]["symptom"].startswith("Sara")


def test_unknown_api_path_returns_json_404(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    payload = response.json()
    assert payload["success"] is False
    assert payload["requestedPath"] == "/api/does-not-exist"
    assert "POST /api/chat" in payload["availableEndpoints"]


def test_root_serves_app_shell(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "She Nurtures" in response.text
