import pytest
from fastapi.testclient import TestClient

from timex import main
from timex.core.exceptions import ConfigurationError


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_health_endpoints(client):
    live = client.get("/api/health/live")
    assert live.status_code == 200
    assert live.json()["status"] == "ok"
    assert "timestamp" in live.json()

    ready = client.get("/api/health/ready")
    assert ready.status_code == 200
    payload = ready.json()
    assert payload["status"] == "ok"
    assert payload["database"]["schema_ok"] is True
    assert payload["database"]["missing_tables"] == []


def test_startup_fails_on_invalid_default_time_slots(monkeypatch):
    broken = main.settings.model_copy(update={"default_time_slots": ["08:00-09:00", "noon"]})
    monkeypatch.setattr(main, "settings", broken)

    with pytest.raises(ConfigurationError, match="Invalid DEFAULT_TIME_SLOTS entries: noon"):
        with TestClient(main.app):
            pass
