from fastapi.testclient import TestClient

from codeprep.hub.app import app
from codeprep.hub.settings import CodePrepSettings

client = TestClient(app)


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_settings_env_prefix(monkeypatch):
    monkeypatch.setenv("CODEPREP_DEFAULT_LANGUAGE", "python")
    monkeypatch.setenv("CODEPREP_PORT", "9001")
    monkeypatch.setenv("CODEPREP_MAX_EDITORS_PER_USER", "5")
    settings = CodePrepSettings()
    assert settings.default_language == "python"
    assert settings.port == 9001
    assert settings.max_editors_per_user == 5


def test_resolve_auth_token():
    assert CodePrepSettings(auth_token="fixed").resolve_auth_token() == "fixed"
    assert CodePrepSettings(auth_token=None).resolve_auth_token()
