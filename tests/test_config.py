from app.audittrack.config import load_config, load_settings


def test_defaults(monkeypatch):
    for k in ("SECRET_KEY", "ENV", "DATABASE_URL", "GEMINI_API_KEY", "API_KEY", "GEMINI_MODEL", "GEMINI_TIMEOUT_SECONDS"):
        monkeypatch.delenv(k, raising=False)
    s = load_settings()
    assert s.env == "development"
    assert s.database_url == "sqlite:///audittrack.db"
    assert s.gemini_api_key == ""
    assert s.gemini_timeout_seconds == 30


def test_api_key_fallback(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "legacy-key")
    assert load_config()["GEMINI_API_KEY"] == "legacy-key"

    monkeypatch.setenv("GEMINI_API_KEY", "new-key")
    assert load_config()["GEMINI_API_KEY"] == "new-key"


def test_bad_timeout_uses_default(monkeypatch):
    monkeypatch.setenv("GEMINI_TIMEOUT_SECONDS", "soon")
    assert load_settings().gemini_timeout_seconds == 30
