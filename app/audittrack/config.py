import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str

    gemini_api_key: str
    gemini_model: str
    gemini_base_url: str
    gemini_timeout_seconds: int


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_settings() -> Settings:
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        database_url=_getenv("DATABASE_URL", "sqlite:///audittrack.db"),
        # API_KEY is the name the hosted frontend used; GEMINI_API_KEY wins when both are set.
        gemini_api_key=_getenv("GEMINI_API_KEY") or _getenv("API_KEY"),
        gemini_model=_getenv("GEMINI_MODEL", "gemini-3-flash-preview"),
        gemini_base_url=_getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com"),
        gemini_timeout_seconds=_getenv_int("GEMINI_TIMEOUT_SECONDS", 30),
    )


def load_config() -> dict:
    s = load_settings()
    is_production = s.env in ("prod", "production")
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "GEMINI_API_KEY": s.gemini_api_key,
        "GEMINI_MODEL": s.gemini_model,
        "GEMINI_BASE_URL": s.gemini_base_url,
        "GEMINI_TIMEOUT_SECONDS": s.gemini_timeout_seconds,
        # security defaults
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_SECURE": is_production,
    }
