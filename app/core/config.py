from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


def _strip_slash(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip().rstrip("/") or None


@dataclass(frozen=True)
class Settings:
    app_env: str
    app_base_url: str | None
    frontend_base_url: str | None
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_credentials: bool
    linkedin_client_id: str | None
    linkedin_client_secret: str | None
    linkedin_scope: str
    linkedin_http_timeout_s: float
    profile_cookie_key: str | None

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


settings = Settings(
    app_env=(_get_env("APP_ENV", "production") or "production").strip().lower(),
    app_base_url=_strip_slash(_get_env("APP_BASE_URL")),
    frontend_base_url=_strip_slash(_get_env("FRONTEND_BASE_URL")),
    api_key=_get_env("API_KEY"),
    rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:9002",
            "http://127.0.0.1:9002",
            "http://localhost:3000",
        ],
    ),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", True),
    linkedin_client_id=_get_env("LINKEDIN_CLIENT_ID"),
    linkedin_client_secret=_get_env("LINKEDIN_CLIENT_SECRET"),
    linkedin_scope=_get_env("LINKEDIN_SCOPE", "openid profile email") or "openid profile email",
    linkedin_http_timeout_s=_get_env_float("LINKEDIN_HTTP_TIMEOUT_S", 10.0),
    profile_cookie_key=_get_env("PROFILE_COOKIE_KEY"),
)
