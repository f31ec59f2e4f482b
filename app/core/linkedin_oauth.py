from __future__ import annotations

from dataclasses import dataclass

from app.core.config import Settings, settings

AUTHORIZATION_URL = "https://www.linkedin.com/oauth/v2/authorization"
TOKEN_URL = "https://www.linkedin.com/oauth/v2/accessToken"
USERINFO_URL = "https://api.linkedin.com/v2/userinfo"

CALLBACK_PATH = "/auth/linkedin/callback"
CLIENT_CALLBACK_PATH = "/linkedin/callback"

STATE_COOKIE = "linkedin_state"
CODE_VERIFIER_COOKIE = "linkedin_code_verifier"
PROFILE_COOKIE = "linkedin_profile"
AUTH_COOKIE_MAX_AGE = 600
PROFILE_COOKIE_MAX_AGE = 300


class OAuthConfigError(RuntimeError):
    def __init__(self, missing: list[str]):
        super().__init__(f"LinkedIn sign-in is not configured. Missing: {', '.join(missing)}.")
        self.missing = missing


@dataclass(frozen=True)
class LinkedInOAuthConfig:
    client_id: str
    client_secret: str
    redirect_uri: str
    client_callback_url: str
    scope: str = "openid profile email"
    secure_cookies: bool = True
    timeout_s: float = 10.0
    profile_cookie_key: str | None = None
    authorization_url: str = AUTHORIZATION_URL
    token_url: str = TOKEN_URL
    userinfo_url: str = USERINFO_URL


def load_linkedin_oauth_config(source: Settings | None = None) -> LinkedInOAuthConfig:
    """Build the OAuth client config, raising OAuthConfigError if anything required is absent."""
    cfg = source or settings
    client_id = (cfg.linkedin_client_id or "").strip()
    client_secret = (cfg.linkedin_client_secret or "").strip()
    app_base_url = (cfg.app_base_url or "").strip()

    missing = []
    if not client_id:
        missing.append("LINKEDIN_CLIENT_ID")
    if not client_secret:
        missing.append("LINKEDIN_CLIENT_SECRET")
    if not app_base_url:
        missing.append("APP_BASE_URL")
    if missing:
        raise OAuthConfigError(missing)

    frontend_base_url = cfg.frontend_base_url or app_base_url
    return LinkedInOAuthConfig(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=f"{app_base_url}{CALLBACK_PATH}",
        client_callback_url=f"{frontend_base_url}{CLIENT_CALLBACK_PATH}",
        scope=cfg.linkedin_scope,
        secure_cookies=not cfg.is_development,
        timeout_s=max(1.0, float(cfg.linkedin_http_timeout_s)),
        profile_cookie_key=cfg.profile_cookie_key,
    )
