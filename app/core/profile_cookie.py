from __future__ import annotations

import base64
import hashlib
import json
import logging

from cryptography.fernet import Fernet, InvalidToken
from pydantic import ValidationError

from app.core.linkedin_oauth import PROFILE_COOKIE_MAX_AGE, LinkedInOAuthConfig
from app.schemas.auth import ProfileRecord

logger = logging.getLogger(__name__)


def _fernet_key(config: LinkedInOAuthConfig) -> bytes:
    """
    Fernet needs a urlsafe base64 key of exactly 32 decoded bytes.
    PROFILE_COOKIE_KEY is used when it has that shape; otherwise the key is
    derived from the client secret.
    """
    raw = (config.profile_cookie_key or "").strip()
    if raw:
        try:
            if len(base64.urlsafe_b64decode(raw)) == 32:
                return raw.encode("ascii")
        except (ValueError, UnicodeEncodeError):
            pass
        logger.warning("profile_cookie_key_invalid; deriving key from client secret")

    digest = hashlib.sha256(config.client_secret.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


def seal_profile(config: LinkedInOAuthConfig, profile: ProfileRecord) -> str:
    payload = json.dumps(profile.model_dump(), ensure_ascii=False).encode("utf-8")
    return Fernet(_fernet_key(config)).encrypt(payload).decode("ascii")


def open_profile(config: LinkedInOAuthConfig, sealed: str | None) -> ProfileRecord | None:
    """Decrypt a sealed profile cookie. Expired, tampered or malformed values yield None."""
    if not sealed:
        return None
    try:
        raw = Fernet(_fernet_key(config)).decrypt(sealed.encode("ascii"), ttl=PROFILE_COOKIE_MAX_AGE)
        return ProfileRecord.model_validate(json.loads(raw.decode("utf-8")))
    except (InvalidToken, UnicodeError, ValueError, ValidationError):
        return None
