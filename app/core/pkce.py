from __future__ import annotations

import base64
import hashlib
import hmac
import secrets

STATE_BYTES = 16
CODE_VERIFIER_BYTES = 32


def _b64url(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def generate_state() -> str:
    """Anti-CSRF nonce round-tripped through the authorization redirect."""
    return _b64url(secrets.token_bytes(STATE_BYTES))


def generate_code_verifier() -> str:
    """PKCE code_verifier: 43 URL-safe characters from 32 random bytes."""
    return _b64url(secrets.token_bytes(CODE_VERIFIER_BYTES))


def code_challenge(verifier: str) -> str:
    """S256 challenge: base64url(sha256(verifier)) without padding."""
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return _b64url(digest)


def states_match(received: str | None, stored: str | None) -> bool:
    if not received or not stored:
        return False
    return hmac.compare_digest(received.encode("utf-8"), stored.encode("utf-8"))
