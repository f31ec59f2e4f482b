from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from app.core.linkedin_oauth import LinkedInOAuthConfig
from app.schemas.auth import LinkedInUserInfo, ProfileRecord, TokenResponse

logger = logging.getLogger(__name__)


class LinkedInAPIError(RuntimeError):
    """Token exchange or userinfo call failed. The message is safe to show to the user."""


def _error_description(response: httpx.Response, fallback: str) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        for key in ("error_description", "message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()[:300]
    return fallback


class LinkedInClient:
    def __init__(self, config: LinkedInOAuthConfig, transport: httpx.BaseTransport | None = None):
        self._config = config
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self._config.timeout_s, transport=self._transport)

    def exchange_code(self, code: str, code_verifier: str, *, flow_id: str = "-") -> str:
        """Trade the authorization code for a bearer token. Called at most once per code."""
        form = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": self._config.client_id,
            "client_secret": self._config.client_secret,
            "redirect_uri": self._config.redirect_uri,
            "code_verifier": code_verifier,
        }
        try:
            with self._client() as client:
                response = client.post(
                    self._config.token_url,
                    data=form,
                    headers={"Accept": "application/json"},
                )
        except httpx.TimeoutException as exc:
            logger.warning("linkedin_token_timeout flow_id=%s", flow_id)
            raise LinkedInAPIError("LinkedIn did not respond in time. Please try again.") from exc
        except httpx.HTTPError as exc:
            logger.warning("linkedin_token_transport_error flow_id=%s kind=%s", flow_id, type(exc).__name__)
            raise LinkedInAPIError("Could not reach LinkedIn. Please try again.") from exc

        if response.status_code >= 400:
            logger.warning("linkedin_token_rejected flow_id=%s status=%s", flow_id, response.status_code)
            description = _error_description(response, "LinkedIn rejected the authorization code.")
            raise LinkedInAPIError(f"Failed to get access token: {description}")

        try:
            token = TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("linkedin_token_invalid_payload flow_id=%s", flow_id)
            raise LinkedInAPIError("LinkedIn returned an unexpected token response.") from exc
        return token.access_token

    def fetch_profile(self, access_token: str, *, flow_id: str = "-") -> ProfileRecord:
        try:
            with self._client() as client:
                response = client.get(
                    self._config.userinfo_url,
                    headers={"Authorization": f"Bearer {access_token}", "Accept": "application/json"},
                )
        except httpx.TimeoutException as exc:
            logger.warning("linkedin_userinfo_timeout flow_id=%s", flow_id)
            raise LinkedInAPIError("LinkedIn did not respond in time. Please try again.") from exc
        except httpx.HTTPError as exc:
            logger.warning("linkedin_userinfo_transport_error flow_id=%s kind=%s", flow_id, type(exc).__name__)
            raise LinkedInAPIError("Could not reach LinkedIn. Please try again.") from exc

        if response.status_code >= 400:
            logger.warning("linkedin_userinfo_rejected flow_id=%s status=%s", flow_id, response.status_code)
            raise LinkedInAPIError("Failed to fetch profile data from LinkedIn.")

        try:
            payload: Any = response.json()
            return LinkedInUserInfo.model_validate(payload).to_profile()
        except (ValueError, ValidationError) as exc:
            logger.warning("linkedin_userinfo_invalid_payload flow_id=%s", flow_id)
            raise LinkedInAPIError("LinkedIn returned an incomplete profile.") from exc
