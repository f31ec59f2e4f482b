from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlencode

from app.core.linkedin_oauth import LinkedInOAuthConfig
from app.core.pkce import code_challenge, generate_code_verifier, generate_state, states_match
from app.integrations.linkedin import LinkedInAPIError, LinkedInClient
from app.schemas.auth import ProfileRecord

logger = logging.getLogger(__name__)


class CallbackStage(str, Enum):
    RECEIVED = "received"
    STATE_CHECKED = "state_checked"
    CODE_PRESENT = "code_present"
    TOKEN_EXCHANGED = "token_exchanged"
    PROFILE_FETCHED = "profile_fetched"
    DELIVERED = "delivered"


class OAuthFlowError(Exception):
    """Terminal FAILED state of the callback. `reason` is the machine code sent to the client route."""

    def __init__(self, reason: str, description: str, *, stage: CallbackStage):
        super().__init__(f"{reason}: {description}")
        self.reason = reason
        self.description = description
        self.stage = stage


@dataclass(frozen=True)
class AuthorizationStart:
    url: str
    state: str
    code_verifier: str


@dataclass(frozen=True)
class CallbackParams:
    code: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class LinkedInAuthFlow:
    """Authorization initiator and callback validator sharing one injected config."""

    def __init__(self, config: LinkedInOAuthConfig, client: LinkedInClient | None = None):
        if not config.client_id:
            raise ValueError("LinkedInAuthFlow requires a client_id")
        self.config = config
        self._client = client or LinkedInClient(config)

    def start(self) -> AuthorizationStart:
        state = generate_state()
        verifier = generate_code_verifier()
        query = urlencode(
            {
                "response_type": "code",
                "client_id": self.config.client_id,
                "redirect_uri": self.config.redirect_uri,
                "scope": self.config.scope,
                "state": state,
                "code_challenge": code_challenge(verifier),
                "code_challenge_method": "S256",
            }
        )
        return AuthorizationStart(
            url=f"{self.config.authorization_url}?{query}",
            state=state,
            code_verifier=verifier,
        )

    def complete(
        self,
        params: CallbackParams,
        stored_state: str | None,
        stored_code_verifier: str | None,
        *,
        flow_id: str | None = None,
    ) -> ProfileRecord:
        flow_id = flow_id or uuid.uuid4().hex[:12]
        stage = CallbackStage.RECEIVED
        code = _clean(params.code)
        error = _clean(params.error)
        stored_code_verifier = _clean(stored_code_verifier)

        if error:
            raise OAuthFlowError(
                error[:64],
                (_clean(params.error_description) or "LinkedIn sign-in was not completed.")[:300],
                stage=stage,
            )
        if not states_match(params.state, stored_state):
            raise OAuthFlowError(
                "state_mismatch",
                "Invalid state or your sign-in session expired. Please try again.",
                stage=stage,
            )
        stage = CallbackStage.STATE_CHECKED

        if not code:
            raise OAuthFlowError("no_code", "Authorization code not found.", stage=stage)
        if not stored_code_verifier:
            raise OAuthFlowError(
                "no_code_verifier",
                "Code verifier not found. Your session may have expired.",
                stage=stage,
            )
        stage = CallbackStage.CODE_PRESENT

        try:
            access_token = self._client.exchange_code(code, stored_code_verifier, flow_id=flow_id)
            stage = CallbackStage.TOKEN_EXCHANGED
            profile = self._client.fetch_profile(access_token, flow_id=flow_id)
        except LinkedInAPIError as exc:
            raise OAuthFlowError("exchange_failed", str(exc), stage=stage) from exc
        stage = CallbackStage.PROFILE_FETCHED

        logger.info("linkedin_profile_fetched flow_id=%s stage=%s", flow_id, stage.value)
        return profile
