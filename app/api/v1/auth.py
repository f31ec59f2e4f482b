from __future__ import annotations

import logging
import uuid
from functools import lru_cache
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from app.core.linkedin_oauth import (
    AUTH_COOKIE_MAX_AGE,
    CODE_VERIFIER_COOKIE,
    PROFILE_COOKIE,
    PROFILE_COOKIE_MAX_AGE,
    STATE_COOKIE,
    load_linkedin_oauth_config,
)
from app.core.profile_cookie import open_profile, seal_profile
from app.services.linkedin_auth import CallbackParams, CallbackStage, LinkedInAuthFlow, OAuthFlowError

router = APIRouter()
logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_linkedin_auth_flow() -> LinkedInAuthFlow:
    return LinkedInAuthFlow(load_linkedin_oauth_config())


def _set_cookie(response: Response, flow: LinkedInAuthFlow, key: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key,
        value,
        max_age=max_age,
        path="/",
        secure=flow.config.secure_cookies,
        httponly=True,
        samesite="lax",
    )


def _delete_cookie(response: Response, flow: LinkedInAuthFlow, key: str) -> None:
    response.delete_cookie(
        key,
        path="/",
        secure=flow.config.secure_cookies,
        httponly=True,
        samesite="lax",
    )


def _client_redirect(flow: LinkedInAuthFlow, params: dict[str, str]) -> RedirectResponse:
    url = f"{flow.config.client_callback_url}?{urlencode(params)}"
    response = RedirectResponse(url, status_code=status.HTTP_302_FOUND)
    response.headers["Cache-Control"] = "no-store"
    response.headers["Referrer-Policy"] = "no-referrer"
    return response


@router.get("/auth/linkedin/signin", summary="Start LinkedIn sign-in (OAuth 2.0 + PKCE)")
def linkedin_signin(flow: LinkedInAuthFlow = Depends(get_linkedin_auth_flow)):
    start = flow.start()
    response = RedirectResponse(start.url, status_code=status.HTTP_302_FOUND)
    response.headers["Cache-Control"] = "no-store"
    _set_cookie(response, flow, STATE_COOKIE, start.state, AUTH_COOKIE_MAX_AGE)
    _set_cookie(response, flow, CODE_VERIFIER_COOKIE, start.code_verifier, AUTH_COOKIE_MAX_AGE)
    return response


@router.get("/auth/linkedin/callback", summary="LinkedIn OAuth redirect target")
def linkedin_callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
    flow: LinkedInAuthFlow = Depends(get_linkedin_auth_flow),
):
    flow_id = uuid.uuid4().hex[:12]
    params = CallbackParams(code=code, state=state, error=error, error_description=error_description)
    try:
        profile = flow.complete(
            params,
            stored_state=request.cookies.get(STATE_COOKIE),
            stored_code_verifier=request.cookies.get(CODE_VERIFIER_COOKIE),
            flow_id=flow_id,
        )
    except OAuthFlowError as exc:
        logger.info("linkedin_callback_failed flow_id=%s reason=%s stage=%s", flow_id, exc.reason, exc.stage.value)
        response = _client_redirect(flow, {"error": exc.reason, "error_description": exc.description})
        _delete_cookie(response, flow, PROFILE_COOKIE)
    else:
        response = _client_redirect(flow, {"status": "success"})
        _set_cookie(response, flow, PROFILE_COOKIE, seal_profile(flow.config, profile), PROFILE_COOKIE_MAX_AGE)
        logger.info("linkedin_callback_delivered flow_id=%s stage=%s", flow_id, CallbackStage.DELIVERED.value)

    _delete_cookie(response, flow, STATE_COOKIE)
    _delete_cookie(response, flow, CODE_VERIFIER_COOKIE)
    return response


@router.get("/auth/linkedin/profile", summary="Read and clear the signed-in LinkedIn profile")
def linkedin_profile(request: Request, flow: LinkedInAuthFlow = Depends(get_linkedin_auth_flow)):
    profile = open_profile(flow.config, request.cookies.get(PROFILE_COOKIE))
    if profile is None:
        response = JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "error": "profile_unavailable",
                "error_description": "No LinkedIn profile is pending. Please sign in again.",
            },
        )
    else:
        response = JSONResponse(content=profile.model_dump())
    response.headers["Cache-Control"] = "no-store"
    _delete_cookie(response, flow, PROFILE_COOKIE)
    return response
