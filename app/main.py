import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from app.api.v1.auth import router as auth_router
from app.api.v1.health import router as health_router
from app.api.v1.resume import router as resume_router
from app.core.cors import cors_allowed_origins
from app.core.linkedin_oauth import CALLBACK_PATH, CODE_VERIFIER_COOKIE, STATE_COOKIE, OAuthConfigError
from app.core.rate_limit import limiter
from app.core.config import settings
from app.core.lifespan import lifespan

logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s %(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn, send_default_pii=False)

logger = logging.getLogger(__name__)

app = FastAPI(title="Resume Pilot API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(OAuthConfigError)
async def oauth_config_error_handler(request: Request, exc: OAuthConfigError):
    logger.error("linkedin_oauth_config_error path=%s missing=%s", request.url.path, ",".join(exc.missing))
    response = JSONResponse(
        status_code=503,
        content={
            "error": "config_error",
            "error_description": "LinkedIn sign-in is not available right now.",
        },
    )
    if request.url.path == CALLBACK_PATH:
        for name in (STATE_COOKIE, CODE_VERIFIER_COOKIE):
            response.delete_cookie(
                name,
                path="/",
                secure=not settings.is_development,
                httponly=True,
                samesite="lax",
            )
    return response


app.include_router(auth_router, tags=["Auth"])
app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(resume_router, prefix="/v1", tags=["Resume"])
