from contextlib import asynccontextmanager
import logging

from app.core.linkedin_oauth import OAuthConfigError, load_linkedin_oauth_config
from app.services.llm import llm_enabled

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    try:
        config = load_linkedin_oauth_config()
    except OAuthConfigError as exc:
        logger.error("linkedin_oauth_unconfigured missing=%s", ",".join(exc.missing))
        app.state.linkedin_oauth_ready = False
    else:
        logger.info("linkedin_oauth_ready secure_cookies=%s", config.secure_cookies)
        app.state.linkedin_oauth_ready = True

    if not llm_enabled():
        logger.warning("llm_disabled; resume tools will answer 503 until OPENAI_API_KEY is set")
    yield
