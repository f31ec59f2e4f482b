from __future__ import annotations

import json
import logging
import os
import time
import uuid
from functools import lru_cache
from typing import Any

from openai import OpenAI

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_unavailable"):
        super().__init__(message)
        self.code = code


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def llm_enabled() -> bool:
    if not _env_bool("LLM_ENABLED", True):
        return False
    api_key = (os.getenv("OPENAI_API_KEY") or "").strip()
    if not api_key or _looks_like_placeholder(api_key):
        return False
    return True


@lru_cache(maxsize=1)
def _client() -> OpenAI:
    return OpenAI(
        api_key=(os.getenv("OPENAI_API_KEY") or "").strip(),
        base_url=(os.getenv("OPENAI_BASE_URL") or None),
        timeout=float(os.getenv("LLM_TIMEOUT_S", "60")),
        max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "2")),
    )


def _model() -> str:
    return (os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o-mini").strip()


def json_completion(
    *,
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.2,
    max_output_tokens: int = 2000,
    task: str = "unknown",
) -> dict[str, Any]:
    """Run one chat completion in JSON mode and return the decoded object."""
    if not llm_enabled():
        raise LLMError("The AI service is not configured.", code="llm_disabled")

    run_id = uuid.uuid4().hex[:12]
    started = time.perf_counter()
    try:
        response = _client().chat.completions.create(
            model=_model(),
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            response_format={"type": "json_object"},
            max_tokens=max_output_tokens,
        )
    except Exception as exc:  # noqa: BLE001 - SDK raises many transport/API error types
        logger.warning(
            "llm_request_failed run_id=%s task=%s model=%s kind=%s",
            run_id,
            task,
            _model(),
            type(exc).__name__,
        )
        raise LLMError("The AI service is unavailable right now. Please try again.", code="llm_failed") from exc

    latency_ms = int((time.perf_counter() - started) * 1000)
    content = response.choices[0].message.content if response.choices else ""
    try:
        parsed = json.loads(content or "")
    except ValueError:
        parsed = None
    if not isinstance(parsed, dict):
        logger.warning("llm_invalid_response run_id=%s task=%s latency_ms=%s", run_id, task, latency_ms)
        raise LLMError("The AI service returned an unexpected response. Please try again.", code="llm_invalid")

    logger.info("llm_completed run_id=%s task=%s latency_ms=%s", run_id, task, latency_ms)
    return parsed
