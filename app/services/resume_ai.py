from __future__ import annotations

from typing import Any

from app.schemas.auth import ProfileRecord
from app.schemas.resume import AtsScoreResult, EnhancedResumeResult, LinkedInAnalysisResult
from app.services.llm import LLMError, json_completion
from app.services.prompts import (
    ATS_WEIGHTS,
    build_ats_score_prompt,
    build_enhance_prompt,
    build_linkedin_analysis_prompt,
)

MIN_DOCUMENT_CHARS = 50
MIN_ROLE_CHARS = 3


class ResumeInputError(ValueError):
    pass


def _require_text(value: str | None, label: str, minimum: int) -> str:
    text = (value or "").strip()
    if len(text) < minimum:
        raise ResumeInputError(f"{label} must be at least {minimum} characters.")
    return text


def _clamp_score(value: Any) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    return int(round(max(0.0, min(100.0, number))))


def _required_str(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise LLMError("The AI service returned an incomplete response. Please try again.", code="llm_invalid")
    return value.strip()


def weighted_ats_score(dimensions: dict[str, int]) -> int:
    total = sum(dimensions.get(name, 0) * weight for name, weight in ATS_WEIGHTS.items())
    return _clamp_score(total)


def score_resume(resume_text: str, job_description_text: str) -> AtsScoreResult:
    resume = _require_text(resume_text, "Resume text", MIN_DOCUMENT_CHARS)
    job_description = _require_text(job_description_text, "Job description", MIN_DOCUMENT_CHARS)

    system, user = build_ats_score_prompt(resume, job_description)
    payload = json_completion(system_prompt=system, user_prompt=user, task="ats_score")

    raw_dimensions = payload.get("dimensions")
    if isinstance(raw_dimensions, dict) and raw_dimensions:
        dimensions = {name: _clamp_score(raw_dimensions.get(name)) for name in ATS_WEIGHTS}
        score = weighted_ats_score(dimensions)
    elif "ats_score" in payload:
        dimensions = {}
        score = _clamp_score(payload.get("ats_score"))
    else:
        raise LLMError("The AI service returned an incomplete response. Please try again.", code="llm_invalid")

    return AtsScoreResult(
        ats_score=score,
        areas_for_improvement=_required_str(payload, "areas_for_improvement"),
        dimensions=dimensions,
    )


def enhance_resume(
    resume_text: str,
    job_description: str | None = None,
    desired_role: str | None = None,
) -> EnhancedResumeResult:
    resume = _require_text(resume_text, "Resume text", MIN_DOCUMENT_CHARS)

    if (job_description or "").strip():
        target_jd = _require_text(job_description, "Job description", MIN_DOCUMENT_CHARS)
        system, user = build_enhance_prompt(resume, job_description=target_jd)
        mode = "job_description"
    elif (desired_role or "").strip():
        role = _require_text(desired_role, "Desired job role", MIN_ROLE_CHARS)
        system, user = build_enhance_prompt(resume, desired_role=role)
        mode = "desired_role"
    else:
        raise ResumeInputError("Either a job description or a desired job role must be provided.")

    payload = json_completion(system_prompt=system, user_prompt=user, task=f"enhance_{mode}")
    return EnhancedResumeResult(enhanced_resume=_required_str(payload, "enhanced_resume"), mode=mode)


def analyze_linkedin_profile(profile_text: str, profile: ProfileRecord | None = None) -> LinkedInAnalysisResult:
    content = _require_text(profile_text, "Profile text", MIN_DOCUMENT_CHARS)
    system, user = build_linkedin_analysis_prompt(content, profile.name if profile else None)
    payload = json_completion(system_prompt=system, user_prompt=user, task="linkedin_analysis")
    return LinkedInAnalysisResult(
        profile_score=_clamp_score(payload.get("profile_score")),
        feedback=_required_str(payload, "feedback"),
        enhanced_profile=_required_str(payload, "enhanced_profile"),
    )
