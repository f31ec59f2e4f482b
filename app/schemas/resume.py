from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.auth import ProfileRecord

EnhanceMode = Literal["job_description", "desired_role"]
ExportFormat = Literal["txt", "docx"]


class AtsScoreRequest(BaseModel):
    resume_text: str = Field(min_length=50, max_length=50000)
    job_description_text: str = Field(min_length=50, max_length=50000)


class AtsScoreResult(BaseModel):
    ats_score: int = Field(ge=0, le=100)
    areas_for_improvement: str
    dimensions: dict[str, int] = Field(default_factory=dict)


class EnhanceRequest(BaseModel):
    resume_text: str = Field(min_length=50, max_length=50000)
    job_description: str | None = Field(default=None, max_length=50000)
    desired_role: str | None = Field(default=None, max_length=200)


class EnhancedResumeResult(BaseModel):
    enhanced_resume: str
    mode: EnhanceMode


class LinkedInAnalysisRequest(BaseModel):
    profile_text: str = Field(min_length=50, max_length=50000)
    profile: ProfileRecord | None = None


class LinkedInAnalysisResult(BaseModel):
    profile_score: int = Field(ge=0, le=100)
    feedback: str
    enhanced_profile: str


class ExportRequest(BaseModel):
    content: str = Field(min_length=1, max_length=100000)
    format: ExportFormat = "docx"


class ExtractTextResponse(BaseModel):
    filename: str
    source_type: str
    text: str
    characters: int = Field(ge=0)
    warnings: list[str] = Field(default_factory=list)
