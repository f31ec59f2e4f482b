import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from fastapi.responses import Response

from app.core.rate_limit import rate_limit
from app.core.security import require_api_key
from app.parsing.parse import UnsupportedDocumentError, parse_document
from app.schemas.resume import (
    AtsScoreRequest,
    AtsScoreResult,
    EnhancedResumeResult,
    EnhanceRequest,
    ExportRequest,
    ExtractTextResponse,
    LinkedInAnalysisRequest,
    LinkedInAnalysisResult,
)
from app.services.llm import LLMError
from app.services.resume_ai import (
    ResumeInputError,
    analyze_linkedin_profile,
    enhance_resume,
    score_resume,
)
from app.services.resume_export import export_resume

router = APIRouter(dependencies=[Depends(require_api_key)])
logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5 MB


def _raise_for(exc: Exception) -> None:
    if isinstance(exc, ResumeInputError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if isinstance(exc, LLMError):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"code": exc.code, "message": str(exc)},
        ) from exc
    raise exc


@router.post("/resume/ats-score", response_model=AtsScoreResult)
@rate_limit()
def resume_ats_score(request: Request, payload: AtsScoreRequest):
    _ = request
    try:
        return score_resume(payload.resume_text, payload.job_description_text)
    except (ResumeInputError, LLMError) as exc:
        _raise_for(exc)


@router.post("/resume/enhance", response_model=EnhancedResumeResult)
@rate_limit()
def resume_enhance(request: Request, payload: EnhanceRequest):
    _ = request
    try:
        return enhance_resume(
            payload.resume_text,
            job_description=payload.job_description,
            desired_role=payload.desired_role,
        )
    except (ResumeInputError, LLMError) as exc:
        _raise_for(exc)


@router.post("/linkedin/analyze", response_model=LinkedInAnalysisResult)
@rate_limit()
def linkedin_analyze(request: Request, payload: LinkedInAnalysisRequest):
    _ = request
    try:
        return analyze_linkedin_profile(payload.profile_text, payload.profile)
    except (ResumeInputError, LLMError) as exc:
        _raise_for(exc)


@router.post("/resume/extract-text", response_model=ExtractTextResponse)
async def resume_extract_text(file: UploadFile = File(...)):
    content = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="File exceeds 5 MB limit.")
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty.")

    try:
        parsed = parse_document(content, file.filename or "")
    except UnsupportedDocumentError as exc:
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(exc)) from exc

    if not parsed.text:
        logger.info("resume_extract_empty doc_id=%s source_type=%s", parsed.doc_id, parsed.source_type)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=parsed.parsing_warnings[0] if parsed.parsing_warnings else "No text could be extracted.",
        )

    return ExtractTextResponse(
        filename=parsed.filename,
        source_type=parsed.source_type,
        text=parsed.text,
        characters=len(parsed.text),
        warnings=parsed.parsing_warnings,
    )


@router.post("/resume/export")
def resume_export(payload: ExportRequest):
    body, media_type, filename = export_resume(payload.content, payload.format)
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
