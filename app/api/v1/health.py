from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check(request: Request):
    return {
        "status": "healthy",
        "linkedin_oauth": bool(getattr(request.app.state, "linkedin_oauth_ready", False)),
    }
