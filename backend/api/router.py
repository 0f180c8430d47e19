from fastapi import APIRouter

from api.routes import jobs, resumes, users
from config import settings

router = APIRouter()


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "huggingface_configured": bool(settings.huggingface_token),
        "adzuna_configured": bool(settings.adzuna_app_id and settings.adzuna_app_key),
        "scoring_api_url": settings.scoring_api_url,
    }


router.include_router(users.router)
router.include_router(users.router_v2)
router.include_router(jobs.router)
router.include_router(resumes.router)
