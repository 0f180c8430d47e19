"""Job search endpoints backed by Adzuna."""

import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request

from api.dependencies import get_adzuna_client, get_hf_client
from api.limiter import limiter
from config import settings
from models.requests import JobSearchRequest, SkillsJobSearchRequest
from models.responses import JobSearchResult
from services.adzuna_client import AdzunaClient, JobSearchError
from services.huggingface_client import HuggingFaceClient
from services.job_suggestion import search_jobs_with_suggestion, suggest_job_titles

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/jobs", tags=["Jobs"])


def _clean_skills(skills: list[str]) -> list[str]:
    return [s.strip() for s in skills if s and s.strip()]


@router.post("/search", response_model=JobSearchResult)
async def search_jobs(body: JobSearchRequest, adzuna: AdzunaClient = Depends(get_adzuna_client)):
    try:
        return await adzuna.search(body)
    except JobSearchError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/search", response_model=JobSearchResult)
async def search_jobs_query(
    title: str = Query(..., description="Job title or keyword"),
    location: str | None = "brasil",
    category: str | None = "it-jobs",
    page: int = Query(1, ge=1),
    results_per_page: int = Query(20, ge=1, le=50),
    adzuna: AdzunaClient = Depends(get_adzuna_client),
):
    if not title.strip():
        raise HTTPException(status_code=400, detail="Job title is required")
    request = JobSearchRequest(
        title=title.strip(),
        location=location,
        category=category,
        page=page,
        results_per_page=results_per_page,
    )
    try:
        return await adzuna.search(request)
    except JobSearchError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/search/skills", response_model=JobSearchResult)
@limiter.limit(settings.rate_limit)
async def search_jobs_by_skills(
    request: Request,
    body: SkillsJobSearchRequest,
    hf_client: HuggingFaceClient = Depends(get_hf_client),
    adzuna: AdzunaClient = Depends(get_adzuna_client),
):
    skills = _clean_skills(body.skills)
    if not skills:
        raise HTTPException(status_code=400, detail="At least one skill is required")

    try:
        return await search_jobs_with_suggestion(
            skills,
            hf_client,
            adzuna,
            location=body.location,
            category=body.category,
            page=body.page,
            results_per_page=body.results_per_page,
        )
    except JobSearchError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/suggest-jobs", response_model=list[str])
async def suggest_jobs(
    skills: list[str] = Body(..., description="Skills used to suggest a job title"),
    hf_client: HuggingFaceClient = Depends(get_hf_client),
):
    cleaned = _clean_skills(skills)
    if not cleaned:
        raise HTTPException(status_code=400, detail="At least one skill is required")
    return await suggest_job_titles(cleaned, hf_client)
