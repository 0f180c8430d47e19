"""Resume endpoints: PDF skill extraction and scoring-service passthroughs."""

import logging
from pathlib import PurePath

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from api.dependencies import get_hf_client, get_scoring_client
from api.limiter import limiter
from config import settings
from models.requests import JobMatchRequest, OccupationRequest
from models.responses import (
    JobMatchResponse,
    Link,
    OccupationInferenceResponse,
    PrimaryOccupationResponse,
    ResumeAnalysisResponse,
    ResumeMetadata,
    SkillExtractionResponse,
)
from services import pdf_parser
from services.huggingface_client import HuggingFaceClient
from services.resume_extractor import extract_resume_entities
from services.scoring_client import ScoringClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/resumes", tags=["Resumes"])

ALLOWED_CONTENT_TYPES = frozenset({"application/pdf", "application/x-pdf"})

DEFAULT_TOP_K = 5
DEFAULT_THRESHOLD = 0.65


def is_pdf(upload: UploadFile) -> bool:
    if upload.content_type and upload.content_type.lower() in ALLOWED_CONTENT_TYPES:
        return True
    return PurePath(upload.filename or "").suffix.lower() == ".pdf"


def _links(request: Request) -> list[Link]:
    root = str(request.base_url).rstrip("/")
    return [
        Link(href=f"{root}/api/v1/resumes/skills", rel="self", method="POST"),
        Link(href=f"{root}/api/v1/jobs/search", rel="jobs-search", method="POST"),
    ]


def _require_text(body: OccupationRequest) -> str:
    if not body.resume_text.strip():
        raise HTTPException(status_code=400, detail="Resume text is required")
    return body.resume_text


@router.post("/skills", response_model=SkillExtractionResponse)
@limiter.limit(settings.rate_limit)
async def extract_skills(
    request: Request,
    file: UploadFile = File(...),
    hf_client: HuggingFaceClient = Depends(get_hf_client),
):
    if not is_pdf(file):
        logger.warning("Unsupported upload content type: %s", file.content_type)
        raise HTTPException(status_code=415, detail="Only PDF files are supported")

    content = await file.read()
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Max size: {settings.max_upload_size_mb}MB",
        )
    if not content:
        raise HTTPException(status_code=400, detail="Resume file is empty")

    logger.info("Extracting skills from %s (%d bytes)", file.filename, len(content))

    try:
        text = pdf_parser.extract_text(content)
    except Exception as e:
        logger.warning("Could not parse %s: %s", file.filename, e)
        raise HTTPException(status_code=400, detail="Could not parse PDF file")

    metadata = ResumeMetadata(file_name=file.filename or "", file_size_bytes=len(content))

    if not text.strip():
        logger.warning("No text extracted from %s", file.filename)
        return SkillExtractionResponse(metadata=metadata, links=_links(request))

    extraction = await extract_resume_entities(text, hf_client)

    logger.info("Extracted %d skills from %s", len(extraction.skills), file.filename)
    return SkillExtractionResponse(
        skills=extraction.skills,
        total_skills=len(extraction.skills),
        text_length=len(text),
        locations=extraction.locations,
        suggested_location=extraction.locations[0] if extraction.locations else None,
        metadata=metadata,
        links=_links(request),
    )


@router.post("/match-jobs", response_model=JobMatchResponse)
async def match_jobs(body: JobMatchRequest, scoring: ScoringClient = Depends(get_scoring_client)):
    candidate = [s for s in body.candidate_skills if s and s.strip()]
    requirements = [s for s in body.job_requirements if s and s.strip()]
    if not candidate:
        raise HTTPException(status_code=400, detail="Candidate skills are required")
    if not requirements:
        raise HTTPException(status_code=400, detail="Job requirements are required")

    return await scoring.match_profile(
        candidate,
        requirements,
        weight_match=body.weight_match,
        weight_similarity=body.weight_similarity,
    )


@router.post("/infer-occupations", response_model=OccupationInferenceResponse)
async def infer_occupations(body: OccupationRequest, scoring: ScoringClient = Depends(get_scoring_client)):
    text = _require_text(body)
    return await scoring.infer_occupations(
        text,
        top_k=body.top_k or DEFAULT_TOP_K,
        threshold=body.threshold if body.threshold is not None else DEFAULT_THRESHOLD,
    )


@router.post("/infer-primary-occupation", response_model=PrimaryOccupationResponse)
async def infer_primary_occupation(body: OccupationRequest, scoring: ScoringClient = Depends(get_scoring_client)):
    text = _require_text(body)
    return await scoring.infer_primary_occupation(
        text,
        threshold=body.threshold if body.threshold is not None else DEFAULT_THRESHOLD,
    )


@router.post("/analyze", response_model=ResumeAnalysisResponse)
async def analyze_resume(body: OccupationRequest, scoring: ScoringClient = Depends(get_scoring_client)):
    text = _require_text(body)
    return await scoring.analyze_resume(
        text,
        threshold_occupation=body.threshold if body.threshold is not None else DEFAULT_THRESHOLD,
    )
