"""Client for the local scoring service (profile matching, occupation inference).

The scoring service is optional. Every call degrades to a deterministic
"unavailable" payload instead of raising, so callers can always render a
response.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from config import settings
from models.responses import (
    JobMatchResponse,
    MatchAnalysis,
    MatchedSkill,
    Occupation,
    OccupationInferenceResponse,
    PrimaryOccupationResponse,
    ResumeAnalysisResponse,
)

logger = logging.getLogger(__name__)


class ScoringServiceError(Exception):
    """Scoring service unreachable, timed out, or returned an unusable body."""


def default_match_response() -> JobMatchResponse:
    return JobMatchResponse(
        match_score=0.0,
        match_percentage="0%",
        level="ERRO",
        analysis=MatchAnalysis(
            strengths="Não disponível",
            gaps="Erro ao calcular",
            recommendation="Tente novamente",
        ),
    )


def _string_list(data: dict, key: str) -> list[str]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item.strip()]


def _parse_occupation(data: Any) -> Occupation | None:
    if not isinstance(data, dict):
        return None
    return Occupation.model_validate(data)


def _parse_matched_skill(data: dict) -> MatchedSkill:
    return MatchedSkill(
        skill_name=data.get("matched_skill"),
        original_skill=data.get("original"),
        score=data.get("similarity_score") or 0.0,
        confidence=data.get("confidence"),
    )


class ScoringClient:
    def __init__(
        self,
        base_url: str,
        match_timeout: float = 60.0,
        inference_timeout: float = 120.0,
        analysis_timeout: float = 180.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport)
        self._match_timeout = match_timeout
        self._inference_timeout = inference_timeout
        self._analysis_timeout = analysis_timeout

    async def _post(self, path: str, payload: dict[str, Any], timeout: float) -> dict:
        try:
            response = await self._http.post(path, json=payload, timeout=timeout)
        except httpx.TimeoutException as e:
            raise ScoringServiceError(f"{path} timed out after {timeout:.0f}s") from e
        except httpx.HTTPError as e:
            raise ScoringServiceError(f"{path}: {type(e).__name__}: {e}") from e

        if response.is_error:
            raise ScoringServiceError(f"{path} returned status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ScoringServiceError(f"{path} returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ScoringServiceError(f"{path} returned a non-object body")
        return data

    async def match_profile(
        self,
        candidate_skills: list[str],
        job_requirements: list[str],
        weight_match: float = 0.7,
        weight_similarity: float = 0.3,
    ) -> JobMatchResponse:
        """Score candidate skills against job requirements."""
        if not candidate_skills:
            raise ValueError("candidate_skills must not be empty")
        if not job_requirements:
            raise ValueError("job_requirements must not be empty")

        logger.info(
            "Matching %d candidate skills against %d requirements",
            len(candidate_skills), len(job_requirements),
        )
        try:
            data = await self._post(
                "match-profile",
                {
                    "candidate_skills": candidate_skills,
                    "job_requirements": job_requirements,
                    "weight_match": weight_match,
                    "weight_similarity": weight_similarity,
                },
                self._match_timeout,
            )
            analysis = data.get("analysis") if isinstance(data.get("analysis"), dict) else {}
            result = JobMatchResponse(
                match_score=data.get("match_score") or 0.0,
                match_percentage=data.get("match_percentage") or "0%",
                level=data.get("level") or "DESCONHECIDO",
                matched_skills=_string_list(data, "matched_skills"),
                matched_count=data.get("matched_count") or 0,
                missing_skills=_string_list(data, "missing_skills"),
                missing_count=data.get("missing_count") or 0,
                required_count=data.get("required_count") or 0,
                analysis=MatchAnalysis(
                    strengths=analysis.get("strengths") or "",
                    gaps=analysis.get("gaps") or "",
                    recommendation=analysis.get("recommendation") or "",
                ),
            )
        except (ScoringServiceError, ValidationError) as e:
            logger.error("Profile matching failed: %s", e)
            return default_match_response()

        logger.info("Profile match: %s", result.match_percentage)
        return result

    async def infer_occupations(
        self,
        resume_text: str,
        top_k: int = 5,
        threshold: float = 0.65,
    ) -> OccupationInferenceResponse:
        if not resume_text or not resume_text.strip():
            return OccupationInferenceResponse()

        logger.info("Inferring occupations (top_k=%d, threshold=%.2f)", top_k, threshold)
        try:
            data = await self._post(
                "infer-occupation",
                {"resume_text": resume_text.strip(), "top_k": top_k, "threshold": threshold},
                self._inference_timeout,
            )
            raw = data.get("occupations")
            occupations = [
                occupation
                for occupation in (_parse_occupation(item) for item in (raw if isinstance(raw, list) else []))
                if occupation is not None
            ]
            return OccupationInferenceResponse(
                status="success",
                processing_time=data.get("processing_time") or 0.0,
                occupations=occupations,
                occupations_found=len(occupations),
            )
        except (ScoringServiceError, ValidationError) as e:
            logger.error("Occupation inference failed: %s", e)
            return OccupationInferenceResponse()

    async def infer_primary_occupation(
        self,
        resume_text: str,
        threshold: float = 0.65,
    ) -> PrimaryOccupationResponse:
        if not resume_text or not resume_text.strip():
            return PrimaryOccupationResponse()

        logger.info("Inferring primary occupation (threshold=%.2f)", threshold)
        try:
            data = await self._post(
                "infer-primary-occupation",
                {"resume_text": resume_text.strip(), "threshold": threshold},
                self._inference_timeout,
            )
            return PrimaryOccupationResponse(
                status="success",
                processing_time=data.get("processing_time") or 0.0,
                primary_occupation=_parse_occupation(data.get("primary_occupation")),
            )
        except (ScoringServiceError, ValidationError) as e:
            logger.error("Primary occupation inference failed: %s", e)
            return PrimaryOccupationResponse()

    async def analyze_resume(
        self,
        resume_text: str,
        threshold_occupation: float = 0.65,
        threshold_skills: float = 0.75,
        top_k_occupations: int = 3,
    ) -> ResumeAnalysisResponse:
        """Full analysis: primary occupation plus matched skills for technical resumes."""
        if not resume_text or not resume_text.strip():
            return ResumeAnalysisResponse()

        logger.info("Running full resume analysis")
        try:
            data = await self._post(
                "analyze-resume",
                {
                    "resume_text": resume_text.strip(),
                    "threshold_occupation": threshold_occupation,
                    "threshold_skills": threshold_skills,
                    "top_k_occupations": top_k_occupations,
                },
                self._analysis_timeout,
            )
            raw_skills = data.get("skills")
            skills = [
                _parse_matched_skill(item)
                for item in (raw_skills if isinstance(raw_skills, list) else [])
                if isinstance(item, dict)
            ]
            return ResumeAnalysisResponse(
                status="success",
                resume_type=data.get("resume_type") or "unknown",
                primary_occupation=_parse_occupation(data.get("primary_occupation")),
                skills=skills,
                total_skills_found=data.get("total_skills_found"),
                successful_matches=data.get("successful_matches"),
                note=data.get("note"),
                processing_time=data.get("processing_time") or 0.0,
            )
        except (ScoringServiceError, ValidationError) as e:
            logger.error("Resume analysis failed: %s", e)
            return ResumeAnalysisResponse()

    async def aclose(self) -> None:
        await self._http.aclose()


_client: ScoringClient | None = None


def get_client() -> ScoringClient:
    global _client
    if _client is None:
        _client = ScoringClient(
            settings.scoring_api_url,
            match_timeout=settings.scoring_match_timeout,
            inference_timeout=settings.scoring_inference_timeout,
            analysis_timeout=settings.scoring_analysis_timeout,
        )
    return _client


async def close_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
