from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Link(BaseModel):
    href: str
    rel: str
    method: str


# --- Job listings (opaque pass-through from Adzuna) ---


class Company(BaseModel):
    model_config = ConfigDict(extra="ignore")

    display_name: str | None = None


class JobLocation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    display_name: str | None = None
    area: list[str] | None = None


class JobCategory(BaseModel):
    model_config = ConfigDict(extra="ignore")

    label: str | None = None
    tag: str | None = None


class JobListing(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str | None = None
    title: str | None = None
    description: str | None = None
    company: Company | None = None
    location: JobLocation | None = None
    category: JobCategory | None = None
    redirect_url: str | None = None
    created: str | None = None
    salary_min: float | None = None
    salary_max: float | None = None
    salary_is_predicted: str | None = None
    contract_type: str | None = None
    contract_time: str | None = None


class JobSearchResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: list[JobListing] = []
    count: int = 0
    mean: float = 0.0


# --- Resume extraction ---


class ResumeMetadata(BaseModel):
    file_name: str = ""
    file_size_bytes: int = 0


class SkillExtractionResponse(BaseModel):
    skills: list[str] = []
    total_skills: int = 0
    text_length: int = 0
    locations: list[str] = []
    suggested_location: str | None = None
    metadata: ResumeMetadata = ResumeMetadata()
    links: list[Link] = []


# --- Scoring service ---


class MatchAnalysis(BaseModel):
    strengths: str = ""
    gaps: str = ""
    recommendation: str = ""


class JobMatchResponse(BaseModel):
    match_score: float = 0.0
    match_percentage: str = "0%"
    level: str = "DESCONHECIDO"
    matched_skills: list[str] = []
    matched_count: int = 0
    missing_skills: list[str] = []
    missing_count: int = 0
    required_count: int = 0
    analysis: MatchAnalysis = MatchAnalysis()


class Occupation(BaseModel):
    titulo: str | None = None
    codigo: str | None = None
    score: float = 0.0
    confidence: str | None = None
    error: str | None = None


class OccupationInferenceResponse(BaseModel):
    status: str = "error"
    processing_time: float = 0.0
    occupations: list[Occupation] = []
    occupations_found: int = 0


class PrimaryOccupationResponse(BaseModel):
    status: str = "error"
    processing_time: float = 0.0
    primary_occupation: Occupation | None = None


class MatchedSkill(BaseModel):
    skill_name: str | None = None
    original_skill: str | None = None
    score: float = 0.0
    confidence: str | None = None


class ResumeAnalysisResponse(BaseModel):
    status: str = "error"
    resume_type: str = "unknown"
    primary_occupation: Occupation | None = None
    skills: list[MatchedSkill] = []
    total_skills_found: int | None = None
    successful_matches: int | None = None
    note: str | None = None
    processing_time: float = 0.0


# --- Users ---


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str | None = None
    created_at: datetime
    updated_at: datetime
    links: list[Link] = []


class PagedResponse(BaseModel):
    page: int
    page_size: int
    total_items: int
    total_pages: int
    data: list[UserResponse] = []
    links: list[Link] = []


class AuthResponse(BaseModel):
    success: bool
    message: str = ""
    user: UserResponse | None = None
    token: str | None = None
