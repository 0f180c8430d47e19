from pydantic import BaseModel, EmailStr, Field

_PHONE_PATTERN = r"^[0-9+()\-.\s]*$"


class JobSearchRequest(BaseModel):
    title: str = Field(..., min_length=1, description="Job title or keyword, e.g. 'desenvolvedor java'")
    location: str | None = Field("brasil", description="City, state or country, e.g. 'são paulo'")
    category: str | None = Field(None, description="Adzuna category tag, e.g. 'it-jobs'")
    page: int = Field(1, ge=1)
    results_per_page: int = Field(20, ge=1, le=50)


class SkillsJobSearchRequest(BaseModel):
    skills: list[str] = Field(..., description="Skills used to infer a job title")
    location: str | None = "brasil"
    category: str | None = None
    page: int = Field(1, ge=1)
    results_per_page: int = Field(20, ge=1, le=50)


class JobMatchRequest(BaseModel):
    candidate_skills: list[str] = []
    job_requirements: list[str] = []
    weight_match: float = 0.7
    weight_similarity: float = 0.3


class OccupationRequest(BaseModel):
    resume_text: str = Field("", max_length=50000, description="Plain text resume content")
    top_k: int | None = Field(None, ge=1, le=20)
    threshold: float | None = Field(None, ge=0.0, le=1.0)


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr = Field(..., max_length=150)
    password: str = Field(..., min_length=6, max_length=255)
    phone: str | None = Field(None, max_length=20, pattern=_PHONE_PATTERN)


class UserUpdate(BaseModel):
    name: str | None = Field(None, max_length=100)
    email: EmailStr | None = Field(None, max_length=150)
    password: str | None = Field(None, min_length=6, max_length=255)
    phone: str | None = Field(None, max_length=20, pattern=_PHONE_PATTERN)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=255)
