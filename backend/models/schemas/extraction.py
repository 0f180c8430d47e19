"""Values produced while extracting skills and locations from a resume."""

from pydantic import BaseModel, ConfigDict


class ResumeExtraction(BaseModel):
    """Skills and locations found in one resume. Ordered and deduplicated."""
    model_config = ConfigDict(frozen=True)

    skills: list[str] = []
    locations: list[str] = []


class NerToken(BaseModel):
    """A single token (or pre-aggregated span) returned by the NER model."""
    entity_group: str = ""
    score: float = 0.0
    word: str | None = None
    start: int = 0
    end: int = 0


class NormalizedEntity(BaseModel):
    """Adjacent NER tokens merged into one span of the source text."""
    group: str = ""
    start: int = 0
    end: int = 0
    score: float = 0.0
    text: str = ""
