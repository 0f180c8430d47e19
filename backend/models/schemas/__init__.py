"""Intermediate values passed between extraction pipeline stages."""

from models.schemas.extraction import NerToken, NormalizedEntity, ResumeExtraction

__all__ = [
    "NerToken",
    "NormalizedEntity",
    "ResumeExtraction",
]
