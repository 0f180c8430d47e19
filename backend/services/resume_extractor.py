"""Hybrid resume entity extraction.

Regex skills are computed locally; NER locations and generative skills are
fetched concurrently, then everything is normalized, filtered and ordered.
"""

import asyncio
import logging
import re

from models.schemas import ResumeExtraction
from services.huggingface_client import HuggingFaceClient
from services.resume_ner import extract_locations
from services.skill_extractor import (
    extract_skills_generative,
    extract_skills_with_regex,
    is_relevant_skill,
    normalize_skill,
)

logger = logging.getLogger(__name__)

# Apostrophes stay inside a word: "d'oeste" -> "D'oeste"
_WORD = re.compile(r"\w[\w']*")


def _dedupe_case_insensitive(values: list[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for value in values:
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result


def normalize_location(location: str | None) -> str:
    if not location or not location.strip():
        return ""
    trimmed = location.strip().replace("##", "")
    if not trimmed:
        return ""
    return _WORD.sub(lambda m: m.group(0).capitalize(), trimmed.lower())


def combine_skills(raw_skills: list[str]) -> list[str]:
    """Normalize, filter and dedupe; longest (by letters) first, then alphabetical."""
    normalized = [normalize_skill(s) for s in raw_skills]
    relevant = [s for s in normalized if is_relevant_skill(s)]
    unique = _dedupe_case_insensitive(relevant)
    return sorted(unique, key=lambda s: (-sum(ch.isalpha() for ch in s), s))


def combine_locations(raw_locations: list[str]) -> list[str]:
    normalized = [normalize_location(loc) for loc in raw_locations]
    unique = _dedupe_case_insensitive([loc for loc in normalized if loc])
    return sorted(unique, key=len, reverse=True)


async def extract_resume_entities(text: str, client: HuggingFaceClient) -> ResumeExtraction:
    """Extract skills and locations from resume text.

    Empty input returns an empty extraction without touching the network.
    Model failures only remove that model's contribution.
    """
    if not text or not text.strip():
        return ResumeExtraction()

    regex_skills = extract_skills_with_regex(text)

    locations, generative_skills = await asyncio.gather(
        extract_locations(text, client),
        extract_skills_generative(text, client),
    )

    skills = combine_skills(regex_skills + generative_skills)
    locations = combine_locations(locations)

    logger.info(
        "Hybrid extraction produced %d skills and %d locations",
        len(skills), len(locations),
    )
    return ResumeExtraction(skills=skills, locations=locations)
