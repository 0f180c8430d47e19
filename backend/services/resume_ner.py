"""Location extraction from resume text using a hosted NER model.

Default model is dslim/bert-base-NER. Its raw output is a flat (or, for
batched inputs, nested) list of token objects that are merged back into
spans of the original text before filtering.
"""

import logging
import re
from typing import Any

from config import settings
from models.schemas import NerToken, NormalizedEntity
from services.huggingface_client import HuggingFaceClient, HuggingFaceError

logger = logging.getLogger(__name__)

LOCATION_GROUPS = frozenset({"LOC", "GPE", "LOCATION"})


def normalize_group_name(raw_group: str | None) -> str:
    """Strip a BIO prefix ("B-", "I-") and upper-case the label."""
    if not raw_group or not raw_group.strip():
        return ""
    if len(raw_group) > 2 and raw_group[1] == "-":
        raw_group = raw_group[2:]
    return raw_group.strip().upper()


def _read_token(element: Any) -> NerToken | None:
    if not isinstance(element, dict):
        return None
    group = element.get("entity_group") or element.get("entity") or element.get("label")
    return NerToken(
        entity_group=normalize_group_name(group) if isinstance(group, str) else "",
        score=float(element.get("score") or 0.0),
        word=element.get("word"),
        start=int(element.get("start") or 0),
        end=int(element.get("end") or 0),
    )


def parse_tokens(data: Any) -> list[NerToken]:
    """Read model output, accepting both a flat and a nested token array."""
    if not isinstance(data, list):
        return []

    tokens: list[NerToken] = []
    for element in data:
        nested = element if isinstance(element, list) else [element]
        for item in nested:
            token = _read_token(item)
            if token is not None:
                tokens.append(token)
    return tokens


def slice_text(original: str, start: int, end: int) -> str:
    """Recover a span from the source text, collapsing whitespace and ## markers."""
    if start < 0 or end <= start or start >= len(original):
        return ""
    span = original[start:min(end, len(original))]
    return re.sub(r"\s+", " ", span).strip().replace("##", "")


def _can_merge(previous: NormalizedEntity, token: NerToken) -> bool:
    if previous.group.lower() != token.entity_group.lower():
        return False
    return token.start <= previous.end + 1


def merge_entities(tokens: list[NerToken], original_text: str) -> list[NormalizedEntity]:
    """Merge adjacent same-group tokens into entity spans.

    Tokens are ordered by start offset (longest first on ties). A token joins
    the previous span when the groups match and it starts at most one
    character after the span ends.
    """
    ordered = sorted(
        (t for t in tokens if t.entity_group.strip()),
        key=lambda t: (t.start, -t.end),
    )

    merged: list[NormalizedEntity] = []
    for token in ordered:
        if merged and _can_merge(merged[-1], token):
            last = merged[-1]
            last.score = max(last.score, token.score)
            last.end = max(last.end, token.end)
            last.text = slice_text(original_text, last.start, last.end)
            continue

        text = slice_text(original_text, token.start, token.end)
        if text.strip():
            merged.append(
                NormalizedEntity(
                    group=token.entity_group,
                    start=token.start,
                    end=token.end,
                    score=token.score,
                    text=text,
                )
            )
    return merged


def is_location(entity: NormalizedEntity) -> bool:
    return entity.group.upper() in LOCATION_GROUPS


async def extract_locations(text: str, client: HuggingFaceClient) -> list[str]:
    """Return raw location spans with confidence >= min_location_score.

    Model failures are logged and yield an empty list.
    """
    model = settings.locations_model
    if not model:
        return []

    try:
        data = await client.classify_tokens(model, text)
        tokens = parse_tokens(data)
    except HuggingFaceError as e:
        logger.warning("NER location extraction with %s failed: %s", model, e)
        return []
    except (TypeError, ValueError) as e:
        logger.warning("Unexpected NER output from %s: %s", model, e)
        return []

    entities = merge_entities(tokens, text)
    return [
        entity.text
        for entity in entities
        if entity.score >= settings.min_location_score and is_location(entity)
    ]
