"""Tests for the hybrid resume entity extraction pipeline."""

import asyncio
import json

import httpx
import pytest

from models.schemas import ResumeExtraction
from services.huggingface_client import HuggingFaceClient
from services.resume_extractor import (
    combine_locations,
    combine_skills,
    extract_resume_entities,
    normalize_location,
)

RESUME = "Desenvolvedor em Curitiba com Java, Docker e Inglês Avançado."


def _routing_transport(ner_payload, generated_payload, calls: list | None = None):
    """Answer NER and generative model calls differently based on the request body."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        body = json.loads(request.content)
        if "parameters" in body:
            return httpx.Response(200, json=generated_payload)
        return httpx.Response(200, json=ner_payload)

    return httpx.MockTransport(handler)


# ---------------------------------------------------------------------------
# Combination rules
# ---------------------------------------------------------------------------


def test_combine_skills_dedupes_case_insensitively_first_wins():
    assert combine_skills(["java", "JAVA", "Java"]) == ["Java"]
    assert combine_skills(["Docker", "docker"]) == ["Docker"]


def test_combine_skills_orders_by_letter_count_then_alphabetically():
    skills = combine_skills(["Go", "Docker", "Python", "Kotlin"])
    assert skills == ["Docker", "Kotlin", "Python", "Go"]


def test_combine_skills_applies_relevance_filter():
    skills = combine_skills(["Avançado", "Inglês Avançado", "Faculdade XPTO", "x"])
    assert skills == ["Inglês Avançado"]


def test_normalize_location():
    assert normalize_location("  SÃO PAULO ") == "São Paulo"
    assert normalize_location("##") == ""
    assert normalize_location(None) == ""


def test_normalize_location_keeps_apostrophe_words_whole():
    assert normalize_location("sÃO miguel d'OESTE") == "São Miguel D'oeste"
    assert normalize_location("mato grosso   do sul") == "Mato Grosso   Do Sul"


def test_combine_locations_sorted_by_length():
    assert combine_locations(["rio", "Belo Horizonte", "RIO", "Recife"]) == ["Belo Horizonte", "Recife", "Rio"]


# ---------------------------------------------------------------------------
# Full pipeline over a mocked HuggingFace endpoint
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_empty_text_makes_no_network_calls():
    calls = []
    client = HuggingFaceClient("https://hf.test/", transport=_routing_transport([], [], calls))
    result = await extract_resume_entities("   \n ", client)
    assert result == ResumeExtraction()
    assert calls == []
    await client.aclose()


@pytest.mark.asyncio
async def test_pipeline_merges_regex_and_generative_skills():
    ner = [{"entity_group": "LOC", "score": 0.97, "start": 17, "end": 25}]
    generated = [{"generated_text": "Java, Liderança, Avançado"}]
    client = HuggingFaceClient("https://hf.test/", transport=_routing_transport(ner, generated))

    result = await extract_resume_entities(RESUME, client)

    assert "Java" in result.skills
    assert "Docker" in result.skills
    assert "Liderança" in result.skills
    assert "Avançado" not in result.skills
    assert len({s.lower() for s in result.skills}) == len(result.skills)
    assert result.locations == ["Curitiba"]
    await client.aclose()


@pytest.mark.asyncio
async def test_ner_timeout_still_returns_skills():
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if "parameters" in body:
            return httpx.Response(200, json=[{"generated_text": "Kubernetes, Scrum"}])
        raise httpx.ReadTimeout("NER timed out", request=request)

    client = HuggingFaceClient("https://hf.test/", transport=httpx.MockTransport(handler))
    result = await extract_resume_entities(RESUME, client)

    assert result.locations == []
    assert "Kubernetes" in result.skills
    assert "Java" in result.skills
    await client.aclose()


@pytest.mark.asyncio
async def test_both_models_failing_leaves_regex_skills():
    client = HuggingFaceClient(
        "https://hf.test/",
        transport=httpx.MockTransport(lambda request: httpx.Response(503, text="loading")),
    )
    result = await extract_resume_entities(RESUME, client)
    assert result.locations == []
    assert set(result.skills) >= {"Java", "Docker", "Inglês"}
    await client.aclose()


@pytest.mark.asyncio
async def test_undecodable_generative_body_leaves_regex_skills():
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if "parameters" in body:
            return httpx.Response(200, content=b'[{"generated_text": "\xff\xfe Java"}]')
        return httpx.Response(200, json=[])

    client = HuggingFaceClient("https://hf.test/", transport=httpx.MockTransport(handler))
    result = await extract_resume_entities("Desenvolvedor Java com Docker.", client)

    assert result.locations == []
    assert set(result.skills) >= {"Java", "Docker"}
    await client.aclose()


@pytest.mark.asyncio
async def test_cancellation_propagates():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(10)
        return httpx.Response(200, json=[])

    client = HuggingFaceClient("https://hf.test/", transport=httpx.MockTransport(handler))
    task = asyncio.create_task(extract_resume_entities(RESUME, client))
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    await client.aclose()
