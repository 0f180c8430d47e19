"""Tests for job-title suggestion, category inference and the search cascade."""

from unittest.mock import AsyncMock

import pytest

from models.responses import JobListing, JobSearchResult
from services.adzuna_client import JobSearchError
from services.job_suggestion import (
    clean_suggested_title,
    determine_main_area,
    infer_category,
    search_jobs_with_suggestion,
    suggest_job_titles,
)


def _result(*titles: str) -> JobSearchResult:
    return JobSearchResult(results=[JobListing(title=t) for t in titles], count=len(titles))


# ---------------------------------------------------------------------------
# Title suggestion
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_suggest_empty_skills():
    client = AsyncMock()
    assert await suggest_job_titles([], client) == []
    client.generate_text.assert_not_called()


@pytest.mark.asyncio
async def test_culinary_skills_skip_remote_call():
    client = AsyncMock()
    titles = await suggest_job_titles(["Culinária Italiana", "HACCP", "Java"], client)
    assert titles == ["Chef de Cozinha"]
    client.generate_text.assert_not_called()


@pytest.mark.asyncio
async def test_culinary_seniority_overrides():
    client = AsyncMock()
    assert await suggest_job_titles(["Gastronomia", "Chef Executivo"], client) == ["Chef Executivo"]
    assert await suggest_job_titles(["Cozinha", "Sous Chef"], client) == ["Sous Chef"]


@pytest.mark.asyncio
async def test_java_spring_boot_rule():
    client = AsyncMock()
    assert await suggest_job_titles(["Java", "Spring Boot"], client) == ["Desenvolvedor Java Backend"]
    client.generate_text.assert_not_called()


@pytest.mark.asyncio
async def test_rules_checked_in_order():
    client = AsyncMock()
    titles = await suggest_job_titles(["Python", "Django", "React", "JavaScript"], client)
    assert titles == ["Desenvolvedor Python Backend"]


@pytest.mark.asyncio
async def test_model_suggestion_is_cleaned():
    client = AsyncMock()
    client.generate_text.return_value = "Com base nestas habilidades\nCargo sugerido: Analista de Dados (júnior)."
    titles = await suggest_job_titles(["Power BI", "Estatística"], client)
    assert titles == ["Analista de Dados"]

    prompt = client.generate_text.call_args.args[0]
    assert "Power BI, Estatística" in prompt


@pytest.mark.asyncio
async def test_prompt_uses_first_ten_skills():
    client = AsyncMock()
    client.generate_text.return_value = "Consultor"
    skills = [f"Skill{i}" for i in range(15)]
    await suggest_job_titles(skills, client)
    prompt = client.generate_text.call_args.args[0]
    assert "Skill9" in prompt
    assert "Skill10" not in prompt


@pytest.mark.asyncio
async def test_short_model_answer_falls_back_to_area_heuristic():
    client = AsyncMock()
    client.generate_text.return_value = "Ok"
    titles = await suggest_job_titles(["Selenium", "Testing"], client)
    assert titles == ["QA"]


@pytest.mark.asyncio
async def test_falls_back_to_first_skill():
    client = AsyncMock()
    client.generate_text.return_value = ""
    assert await suggest_job_titles(["Origami"], client) == ["Origami"]


@pytest.mark.asyncio
async def test_unexpected_error_returns_first_skill():
    client = AsyncMock()
    client.generate_text.side_effect = RuntimeError("boom")
    assert await suggest_job_titles(["Origami", "Xadrez"], client) == ["Origami"]


def test_clean_suggested_title():
    assert clean_suggested_title("Cargo: Enfermeiro.") == "Enfermeiro"
    assert clean_suggested_title("\n\nSugestão:   Gerente   de Projetos -\n") == "Gerente de Projetos"
    assert clean_suggested_title("") == ""


def test_area_heuristic_needs_two_hits():
    assert determine_main_area(["vendas"]) is None
    assert determine_main_area(["vendas", "negociação"]) == "Profissional de Vendas"


def test_area_heuristic_prioritizes_culinary():
    assert determine_main_area(["gestão de estoque", "seleção de ingredientes", "excel"]) == "Chef de Cozinha"


# ---------------------------------------------------------------------------
# Category inference
# ---------------------------------------------------------------------------


def test_infer_category_it():
    assert infer_category("Desenvolvedor Java Backend", ["Java", "Spring Boot"]) == "it-jobs"


def test_infer_category_engineering_excludes_software():
    assert infer_category("Engenheiro Civil", []) == "engineering-jobs"
    assert infer_category("Engenheiro de Software", []) == "it-jobs"


def test_infer_category_from_skills():
    assert infer_category("Especialista", ["Contabilidade"]) == "accounting-finance-jobs"


def test_infer_category_hospitality():
    assert infer_category("Chef de Cozinha", ["HACCP"]) == "hospitality-catering-jobs"


def test_infer_category_unknown_or_blank():
    assert infer_category("Astronauta", ["Gravidade zero"]) is None
    assert infer_category("", ["Java"]) is None


# ---------------------------------------------------------------------------
# Fallback cascade
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_cascade_empty_skills():
    adzuna = AsyncMock()
    result = await search_jobs_with_suggestion([], AsyncMock(), adzuna)
    assert result.results == []
    adzuna.search.assert_not_called()


@pytest.mark.asyncio
async def test_cascade_stops_at_first_hit():
    adzuna = AsyncMock()
    adzuna.search.return_value = _result("Dev Java")
    result = await search_jobs_with_suggestion(["Java", "Spring Boot"], AsyncMock(), adzuna)

    assert len(result.results) == 1
    assert adzuna.search.await_count == 1
    request = adzuna.search.call_args.args[0]
    assert request.title == "Desenvolvedor Java Backend"
    assert request.category == "it-jobs"
    assert request.location == "brasil"


@pytest.mark.asyncio
async def test_cascade_full_order():
    adzuna = AsyncMock()
    adzuna.search.side_effect = [_result(), _result(), _result(), _result("Vaga")]
    result = await search_jobs_with_suggestion(["Java", "Spring Boot", "SQL"], AsyncMock(), adzuna)

    assert [j.title for j in result.results] == ["Vaga"]
    attempts = [(c.args[0].title, c.args[0].category) for c in adzuna.search.call_args_list]
    assert attempts == [
        ("Desenvolvedor Java Backend", "it-jobs"),
        ("Desenvolvedor Java Backend", None),
        ("Java Spring Boot", None),
        ("Java", None),
    ]


@pytest.mark.asyncio
async def test_cascade_single_skill_without_category():
    adzuna = AsyncMock()
    adzuna.search.return_value = _result()
    hf = AsyncMock()
    hf.generate_text.return_value = ""
    result = await search_jobs_with_suggestion(["Origami"], hf, adzuna)

    assert result.results == []
    titles = [c.args[0].title for c in adzuna.search.call_args_list]
    assert titles == ["Origami", "Origami"]


@pytest.mark.asyncio
async def test_cascade_keeps_explicit_category():
    adzuna = AsyncMock()
    adzuna.search.return_value = _result("x")
    await search_jobs_with_suggestion(["Java", "Spring"], AsyncMock(), adzuna, category="engineering-jobs")
    assert adzuna.search.call_args.args[0].category == "engineering-jobs"


@pytest.mark.asyncio
async def test_cascade_propagates_search_errors():
    adzuna = AsyncMock()
    adzuna.search.side_effect = JobSearchError("down")
    with pytest.raises(JobSearchError):
        await search_jobs_with_suggestion(["Java", "Spring"], AsyncMock(), adzuna)
