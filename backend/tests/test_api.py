from unittest.mock import AsyncMock, patch

import pytest

from api.dependencies import get_adzuna_client, get_hf_client, get_scoring_client
from main import app
from models.responses import (
    JobListing,
    JobMatchResponse,
    JobSearchResult,
    OccupationInferenceResponse,
    ResumeAnalysisResponse,
)
from models.schemas import ResumeExtraction
from services.adzuna_client import JobSearchError
from test_pdf_parser import make_pdf


@pytest.fixture
def adzuna():
    mock = AsyncMock()
    mock.search.return_value = JobSearchResult(results=[JobListing(title="Dev Java")], count=1)
    app.dependency_overrides[get_adzuna_client] = lambda: mock
    return mock


@pytest.fixture
def hf():
    mock = AsyncMock()
    mock.generate_text.return_value = ""
    app.dependency_overrides[get_hf_client] = lambda: mock
    return mock


@pytest.fixture
def scoring():
    mock = AsyncMock()
    app.dependency_overrides[get_scoring_client] = lambda: mock
    return mock


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["adzuna_configured"] is True


# --- Jobs ---


def test_search_jobs_post(client, adzuna):
    response = client.post("/api/v1/jobs/search", json={"title": "java"})
    assert response.status_code == 200
    assert response.json()["results"][0]["title"] == "Dev Java"
    request = adzuna.search.call_args.args[0]
    assert request.location == "brasil"
    assert request.results_per_page == 20


def test_search_jobs_post_validates_body(client, adzuna):
    response = client.post("/api/v1/jobs/search", json={"title": "", "results_per_page": 100})
    assert response.status_code == 422
    adzuna.search.assert_not_called()


def test_search_jobs_get_defaults(client, adzuna):
    response = client.get("/api/v1/jobs/search", params={"title": "desenvolvedor"})
    assert response.status_code == 200
    request = adzuna.search.call_args.args[0]
    assert request.category == "it-jobs"
    assert request.location == "brasil"


def test_search_jobs_get_requires_title(client, adzuna):
    assert client.get("/api/v1/jobs/search").status_code == 422
    assert client.get("/api/v1/jobs/search", params={"title": "  "}).status_code == 400


def test_search_error_maps_to_502(client, adzuna):
    adzuna.search.side_effect = JobSearchError("Error searching jobs. Check the Adzuna API credentials.")
    response = client.post("/api/v1/jobs/search", json={"title": "java"})
    assert response.status_code == 502
    assert "credentials" in response.json()["detail"]


def test_search_by_skills(client, adzuna, hf):
    response = client.post("/api/v1/jobs/search/skills", json={"skills": ["Java", "Spring Boot"]})
    assert response.status_code == 200
    request = adzuna.search.call_args.args[0]
    assert request.title == "Desenvolvedor Java Backend"
    assert request.category == "it-jobs"


def test_search_by_skills_requires_a_skill(client, adzuna, hf):
    response = client.post("/api/v1/jobs/search/skills", json={"skills": ["  "]})
    assert response.status_code == 400


def test_suggest_jobs(client, hf):
    response = client.post("/api/v1/jobs/suggest-jobs", json=["Culinária Italiana", "HACCP"])
    assert response.status_code == 200
    assert response.json() == ["Chef de Cozinha"]
    hf.generate_text.assert_not_called()


def test_suggest_jobs_empty(client, hf):
    assert client.post("/api/v1/jobs/suggest-jobs", json=[]).status_code == 400


# --- Resumes ---


def test_upload_rejects_non_pdf(client, hf):
    response = client.post(
        "/api/v1/resumes/skills",
        files={"file": ("resume.txt", b"not a pdf", "text/plain")},
    )
    assert response.status_code == 415


def test_upload_rejects_empty_file(client, hf):
    response = client.post(
        "/api/v1/resumes/skills",
        files={"file": ("resume.pdf", b"", "application/pdf")},
    )
    assert response.status_code == 400


def test_upload_rejects_oversized_file(client, hf):
    big = b"%PDF-1.4\n" + b"0" * (5 * 1024 * 1024 + 1)
    response = client.post(
        "/api/v1/resumes/skills",
        files={"file": ("resume.pdf", big, "application/pdf")},
    )
    assert response.status_code == 400
    assert "too large" in response.json()["detail"]


def test_upload_rejects_unparseable_pdf(client, hf):
    response = client.post(
        "/api/v1/resumes/skills",
        files={"file": ("resume.pdf", b"garbage bytes", "application/pdf")},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Could not parse PDF file"


@patch("api.routes.resumes.extract_resume_entities", new_callable=AsyncMock)
def test_upload_extracts_skills(mock_extract, client, hf):
    mock_extract.return_value = ResumeExtraction(skills=["Java", "Docker"], locations=["Curitiba", "Paraná"])
    response = client.post(
        "/api/v1/resumes/skills",
        files={"file": ("cv.pdf", make_pdf("Java e Docker em Curitiba"), "application/octet-stream")},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["skills"] == ["Java", "Docker"]
    assert data["total_skills"] == 2
    assert data["suggested_location"] == "Curitiba"
    assert data["metadata"]["file_name"] == "cv.pdf"
    assert data["text_length"] > 0
    assert {link["rel"] for link in data["links"]} == {"self", "jobs-search"}


def test_match_jobs(client, scoring):
    scoring.match_profile.return_value = JobMatchResponse(match_score=0.5, match_percentage="50%", level="MEDIO")
    response = client.post(
        "/api/v1/resumes/match-jobs",
        json={"candidate_skills": ["Java"], "job_requirements": ["Java", "Kafka"]},
    )
    assert response.status_code == 200
    assert response.json()["match_percentage"] == "50%"


def test_match_jobs_requires_both_lists(client, scoring):
    response = client.post("/api/v1/resumes/match-jobs", json={"candidate_skills": ["Java"], "job_requirements": []})
    assert response.status_code == 400
    scoring.match_profile.assert_not_called()


def test_infer_occupations_defaults(client, scoring):
    scoring.infer_occupations.return_value = OccupationInferenceResponse(status="success")
    response = client.post("/api/v1/resumes/infer-occupations", json={"resume_text": "Chef de cozinha"})
    assert response.status_code == 200
    _, kwargs = scoring.infer_occupations.call_args
    assert kwargs == {"top_k": 5, "threshold": 0.65}


def test_occupation_endpoints_require_text(client, scoring):
    for path in ("infer-occupations", "infer-primary-occupation", "analyze"):
        response = client.post(f"/api/v1/resumes/{path}", json={"resume_text": " "})
        assert response.status_code == 400


def test_analyze_resume(client, scoring):
    scoring.analyze_resume.return_value = ResumeAnalysisResponse(status="success", resume_type="technical")
    response = client.post("/api/v1/resumes/analyze", json={"resume_text": "Dev Java", "threshold": 0.7})
    assert response.status_code == 200
    assert response.json()["resume_type"] == "technical"
    _, kwargs = scoring.analyze_resume.call_args
    assert kwargs["threshold_occupation"] == 0.7
