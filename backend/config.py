import os
from pydantic_settings import BaseSettings


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting is missing."""


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    app_name: str = "Job Finder API"
    debug: bool = False
    log_level: str = "INFO"
    max_upload_size_mb: int = 5
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # Rate limiting (slowapi)
    rate_limit_enabled: bool = True
    rate_limit: str = "10/minute"

    # Database
    database_url: str = "sqlite+aiosqlite:///./job_finder.db"
    bcrypt_rounds: int = 12

    # HuggingFace inference
    huggingface_base_url: str = "https://router.huggingface.co/hf-inference/"
    huggingface_token: str = ""
    huggingface_timeout: float = 60.0
    skills_model: str = "microsoft/DialoGPT-medium"
    locations_model: str = "dslim/bert-base-NER"
    min_location_score: float = 0.9

    # Adzuna job listings
    adzuna_app_id: str = ""
    adzuna_app_key: str = ""
    adzuna_base_url: str = "https://api.adzuna.com/v1/api/jobs/br/"
    adzuna_timeout: float = 30.0

    # Local scoring service
    scoring_api_url: str = "http://localhost:5001/api/v1"
    scoring_match_timeout: float = 60.0
    scoring_inference_timeout: float = 120.0
    scoring_analysis_timeout: float = 180.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
