"""Adzuna job-listings API client."""

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from config import ConfigurationError, settings
from models.requests import JobSearchRequest
from models.responses import JobSearchResult

logger = logging.getLogger(__name__)


class JobSearchError(Exception):
    """Adzuna could not be reached or returned an unusable response."""


def _lower_keys(value: Any) -> Any:
    """Recursively lower-case dict keys so field matching is case-insensitive."""
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_lower_keys(v) for v in value]
    return value


class AdzunaClient:
    def __init__(
        self,
        app_id: str,
        app_key: str,
        base_url: str = "https://api.adzuna.com/v1/api/jobs/br/",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not app_id:
            raise ConfigurationError("ADZUNA_APP_ID is not configured (environment or .env)")
        if not app_key:
            raise ConfigurationError("ADZUNA_APP_KEY is not configured (environment or .env)")
        self._app_id = app_id
        self._app_key = app_key
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    def _params(self, request: JobSearchRequest) -> dict[str, str]:
        params = {
            "app_id": self._app_id,
            "app_key": self._app_key,
            "what": request.title,
            "results_per_page": str(request.results_per_page),
        }
        if request.location:
            params["where"] = request.location
        if request.category:
            params["category"] = request.category
        return params

    async def search(self, request: JobSearchRequest) -> JobSearchResult:
        """Run one search. Raises JobSearchError on transport or decode failure."""
        logger.info(
            "Searching Adzuna: what=%s where=%s category=%s page=%d",
            request.title, request.location, request.category, request.page,
        )
        try:
            response = await self._http.get(f"search/{request.page}", params=self._params(request))
            logger.info("Adzuna responded %d", response.status_code)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Adzuna request failed: %s", e)
            raise JobSearchError("Error searching jobs. Check the Adzuna API credentials.") from e

        # Decode bytes explicitly: Adzuna may send charset=utf8, which is not a
        # registered codec name.
        try:
            content = response.content.decode("utf-8")
            data = json.loads(content)
        except ValueError as e:
            logger.error("Could not decode Adzuna response: %s", e)
            raise JobSearchError("Error processing the job search response.") from e

        logger.debug("Adzuna response (first 1000 chars): %s", content[:1000])

        if data is None:
            logger.warning("Adzuna returned an empty body")
            return JobSearchResult()

        try:
            result = JobSearchResult.model_validate(_lower_keys(data))
        except ValidationError as e:
            logger.error("Unexpected Adzuna response shape: %s", e)
            raise JobSearchError("Error processing the job search response.") from e

        logger.info("Adzuna search returned %d jobs", len(result.results))
        if result.results:
            first = result.results[0]
            logger.debug(
                "First job: title=%s company=%s location=%s url=%s",
                first.title,
                first.company.display_name if first.company else None,
                first.location.display_name if first.location else None,
                first.redirect_url,
            )
        return result

    async def aclose(self) -> None:
        await self._http.aclose()


_client: AdzunaClient | None = None


def get_client() -> AdzunaClient:
    """Return the shared client. Built at startup so missing credentials fail fast."""
    global _client
    if _client is None:
        _client = AdzunaClient(
            settings.adzuna_app_id,
            settings.adzuna_app_key,
            base_url=settings.adzuna_base_url,
            timeout=settings.adzuna_timeout,
        )
    return _client


async def close_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
