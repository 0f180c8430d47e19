"""HuggingFace inference API wrapper with error handling."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from config import settings

logger = logging.getLogger(__name__)


class HuggingFaceError(Exception):
    """Inference call failed: transport error, timeout, non-2xx or bad JSON."""


class HuggingFaceClient:
    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def query(self, model: str, payload: dict[str, Any]) -> Any:
        """POST a payload to a hosted model and return the decoded JSON body."""
        endpoint = f"models/{quote(model, safe='')}"
        try:
            response = await self._http.post(endpoint, json=payload)
        except httpx.HTTPError as e:
            raise HuggingFaceError(f"{model}: {type(e).__name__}: {e}") from e

        if response.is_error:
            raise HuggingFaceError(f"{model} returned {response.status_code}: {response.text[:300]}")

        try:
            return response.json()
        except ValueError as e:
            raise HuggingFaceError(f"{model} returned invalid JSON: {e}") from e

    async def classify_tokens(self, model: str, text: str) -> Any:
        """Run a token-classification (NER) model over text."""
        return await self.query(model, {"inputs": text, "options": {"wait_for_model": True}})

    async def generate(
        self,
        model: str,
        prompt: str,
        max_new_tokens: int,
        temperature: float | None = None,
    ) -> list[str]:
        """Run a text-generation model and return every generated_text found."""
        parameters: dict[str, Any] = {"max_new_tokens": max_new_tokens}
        if temperature is not None:
            parameters["temperature"] = temperature
        data = await self.query(
            model,
            {"inputs": prompt, "parameters": parameters, "options": {"wait_for_model": True}},
        )
        return _generated_texts(data)

    async def generate_text(self, prompt: str) -> str:
        """Free-text generation with the skills model. Returns "" on failure."""
        if not prompt or not prompt.strip():
            return ""
        if not settings.skills_model:
            logger.warning("Text generation skipped: no skills model configured")
            return ""
        try:
            texts = await self.generate(settings.skills_model, prompt, max_new_tokens=150, temperature=0.7)
        except HuggingFaceError as e:
            logger.error("Text generation with %s failed: %s", settings.skills_model, e)
            return ""
        return texts[0].strip() if texts else ""

    async def aclose(self) -> None:
        await self._http.aclose()


def _generated_texts(data: Any) -> list[str]:
    """Accept either [{generated_text}, ...] or a single {generated_text}."""
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        items = [data]
    else:
        return []
    texts = []
    for item in items:
        if isinstance(item, dict) and isinstance(item.get("generated_text"), str):
            texts.append(item["generated_text"])
    return texts


_client: HuggingFaceClient | None = None


def get_client() -> HuggingFaceClient:
    global _client
    if _client is None:
        if not settings.huggingface_token:
            logger.warning("No HUGGINGFACE_TOKEN set - anonymous inference calls may be rejected")
        _client = HuggingFaceClient(
            settings.huggingface_base_url,
            token=settings.huggingface_token,
            timeout=settings.huggingface_timeout,
        )
    return _client


async def close_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
