"""Skill extraction: regex catalogue + generative HuggingFace model.

Combines:
1. Case-insensitive patterns over a fixed multi-domain vocabulary
2. A text-generation model asked for a comma-separated skill list
3. Normalization and a relevance filter applied to the union
"""

import logging
import re

from config import settings
from services.huggingface_client import HuggingFaceClient, HuggingFaceError
from services.prompt_builder import build_skills_prompt

logger = logging.getLogger(__name__)

SKILLS_MAX_NEW_TOKENS = 120

# ---------------------------------------------------------------------------
# Skill catalogue. Every match is kept verbatim (normalized later).
# ---------------------------------------------------------------------------
_SKILL_PATTERNS: list[str] = [
    # Programming languages and technologies
    r"\b(Java|Python|JavaScript|TypeScript|C#|C\+\+|C\b|Go|Rust|Kotlin|Swift)\b",
    r"\b(React|Angular|Vue\.js?|Node\.js?|Next\.js?|Nuxt\.js?)\b",
    r"\b(Spring|Spring Boot|Django|Flask|Laravel|\.NET Core|ASP\.NET)\b",
    r"\b(MySQL|PostgreSQL|MongoDB|SQL Server|Oracle|Redis|Elasticsearch)\b",
    r"\b(AWS|Azure|Google Cloud|GCP|Docker|Kubernetes|Terraform|Ansible)\b",
    r"\b(Git|GitHub|GitLab|CI/CD|Jenkins|Agile|Scrum|Kanban)\b",
    r"\b(HTML|CSS|Sass|Less|REST|GraphQL|gRPC|SOAP|JSON|XML)\b",
    r"\b(Power BI|Tableau|Looker|Excel|ETL|Data Lake|Data Warehouse)\b",
    # Office / administrative
    r"\b(Microsoft Office|Excel|Word|PowerPoint|Outlook)\b",
    r"\b(SAP|CRM|ERP|Gestão de Projetos)\b",
    # Interpersonal
    r"\b(Comunicação|Liderança|Negociação|Oratória|Trabalho em Equipe)\b",
    # Languages
    r"\b(Inglês|Espanhol|Francês|Alemão|Italiano|Português|Mandarim)\b",
    r"\b(Fluente|Avançado|Intermediário|Básico)\b",
    # Finance and accounting
    r"\b(Contabilidade|Finanças|Orçamento|Controladoria|Tesouraria|Fiscal)\b",
    r"\b(Impostos|Tributos|Auditoria|Compliance|Folha de Pagamento)\b",
    # Sales and marketing
    r"\b(Marketing Digital|SEO|Google Ads|Meta Ads|Redes Sociais|E-commerce)\b",
    r"\b(Vendas|Atendimento ao Cliente|Negociação|CRM|SAC)\b",
    # Healthcare
    r"\b(Enfermagem|Medicina|Fisioterapia|Nutrição|Farmácia)\b",
    # Industry and manufacturing
    r"\b(Lean|Six Sigma|Gestão de Qualidade|ISO|5S|Kaizen|Manufatura)\b",
    # Culinary
    r"\b(Gastronomia|Culinária|Chef|Cozinha|Cozinheiro|Confeitaria|Panificação)\b",
    r"\b(Culinária Italiana|Culinária Francesa|Culinária Brasileira|Cozinha Contemporânea)\b",
    r"\b(Massas|Risotos|Molhos|Sous-vide|Fermentação|Churrascaria)\b",
    r"\b(Kitchen Brigade|Mise en Place|HACCP|Segurança Alimentar)\b",
    r"\b(Desenvolvimento de Cardápios|Gestão de Estoque|Seleção de Ingredientes)\b",
    r"\b(Técnicas de Corte|Brunoise|Julienne|Chiffonade|Cozinha Vegetariana|Vegana)\b",
]

SKILL_PATTERNS: list[re.Pattern] = [re.compile(p, re.IGNORECASE) for p in _SKILL_PATTERNS]

# Short tokens that are real skills even without a vowel
ALLOWED_SHORT_SKILLS: frozenset[str] = frozenset({
    "c", "c#", "c++", "sql", "bi", "ux", "ui", "go", "aws", ".net", "php", "java",
})

# Language proficiency levels that mean nothing without the language
LANGUAGE_LEVELS: frozenset[str] = frozenset({
    "fluente", "avançado", "intermediário", "básico", "nativo", "intermediario",
})

_VOWELS = "aeiouáéíóúâêôãõ"
_EDGE_PUNCTUATION = re.compile(r"^\W+|\W+$")
_SKILL_SEPARATORS = re.compile(r"[,;\n]")
_MAX_SKILL_WORDS = 6


def extract_skills_with_regex(text: str) -> list[str]:
    """Return every catalogue match, in pattern order, duplicates included."""
    matches: list[str] = []
    for pattern in SKILL_PATTERNS:
        matches.extend(m.group(0) for m in pattern.finditer(text))
    return matches


def normalize_skill(skill: str | None) -> str:
    """Trim, strip leading/trailing non-word characters, upper-case the first letter."""
    if not skill or not skill.strip():
        return ""
    trimmed = _EDGE_PUNCTUATION.sub("", skill.strip())
    if not trimmed:
        return ""
    return trimmed[0].upper() + trimmed[1:]


def _has_vowel(value: str) -> bool:
    return any(ch.lower() in _VOWELS for ch in value)


def is_relevant_skill(skill: str | None) -> bool:
    """Reject noise: bare language levels, stray short tokens, institutions, sentences."""
    if not skill or not skill.strip():
        return False

    trimmed = skill.strip()
    if len(trimmed) < 2:
        return False

    if trimmed.lower() in LANGUAGE_LEVELS:
        return False

    if len(trimmed) <= 3 and trimmed.lower() not in ALLOWED_SHORT_SKILLS:
        return _has_vowel(trimmed) and len(trimmed) >= 3

    if trimmed.lower().startswith("faculdade"):
        return False

    if len([w for w in trimmed.split(" ") if w.strip()]) > _MAX_SKILL_WORDS:
        return False

    return True


def parse_skill_list(generated: str | None) -> list[str]:
    """Split generated text into normalized skills.

    Models often echo the prompt, so only the last line containing a comma
    is read (the whole text when no line has one).
    """
    if not generated or not generated.strip():
        return []

    lines_with_commas = [line for line in generated.split("\n") if "," in line]
    cleaned = lines_with_commas[-1] if lines_with_commas else generated

    parts = (part.strip() for part in _SKILL_SEPARATORS.split(cleaned))
    return [normalize_skill(part) for part in parts if part]


async def extract_skills_generative(text: str, client: HuggingFaceClient) -> list[str]:
    """Ask the generative model for skills. Failures yield an empty list."""
    model = settings.skills_model
    if not model or not text or not text.strip():
        return []

    try:
        generated = await client.generate(
            model,
            build_skills_prompt(text),
            max_new_tokens=SKILLS_MAX_NEW_TOKENS,
        )
    except HuggingFaceError as e:
        logger.error("Generative skill extraction with %s failed: %s", model, e)
        return []

    skills: list[str] = []
    for item in generated:
        skills.extend(parse_skill_list(item))
    return skills
