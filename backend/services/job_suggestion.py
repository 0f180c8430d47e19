"""Job-title suggestion, Adzuna category inference and the search fallback cascade.

Title suggestion is layered: fixed culinary table, ordered keyword rules,
generative model, keyword-count heuristic, first skill. Each layer only runs
when the previous one produced nothing.
"""

import logging
import re

from models.requests import JobSearchRequest
from models.responses import JobSearchResult
from services.adzuna_client import AdzunaClient
from services.huggingface_client import HuggingFaceClient
from services.prompt_builder import build_job_title_prompt

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------

CULINARY_TERMS: tuple[str, ...] = (
    "culinária", "gastronomia", "chef", "cozinha", "haccp", "kitchen brigade",
    "sous-vide", "massas", "risotos", "confeitaria", "panificação",
)

# (title, alternative keyword sets); a set matches when every keyword is
# a substring of at least one skill. Checked in order, first match wins.
TITLE_RULES: list[tuple[str, list[tuple[str, ...]]]] = [
    ("Desenvolvedor Java Backend", [("java", "spring"), ("java", "spring boot")]),
    ("Desenvolvedor Python Backend", [("python", "django"), ("python", "flask")]),
    ("Desenvolvedor Frontend React", [("javascript", "react"), ("typescript", "react")]),
    ("Desenvolvedor Frontend Angular", [("angular",), ("typescript", "angular")]),
    ("Desenvolvedor Node.js", [("node", "express"), ("node.js",)]),
    ("Engenheiro DevOps", [("aws", "cloud"), ("devops", "kubernetes"), ("docker", "ci/cd")]),
    ("Contador", [("contabilidade", "fiscal"), ("contabilidade", "balanço")]),
    ("Analista Financeiro", [("finanças", "investimentos"), ("financeiro", "controle")]),
    ("Analista de Recursos Humanos", [("recrutamento", "seleção"), ("recursos humanos", "gestão de pessoas")]),
    ("Analista de Marketing Digital", [("marketing", "redes sociais"), ("marketing digital", "campanhas")]),
    ("Executivo de Vendas", [("vendas", "negociação"), ("comercial", "prospecção")]),
    ("Enfermeiro", [("enfermagem", "hospitalar")]),
    ("Nutricionista", [("nutrição", "dietética")]),
    ("Assistente Administrativo", [("administrativo", "secretariado"), ("atendimento", "arquivo")]),
    ("Professor", [("professor", "ensino"), ("educação", "aula")]),
]

# Insertion order is the tie-break order for the keyword-count heuristic.
AREA_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Chef de Cozinha": (
        "culinária", "gastronomia", "chef", "cozinha", "haccp", "kitchen brigade",
        "sous-vide", "massas", "risotos", "confeitaria", "panificação",
        "culinária italiana", "culinária francesa", "desenvolvimento de cardápios",
        "gestão de estoque", "seleção de ingredientes",
    ),
    "Desenvolvedor Frontend": (
        "javascript", "html", "css", "react", "vue", "angular", "frontend", "ui", "ux",
    ),
    "Desenvolvedor Backend": (
        "java", "c#", ".net", "python", "nodejs", "php", "backend", "api", "rest",
    ),
    "Cientista de Dados": (
        "python", "r", "machine learning", "ml", "ai", "data science", "analytics",
        "estatística", "big data", "pandas", "numpy", "tensorflow", "pytorch",
    ),
    "DBA": ("sql", "oracle", "mysql", "postgresql", "banco de dados", "database", "dba"),
    "DevOps": ("aws", "azure", "gcp", "docker", "kubernetes", "ci/cd", "jenkins", "devops", "terraform"),
    "QA": ("teste", "testing", "automation", "selenium", "qa", "qualidade"),
    "Analista Financeiro": (
        "finanças", "contabilidade", "fluxo de caixa", "investimentos", "orçamento",
        "excel", "fiscal", "tributário", "controle financeiro",
    ),
    "Profissional de Marketing": (
        "marketing", "publicidade", "redes sociais", "seo", "google ads", "facebook ads",
        "e-commerce", "campanhas", "branding", "estratégia de marca",
    ),
    "Analista de Recursos Humanos": (
        "recursos humanos", "recrutamento", "seleção", "dp", "departamento pessoal",
        "gestão de pessoas", "treinamento", "folha de pagamento", "benefícios",
    ),
    "Profissional de Vendas": (
        "vendas", "comercial", "negociação", "prospecção", "crm", "atendimento ao cliente",
        "contas", "relacionamento", "vendedor",
    ),
    "Gerente de Projetos": (
        "gestão de projetos", "pmbok", "pmp", "scrum", "kanban", "agile", "projetos",
        "cronograma", "planejamento estratégico",
    ),
    "Profissional de Saúde": (
        "saúde", "medicina", "enfermagem", "farmacêutico", "fisioterapia", "nutricionista",
        "odontologia", "psicologia", "terapêutico",
    ),
    "Profissional Jurídico": (
        "direito", "jurídico", "advogado", "legislação", "contrato", "assessoria jurídica",
        "compliance", "normas regulatórias",
    ),
    "Profissional de Educação": (
        "educação", "ensino", "professor", "treinamento", "instrução", "aula", "pedagogia",
        "licenciatura",
    ),
    "Profissional de Engenharia": (
        "engenharia", "produção", "manutenção", "logística", "industrial", "manufatura", "automação",
    ),
    "Profissional de Atendimento": (
        "atendimento", "suporte", "call center", "help desk", "customer service", "sac",
        "atendimento ao cliente",
    ),
}

PRIORITY_AREAS: tuple[str, ...] = ("Chef de Cozinha",)
MIN_AREA_HITS = 2

# Title keyword entries are either a plain substring or (required, excluded).
_TitleKeyword = str | tuple[str, str]

# (category, title keywords, skill keywords). First match wins.
CATEGORY_RULES: list[tuple[str, tuple[_TitleKeyword, ...], tuple[str, ...]]] = [
    (
        "it-jobs",
        ("desenvolvedor", "programador", "engenheiro de software", "analista de sistemas",
         "devops", "dba", "qa", "cientista de dados", "arquiteto de software"),
        ("programação", "java", "python", "javascript", "react", "node"),
    ),
    (
        "engineering-jobs",
        (("engenheiro", "software"), "engenharia", "projetista"),
        (),
    ),
    (
        "healthcare-nursing-jobs",
        ("médico", "enfermeiro", "enfermagem", "fisioterapeuta", "nutricionista",
         "farmacêutico", "psicólogo", "dentista", "odontologia"),
        ("saúde", "medicina", "enfermagem"),
    ),
    (
        "accounting-finance-jobs",
        ("contador", "contabilidade", "analista financeiro", "financeiro", "auditor", "tesoureiro"),
        ("contabilidade", "finanças", "fiscal"),
    ),
    (
        "sales-jobs",
        ("marketing", "vendedor", "vendas", "comercial", "publicidade"),
        ("marketing", "vendas", "seo"),
    ),
    (
        "hr-recruitment-jobs",
        ("recursos humanos", "rh", "recrutador", "dp"),
        ("recursos humanos", "recrutamento"),
    ),
    (
        "teaching-jobs",
        ("professor", "educação", "pedagogo", "instrutor"),
        ("ensino", "educação", "aula"),
    ),
    (
        "legal-jobs",
        ("advogado", "jurídico", "direito"),
        ("jurídico", "direito"),
    ),
    (
        "admin-secretarial-jobs",
        ("administrativo", "secretário", "assistente administrativo"),
        ("administrativo", "secretariado"),
    ),
    (
        "customer-service-jobs",
        ("atendimento", "call center", "suporte", "sac"),
        ("atendimento", "call center"),
    ),
    (
        "hospitality-catering-jobs",
        ("chef", "cozinha", "cozinheiro", "gastronomia", "culinária", "confeiteiro", "padeiro"),
        ("culinária", "gastronomia", "chef", "haccp", "kitchen brigade", "sous-vide"),
    ),
]

_TITLE_LABEL_PREFIX = re.compile(r"^(Cargo sugerido|Cargo|O cargo é|É|Sugestão):\s*", re.IGNORECASE)
_PARENTHETICAL = re.compile(r"\s*\([^)]*\)\s*")
_WHITESPACE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Matching helpers
# ---------------------------------------------------------------------------

def _any_skill_contains(skills_lower: list[str], keyword: str) -> bool:
    return any(keyword in skill for skill in skills_lower)


def contains_all(skills_lower: list[str], keywords: tuple[str, ...]) -> bool:
    """True when every keyword is a substring of some skill."""
    return all(_any_skill_contains(skills_lower, k) for k in keywords)


def _culinary_title(skills_lower: list[str]) -> str | None:
    if not any(_any_skill_contains(skills_lower, term) for term in CULINARY_TERMS):
        return None
    if _any_skill_contains(skills_lower, "executivo"):
        return "Chef Executivo"
    if _any_skill_contains(skills_lower, "sous chef") or _any_skill_contains(skills_lower, "subchef"):
        return "Sous Chef"
    return "Chef de Cozinha"


def match_title_rules(skills_lower: list[str]) -> str | None:
    culinary = _culinary_title(skills_lower)
    if culinary:
        return culinary
    for title, alternatives in TITLE_RULES:
        if any(contains_all(skills_lower, keywords) for keywords in alternatives):
            return title
    return None


def clean_suggested_title(raw: str | None) -> str:
    """Strip prompt echo, labels, asides and trailing punctuation from model output."""
    if not raw or not raw.strip():
        return ""

    lines = [line.strip() for line in raw.split("\n") if line.strip()]
    title = lines[-1] if lines else raw.strip()

    title = _TITLE_LABEL_PREFIX.sub("", title)
    title = _PARENTHETICAL.sub(" ", title)
    title = title.rstrip(".,;:- ")
    title = title.split("\n")[0].strip()
    title = _WHITESPACE.sub(" ", title)
    return title.strip()


def determine_main_area(skills_lower: list[str]) -> str | None:
    """Keyword-count heuristic over AREA_KEYWORDS."""
    for area in PRIORITY_AREAS:
        hits = sum(1 for k in AREA_KEYWORDS[area] if _any_skill_contains(skills_lower, k))
        if hits >= MIN_AREA_HITS:
            return area

    best_area, best_hits = None, 0
    for area, keywords in AREA_KEYWORDS.items():
        hits = sum(1 for k in keywords if _any_skill_contains(skills_lower, k))
        if hits > best_hits:
            best_area, best_hits = area, hits

    if best_area and (best_hits >= MIN_AREA_HITS or best_area in PRIORITY_AREAS):
        return best_area
    return None


# ---------------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------------

async def suggest_job_titles(skills: list[str], client: HuggingFaceClient) -> list[str]:
    """Suggest one job title for a skill list. Returns [] only for empty input."""
    if not skills:
        logger.warning("Job title suggestion requested without skills")
        return []

    try:
        skills_lower = [s.lower() for s in skills]

        title = match_title_rules(skills_lower)
        if title:
            return [title]

        prompt = build_job_title_prompt(skills)
        logger.info("Requesting job title suggestion for skills: %s", ", ".join(skills[:10]))
        generated = await client.generate_text(prompt)
        if generated:
            title = clean_suggested_title(generated)
            if 3 < len(title) < 100:
                logger.info("Model suggested job title: %s", title)
                return [title]
            logger.warning("Discarding suggested job title (length %d): %r", len(title), title)

        logger.warning("Model gave no usable job title, falling back to keyword heuristic")
        area = determine_main_area(skills_lower)
        if area:
            return [area]

        first = skills[0]
        return [first] if first and first.strip() else []
    except Exception as e:
        logger.error("Job title suggestion failed: %s", e)
        return [skills[0]]


def infer_category(title: str | None, skills: list[str]) -> str | None:
    """Map a job title (and skills) to an Adzuna category tag."""
    if not title or not title.strip():
        return None

    title_lower = title.lower()
    skills_lower = [s.lower() for s in skills]

    for category, title_keywords, skill_keywords in CATEGORY_RULES:
        for keyword in title_keywords:
            if isinstance(keyword, tuple):
                required, excluded = keyword
                if required in title_lower and excluded not in title_lower:
                    return category
            elif keyword in title_lower:
                return category
        if any(_any_skill_contains(skills_lower, k) for k in skill_keywords):
            return category
    return None


async def search_jobs_with_suggestion(
    skills: list[str],
    hf_client: HuggingFaceClient,
    adzuna: AdzunaClient,
    location: str | None = "brasil",
    category: str | None = None,
    page: int = 1,
    results_per_page: int = 20,
) -> JobSearchResult:
    """Search jobs for a suggested title, broadening the query until something is found.

    Attempts: suggested title (+ category) -> without category -> first two
    skills -> first skill. Adzuna errors propagate.
    """
    if not skills:
        logger.warning("Job search requested without skills")
        return JobSearchResult()

    try:
        titles = await suggest_job_titles(skills, hf_client)
        title = titles[0] if titles and titles[0].strip() else skills[0]

        if not category or not category.strip():
            category = infer_category(title, skills)
            logger.info("Inferred category %s for title %s", category, title)

        request = JobSearchRequest(
            title=title,
            location=location,
            category=category,
            page=page,
            results_per_page=results_per_page,
        )
        logger.info(
            "Searching jobs for title=%s category=%s location=%s",
            title, category or "none", location,
        )
        result = await adzuna.search(request)

        if not result.results and category:
            logger.info("No results in category %s, retrying without category", category)
            request = request.model_copy(update={"category": None})
            result = await adzuna.search(request)

        if not result.results and len(skills) >= 2:
            fallback = " ".join(skills[:2])
            logger.info("No results, retrying with first two skills: %s", fallback)
            request = request.model_copy(update={"title": fallback, "category": None})
            result = await adzuna.search(request)

        if not result.results:
            logger.info("Still no results, retrying with first skill: %s", skills[0])
            request = request.model_copy(update={"title": skills[0], "category": None})
            result = await adzuna.search(request)

        return result
    except Exception as e:
        logger.error("Job search with suggested title failed: %s", e)
        raise
