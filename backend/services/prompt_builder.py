"""All prompt templates for HuggingFace text-generation calls.

Prompts are in Portuguese: resumes and job listings target the Brazilian
market (Adzuna "br").
"""

SKILLS_PROMPT_MAX_CHARS = 1500
TITLE_PROMPT_MAX_SKILLS = 10


def build_skills_prompt(resume_text: str) -> str:
    """Ask the model for a comma-separated list of relevant skills.

    The resume is truncated to keep the prompt within the model's context.
    """
    truncated = resume_text[:SKILLS_PROMPT_MAX_CHARS]

    return f"""Analise o currículo abaixo e extraia todas as habilidades profissionais RELEVANTES, incluindo:
- Habilidades técnicas específicas da área (ex: Culinária Italiana, Gestão de Kitchen Brigade, HACCP para gastronomia; Java, React para TI; Contabilidade, Fiscal para finanças)
- Competências interpessoais importantes (comunicação, liderança, trabalho em equipe)
- Conhecimentos específicos da área profissional (gastronomia, marketing, finanças, recursos humanos, vendas, saúde, TI, engenharia, etc)
- Ferramentas e metodologias específicas da profissão

IMPORTANTE:
- NÃO extraia níveis de idioma isolados (ex: "Intermediário", "Avançado", "Fluente", "Básico") sem o idioma
- Extraia idiomas como "Inglês Avançado", "Italiano Fluente", etc.
- Priorize habilidades técnicas e específicas da área sobre habilidades genéricas
- Para gastronomia: extraia técnicas culinárias, tipos de culinária, gestão de cozinha, etc.
- Para TI: extraia linguagens, frameworks, ferramentas técnicas
- Para outras áreas: extraia conhecimentos específicos da profissão

Responda apenas com uma lista separada por vírgulas, sem explicações.

Currículo:
{truncated}

Exemplos de resposta:
- Para gastronomia: Culinária Italiana, Gestão de Kitchen Brigade, HACCP, Sous-vide, Desenvolvimento de Cardápios, Liderança de Equipes
- Para TI: Java, Spring Boot, React, PostgreSQL, AWS, Git
- Para finanças: Contabilidade, Fiscal, Excel Avançado, Orçamento, Controle Financeiro
"""


def build_job_title_prompt(skills: list[str]) -> str:
    """Ask the model for exactly one job title matching the skills."""
    skills_text = ", ".join(skills[:TITLE_PROMPT_MAX_SKILLS])

    return f"""
Com base nestas habilidades profissionais: {skills_text}

Sugira APENAS UM cargo específico e real do mercado de trabalho brasileiro.
Considere TODAS as áreas: gastronomia/culinária, TI, saúde, finanças, marketing, recursos humanos, vendas, jurídico, educação, engenharia, administração, etc.

IMPORTANTE:
- Retorne APENAS o nome do cargo, sem explicações, sem pontos, sem vírgulas extras
- Use nomes de cargos comuns no Brasil
- NÃO retorne habilidades, retorne o CARGO/OCUPAÇÃO
- Analise o CONTEXTO das habilidades para determinar a área correta

REGRAS ESPECÍFICAS:
- Se houver habilidades de culinária/gastronomia (ex: Culinária Italiana, HACCP, Kitchen Brigade, Sous-vide): sugira cargo de gastronomia (Chef, Cozinheiro, etc)
- Se houver linguagens de programação (Java, Python, JavaScript): sugira cargo de TI
- Se houver habilidades de dados/analytics SEM linguagens de programação: NÃO sugira "Cientista de Dados"
- Se houver apenas habilidades genéricas (Liderança, Orçamento, Idiomas): analise o contexto geral

Exemplos de resposta correta:
- Para habilidades de culinária: Chef de Cozinha, Chef Executivo, Sous Chef
- Para TI: Desenvolvedor Java, Analista de Sistemas, Engenheiro de Software
- Para finanças: Contador, Analista Financeiro
- Para saúde: Enfermeiro, Nutricionista
- Para marketing: Analista de Marketing, Gerente de Marketing Digital

Habilidades fornecidas: {skills_text}
Cargo sugerido:
"""
