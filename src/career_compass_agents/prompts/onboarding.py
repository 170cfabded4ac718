"""Prompt templates for onboarding: role tasks (v1) and skill inference (v1)."""

from __future__ import annotations

ROLE_TASKS_SYSTEM = """\
You are a job analysis expert. Generate tasks that are exactly and directly \
relevant to the job role provided. Never include tasks from unrelated roles \
or industries, and never include generic tasks that fit any role."""

ROLE_TASKS_USER = """\
Job role: "{role}"{company}
{guidance}
Generate exactly {count} specific, concrete and actionable tasks that someone \
with the job title "{role}" typically performs day to day. Every task must be \
a typical responsibility of that title."""

INFER_SKILLS_SYSTEM = """\
You are a job analysis expert. Infer the skills someone in a role would have \
from the tasks they perform. Only list skills the tasks directly imply."""

INFER_SKILLS_USER = """\
Role: "{role}"{company}

Selected tasks:
{tasks}

Infer 10-20 skills demonstrated by performing these tasks: technical skills, \
software tools, methodologies and professional competencies. For example \
"Create wireframes and prototypes" implies Wireframing, Prototyping and \
UI/UX Design, and "Financial modeling and valuation analyses" implies \
Financial Modeling, Valuation and Excel. Leave out generic skills that apply \
to any role."""

# (keywords that must all appear in the role, guidance)
_ROLE_GUIDANCE: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("ux",),
        "Focus on user research, wireframing, prototyping, usability testing "
        "and UI components.",
    ),
    (
        ("user experience",),
        "Focus on user research, wireframing, prototyping, usability testing "
        "and UI components.",
    ),
    (
        ("software", "engineer"),
        "Focus on writing and reviewing code, debugging, software design and "
        "shipping features.",
    ),
    (
        ("investment banking",),
        "Focus on financial modeling, valuation, pitch books and due diligence.",
    ),
    (
        ("analyst",),
        "Focus on financial modeling, valuation, pitch books and due diligence.",
    ),
    (
        ("marketing",),
        "Focus on campaigns, marketing analytics, ROI and content creation.",
    ),
)


def role_guidance(role: str) -> str:
    """Extra prompt guidance for well-known role families, or ''."""
    lowered = role.lower()
    for keywords, guidance in _ROLE_GUIDANCE:
        if all(keyword in lowered for keyword in keywords):
            return guidance
    return ""


def company_suffix(company: str | None) -> str:
    return f" at {company}" if company else ""


def numbered(values: list[str]) -> str:
    return "\n".join(f"{i}. {value}" for i, value in enumerate(values, start=1))
