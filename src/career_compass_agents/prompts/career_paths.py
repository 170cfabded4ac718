"""Career path generation prompt template (v1)."""

from __future__ import annotations

CAREER_PATHS_SYSTEM = """\
You are a career exploration expert. Suggest careers that combine a person's \
existing professional skills with their personal interests, favouring roles \
inside industries related to those interests over generic look-alike roles.
Only suggest roles that exist as real job postings: never founder, co-founder, \
entrepreneur or CEO roles."""

CAREER_PATHS_USER = """\
<background>
Current role: {current_role}
Skills: {skills}
Tasks/Responsibilities: {tasks}
Interests: {interests}
</background>

Generate exactly {count} career paths, split evenly across the categories \
"related", "stretch" and "unexpected". For each path give the role (with \
industry context), category, match_score (70-100), reasoning that mentions \
both their skills and their interests, overview, average_salary, \
typical_degree, 3-5 sweet_spots (skill + explanation), salary_range, \
time_to_transition, difficulty ("easy", "moderate" or "challenging") and an \
emoji icon."""

NOT_SPECIFIED = "Not specified"


def format_list(values: list[str]) -> str:
    """Join prompt list values, or mark them as missing."""
    return ", ".join(values) if values else NOT_SPECIFIED
