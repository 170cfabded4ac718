"""CLI entrypoint using typer."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import structlog
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from career_compass_agents.observability import bind_request_context, configure_logging
from career_compass_agents.orchestrator.job_matcher import JobMatchReport, JobMatchService
from career_compass_agents.orchestrator.path_orchestrator import PathOrchestrator
from career_compass_agents.tools.factories import (
    create_job_search,
    create_path_generator,
    create_skill_inferrer,
    create_task_generator,
)
from career_compass_core.cache_key import generate_cache_key
from career_compass_core.config.settings import Settings
from career_compass_core.exceptions import CacheUnavailableError, CareerCompassError
from career_compass_core.interfaces.cache import PurgeableCache
from career_compass_core.matching.ranker import rank_jobs
from career_compass_core.models.career_path import PathResult
from career_compass_core.models.job import MatchResult
from career_compass_core.models.profile import PathRequest, UserProfile
from career_compass_infra.cache.factory import open_cache_client, open_career_path_cache

app = typer.Typer(
    name="career-compass",
    help="Career path suggestions and job matching",
)
console = Console()
logger = structlog.get_logger()


def _load_settings(command: str, verbose: bool) -> Settings:
    settings = Settings()
    if verbose:
        settings.log_level = "DEBUG"
    configure_logging(settings)
    bind_request_context(command=command)
    return settings


def _read_json(path: Path) -> Any:  # noqa: ANN401
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as e:
        console.print(f"[red]Error:[/red] {path} is not valid JSON: {escape(str(e))}")
        raise typer.Exit(code=1) from e


def _load_profile(path: Path) -> UserProfile:
    try:
        return UserProfile.model_validate(_read_json(path))
    except ValidationError as e:
        console.print(f"[red]Error:[/red] invalid profile in {path}:\n{escape(str(e))}")
        raise typer.Exit(code=1) from e


def _print_matches(matches: list[MatchResult]) -> None:
    if not matches:
        console.print("[yellow]No matching jobs found.[/yellow]")
        return
    table = Table(title="Job matches")
    table.add_column("#", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Title")
    table.add_column("Company")
    table.add_column("Location")
    table.add_column("Reasons")
    for rank, match in enumerate(matches, start=1):
        job = match.job
        table.add_row(
            str(rank),
            str(match.match_score),
            job.title,
            job.company,
            "Remote" if job.remote else job.location,
            ", ".join(match.reasons),
        )
    console.print(table)


def _print_paths(result: PathResult) -> None:
    source = "cache" if result.cached else "generated"
    table = Table(title=f"Career paths ({source}, key={result.cache_key})")
    table.add_column("Role")
    table.add_column("Category")
    table.add_column("Match", justify="right")
    table.add_column("Salary")
    table.add_column("Difficulty")
    for path in result.career_paths:
        table.add_row(
            f"{path.icon or ''} {path.role}".strip(),
            path.category,
            str(path.match_score),
            path.salary_range or path.average_salary or "",
            path.difficulty or "",
        )
    console.print(table)


@app.command()
def match(
    profile: Path = typer.Argument(..., help="User profile JSON file", exists=True),
    jobs: Path = typer.Argument(..., help="JSON file with a list of job postings", exists=True),
    limit: int | None = typer.Option(None, "--limit", min=1, help="Show at most N matches"),
    exact_tags: bool = typer.Option(
        False, "--exact-tags", help="Require exact tag equality instead of substring matching"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Rank job postings from a file against a user profile."""
    settings = _load_settings("match", verbose)
    user = _load_profile(profile)

    raw_jobs = _read_json(jobs)
    if not isinstance(raw_jobs, list):
        console.print(f"[red]Error:[/red] {jobs} must contain a JSON list")
        raise typer.Exit(code=1)

    mode = "exact" if exact_tags else settings.tag_match_mode
    ranked = rank_jobs(user, raw_jobs, tag_match=mode)
    _print_matches(ranked[: settings.max_match_results if limit is None else limit])
    console.print(f"\n[bold]{len(ranked)}[/bold] of {len(raw_jobs)} jobs matched")


@app.command()
def search(
    profile: Path = typer.Argument(..., help="User profile JSON file", exists=True),
    query: str = typer.Option(..., "--query", "-q", help="Role to search for"),
    location: str | None = typer.Option(None, "--location", "-l", help="Search location"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Search live job postings and rank them for a user profile."""
    settings = _load_settings("search", verbose)
    user = _load_profile(profile)

    try:
        report = asyncio.run(_run_search(settings, user, query, location))
    except CareerCompassError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    source = "stored postings" if report.from_store else "live search"
    console.print(f"[dim]{report.jobs_considered} jobs from {source}[/dim]")
    _print_matches(report.matches)


@app.command()
def paths(
    role: str = typer.Option(..., "--role", help="Current role"),
    skill: list[str] = typer.Option([], "--skill", help="A skill (repeatable)"),
    task: list[str] = typer.Option([], "--task", help="A task (repeatable)"),
    interest: list[str] = typer.Option([], "--interest", help="An interest (repeatable)"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Suggest career paths, served from cache when available."""
    settings = _load_settings("paths", verbose)
    request = PathRequest(current_role=role, skills=skill, tasks=task, interests=interest)

    try:
        result = asyncio.run(_run_paths(settings, request))
    except CareerCompassError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    _print_paths(result)


@app.command()
def tasks(
    role: str = typer.Option(..., "--role", help="Job title to suggest tasks for"),
    company: str | None = typer.Option(None, "--company", help="Current company"),
    count: int | None = typer.Option(None, "--count", min=1, help="Number of tasks"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Suggest typical day-to-day tasks for a role."""
    settings = _load_settings("tasks", verbose)
    try:
        suggested = asyncio.run(_run_tasks(settings, role, company, count))
    except CareerCompassError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if not suggested:
        console.print("[yellow]No tasks suggested.[/yellow]")
    for item in suggested:
        console.print(f"- {escape(item)}")


@app.command()
def skills(
    role: str = typer.Option(..., "--role", help="Current role"),
    task: list[str] = typer.Option([], "--task", help="A task you perform (repeatable)"),
    company: str | None = typer.Option(None, "--company", help="Current company"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Infer skills from a role and the tasks performed in it."""
    settings = _load_settings("skills", verbose)
    try:
        inferred = asyncio.run(_run_skills(settings, role, task, company))
    except CareerCompassError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    console.print(", ".join(escape(s) for s in inferred) or "[yellow]No skills inferred.[/yellow]")


@app.command()
def profile(
    skill: list[str] = typer.Option([], "--skill", help="A skill (repeatable)"),
    task: list[str] = typer.Option([], "--task", help="A task (repeatable)"),
    interest: list[str] = typer.Option([], "--interest", help="An interest (repeatable)"),
    location: list[str] = typer.Option([], "--location", help="Preferred location (repeatable)"),
    remote: bool = typer.Option(True, "--remote/--no-remote", help="Count remote jobs as a match"),
    salary: int | None = typer.Option(None, "--salary", min=1, help="Desired yearly salary"),
    environment: str = typer.Option(
        "flexible", "--environment", help="remote, hybrid, office or flexible"
    ),
    role: str = typer.Option("", "--role", help="Current role"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the profile here"),
) -> None:
    """Build a matching profile JSON from onboarding answers."""
    try:
        request = PathRequest(current_role=role, skills=skill, tasks=task, interests=interest)
        user = UserProfile.from_onboarding(
            request,
            locations=location,
            include_remote=remote,
            desired_salary=salary,
            work_environment_pref=environment,  # type: ignore[arg-type]
        )
    except ValidationError as e:
        console.print(f"[red]Error:[/red] invalid onboarding answers:\n{escape(str(e))}")
        raise typer.Exit(code=1) from e

    data = user.model_dump_json(indent=2)
    if output is None:
        console.print_json(data)
        return
    output.write_text(data)
    console.print(f"Profile with {len(user.matching_tags)} matching tags written to {output}")


@app.command("purge-cache")
def purge_cache(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Delete expired career path cache entries."""
    settings = _load_settings("purge-cache", verbose)
    try:
        removed = asyncio.run(_run_purge(settings))
    except CareerCompassError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if removed is None:
        console.print(f"The {settings.cache_backend} backend expires entries itself.")
    else:
        console.print(f"Removed [bold]{removed}[/bold] expired cache entries")


@app.command("cache-key")
def cache_key(
    role: str = typer.Option("", "--role", help="Current role"),
    skill: list[str] = typer.Option([], "--skill", help="A skill (repeatable)"),
    task: list[str] = typer.Option([], "--task", help="A task (repeatable)"),
    interest: list[str] = typer.Option([], "--interest", help="An interest (repeatable)"),
) -> None:
    """Print the career path cache key for the given inputs."""
    settings = Settings()
    console.print(generate_cache_key(role, skill, task, interest, prefix=settings.cache_key_prefix))


@app.command()
def version() -> None:
    """Show version."""
    console.print("career-compass v0.1.0")


async def _run_paths(settings: Settings, request: PathRequest) -> PathResult:
    generator = create_path_generator(settings)
    async with open_career_path_cache(settings) as cache:
        orchestrator = PathOrchestrator(
            cache,
            generator,
            expected_count=settings.path_count,
            key_prefix=settings.cache_key_prefix,
        )
        return await orchestrator.get_career_paths(request)


async def _run_search(
    settings: Settings,
    user: UserProfile,
    query: str,
    location: str | None,
) -> JobMatchReport:
    from career_compass_infra.db.repositories.job_repo import open_job_repository

    provider = create_job_search(settings)
    async with open_job_repository(settings) as repository:
        service = JobMatchService(settings, provider, repository)
        return await service.find_matches(user, query, location)


async def _run_tasks(
    settings: Settings, role: str, company: str | None, count: int | None
) -> list[str]:
    return await create_task_generator(settings).generate_tasks(role, company, count)


async def _run_skills(
    settings: Settings, role: str, tasks: list[str], company: str | None
) -> list[str]:
    return await create_skill_inferrer(settings).infer_skills(role, tasks, company)


async def _run_purge(settings: Settings) -> int | None:
    """Purge expired entries; None when the backend expires them itself."""
    async with open_cache_client(settings, degrade=False) as client:
        if not isinstance(client, PurgeableCache):
            return None
        try:
            return await client.purge_expired()
        except Exception as e:
            msg = f"failed to purge {settings.cache_backend} cache: {e}"
            raise CacheUnavailableError(msg) from e


if __name__ == "__main__":
    app()
