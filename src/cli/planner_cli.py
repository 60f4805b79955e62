"""
Study Planner CLI - build and inspect study plans from the terminal.

Usage:
    study-planner plan snapshot.json            # Plan from a local progress snapshot
    study-planner plan snapshot.json --json     # Same, as JSON
    study-planner sync <user_id> <course_id>    # Plan from the live progress service

A snapshot file is either a bare progress record or an object with
"progress" plus optional "exam_sessions", "config" and "availability" keys.
"""

from __future__ import annotations

import asyncio
import json
import sys
from collections import defaultdict
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config import Settings, get_settings
from src.core.availability import UserAvailability, create_default_user_availability
from src.core.errors import PlannerError
from src.core.plan_config import StudyPlanConfig, create_default_study_plan_config
from src.core.progress import ExamSessionSummary, UserCourseProgress
from src.core.providers import seeded_random
from src.core.records import StudyPlan
from src.integrations.plan_cache import PlanCache
from src.integrations.progress_client import HttpProgressClient
from src.integrations.progress_sync import ProgressSync
from src.planning.planner import StudyPlanner

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="study-planner",
    help="Adaptive study plan generator",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def configure_logging(settings: Settings, verbose: bool = False) -> None:
    """Route loguru output to stderr (and the optional log file)."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(
            settings.log_file,
            level=settings.log_level,
            rotation="10 MB",
            retention="7 days",
        )


def build_planner(settings: Settings, seed: int | None = None) -> StudyPlanner:
    return StudyPlanner(
        rng=seeded_random(seed if seed is not None else settings.planner_random_seed),
        base_hours=settings.planner_base_hours,
        mock_exam_probability=settings.planner_mock_exam_probability,
    )


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Adaptive study plan generator."""
    configure_logging(get_settings(), verbose)


# =============================================================================
# Snapshot loading
# =============================================================================


def load_snapshot(
    path: Path, settings: Settings
) -> tuple[UserCourseProgress, list[ExamSessionSummary], StudyPlanConfig, UserAvailability]:
    data: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
    if "progress" not in data:
        data = {"progress": data}

    progress = UserCourseProgress.from_dict(data["progress"])
    exam_sessions = [ExamSessionSummary.from_dict(s) for s in data.get("exam_sessions", [])]
    config = (
        StudyPlanConfig.from_dict(data["config"])
        if "config" in data
        else create_default_study_plan_config()
    )
    availability = (
        UserAvailability.from_dict(data["availability"])
        if "availability" in data
        else create_default_user_availability(settings.default_timezone, settings.default_locale)
    )
    return progress, exam_sessions, config, availability


# =============================================================================
# Commands
# =============================================================================


@app.command()
def plan(
    snapshot: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="Progress snapshot JSON"),
    ],
    seed: Annotated[
        int | None, typer.Option("--seed", "-s", help="Random seed for session types")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the plan as JSON")] = False,
    limit: Annotated[
        int, typer.Option("--sessions", "-n", help="Sessions to list in the table")
    ] = 10,
) -> None:
    """
    Build a study plan from a local progress snapshot.

    Examples:
        study-planner plan snapshot.json
        study-planner plan snapshot.json --seed 7 --json
    """
    settings = get_settings()

    try:
        progress, exam_sessions, config, availability = load_snapshot(snapshot, settings)
    except (KeyError, ValueError, PlannerError) as e:
        console.print(f"[red]Invalid snapshot {snapshot}: {e}[/]")
        raise typer.Exit(1)

    planner = build_planner(settings, seed)
    try:
        study_plan = planner.create_plan(
            progress.user_id,
            progress.course_id,
            progress.id,
            config,
            availability,
            progress,
            exam_sessions,
        )
    except PlannerError as e:
        console.print(f"[red]Could not build plan: {e}[/]")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(study_plan.to_dict(), indent=2))
        return
    render_plan(study_plan, limit)


@app.command()
def sync(
    user_id: Annotated[str, typer.Argument(help="Learner ID")],
    course_id: Annotated[str, typer.Argument(help="Course ID")],
    seed: Annotated[
        int | None, typer.Option("--seed", "-s", help="Random seed for session types")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the plan as JSON")] = False,
) -> None:
    """
    Build a study plan from the live progress service.

    Examples:
        study-planner sync 7f0c... 91ab...
    """
    settings = get_settings()

    try:
        study_plan = asyncio.run(_run_sync(settings, user_id, course_id, seed))
    except PlannerError as e:
        console.print(f"[red]Sync failed: {e}[/]")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(study_plan.to_dict(), indent=2))
        return
    render_plan(study_plan, limit=10)


async def _run_sync(
    settings: Settings, user_id: str, course_id: str, seed: int | None
) -> StudyPlan:
    async with HttpProgressClient(
        settings.progress_api_url,
        api_key=settings.progress_api_key,
        timeout_seconds=settings.progress_api_timeout,
    ) as client:
        syncer = ProgressSync(
            client,
            build_planner(settings, seed),
            cache=PlanCache(settings.plan_cache_ttl_seconds),
            exam_session_limit=settings.progress_exam_session_limit,
        )
        return await syncer.build_plan(
            user_id,
            course_id,
            create_default_study_plan_config(),
            create_default_user_availability(settings.default_timezone, settings.default_locale),
        )


# =============================================================================
# Rendering
# =============================================================================


def render_plan(study_plan: StudyPlan, limit: int) -> None:
    console.print(
        Panel(
            f"[bold cyan]{study_plan.plan_name}[/]\n"
            f"{study_plan.plan_description}\n\n"
            f"Sessions: {len(study_plan.study_sessions)}  "
            f"Planned: {study_plan.total_planned_hours:.1f}h\n"
            f"Start: {study_plan.start_date:%Y-%m-%d}  "
            f"Estimated completion: {study_plan.estimated_completion_date:%Y-%m-%d}",
            title="Study Plan",
            border_style="cyan",
        )
    )

    hours: dict[str, float] = defaultdict(float)
    for session in study_plan.study_sessions:
        hours[session.primary_component.value] += session.estimated_duration_minutes / 60

    components = Table(title="Hours by Component")
    components.add_column("Component", style="cyan")
    components.add_column("Hours", justify="right")
    for component, total in hours.items():
        components.add_row(component, f"{total:.1f}")
    console.print(components)

    milestones = Table(title="Milestones")
    milestones.add_column("Milestone", style="cyan")
    milestones.add_column("Target date")
    milestones.add_column("Proficiency", justify="right")
    for m in study_plan.milestones:
        milestones.add_row(m.name, f"{m.target_date:%Y-%m-%d}", f"{m.target_proficiency:.0%}")
    console.print(milestones)

    sessions = Table(title=f"First {min(limit, len(study_plan.study_sessions))} Sessions")
    sessions.add_column("Date")
    sessions.add_column("Component", style="cyan")
    sessions.add_column("Type")
    sessions.add_column("Priority")
    sessions.add_column("Minutes", justify="right")
    for s in study_plan.study_sessions[:limit]:
        sessions.add_row(
            f"{s.scheduled_date:%Y-%m-%d}",
            s.primary_component.value,
            s.session_type.value,
            s.priority.value,
            f"{s.estimated_duration_minutes:.0f}",
        )
    console.print(sessions)


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
