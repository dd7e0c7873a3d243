"""
LifePlanner — behavior analysis for a daily plan.
Entry point for the command line.
"""

import json
import logging
import sys
from pathlib import Path

import click

# Ensure the package is importable when run from another directory
sys.path.insert(0, str(Path(__file__).resolve().parent))

from lifeplanner.analysis.fitness import estimate_distance_km
from lifeplanner.config import load_config
from lifeplanner.data.database import Database
from lifeplanner.data.models import FitnessData
from lifeplanner.data.repository import Repository
from lifeplanner.errors import LifePlannerError
from lifeplanner.services.behavior_service import BehaviorAnalyzer
from lifeplanner.services.task_service import TaskService

logger = logging.getLogger(__name__)


def setup_logging(log_file: str = "lifeplanner.log", level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def _echo_json(payload) -> None:
    click.echo(json.dumps(payload, indent=2))


@click.group()
@click.option("--db", "db_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="SQLite database file.")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="JSON config file.")
@click.pass_context
def cli(ctx: click.Context, db_path, config_path) -> None:
    """Analyze your plan and get recommendations."""
    config = load_config(config_path)
    setup_logging(config["log_file"], config["log_level"])

    db = Database(db_path=db_path or Path(config["db_path"]))
    db.connect()
    ctx.call_on_close(db.close)

    ctx.obj = {"config": config, "repo": Repository(db.conn)}


@cli.command()
@click.pass_obj
def analyze(obj) -> None:
    """Run behavior analysis over stored tasks and today's fitness."""
    analyzer = BehaviorAnalyzer(obj["repo"], obj["config"])
    _echo_json(analyzer.analyze_behavior().to_dict())


@cli.command()
@click.option("--days", type=click.IntRange(min=1), default=None,
              help="How many recent days to review.")
@click.pass_obj
def fitness(obj, days) -> None:
    """Summarize recent step counts and their trend."""
    analyzer = BehaviorAnalyzer(obj["repo"], obj["config"])
    try:
        progress = analyzer.review_fitness(days)
    except LifePlannerError as e:
        raise click.ClickException(str(e))
    _echo_json(progress.to_dict())


@cli.command("record-fitness")
@click.argument("day")
@click.argument("steps", type=click.IntRange(min=0))
@click.option("--goal", type=click.IntRange(min=0), default=None, help="Daily step goal.")
@click.option("--active-minutes", type=click.IntRange(min=0), default=0)
@click.option("--calories", type=click.IntRange(min=0), default=0)
@click.pass_obj
def record_fitness(obj, day, steps, goal, active_minutes, calories) -> None:
    """Store one day's fitness snapshot (DAY is YYYY-MM-DD)."""
    data = FitnessData(
        date=day,
        steps=steps,
        steps_goal=goal if goal is not None else obj["config"]["default_steps_goal"],
        distance_km=estimate_distance_km(steps),
        active_minutes=active_minutes,
        calories_burned=calories,
    )
    _echo_json(obj["repo"].record_fitness(data).to_dict())


@cli.command("task-status")
@click.argument("task_id")
@click.argument("status")
@click.option("--actual-minutes", type=click.IntRange(min=0), default=None)
@click.option("--notes", default=None)
@click.pass_obj
def task_status(obj, task_id, status, actual_minutes, notes) -> None:
    """Change a task's status (pending, in_progress, done, skipped, rescheduled)."""
    service = TaskService(obj["repo"])
    try:
        task = service.update_task_status(task_id, status, actual_minutes, notes)
    except LifePlannerError as e:
        raise click.ClickException(str(e))
    _echo_json({
        "success": True,
        "task": task.to_dict(),
        "goals": [g.to_dict() for g in obj["repo"].get_goals()],
    })


@cli.command()
@click.option("--weeks", type=click.IntRange(min=1), default=None)
@click.pass_obj
def heatmap(obj, weeks) -> None:
    """Completed tasks per day over the last few weeks."""
    service = TaskService(obj["repo"])
    _echo_json(service.activity_heatmap(weeks or obj["config"]["heatmap_weeks"]))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The entry point. Loads config, sets up logging, opens the database and
#   hands a Repository to whichever command runs.
#
# Key points:
#   - One Database per process: opened in the group callback, closed by
#     ctx.call_on_close when the command finishes.
#   - Domain errors (LifePlannerError) become ClickException, so the user
#     sees a one-line message and a non-zero exit code, not a traceback.
#   - Every command prints JSON with camelCase keys, the same shape a web
#     route would return.
#
# Interviewer-friendly talking points:
#   1. The CLI is a thin shell: all logic lives in services, so a web
#      framework could call the same BehaviorAnalyzer.
#   2. Logging to both console and file: console for development, file
#      for debugging user-reported issues.
