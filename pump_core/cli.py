"""
Command-line interface for the dumbbell programme tracker.

Commands:
  templates   Show the programme and the last weight of each exercise
  log         Record a workout interactively
  history     Recent workouts with their volume
  stats       Adherence over the last four weeks and the volume series
  export      Write the history to a JSON file
  import      Replace the history with a JSON file
  clear       Delete all saved workouts
  timer       Run a rest countdown
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import typer
from tabulate import tabulate

from pump_core.analytics import adherence, format_date, format_weight, log_volume, volume_series
from pump_core.catalog import TemplateNotFoundError, get_template, list_templates
from pump_core.codec import export_to_file, import_logs
from pump_core.config import get_config_value, get_data_dir, load_config
from pump_core.constants import (
    DEFAULT_ACCESSORY_REST_SECONDS, DEFAULT_EXPORT_FILENAME, DEFAULT_EXPORT_INDENT,
    DEFAULT_LOG_LEVEL, DEFAULT_MAIN_REST_SECONDS, RECENT_LOGS_LIMIT
)
from pump_core.models import coerce_number
from pump_core.session import SessionDraftManager
from pump_core.storage import JsonFileStore, LogStore, ProfileStore
from pump_core.timer import RestTimer, format_clock, rest_seconds_for
from pump_core.utils import parse_iso_datetime, round_half_up

app = typer.Typer(help="Track a three-day dumbbell programme.")

logger = logging.getLogger(__name__)

CLEAR_CONFIRMATION = "This will delete all saved workouts. Are you sure?"
NO_DATA_MESSAGE = "No data yet. Log a workout to see the chart."

# --- Helper Functions ---

def setup_logging(config: dict, verbose: bool = False) -> None:
    """Configure root logging from the ``logging`` config section."""
    level_name = "DEBUG" if verbose else get_config_value(config, "logging.level", DEFAULT_LOG_LEVEL)
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    handlers = [logging.StreamHandler(sys.stderr)]
    log_file = get_config_value(config, "logging.file")
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError as e:
            typer.echo(f"Warning: cannot open log file '{log_file}': {e}", err=True)
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s', handlers=handlers, force=True)

def get_stores(ctx: typer.Context) -> Tuple[ProfileStore, LogStore]:
    """Open the profile and log stores once per invocation."""
    if "stores" not in ctx.obj:
        config = ctx.obj.get("config", {})
        data_dir = get_data_dir(config, ctx.obj.get("data_dir"))
        indent = get_config_value(config, "export.indent", DEFAULT_EXPORT_INDENT)
        backend = JsonFileStore(data_dir, indent=indent)
        logger.debug(f"Using data directory {data_dir}")
        ctx.obj["stores"] = (ProfileStore(backend), LogStore(backend))
    return ctx.obj["stores"]

def template_title(template_id: str) -> str:
    try:
        return get_template(template_id).title
    except TemplateNotFoundError:
        return template_id

def format_number(value: Optional[float]) -> str:
    return "" if value is None else f"{value:g}"

def prompt_number(label: str, default: str = "", integer: bool = False) -> Optional[float]:
    """Prompt until the answer is empty (unset) or a non-negative number."""
    while True:
        answer = typer.prompt(label, default=default, show_default=bool(default)).strip()
        if answer == "":
            return None
        value = coerce_number(answer, integer=integer)
        if value is not None and value >= 0 and (not integer or isinstance(value, int)):
            return value
        typer.echo("  Please enter a non-negative number, or leave blank.")

def run_countdown(seconds: int, interval: float = 1.0) -> None:
    """Show a rest countdown on one line until it ends or is interrupted."""
    timer = RestTimer(interval=interval)
    typer.echo(f"Rest timer {format_clock(seconds)}", nl=False)
    timer.start(seconds, on_tick=lambda remaining: typer.echo(f"\rRest timer {format_clock(remaining)}", nl=False))
    try:
        timer.wait()
    except KeyboardInterrupt:
        timer.cancel()
        typer.echo("\nRest skipped.")
        return
    typer.echo("\nRest over.")

# --- Commands ---

@app.callback()
def callback(ctx: typer.Context,
             config_file: Optional[Path] = typer.Option(None, "--config-file", help="Path to a YAML configuration file."),
             data_dir: Optional[str] = typer.Option(None, "--data-dir", help="Override the data directory."),
             verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")):
    """Initialize the Typer context with configuration."""
    ctx.obj = {}
    ctx.obj["config"] = load_config(config_file)
    ctx.obj["data_dir"] = data_dir
    setup_logging(ctx.obj["config"], verbose)


@app.command(name="templates")
def show_templates(
    ctx: typer.Context,
    template_id: Optional[str] = typer.Argument(None, help="Only show this template (push, pull or legs)."),
):
    """Show the programme with the last weight used for each exercise."""
    profile, _ = get_stores(ctx)
    if template_id:
        try:
            templates = [get_template(template_id)]
        except TemplateNotFoundError as e:
            typer.echo(f"Error: {e.args[0]}")
            raise typer.Exit(1)
    else:
        templates = list_templates()

    for template in templates:
        typer.echo(f"\n{template.title} ({template.id})")
        rows = [
            [ex.name, ex.role_label, ex.target, ex.prescription,
             format_weight(profile.last_weight(ex.id)) or "n/a"]
            for ex in template.exercises
        ]
        typer.echo(tabulate(rows, headers=["Exercise", "Role", "Target", "Sets×Reps", "Last weight"], tablefmt="grid"))


@app.command(name="log")
def log_workout(
    ctx: typer.Context,
    template_id: str = typer.Argument(..., help="Template to follow (push, pull or legs)."),
    rest: bool = typer.Option(False, "--rest", help="Run the rest timer after each completed set."),
):
    """Record a workout set by set."""
    config = ctx.obj.get("config", {})
    profile, logs = get_stores(ctx)
    try:
        template = get_template(template_id)
    except TemplateNotFoundError as e:
        typer.echo(f"Error: {e.args[0]}")
        raise typer.Exit(1)

    main_rest = get_config_value(config, "timer.main_rest_seconds", DEFAULT_MAIN_REST_SECONDS)
    accessory_rest = get_config_value(config, "timer.accessory_rest_seconds", DEFAULT_ACCESSORY_REST_SECONDS)

    manager = SessionDraftManager(profile, logs)
    draft = manager.start(template)
    typer.echo(f"{template.title} · {format_date(parse_iso_datetime(draft.date))}")
    typer.echo("Leave a field blank to skip it.")

    for entry_index, entry in enumerate(draft.entries):
        exercise = template.get_exercise(entry.exercise_id)
        typer.echo(f"\n{exercise.name} · {exercise.role_label} · {exercise.prescription}")
        set_index = 0
        while True:
            if set_index >= len(entry.sets):
                if not typer.confirm("Add another set?", default=False):
                    break
                manager.add_set(entry_index)
            current = entry.sets[set_index]
            reps = prompt_number(f"  Set {set_index + 1} reps", integer=True)
            manager.set_reps(entry_index, set_index, reps)
            weight = prompt_number(f"  Set {set_index + 1} weight (kg)", default=format_number(current.weight))
            manager.set_weight(entry_index, set_index, weight)
            manager.set_done(entry_index, set_index, reps is not None)
            if rest and reps is not None:
                run_countdown(rest_seconds_for(exercise, main_rest, accessory_rest))
            set_index += 1
        notes = typer.prompt("  Notes", default=entry.notes, show_default=bool(entry.notes))
        manager.set_entry_notes(entry_index, notes)

    manager.set_session_notes(typer.prompt("\nSession notes", default="", show_default=False))

    if typer.confirm("Save workout?", default=True):
        saved = manager.save()
        typer.echo(f"✅ Saved workout {saved.id}. Volume: {round_half_up(log_volume(saved))}")
    else:
        manager.cancel()
        typer.echo("Workout discarded.")


@app.command(name="history")
def show_history(
    ctx: typer.Context,
    limit: int = typer.Option(RECENT_LOGS_LIMIT, "--limit", "-n", help="Number of workouts to show."),
):
    """Show the most recent workouts."""
    _, logs = get_stores(ctx)
    recent = logs.recent(limit)
    if not recent:
        typer.echo("No workouts logged yet.")
        return
    rows = [
        [template_title(log.template_id), format_date(parse_iso_datetime(log.date)) or log.date,
         round_half_up(log_volume(log))]
        for log in recent
    ]
    typer.echo(tabulate(rows, headers=["Workout", "Date", "Volume"], tablefmt="grid"))


@app.command(name="stats")
def show_stats(ctx: typer.Context):
    """Show adherence over the last four weeks and the training volume per session."""
    _, logs = get_stores(ctx)
    history = logs.logs()

    result = adherence(history)
    typer.echo("Adherence (last 4 weeks)")
    typer.echo(f"{result.completed} of {result.expected} sessions ({result.percentage}%)")

    typer.echo("\nTraining volume")
    series = volume_series(history)
    if not series:
        typer.echo(NO_DATA_MESSAGE)
        return
    rows = [[point.index, point.label, point.volume] for point in series]
    typer.echo(tabulate(rows, headers=["#", "Date", "Volume"], tablefmt="grid"))


@app.command(name="export")
def export_history(
    ctx: typer.Context,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path."),
):
    """Export all workouts to a JSON file."""
    config = ctx.obj.get("config", {})
    _, logs = get_stores(ctx)
    path = output or Path(get_config_value(config, "export.filename", DEFAULT_EXPORT_FILENAME))
    indent = get_config_value(config, "export.indent", DEFAULT_EXPORT_INDENT)
    try:
        written = export_to_file(logs, path, indent=indent)
    except OSError as e:
        typer.echo(f"Error: could not write '{path}': {e}")
        raise typer.Exit(1)
    typer.echo(f"✅ Exported {len(logs)} workouts to {written}")


@app.command(name="import")
def import_history(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="JSON file to import, or '-' for standard input."),
    strict: bool = typer.Option(False, "--strict", help="Reject the import if any record does not match the log schema."),
):
    """Replace all workouts with the contents of a JSON export."""
    _, logs = get_stores(ctx)
    try:
        if source == "-":
            text = typer.get_text_stream("stdin").read()
        else:
            text = Path(source).read_text(encoding="utf-8")
    except OSError as e:
        typer.echo(f"Import failed: {e}")
        raise typer.Exit(1)

    result = import_logs(text, logs, strict=strict)
    typer.echo(result.message)
    if not result.ok:
        raise typer.Exit(1)


@app.command(name="clear")
def clear_history(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
    include_profile: bool = typer.Option(False, "--include-profile", help="Also forget last weights and notes."),
):
    """Delete all saved workouts."""
    if not yes and not typer.confirm(CLEAR_CONFIRMATION, default=False):
        typer.echo("Nothing deleted.")
        return
    profile, logs = get_stores(ctx)
    logs.clear()
    if include_profile:
        profile.clear()
    typer.echo("All workouts deleted.")


@app.command(name="timer")
def rest_timer(
    ctx: typer.Context,
    seconds: Optional[int] = typer.Argument(None, help="Countdown length in seconds (default: main lift rest)."),
    interval: float = typer.Option(1.0, "--interval", hidden=True),
):
    """Run a rest countdown."""
    config = ctx.obj.get("config", {})
    if seconds is None:
        seconds = get_config_value(config, "timer.main_rest_seconds", DEFAULT_MAIN_REST_SECONDS)
    if seconds <= 0:
        typer.echo("Error: the countdown must be at least one second.")
        raise typer.Exit(1)
    run_countdown(seconds, interval=interval)


if __name__ == "__main__":
    app()
