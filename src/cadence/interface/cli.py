"""cadence CLI — record answers, inspect schedules, and plan sessions."""

import asyncio
import json
import logging
import random
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from cadence.application.config import AppConfig, resolve_config
from cadence.application.factory import build_review_service
from cadence.application.log_setup import setup_logging
from cadence.application.review.difficulty import DifficultyAdapter
from cadence.domain.errors import CadenceError
from cadence.domain.review.models import DifficultyTier

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="cadence: spaced-repetition scheduling and adaptive difficulty.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage cadence configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def humanize_error(error: Exception) -> str:
    """Turn an exception into a one-line message for the terminal."""
    if isinstance(error, CadenceError):
        return str(error)
    return f"{type(error).__name__}: {error}"


def _config(ctx: typer.Context, **overrides) -> AppConfig:
    obj = ctx.obj or {}
    overrides.setdefault("store_path", obj.get("store_path"))
    overrides.setdefault("backend", obj.get("backend"))
    try:
        config = resolve_config(overrides)
    except ValidationError as e:
        typer.secho(f"Invalid configuration:\n{e}", fg="red", err=True)
        raise typer.Exit(2)

    # Each -v raises the configured verbosity by one
    bonus = obj.get("verbose_bonus", 0)
    if bonus:
        config = config.model_copy(update={"verbose": config.verbose + bonus})
    setup_logging(config)
    return config


def _run(coro):
    try:
        return asyncio.run(coro)
    except CadenceError as e:
        typer.secho(humanize_error(e), fg="red", err=True)
        raise typer.Exit(1)


def _format_instant(epoch_ms: int) -> str:
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    store: Annotated[
        Path | None, typer.Option("--store", help="Path to the YAML review store.")
    ] = None,
    backend: Annotated[
        str | None, typer.Option(help="Review store backend: yaml, memory.")
    ] = None,
):
    """Global settings for cadence."""
    ctx.ensure_object(dict)
    ctx.obj["store_path"] = store
    ctx.obj["backend"] = backend
    ctx.obj["verbose_bonus"] = verbose


# ---------------------------------------------------------------------------
# Answer-submission commands
# ---------------------------------------------------------------------------


@app.command()
def answer(
    ctx: typer.Context,
    owner: Annotated[str, typer.Argument(help="Learner id.")],
    item: Annotated[str, typer.Argument(help="Item id.")],
    correct: Annotated[
        bool, typer.Option("--correct/--incorrect", help="Whether the answer was right.")
    ] = True,
    time_taken: Annotated[
        float, typer.Option("--time", "-t", help="Seconds taken to answer.")
    ] = 0.0,
    confidence: Annotated[
        int | None,
        typer.Option("--confidence", "-c", help="Confidence 0-100. Derived if omitted."),
    ] = None,
):
    """[bold green]Record[/bold green] an answer and reschedule the item."""
    service = build_review_service(_config(ctx))
    state = _run(service.record_answer(owner, item, correct, time_taken, confidence))

    typer.echo(f"Item:        {state.item_id}")
    typer.echo(f"Interval:    {state.interval_days} day(s)")
    typer.echo(f"Ease:        {state.ease_factor:.2f}")
    typer.echo(f"Repetitions: {state.repetition_count}")
    typer.echo(f"Next review: {_format_instant(state.next_review_at)}")


@app.command()
def enroll(
    ctx: typer.Context,
    owner: Annotated[str, typer.Argument(help="Learner id.")],
    items: Annotated[list[str], typer.Argument(help="Item ids to register as new.")],
):
    """Register items the learner has not seen yet."""
    service = build_review_service(_config(ctx))

    async def run():
        for item in items:
            await service.enroll_item(owner, item)

    _run(run())
    typer.secho(f"Enrolled {len(items)} item(s) for {owner}.", fg="green")


# ---------------------------------------------------------------------------
# Content-delivery commands
# ---------------------------------------------------------------------------


@app.command()
def due(
    ctx: typer.Context,
    owner: Annotated[str, typer.Argument(help="Learner id.")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List items due for review, most overdue first."""
    service = build_review_service(_config(ctx))
    states = _run(service.due_items(owner))

    if json_output:
        typer.echo(json.dumps([s.to_dict() for s in states], indent=2))
        return

    if not states:
        typer.secho("Nothing due.", fg="green")
        return

    for s in states:
        typer.echo(f"  {s.item_id}  (due {_format_instant(s.next_review_at)})")


@app.command()
def stats(
    ctx: typer.Context,
    owner: Annotated[str, typer.Argument(help="Learner id.")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show schedule statistics and study recommendations."""
    service = build_review_service(_config(ctx))

    async def run():
        summary = await service.summarize(owner)
        return summary, await service.recommendations(owner, summary)

    summary, recommendations = _run(run())

    if json_output:
        typer.echo(
            json.dumps({**asdict(summary), "recommendations": recommendations}, indent=2)
        )
        return

    ease = "n/a" if summary.average_ease_factor is None else f"{summary.average_ease_factor:.2f}"
    typer.echo(
        f"Total: {summary.total}  Due: {summary.due_count}  New: {summary.new_count}"
        f"  Learning: {summary.learning_count}  Mature: {summary.mature_count}"
        f"  Avg ease: {ease}"
    )
    for line in recommendations:
        typer.echo(f"  - {line}")


@app.command()
def suggest(
    ctx: typer.Context,
    owner: Annotated[str, typer.Argument(help="Learner id.")],
    tier: Annotated[str, typer.Option("--tier", help="Current tier: easy, medium, hard, expert.")] = "medium",
):
    """Suggest the next difficulty tier from recent answers."""
    service = build_review_service(_config(ctx))
    try:
        current = DifficultyTier.parse(tier)
    except CadenceError as e:
        typer.secho(humanize_error(e), fg="red", err=True)
        raise typer.Exit(2)

    typer.echo(_run(service.suggest_tier(owner, current)).value)


@app.command()
def queue(
    ctx: typer.Context,
    owner: Annotated[str, typer.Argument(help="Learner id.")],
    limit: Annotated[int | None, typer.Option(help="Maximum items in the queue.")] = None,
    seed: Annotated[int | None, typer.Option(help="Seed for shuffling new items.")] = None,
):
    """Build the next study queue: due items first, then new ones."""
    service = build_review_service(_config(ctx))
    rng = random.Random(seed) if seed is not None else None
    items = _run(service.build_session_queue(owner, limit, rng))

    if not items:
        typer.secho("Queue is empty.", fg="yellow")
        return
    for item in items:
        typer.echo(item)


@app.command()
def confidence(
    correct: Annotated[
        bool, typer.Option("--correct/--incorrect", help="Whether the answer was right.")
    ] = True,
    time_taken: Annotated[float, typer.Option("--time", help="Seconds taken.")] = 0.0,
    avg_time: Annotated[float, typer.Option("--avg-time", help="Average seconds per item.")] = 0.0,
    accuracy: Annotated[float, typer.Option("--accuracy", help="Historical accuracy 0-1.")] = 0.0,
):
    """Score confidence (0-100) from raw answer signals."""
    typer.echo(DifficultyAdapter().score_confidence(correct, time_taken, avg_time, accuracy))


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def serve(
    host: Annotated[str | None, typer.Option(help="Host to bind the server to.")] = None,
    port: Annotated[int | None, typer.Option(help="Port to bind the server to.")] = None,
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the HTTP API."""
    import uvicorn

    config = resolve_config({"host": host, "port": port})
    setup_logging(config)
    uvicorn.run("cadence.server:app", host=config.host, port=config.port, reload=reload)


@app.command()
def logs(ctx: typer.Context):
    """Print the path of the log file."""
    log_file = setup_logging(_config(ctx))
    if log_file is None:
        typer.secho("Log directory is not writable.", fg="red", err=True)
        raise typer.Exit(1)
    typer.echo(str(log_file))


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
