"""flashdeck CLI: root commands and the config subgroup."""

import json
import logging
import sys
from datetime import timedelta
from typing import Annotated

import typer

from flashdeck.application.config import SchedulerConfig, resolve_config
from flashdeck.application.scheduling.queries import (
    format_interval,
    get_card_state_description,
)
from flashdeck.application.scheduling.sm2 import SuperMemo2Scheduler, utcnow
from flashdeck.domain.scheduling.models import CardState, Rating

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="flashdeck: SM-2 spaced-repetition scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

config_app = typer.Typer(help="Manage flashdeck configuration.")
app.add_typer(config_app, name="config")


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
):
    """Global settings for flashdeck."""
    ctx.ensure_object(dict)
    # Each -v adds one level on top of the default of 1
    config = resolve_config({"verbose": 1 + verbose if verbose else None})
    ctx.obj["config"] = config
    if config.verbose >= 2:
        logging.getLogger("flashdeck").setLevel(logging.DEBUG)


def _config(ctx: typer.Context) -> SchedulerConfig:
    return ctx.obj["config"]


def _scheduler(ctx: typer.Context) -> SuperMemo2Scheduler:
    return SuperMemo2Scheduler(_config(ctx))


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def simulate(
    ctx: typer.Context,
    ratings: Annotated[
        list[Rating],
        typer.Argument(
            help="Ratings to apply in order, e.g. GOOD GOOD AGAIN.", case_sensitive=False
        ),
    ],
    follow_due: Annotated[
        bool,
        typer.Option(
            "--follow-due/--immediate",
            help="Answer each card when it falls due, or all at the same moment.",
        ),
    ] = True,
    as_json: Annotated[bool, typer.Option("--json", help="Emit JSON instead of a table.")] = False,
):
    """[bold green]Simulate[/bold green] a sequence of ratings on a fresh card."""
    scheduler = _scheduler(ctx)
    now = utcnow()
    state = scheduler.new_card(now=now)

    rows = []
    for step, rating in enumerate(ratings, start=1):
        state = scheduler.next_state(rating, state, now)
        rows.append(
            {
                "step": step,
                "rating": rating.value,
                "state": state.state.value,
                "repetitions": state.repetitions,
                "interval": state.interval,
                "easiness_factor": round(state.easiness_factor, 4),
                "lapses": state.lapses,
                "due_in": _format_due_in(state.due_date - now),
            }
        )
        if follow_due:
            now = max(now, state.due_date)

    if as_json:
        typer.echo(json.dumps(rows, indent=2))
        return

    typer.echo(
        f"{'#':>3}  {'rating':<6}  {'state':<9}  {'reps':>4}  {'interval':<10}  "
        f"{'EF':>6}  {'lapses':>6}  due in"
    )
    for row in rows:
        typer.echo(
            f"{row['step']:>3}  {row['rating']:<6}  {row['state']:<9}  "
            f"{row['repetitions']:>4}  {format_interval(row['interval']):<10}  "
            f"{row['easiness_factor']:>6.2f}  {row['lapses']:>6}  {row['due_in']}"
        )


def _format_due_in(delta: timedelta) -> str:
    minutes = int(delta.total_seconds() // 60)
    if minutes < 60 * 24:
        return f"{minutes}m"
    return f"{delta.days}d"


@app.command()
def describe(
    state: Annotated[
        CardState, typer.Option(help="Card state.", case_sensitive=False)
    ] = CardState.REVIEW,
    due_in: Annotated[
        float, typer.Option(help="Days until the card is due; negative if overdue.")
    ] = 0.0,
):
    """Show the status label a card would get."""
    now = utcnow()
    scheduler = SuperMemo2Scheduler()
    card = scheduler.new_card(now=now).with_changes(
        state=state, due_date=now + timedelta(days=due_in)
    )
    typer.echo(get_card_state_description(card, now))


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Bind address.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Bind port.")] = 8777,
):
    """Run the scheduling HTTP API."""
    import uvicorn

    logger.info(f"Serving flashdeck API on {host}:{port}")
    uvicorn.run("flashdeck.server:app", host=host, port=port)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    typer.echo(json.dumps(config.model_dump(), indent=2))


if __name__ == "__main__":
    app()
