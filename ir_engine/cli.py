"""
ir-engine: developer CLI for replaying review sessions.

Runs the session engine over a JSON fixture pool with in-memory
collaborators, so ranking and queue behaviour can be inspected without
a vault.

Commands:
- ir-engine simulate FIXTURE   - Grade items in session order and show the result
- ir-engine rank FIXTURE       - Show the current ranking with JD1 scores

Fixture format:
    {"notes": [{"id": "a", "priority": 80, "path": "inbox/a.md",
                "clozes": 2, "links": ["b"]}]}
"""
from __future__ import annotations

import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from config import get_settings

from .memory import InMemoryNotePlatform, InMemoryStore
from .models import SessionConfig, StrategyId, utcnow
from .session import SessionManager
from .strategies import JD1Strategy, StrategyContext

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="ir-engine",
    help="Incremental reading session engine: developer tools",
    no_args_is_help=True,
)
console = Console()

STYLES = {
    "item_type": {
        "topic": "cyan",
        "cloze": "magenta",
        "basic": "blue",
        "image_occlusion": "green",
    },
    "rating": {1: "bold red", 2: "yellow", 3: "green", 4: "bold green"},
}


def style_item_type(item_type: str) -> str:
    color = STYLES["item_type"].get(item_type, "white")
    return f"[{color}]{item_type}[/{color}]"


# =============================================================================
# Fixture loading
# =============================================================================

def load_fixture(path: Path) -> tuple[InMemoryStore, InMemoryNotePlatform]:
    """Build in-memory collaborators from a JSON fixture file."""
    data = json.loads(path.read_text(encoding="utf-8"))

    store = InMemoryStore()
    notes = InMemoryNotePlatform()

    for note in data.get("notes", []):
        note_id = store.create_note(
            content=note.get("content", ""),
            priority=int(note.get("priority", 50)),
            note_id=note.get("id"),
            path=note.get("path"),
        )
        notes.contents[note_id] = note.get("content", "")
        for _ in range(int(note.get("clozes", 0))):
            store.add_cloze(note_id)
        for target in note.get("links", []):
            notes.add_link(note_id, target)

    return store, notes


def build_config(
    strategy: Optional[str],
    deterministic: Optional[bool],
    seed: Optional[int],
) -> SessionConfig:
    """Session config from settings, with command-line overrides."""
    base = SessionConfig.from_settings(get_settings())
    overrides = {}
    if strategy is not None:
        overrides["strategy"] = strategy
    if deterministic is not None:
        overrides["deterministic"] = deterministic
    if seed is not None:
        overrides["seed"] = seed

    fields = {name: getattr(base, name) for name in base.__dataclass_fields__}
    fields.update(overrides)
    return SessionConfig(**fields)


def parse_grades(grades: str) -> list[int]:
    try:
        values = [int(g) for g in grades.split(",") if g.strip()]
    except ValueError:
        raise typer.BadParameter(f"Grades must be integers 1-4, got '{grades}'")
    if not values or any(v not in (1, 2, 3, 4) for v in values):
        raise typer.BadParameter(f"Grades must be integers 1-4, got '{grades}'")
    return values


# =============================================================================
# Commands
# =============================================================================

async def _simulate(
    manager: SessionManager,
    grades: list[int],
    limit: int,
    now: datetime,
) -> list[tuple]:
    await manager.load_pool(now)

    rows = []
    for step in range(limit):
        si = await manager.get_next(now)
        if si is None:
            break
        rating = grades[step % len(grades)]
        state = await manager.record_review(si.id, rating, now)
        rows.append((step + 1, si, rating, state))
    return rows


@app.command()
def simulate(
    fixture: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON pool fixture"),
    grades: str = typer.Option("3", "--grades", "-g", help="Comma-separated grade cycle (1-4)"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum items to deliver"),
    strategy: Optional[str] = typer.Option(None, "--strategy", "-s", help="JD1 or Anki"),
    deterministic: Optional[bool] = typer.Option(
        None, "--deterministic/--interleave", help="Disable/enable 80/20 interleaving"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Interleaving RNG seed"),
) -> None:
    """Run a session over a fixture pool, grading every delivered item."""
    grade_cycle = parse_grades(grades)
    store, notes = load_fixture(fixture)
    manager = SessionManager(store, notes, build_config(strategy, deterministic, seed))

    rows = asyncio.run(_simulate(manager, grade_cycle, limit, utcnow()))

    table = Table(title=f"Session ({manager.config.strategy.value})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Item")
    table.add_column("Type")
    table.add_column("Grade", justify="center")
    table.add_column("Status")
    table.add_column("Due")

    for step, si, rating, state in rows:
        style = STYLES["rating"][rating]
        table.add_row(
            str(step),
            si.id,
            style_item_type(si.item.type.value),
            f"[{style}]{rating}[/{style}]",
            state.status.value,
            state.due.strftime("%Y-%m-%d %H:%M") if state.due else "-",
        )

    console.print(table)

    stats = manager.get_session_stats()
    console.print(
        f"[bold]Reviewed:[/bold] {stats.reviewed}  "
        f"[red]Again:[/red] {stats.again}  [yellow]Hard:[/yellow] {stats.hard}  "
        f"[green]Good:[/green] {stats.good}  [bold green]Easy:[/bold green] {stats.easy}"
    )
    if manager.volatile_queue:
        console.print(f"[dim]Still in volatile queue: {', '.join(manager.volatile_queue)}[/dim]")


@app.command()
def rank(
    fixture: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON pool fixture"),
    limit: int = typer.Option(10, "--limit", "-n", help="Number of items to show"),
    strategy: Optional[str] = typer.Option(None, "--strategy", "-s", help="JD1 or Anki"),
) -> None:
    """Show the ranking for a freshly loaded pool."""
    store, notes = load_fixture(fixture)
    manager = SessionManager(store, notes, build_config(strategy, True, None))
    now = utcnow()

    async def _rank():
        await manager.load_pool(now)
        return await manager.get_next_n(limit, now)

    ranked = asyncio.run(_rank())
    scorer = JD1Strategy()
    context = StrategyContext(now=now)

    table = Table(title=f"Ranking ({manager.config.strategy.value})")
    table.add_column("Rank", justify="right", style="dim")
    table.add_column("Item")
    table.add_column("Type")
    table.add_column("Priority", justify="right")
    if manager.config.strategy is StrategyId.JD1:
        table.add_column("Score", justify="right")

    for position, si in enumerate(ranked, start=1):
        row = [str(position), si.id, style_item_type(si.item.type.value), str(si.item.priority)]
        if manager.config.strategy is StrategyId.JD1:
            row.append(f"{scorer.score(si, context):.1f}")
        table.add_row(*row)

    console.print(table)


# =============================================================================
# Entry Point
# =============================================================================

def configure_logging() -> None:
    """Route loguru output according to settings."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB", retention=5)


def main() -> None:
    """CLI entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
