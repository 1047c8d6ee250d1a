"""
KidQuest: terminal front end for the level engine.

A Rich terminal interface for playing levels and inspecting a kid's
progress and level locks.

Commands:
- kidquest play     - Play a level
- kidquest preview  - Show the questions of a level
- kidquest status   - Show progress, locks and achievements
- kidquest lock     - Show the lock status of one level
- kidquest reset    - Unlock a cooling-down level now
- kidquest export   - Dump stored progress as JSON
- kidquest clear    - Delete all progress of a kid
"""
from __future__ import annotations

import json
import random
import sys
import time
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from config import Settings, get_settings
from src.core.platform_client import PlatformClient
from src.game.engine import GameEngine
from src.game.errors import GameEngineError
from src.game.generators import generate_level
from src.game.models import (
    ListeningQuestion,
    LogicalQuestion,
    MathQuestion,
    Question,
    ReadingQuestion,
    WritingQuestion,
)
from src.game.questions import handler_for
from src.game.scheduler import ReviewScheduler, format_time_until_unlock
from src.game.types import MATH_SYMBOLS, EnginePhase, GameDomain, Locale

from .state_store import StateStore

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="kidquest",
    help="KidQuest: levels for language, math and logic",
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Styling
# =============================================================================

STYLES = {
    "correct": "bold green",
    "incorrect": "bold red",
    "info": "bold cyan",
    "warning": "bold yellow",
    "dim": "dim",
    "question_type": {
        "writing": "blue",
        "reading": "magenta",
        "listening": "green",
        "math": "yellow",
        "logical": "cyan",
    },
}


def style_question_type(question_type: str) -> str:
    """Get styled question type string."""
    color = STYLES["question_type"].get(question_type, "white")
    return f"[{color}]{question_type}[/{color}]"


def star_bar(stars: int, max_stars: int = 5) -> str:
    return f"[yellow]{'★' * stars}[/yellow][dim]{'☆' * (max_stars - stars)}[/dim]"


# =============================================================================
# Wiring
# =============================================================================


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB", retention=5)


def build_engine(
    kid_id: Optional[str] = None,
    seed: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> GameEngine:
    """Engine wired from settings: SQLite store, SM-2 config, optional sync."""
    settings = settings or get_settings()
    seed = seed if seed is not None else settings.rng_seed
    sync_client = PlatformClient(settings.get_sync_config()) if settings.sync_enabled else None

    return GameEngine(
        kid_id=kid_id or settings.default_kid_id,
        store=StateStore(settings.database_path),
        scheduler=ReviewScheduler(config=settings.get_sm2_config()),
        sync_client=sync_client,
        rng=random.Random(seed),
        default_locale=Locale(settings.default_locale),
        scoring=settings.get_scoring_config(),
    )


def close_engine(engine: GameEngine) -> None:
    if isinstance(engine.sync_client, PlatformClient):
        engine.sync_client.close()
    if isinstance(engine.store, StateStore):
        engine.store.close()


def fail(error: GameEngineError) -> None:
    console.print(f"[{STYLES['incorrect']}]{error}[/{STYLES['incorrect']}]")
    raise typer.Exit(1)


# =============================================================================
# Display Helpers
# =============================================================================


def describe_question(question: Question) -> str:
    """One-line summary of a question."""
    if isinstance(question, MathQuestion):
        return f"{question.num1} {MATH_SYMBOLS[question.operation]} {question.num2} = ?"
    if isinstance(question, WritingQuestion):
        return question.prompt
    if isinstance(question, ReadingQuestion):
        return f"{question.text} / {question.question}"
    if isinstance(question, ListeningQuestion):
        return f"(hear: {question.spoken_text}) {question.question}"
    return question.question


def describe_answer(question: Question) -> str:
    if isinstance(question, (ReadingQuestion, ListeningQuestion, LogicalQuestion)):
        return question.correct_option
    return str(question.correct_answer)


def display_result(engine: GameEngine) -> None:
    result = engine.result
    lines = [
        star_bar(result.stars_earned),
        "",
        f"[bold]{result.feedback}[/bold]",
        "",
        f"Correct: {result.percentage}%",
        f"Score: {result.score}",
        f"Points awarded: {result.points_awarded}",
        f"Time: {result.time_taken_seconds:.0f}s",
    ]
    if result.next_level_available:
        lines.append(f"\n[green]Level {result.level_number + 1} unlocked![/green]")

    lock = engine.get_level_lock_status(result.domain, result.level_number)
    if lock.is_locked:
        lines.append(f"[dim]Replay available in {format_time_until_unlock(lock)}[/dim]")

    console.print()
    console.print(
        Panel(
            "\n".join(lines),
            title=f"[bold]{result.level_id}[/bold]",
            border_style="green" if result.is_completed else "yellow",
        )
    )


# =============================================================================
# Commands
# =============================================================================


@app.command()
def play(
    domain: GameDomain = typer.Argument(..., help="language, mathematics or logical"),
    level: int = typer.Argument(..., min=1, help="Level number"),
    kid: Optional[str] = typer.Option(None, "--kid", "-k", help="Kid profile id"),
    locale: Optional[Locale] = typer.Option(None, "--locale", "-l", help="Content locale"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
) -> None:
    """
    Play one level interactively.

    Each answer is graded right away. Finishing with 3+ stars unlocks the
    next level; any pass locks this level for a spaced-repetition cooldown.
    """
    engine = build_engine(kid, seed)
    try:
        try:
            engine.start_game(domain, level, locale=locale)
        except GameEngineError as e:
            fail(e)

        total = len(engine.questions)
        console.print(f"\n[bold cyan]KidQuest[/bold cyan] - {domain.value} level {level}")
        console.print("=" * 40)

        while engine.phase == EnginePhase.IN_PROGRESS:
            question = engine.current_question
            handler = handler_for(question)

            console.print(
                f"\n[dim]Question {engine.current_question_index + 1}/{total}  |  "
                f"{question.time_limit_seconds}s[/dim]  {style_question_type(question.type)}"
            )
            handler.present(question, console)

            started = time.monotonic()
            answer = handler.get_input(question, console)
            elapsed = time.monotonic() - started

            if elapsed > question.time_limit_seconds:
                engine.time_up()
                console.print(f"[{STYLES['warning']}]Time's up! It was: {describe_answer(question)}[/]")
                continue

            recorded = engine.submit_answer(answer, time_taken_seconds=round(elapsed, 2))
            if recorded.is_correct:
                console.print(f"[{STYLES['correct']}]Correct![/]")
            else:
                console.print(f"[{STYLES['incorrect']}]The answer is: {describe_answer(question)}[/]")

        display_result(engine)
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Session interrupted.[/yellow]")
        if engine.phase == EnginePhase.IN_PROGRESS:
            engine.complete()
            display_result(engine)
    finally:
        close_engine(engine)


@app.command()
def preview(
    domain: GameDomain = typer.Argument(..., help="language, mathematics or logical"),
    level: int = typer.Argument(..., min=1, help="Level number"),
    locale: Optional[Locale] = typer.Option(None, "--locale", "-l", help="Content locale"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
) -> None:
    """Show the generated questions of a level with their answers."""
    settings = get_settings()
    seed = seed if seed is not None else settings.rng_seed
    try:
        generated = generate_level(
            domain, level, locale=locale or settings.default_locale, rng=random.Random(seed)
        )
    except GameEngineError as e:
        fail(e)

    console.print(f"\n[bold]{generated.title}[/bold] - {generated.description}")
    console.print(f"[dim]{generated.difficulty.value}, {generated.total_time_limit_seconds}s total[/dim]\n")

    table = Table()
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Question")
    table.add_column("Answer", style="green")
    table.add_column("Time", justify="right")

    for i, question in enumerate(generated.questions, 1):
        table.add_row(
            str(i),
            style_question_type(question.type),
            describe_question(question),
            describe_answer(question),
            f"{question.time_limit_seconds}s",
        )

    console.print(table)


@app.command()
def status(
    kid: Optional[str] = typer.Option(None, "--kid", "-k", help="Kid profile id"),
) -> None:
    """Show progress, level locks and achievements."""
    engine = build_engine(kid)
    try:
        progress = engine.progress

        console.print(f"\n[bold cyan]Progress for {engine.kid_id}[/bold cyan]")
        console.print("=" * 40)

        table = Table()
        table.add_column("Domain")
        table.add_column("Max level", justify="right")
        table.add_column("Next playable", justify="right")
        table.add_column("Stars", justify="right")

        for domain in GameDomain:
            table.add_row(
                domain.value,
                str(progress.max_level_completed.get(domain, 0)),
                str(engine.get_max_unlocked_level(domain)),
                str(progress.total_stars.get(domain, 0)),
            )
        console.print(table)
        console.print(f"Sessions completed: {progress.sessions_completed}")

        completions = engine.store.list_completions(engine.kid_id)
        if completions:
            console.print("\n[bold]Completed Levels[/bold]")
            levels = Table()
            levels.add_column("Level")
            levels.add_column("Best")
            levels.add_column("Reviews", justify="right")
            levels.add_column("Interval", justify="right")
            levels.add_column("Lock")

            for completion in completions:
                lock = engine.scheduler.get_lock_status(completion)
                levels.add_row(
                    completion.level_id,
                    star_bar(progress.best_stars(completion.domain, completion.level_number)),
                    str(completion.repetitions),
                    f"{completion.interval}d",
                    f"[yellow]{format_time_until_unlock(lock)}[/yellow]" if lock.is_locked else "[green]open[/green]",
                )
            console.print(levels)

        achievements = engine.get_achievements()
        if achievements:
            console.print("\n[bold]Achievements[/bold]")
            for badge in achievements:
                console.print(f"  {badge}")
    finally:
        close_engine(engine)


@app.command()
def lock(
    domain: GameDomain = typer.Argument(..., help="language, mathematics or logical"),
    level: int = typer.Argument(..., min=1, help="Level number"),
    kid: Optional[str] = typer.Option(None, "--kid", "-k", help="Kid profile id"),
) -> None:
    """Show whether a level can be played now."""
    engine = build_engine(kid)
    try:
        if not engine.is_level_unlocked(domain, level):
            console.print(f"[yellow]{domain.value} level {level} is not unlocked yet.[/yellow]")
            return

        lock_status = engine.get_level_lock_status(domain, level)
        if lock_status.is_locked:
            console.print(
                f"[yellow]{domain.value} level {level} is locked for "
                f"{format_time_until_unlock(lock_status)}[/yellow] "
                f"[dim](until {lock_status.next_unlock_at:%Y-%m-%d %H:%M} UTC)[/dim]"
            )
        else:
            console.print(f"[green]{domain.value} level {level} is ready to play.[/green]")
    finally:
        close_engine(engine)


@app.command()
def reset(
    domain: GameDomain = typer.Argument(..., help="language, mathematics or logical"),
    level: int = typer.Argument(..., min=1, help="Level number"),
    kid: Optional[str] = typer.Option(None, "--kid", "-k", help="Kid profile id"),
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Unlock a cooling-down level immediately (parent override)."""
    if not confirm and not Confirm.ask(f"Unlock {domain.value} level {level} now?", default=False):
        raise typer.Exit(0)

    engine = build_engine(kid)
    try:
        unlocked = engine.reset_level_lock(domain, level)
    finally:
        close_engine(engine)

    if unlocked is None:
        console.print(f"[yellow]{domain.value} level {level} has never been completed.[/yellow]")
    else:
        console.print(f"[green]{domain.value} level {level} is unlocked.[/green]")


@app.command()
def export(
    kid: Optional[str] = typer.Option(None, "--kid", "-k", help="Kid profile id"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON to a file"),
) -> None:
    """Export stored progress, completions and awards as JSON."""
    engine = build_engine(kid)
    try:
        data = engine.export_progress()
    finally:
        close_engine(engine)

    text = json.dumps(data, ensure_ascii=False, indent=2)
    if output:
        output.write_text(text, encoding="utf-8")
        console.print(f"[green]Exported progress to {output}[/green]")
    else:
        typer.echo(text)


@app.command()
def clear(
    kid: Optional[str] = typer.Option(None, "--kid", "-k", help="Kid profile id"),
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete all stored progress for a kid."""
    engine = build_engine(kid)
    try:
        if not confirm and not Confirm.ask(
            f"Delete ALL progress for {engine.kid_id}? This cannot be undone!", default=False
        ):
            raise typer.Exit(0)
        removed = engine.clear_progress()
    finally:
        close_engine(engine)

    console.print(f"[green]Removed {removed} records.[/green]")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    configure_logging(get_settings())
    app()


if __name__ == "__main__":
    main()
