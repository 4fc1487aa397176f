# src/cli/runner.py

"""Headless CLI runner, driving the same controller as the TUI."""

import json
import logging
import sys
from typing import Any

from rich.console import Console
from rich.table import Table

from src.models.prediction import HistoryEntry, PredictionResult, format_price
from src.services.selection_controller import SelectionController
from src.storage.history_cache import HistoryCache

logger = logging.getLogger("estate_predict.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _dump_json(data: Any) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _print_names(title: str, names: list[str], output_format: str) -> None:
    """Print a catalog list as JSON or as a one-column Rich table."""
    if output_format != "table":
        _dump_json(names)
        return
    table = Table(title=title, show_lines=False, title_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Name")
    for idx, name in enumerate(names, 1):
        table.add_row(str(idx), name)
    Console().print(table)


def _history_to_dicts(entries: list[HistoryEntry]) -> list[dict[str, object]]:
    """Serialise history entries to plain dicts for JSON output."""
    return [
        {
            "state": e.state,
            "city": e.city,
            "year": e.year,
            "price": e.price,
            "date": e.timestamp.isoformat(),
        }
        for e in entries
    ]


def _print_history(entries: list[HistoryEntry]) -> None:
    """Render a Rich table of history entries, newest first."""
    table = Table(
        title="Recent Predictions",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("State", style="magenta")
    table.add_column("City")
    table.add_column("Year", justify="center")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Date", style="dim")

    for e in reversed(entries):
        table.add_row(
            e.state,
            e.city,
            str(e.year),
            format_price(e.price),
            e.timestamp.strftime("%Y-%m-%d %H:%M"),
        )

    Console().print(table)


def _print_prediction(result: PredictionResult, output_format: str) -> None:
    sel = result.selection
    if output_format == "table":
        _err.print(
            f"[bold]{sel.city}, {sel.state} ({sel.year})[/bold]"
        )
        Console().print(
            f"Predicted Price: [bold green]{format_price(result.price)}[/bold green]"
        )
        return
    _dump_json(
        {
            "state": sel.state,
            "city": sel.city,
            "year": sel.year,
            "predicted_price": result.price,
            "date": result.created_at.isoformat(),
        }
    )


async def cli_list_states(output_format: str) -> int:
    """Print the state catalog and return an exit code."""
    controller = SelectionController()
    try:
        if not await controller.start():
            _err.print(f"[red]{controller.error}[/red]")
            return 1
        _print_names("States", controller.states, output_format)
        return 0
    finally:
        await controller.close()


async def cli_list_cities(state: str, output_format: str) -> int:
    """Print the cities of *state* and return an exit code."""
    controller = SelectionController()
    try:
        if not await controller.start():
            _err.print(f"[red]{controller.error}[/red]")
            return 1
        if not await controller.choose_state(state):
            _err.print(
                f"[red]{controller.error or f'Unknown state: {state}'}[/red]"
            )
            return 1
        _print_names(f"Cities in {state}", controller.cities, output_format)
        return 0
    finally:
        await controller.close()


async def cli_predict(
    state: str,
    city: str,
    year: int,
    output_format: str,
) -> int:
    """Walk the state -> city -> year flow, predict, and record history."""
    controller = SelectionController()
    try:
        if not await controller.start():
            _err.print(f"[red]{controller.error}[/red]")
            return 1

        if not await controller.choose_state(state):
            _err.print(
                f"[red]{controller.error or f'Unknown state: {state}'}[/red]"
            )
            if controller.states:
                _err.print(
                    f"[dim]Available: {', '.join(controller.states)}[/dim]"
                )
            return 1

        if not controller.choose_city(city):
            _err.print(f"[red]Unknown city for {state}: {city}[/red]")
            _err.print(f"[dim]Available: {', '.join(controller.cities)}[/dim]")
            return 1

        if not controller.choose_year(year):
            _err.print(
                f"[red]Year must be between {controller.years[0]}"
                f" and {controller.years[-1]}[/red]"
            )
            return 1

        _err.print(f"[bold]Predicting:[/bold] {city}, {state} ({year})")
        result = await controller.submit()
        if result is None:
            _err.print(f"[red]{controller.error}[/red]")
            return 1

        _print_prediction(result, output_format)
        return 0
    finally:
        await controller.close()


def run_show_history(output_format: str) -> int:
    """Print the persisted prediction history."""
    history = HistoryCache()
    entries = history.load()
    if not entries:
        _err.print("[yellow]No predictions recorded yet.[/yellow]")
    if output_format == "table":
        _print_history(entries)
    else:
        _dump_json(_history_to_dicts(entries))
    return 0


def run_clear_history() -> int:
    """Remove every recorded prediction."""
    history = HistoryCache()
    count = len(history.load())
    history.clear()
    _err.print(f"[green]✓ Cleared {count} history entries[/green]")
    return 0
