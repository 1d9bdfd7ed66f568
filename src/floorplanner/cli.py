"""Command Line Interface for Floor Planner.

This module provides a simple CLI for detecting areas, running operation
scripts, merging areas and validating floor plan JSON files.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .engine.api import apply_operations
from .engine.store import FloorGraph
from .engine.validators import find_violations
from .io.parser import load_floor, save_floor

app = typer.Typer(
    name="floor-planner",
    help="A CLI tool for floor plan graph editing and area detection",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _print_areas(graph: FloorGraph) -> None:
    table = Table(title="Areas")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Nodes", justify="right")
    table.add_column("Surface (m²)", justify="right")

    for area in graph.areas:
        table.add_row(area.id, area.name, str(len(area.node_ids)), f"{graph.area_surface(area.id):.2f}")

    console.print(table)


@app.command()
def detect(
    floor: Path = typer.Option(..., "--floor", "-f", help="Path to floor JSON file"),
    output: Optional[Path] = typer.Option(None, "--out", help="Path to output floor JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """Re-detect the enclosed areas of a floor."""
    _setup_logging(verbose)
    try:
        graph = FloorGraph(load_floor(str(floor)))
        console.print(f"[green]✓[/green] Loaded floor from {floor}")

        graph.recalculate_areas()
        _print_areas(graph)

        if output:
            save_floor(graph.floor, str(output))
            console.print(f"[green]✓[/green] Saved floor to {output}")

    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found - {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def apply(
    floor: Path = typer.Option(..., "--floor", "-f", help="Path to floor JSON file"),
    ops: Path = typer.Option(..., "--ops", help="Path to operations JSON file"),
    output: Path = typer.Option(..., "--out", help="Path to output floor JSON file"),
    validate: bool = typer.Option(False, "--validate", help="Check floor invariants after each operation"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """Apply a list of operations to a floor."""
    _setup_logging(verbose)
    try:
        graph = FloorGraph(load_floor(str(floor)))
        console.print(f"[green]✓[/green] Loaded floor from {floor}")

        with open(ops, encoding="utf-8") as f:
            operations = json.load(f)
        if not isinstance(operations, list):
            operations = [operations]
        console.print(f"[green]✓[/green] Loaded {len(operations)} operations from {ops}")

        results = apply_operations(graph, operations, validate=validate)

        table = Table(title="Operations")
        table.add_column("#", justify="right")
        table.add_column("Operation", style="cyan")
        table.add_column("Status", justify="center")
        table.add_column("Result")
        for entry in results:
            op_name = entry["operation"].get("op") or entry["operation"].get("type") or "?"
            status = "[green]OK[/green]" if entry["success"] else "[red]FAILED[/red]"
            detail = entry.get("error") or ("" if entry["result"] is None else str(entry["result"]))
            table.add_row(str(entry["operation_index"] + 1), op_name, status, detail)
        console.print(table)

        save_floor(graph.floor, str(output))
        console.print(f"[green]✓[/green] Saved floor to {output}")

        failed = sum(1 for entry in results if not entry["success"])
        if failed:
            console.print(f"\n[bold red]{failed} of {len(results)} operations failed[/bold red]")
            raise typer.Exit(1)
        console.print("\n[bold green]All operations applied[/bold green]")

    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found - {e}[/red]")
        raise typer.Exit(1)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: Invalid JSON - {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def merge(
    floor: Path = typer.Option(..., "--floor", "-f", help="Path to floor JSON file"),
    area_a: str = typer.Option(..., "--a", help="ID of the area to keep"),
    area_b: str = typer.Option(..., "--b", help="ID of the area to merge into it"),
    output: Path = typer.Option(..., "--out", help="Path to output floor JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """Merge two areas of a floor into one."""
    _setup_logging(verbose)
    try:
        graph = FloorGraph(load_floor(str(floor)))
        console.print(f"[green]✓[/green] Loaded floor from {floor}")

        if not graph.merge_areas(area_a, area_b):
            console.print(f"[red]Error: cannot merge areas '{area_a}' and '{area_b}'[/red]")
            raise typer.Exit(1)

        _print_areas(graph)
        save_floor(graph.floor, str(output))
        console.print(f"[green]✓[/green] Saved floor to {output}")

    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found - {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def check(
    floor: Path = typer.Option(..., "--floor", "-f", help="Path to floor JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """Validate the graph invariants of a floor."""
    _setup_logging(verbose)
    try:
        floor_obj = load_floor(str(floor))
    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found - {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    violations = find_violations(floor_obj)
    if not violations:
        console.print("[bold green]✓ Floor is valid[/bold green]")
        return

    table = Table(title="Violations")
    table.add_column("#", justify="right")
    table.add_column("Problem", style="red")
    for i, violation in enumerate(violations, 1):
        table.add_row(str(i), violation)
    console.print(table)
    console.print(f"\n[bold red]{len(violations)} violations found[/bold red]")
    raise typer.Exit(1)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
