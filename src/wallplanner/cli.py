"""Command Line Interface for Wall Planner.

This module provides a simple CLI for detecting rooms in a wall plan and
inspecting the trimmed wall faces.
"""

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core.model import DetectionOptions
from .engine.detector import detect_rooms
from .geom.junction import rebuild_wall_faces
from .io.parser import detection_result_to_dict, load_walls

app = typer.Typer(
    name="wall-planner",
    help="A CLI tool for wall junction cleanup and room detection",
    no_args_is_help=True,
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _fmt(point) -> str:
    return f"({point.x:.1f}, {point.y:.1f})"


@app.command()
def detect(
    walls: Path = typer.Option(..., "--walls", "-w", help="Path to walls JSON file"),
    snap_tolerance: float = typer.Option(5.0, "--snap-tolerance", help="Endpoint merge tolerance (mm)"),
    min_area: float = typer.Option(1.0, "--min-area", help="Minimum room area (m^2)"),
    max_area: float = typer.Option(10000.0, "--max-area", help="Maximum room area (m^2)"),
    include_outer: bool = typer.Option(False, "--include-outer", help="Keep counter-clockwise (outer) faces"),
    output: Path = typer.Option(None, "--output", "-o", help="Path to output JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """Detect enclosed rooms in a wall plan."""
    _configure_logging(verbose)
    try:
        wall_list = load_walls(str(walls))
        console.print(f"[green]✓[/green] Loaded {len(wall_list)} walls from {walls}")

        options = DetectionOptions(
            snap_tolerance=snap_tolerance,
            min_room_area=min_area,
            max_room_area=max_area,
            exclude_outer_faces=not include_outer,
        )
        result = detect_rooms(wall_list, options)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Rooms")
    table.add_column("Name", style="cyan")
    table.add_column("Area (m²)", justify="right")
    table.add_column("Perimeter (m)", justify="right")
    table.add_column("Walls")
    for room in result.rooms:
        table.add_row(
            room.name,
            f"{room.area:.2f}",
            f"{room.perimeter:.2f}",
            ", ".join(room.boundary_wall_ids),
        )
    console.print(table)

    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")

    stats = result.stats
    console.print(
        f"[blue]ℹ[/blue] {stats.total_nodes} nodes, {stats.total_edges} edges, "
        f"{stats.cycles_found} cycles, {stats.rooms_created} rooms "
        f"in {stats.execution_time_ms:.2f} ms"
    )

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", encoding="utf-8") as f:
            json.dump(detection_result_to_dict(result), f, indent=2)
        console.print(f"[green]✓[/green] Result saved to {output}")


@app.command()
def faces(
    walls: Path = typer.Option(..., "--walls", "-w", help="Path to walls JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """Show the trimmed interior and exterior faces of every wall."""
    _configure_logging(verbose)
    try:
        wall_list = load_walls(str(walls))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Wall faces")
    table.add_column("Wall", style="cyan")
    table.add_column("Interior")
    table.add_column("Exterior")
    for wall in rebuild_wall_faces(wall_list):
        table.add_row(
            wall.id,
            f"{_fmt(wall.interior_line.start)} → {_fmt(wall.interior_line.end)}",
            f"{_fmt(wall.exterior_line.start)} → {_fmt(wall.exterior_line.end)}",
        )
    console.print(table)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
