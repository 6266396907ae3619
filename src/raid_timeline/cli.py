"""CLI interface for raid-timeline."""

import json
import logging
import os
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .constants import DEFAULT_EXPORT_WORKERS, SCREEN_SIZE
from .export_pipeline import encode_mechanic
from .output import resolve_output_provider, supported_output_formats
from .render.render_context import RenderContext
from .timeline.codec import MechanicValidationError, load_mechanic, snapshot_to_dict
from .timeline.engine import TimelineEngine
from .timeline.filters import filter_hidden_objects
from .timeline.model import EVENT_TYPES, MechanicData

# Load environment variables from .env file
load_dotenv()

console = Console()
err_console = Console(stderr=True)
SUPPORTED_OUTPUT_FORMATS_TEXT = ", ".join(supported_output_formats()).upper()

app = typer.Typer(help="Resolve and render raid mechanic timelines.")


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""
    pass


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )


def _default_workers() -> int:
    raw = os.getenv("RAID_TIMELINE_WORKERS")
    if not raw:
        return DEFAULT_EXPORT_WORKERS
    try:
        return max(1, int(raw))
    except ValueError:
        raise CLIError(f"RAID_TIMELINE_WORKERS must be an integer (got '{raw}')")


def _load(mechanic_file: Path) -> MechanicData:
    """Load and validate a mechanic JSON file."""
    try:
        return load_mechanic(mechanic_file)
    except FileNotFoundError:
        raise CLIError(f"File '{mechanic_file}' not found")
    except json.JSONDecodeError as e:
        raise CLIError(f"Invalid JSON in '{mechanic_file}': {e}")
    except MechanicValidationError as e:
        raise CLIError(str(e))


def _fail(error: Exception) -> None:
    if isinstance(error, CLIError):
        err_console.print(f"[bold red]Error:[/bold red] {error}")
    else:
        err_console.print(f"[bold red]Unexpected error:[/bold red] {error}")
    sys.exit(1)


@app.command()
def render(
    mechanic_file: Path = typer.Argument(..., help="Mechanic JSON file"),
    out: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help=f"Output animation ({SUPPORTED_OUTPUT_FORMATS_TEXT}); defaults to <mechanic id>.gif",
    ),
    start: int = typer.Option(0, "--start", help="First frame to export"),
    end: int | None = typer.Option(
        None, "--end", help="Frame to stop before (defaults to the mechanic length)"
    ),
    step: int = typer.Option(1, "--step", help="Export every N-th frame"),
    workers: int | None = typer.Option(
        None,
        "--workers",
        "-w",
        help="Worker processes for snapshot resolution (env: RAID_TIMELINE_WORKERS)",
    ),
    size: int = typer.Option(SCREEN_SIZE, "--size", help="Output width and height in pixels"),
    hide: list[str] = typer.Option(
        [], "--hide", help="Hide an entity before export, e.g. --hide aoe:tower1"
    ),
    paths: bool = typer.Option(False, "--paths", help="Draw each player's movement path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    Render a mechanic to an animated GIF or WebP.

    Examples:
      # Whole mechanic with 4 workers
      raid-timeline render mechanic.json -o out.webp --workers 4

      # First five seconds at half frame rate
      raid-timeline render mechanic.json --end 150 --step 2
    """
    _configure_logging(verbose)
    try:
        mechanic = _load(mechanic_file)
        if hide:
            mechanic = filter_hidden_objects(mechanic, hide)
        output_path = out or f"{mechanic.id}.gif"
        worker_count = workers if workers is not None else _default_workers()

        try:
            provider = resolve_output_provider(output_path)
        except ValueError as e:
            raise CLIError(str(e))

        ext = Path(output_path).suffix[1:].upper()
        console.print(
            f"[bold blue]Rendering {mechanic.name} as {ext} "
            f"({mechanic.duration_frames} frames @ {mechanic.fps} fps, "
            f"{worker_count} worker(s))...[/bold blue]"
        )
        try:
            encoded = encode_mechanic(
                mechanic,
                output_path,
                start=start,
                stop=end,
                step=step,
                workers=worker_count,
                render_context=RenderContext.sized(size, show_movement_paths=paths),
                provider=provider,
            )
        except ValueError as e:
            raise CLIError(f"Failed to generate output: {e}")

        if not encoded:
            raise CLIError("No frames in the requested range")
        provider.write(encoded)
        console.print(f"[green]✓[/green] {ext} saved to {output_path}")

    except Exception as e:
        _fail(e)


@app.command()
def snapshot(
    mechanic_file: Path = typer.Argument(..., help="Mechanic JSON file"),
    frame: int = typer.Option(0, "--frame", "-f", help="Frame to resolve"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Print the resolved snapshot at a frame as JSON."""
    _configure_logging(verbose)
    try:
        mechanic = _load(mechanic_file)
        try:
            resolved = TimelineEngine(mechanic).resolve(frame)
        except ValueError as e:
            raise CLIError(str(e))
        console.print_json(json.dumps(snapshot_to_dict(resolved), ensure_ascii=False))

    except Exception as e:
        _fail(e)


@app.command()
def info(
    mechanic_file: Path = typer.Argument(..., help="Mechanic JSON file"),
) -> None:
    """Show a summary of a mechanic: roster, duration and event counts."""
    try:
        mechanic = _load(mechanic_file)

        console.print(f"[bold]{mechanic.name}[/bold] ({mechanic.id})")
        if mechanic.description:
            console.print(mechanic.description)
        seconds = mechanic.duration_frames / mechanic.fps
        console.print(
            f"Duration: {mechanic.duration_frames} frames @ {mechanic.fps} fps ({seconds:.1f}s)"
        )
        console.print(
            f"Field: {mechanic.field.type}, size {mechanic.field.size}, "
            f"{len(mechanic.markers)} marker(s)"
        )

        roster = Table(title="Roster")
        roster.add_column("Id")
        roster.add_column("Kind")
        roster.add_column("Role / Name")
        for player in mechanic.initial_players:
            roster.add_row(player.id, "player", player.role)
        for enemy in mechanic.enemies:
            roster.add_row(enemy.id, "enemy", enemy.name)
        console.print(roster)

        counts = {name: 0 for name in EVENT_TYPES}
        for event in mechanic.timeline:
            counts[event.type] += 1
        events = Table(title="Timeline events")
        events.add_column("Type")
        events.add_column("Count", justify="right")
        for name, count in counts.items():
            if count:
                events.add_row(name, str(count))
        console.print(events)

    except Exception as e:
        _fail(e)


if __name__ == "__main__":
    app()
