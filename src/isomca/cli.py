"""Command-line interface for isomca."""

from datetime import datetime
from pathlib import Path
from typing import Optional
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

from . import __version__
from .anvil import REGION_SIZE, DecodeError, RegionFile, SectionStateError, World
from .config import RenderConfig, ChunkRange
from .render import RenderPipeline, RenderProgress

app = typer.Typer(
    name="isomca",
    help="Render Minecraft Anvil worlds as isometric images.",
    no_args_is_help=True,
)
console = Console()


def setup_logging(verbose: bool) -> None:
    """Route log records through rich on the shared console."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def version_callback(value: bool):
    if value:
        console.print(f"isomca version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
):
    """isomca: isometric renderer for Anvil region files."""
    pass


@app.command()
def render(
    source: Path = typer.Argument(..., help="Region directory (or world directory containing region/)"),
    assets: Path = typer.Argument(..., help="Resource pack assets directory"),
    min_cx: Optional[int] = typer.Option(None, "--min-cx", help="Minimum chunk X"),
    min_cz: Optional[int] = typer.Option(None, "--min-cz", help="Minimum chunk Z"),
    max_cx: Optional[int] = typer.Option(None, "--max-cx", help="Maximum chunk X"),
    max_cz: Optional[int] = typer.Option(None, "--max-cz", help="Maximum chunk Z"),
    min_y: Optional[int] = typer.Option(None, "--min-y", help="Lowest block Y (defaults to loaded sections)"),
    max_y: Optional[int] = typer.Option(None, "--max-y", help="Block Y to stop below (defaults to loaded sections)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output PNG (default: output.png)"),
    parallel: Optional[bool] = typer.Option(None, "--parallel/--no-parallel", help="Render chunks in parallel (default: on)"),
    workers: Optional[int] = typer.Option(None, "--workers", help="Parallel worker count (defaults to all cores)"),
    sky_light: Optional[bool] = typer.Option(None, "--sky-light/--no-sky-light", help="Light faces by sky light as well as block light"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Load settings from a JSON config"),
    save_config: Optional[Path] = typer.Option(None, "--save-config", help="Write the effective settings to a JSON config"),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
):
    """Render a range of chunks to a PNG.

    Example:
        isomca render world/region assets --min-cx -2 --min-cz -1 --max-cx 1 --max-cz 1 -o map.png
    """
    setup_logging(verbose)

    if config_file is not None:
        try:
            config = RenderConfig.load(config_file)
        except (OSError, ValueError, KeyError) as e:
            console.print(f"[red]Error:[/red] Could not load config {config_file}: {e}")
            raise typer.Exit(1)
        config.source_dir = source
        config.assets_dir = assets
    else:
        missing = [
            flag for flag, value in (
                ("--min-cx", min_cx), ("--min-cz", min_cz), ("--max-cx", max_cx), ("--max-cz", max_cz),
            )
            if value is None
        ]
        if missing:
            console.print(f"[red]Error:[/red] Missing option(s): {', '.join(missing)}")
            raise typer.Exit(1)
        config = RenderConfig(
            source_dir=source,
            assets_dir=assets,
            chunks=ChunkRange(min_cx=min_cx, min_cz=min_cz, max_cx=max_cx, max_cz=max_cz),
        )

    # Explicit options win over the config file
    chunks = config.chunks
    if min_cx is not None:
        chunks.min_cx = min_cx
    if min_cz is not None:
        chunks.min_cz = min_cz
    if max_cx is not None:
        chunks.max_cx = max_cx
    if max_cz is not None:
        chunks.max_cz = max_cz
    if min_y is not None:
        config.min_y = min_y
    if max_y is not None:
        config.max_y = max_y
    if output is not None:
        config.output = output
    if parallel is not None:
        config.parallel = parallel
    if workers is not None:
        config.workers = workers
    if sky_light is not None:
        config.use_sky_light = sky_light

    try:
        config.validate()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if save_config is not None:
        config.save(save_config)
        console.print(f"Config saved to: {save_config}")

    console.print(f"[bold]Rendering chunks ({chunks.min}) to ({chunks.max})[/bold]")
    console.print(f"  Source: {config.region_dir}")
    console.print(f"  Assets: {config.assets_dir}")
    if config.min_y is not None or config.max_y is not None:
        console.print(f"  Y range: {config.min_y} to {config.max_y}")
    console.print(f"  Output: {config.output}")
    console.print()

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        ) as progress:
            tasks = {}

            def progress_callback(p: RenderProgress):
                if p.phase not in tasks:
                    tasks[p.phase] = progress.add_task(f"[cyan]{p.phase}[/cyan]: {p.message}", total=p.total)
                progress.update(
                    tasks[p.phase],
                    completed=p.current,
                    total=p.total,
                    description=f"[cyan]{p.phase}[/cyan]: {p.message}",
                )

            pipeline = RenderPipeline(config)
            image_path = pipeline.run(progress_callback)
    except SectionStateError as e:
        console.print(f"[red]Internal error:[/red] {e}")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    stats = pipeline.load_stats
    console.print()
    if stats is not None and stats.loaded == 0:
        console.print("[yellow]Warning:[/yellow] no chunks were loaded; the image is empty")
    console.print(f"[green]Success![/green] Image saved to: {image_path}")


@app.command()
def info(
    source: Path = typer.Argument(..., help="Region directory (or world directory containing region/)"),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
):
    """Show the region files in a directory and how many chunks each holds.

    Example:
        isomca info world/region
    """
    setup_logging(verbose)

    region_dir = source / "region" if (source / "region").is_dir() else source
    if not region_dir.is_dir():
        console.print(f"[red]Error:[/red] Not a directory: {source}")
        raise typer.Exit(1)

    world = World(region_dir)
    regions = world.region_files()

    table = Table(title=f"Region files in {region_dir}")
    table.add_column("Region", style="cyan")
    table.add_column("File")
    table.add_column("Chunks", justify="right")
    table.add_column("Chunk range")
    table.add_column("Last modified")
    table.add_column("Size", justify="right")

    total_chunks = 0
    for coord, path in sorted(regions.items(), key=lambda item: (item[0].rz, item[0].rx)):
        size_kb = path.stat().st_size / 1024
        try:
            with RegionFile(path) as region:
                count = len(region.chunk_indexes())
                modified = region.latest_timestamp()
        except (DecodeError, OSError) as e:
            table.add_row(str(coord), path.name, "[red]error[/red]", str(e), "", f"{size_kb:.1f} KB")
            continue
        total_chunks += count
        min_cx = coord.rx * REGION_SIZE
        min_cz = coord.rz * REGION_SIZE
        chunk_range = f"({min_cx}, {min_cz}) to ({min_cx + REGION_SIZE - 1}, {min_cz + REGION_SIZE - 1})"
        last_modified = datetime.fromtimestamp(modified).strftime("%Y-%m-%d %H:%M") if modified else "-"
        table.add_row(str(coord), path.name, str(count), chunk_range, last_modified, f"{size_kb:.1f} KB")

    console.print(table)
    console.print(f"[cyan]Regions:[/cyan] {len(regions)}  [cyan]Chunks:[/cyan] {total_chunks}")


if __name__ == "__main__":
    app()
