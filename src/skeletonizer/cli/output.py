"""Rich console output helpers for the CLI.

Progress bars, polygon tables, run summaries and error messages for the
skeletonizer command.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from skeletonizer.utils import ProcessingStats

console = Console()

SYM_STEP = "▸"
SYM_OK = "✓"
SYM_ERR = "✗"
SYM_DOT = "·"


def create_progress() -> Progress:
    """Create a progress bar counting finished polygons.

    Returns:
        Progress instance whose task description shows the last finished polygon
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=32, complete_style="cyan", finished_style="green"),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        TextColumn("[dim]{task.description}"),
        console=console,
    )


def print_header(version: str) -> None:
    console.print(f"\n[bold]Skeletonizer[/bold] v{version}")
    console.print("─" * 40)


def print_step(message: str) -> None:
    console.print(f"\n{SYM_STEP} {message}")


def print_document_info(path: str, doc_format: str, polygon_count: int, vertex_count: int) -> None:
    """Print what was loaded from a polygon document.

    Args:
        path: Path to the document
        doc_format: Document format ("native" or "geojson")
        polygon_count: Number of polygons in the document
        vertex_count: Total boundary points across all polygons
    """
    # Paths may contain markup characters
    console.print(Text.assemble("  ", path, f" [{doc_format}]"))
    console.print(f"  {polygon_count:,} polygons {SYM_DOT} {vertex_count:,} vertices")


def print_polygon_table(rows: list[tuple[str, int, int]]) -> None:
    """Print a table of polygons.

    Args:
        rows: Tuples of (name, outer point count, hole count)
    """
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Polygon")
    table.add_column("Points", justify="right")
    table.add_column("Holes", justify="right")
    for name, points, holes in rows:
        table.add_row(Text(name), str(points), str(holes))
    console.print(table)


def print_workers(workers: int, is_auto: bool = False) -> None:
    source = "auto" if is_auto else "requested"
    console.print(f"  {workers} worker processes ({source}) {SYM_DOT} Ctrl+C to cancel")


def format_duration(seconds: float) -> str:
    """Format a duration for humans.

    Examples:
        >>> format_duration(0.25)
        '250ms'
        >>> format_duration(75)
        '1m 15.0s'
    """
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    minutes, rest = divmod(seconds, 60)
    if minutes:
        return f"{int(minutes)}m {rest:.1f}s"
    return f"{rest:.1f}s"


def print_summary(stats: ProcessingStats, output_path: str, file_size: str) -> None:
    """Print the run summary as a two-column grid.

    Args:
        stats: Statistics of the finished run
        output_path: Path of the written result document
        file_size: Human-readable size of the result document
    """
    console.print(
        f"\n[bold green]{SYM_OK} Done[/bold green] in {format_duration(stats.duration_seconds)}"
    )

    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="dim")
    grid.add_column()
    grid.add_row("  output", Text.assemble((output_path, "bold"), f" ({file_size})"))
    grid.add_row("  polygons", f"{stats.processed_count} processed, {stats.skipped_count} skipped")
    grid.add_row("  skeleton", f"{stats.subtree_count} subtrees, {stats.face_count} faces")
    if stats.durations_ms:
        grid.add_row(
            "  per polygon",
            f"{stats.avg_duration_ms:.1f}ms avg "
            f"({stats.min_duration_ms:.1f}-{stats.max_duration_ms:.1f}ms)",
        )
    errors_style = "red" if stats.error_count else "green"
    grid.add_row("  errors", Text(str(stats.error_count), style=errors_style))
    console.print(grid)


def print_errors(errors: list[tuple[str, str]], limit: int = 10) -> None:
    """Print per-polygon errors.

    Args:
        errors: Tuples of (polygon name, message)
        limit: Maximum number of errors listed
    """
    for name, message in errors[:limit]:
        console.print(Text.assemble((f"  {SYM_ERR} ", "red"), f"{name}: {message}"))
    if len(errors) > limit:
        console.print(f"  ... +{len(errors) - limit} more")


def print_error(message: str, details: str | None = None) -> None:
    """Print an error message.

    Args:
        message: Main error message
        details: Optional second line
    """
    console.print(Text.assemble("\n", (f"{SYM_ERR} Error: ", "bold red"), message))
    if details:
        console.print(Text(f"  {details}"))


def print_cancelled(processed: int, cancelled: int) -> None:
    """Print the outcome of a run interrupted with Ctrl+C.

    Args:
        processed: Polygons finished before the interruption
        cancelled: Pending polygons that were dropped
    """
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print(f"  {processed} polygons finished {SYM_DOT} {cancelled} dropped")
    console.print("  No output file written")
