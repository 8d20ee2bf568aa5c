"""The skeletonizer command."""

import os
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from skeletonizer import __version__
from skeletonizer.cli.output import (
    SYM_ERR,
    SYM_OK,
    console,
    create_progress,
    print_cancelled,
    print_document_info,
    print_error,
    print_errors,
    print_header,
    print_polygon_table,
    print_step,
    print_summary,
    print_workers,
)
from skeletonizer.config import (
    FacesConfig,
    LoggingConfig,
    OutputFormat,
    ProcessingConfig,
    SkeletonizerSettings,
)
from skeletonizer.core import SkeletonProcessor
from skeletonizer.core.skeleton import prepare_contours
from skeletonizer.domain import Polygon
from skeletonizer.exceptions import (
    PolygonFormatError,
    PolygonLoadError,
    PolygonSaveError,
    SkeletonizerError,
)
from skeletonizer.io import PolygonReader, ResultWriter
from skeletonizer.utils import ProcessingStats

app = typer.Typer(
    name="skeletonizer",
    help="Compute straight skeletons and roof faces for polygon documents.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Handle --version."""
    if value:
        console.print(f"[bold blue]Skeletonizer[/bold blue] v{__version__}")
        raise typer.Exit()



@app.command()
def skeletonize(
    input_path: Annotated[
        Path,
        typer.Argument(
            help="Path to input JSON or GeoJSON polygon document",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-skeleton.{ext})",
        ),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format (json|obj)",
        ),
    ] = "json",
    no_faces: Annotated[
        bool,
        typer.Option(
            "--no-faces",
            help="Skip roof face reconstruction",
        ),
    ] = False,
    height_scale: Annotated[
        float,
        typer.Option(
            "--height-scale",
            help="Multiplier applied to face heights (roof pitch)",
            min=0.01,
            max=100.0,
        ),
    ] = 1.0,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
    list_polygons: Annotated[
        bool,
        typer.Option(
            "--list",
            help="List all polygons in the document and exit",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Analyze and show what would be done without writing output",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Compute the straight skeleton and roof faces of every polygon in a document.

    Reads native JSON ({"polygons": [...]}) or GeoJSON Polygon/MultiPolygon
    features and writes {name}-skeleton.json (or .obj) next to the input.

    Example:
        skeletonizer footprints.geojson -f obj
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    _check_input(input_path)

    try:
        fmt = OutputFormat(output_format.lower())
    except ValueError:
        print_error(f"Invalid format: {output_format}", details="Valid values: json, obj")
        raise typer.Exit(code=1)

    settings = SkeletonizerSettings(
        faces=FacesConfig(enabled=not no_faces, height_scale=height_scale),
        processing=ProcessingConfig(max_workers=workers, output_format=fmt),
        logging=LoggingConfig(log_file=log_file, log_level="WARNING" if quiet else log_level),
    )
    if not quiet:
        print_header(__version__)
        print_step("Loading polygons")

    try:
        polygons = _read_document(input_path, quiet)

        if list_polygons:
            print_polygon_table([(p.name, len(p.outer), len(p.holes)) for p in polygons])
            raise typer.Exit(code=0)

        if dry_run:
            _report_dry_run(input_path, polygons, settings, output, quiet, verbose)
            raise typer.Exit(code=0)

        if not polygons:
            if not quiet:
                console.print("\nNo polygons found. Nothing to process.")
            raise typer.Exit(code=0)

        if not quiet:
            print_step("Processing")
            print_workers(workers or os.cpu_count() or 1, is_auto=workers is None)

        output_path = output or ResultWriter.get_output_path(input_path, fmt)
        stats = _run(SkeletonProcessor(settings), input_path, output_path, workers, quiet)

        if not quiet:
            print_summary(stats, str(output_path), _format_file_size(output_path))
            if verbose and stats.errors:
                print_errors(stats.errors)

        if stats.error_count:
            raise typer.Exit(code=1)

    except typer.Exit:
        raise
    except PolygonLoadError as e:
        _fail(f"Could not load polygons: {e.reason}")
    except PolygonFormatError as e:
        _fail(f"Invalid polygon document: {e.details}")
    except PolygonSaveError as e:
        _fail(f"Could not save results: {e.reason}")
    except SkeletonizerError as e:
        _fail(str(e))
    except Exception as e:
        _fail(f"Unexpected error: {e}")


def _fail(message: str) -> NoReturn:
    print_error(message)
    raise typer.Exit(code=1)


def _check_input(input_path: Path) -> None:
    if not input_path.exists():
        print_error(
            f"Input file not found: {input_path}",
            details="Check the path and permissions.",
        )
        raise typer.Exit(code=1)
    if not input_path.is_file():
        print_error(
            f"Input path is not a file: {input_path}",
            details="Expected a JSON or GeoJSON document.",
        )
        raise typer.Exit(code=1)


def _read_document(input_path: Path, quiet: bool) -> list[Polygon]:
    """Load every polygon of a document and describe it on the console."""
    reader = PolygonReader(input_path)
    reader.load()
    polygons = list(reader.iter_polygons())
    if not quiet:
        print_document_info(
            path=str(input_path),
            doc_format=reader.format,
            polygon_count=len(polygons),
            vertex_count=sum(p.vertex_count for p in polygons),
        )
    return polygons


def _run(
    processor: SkeletonProcessor,
    input_path: Path,
    output_path: Path,
    workers: int | None,
    quiet: bool,
) -> ProcessingStats:
    """Run the processor, with a progress bar unless quiet.

    Ctrl+C exits with code 130 and nothing is written.
    """
    try:
        if quiet:
            return processor.process(
                input_path=input_path, output_path=output_path, max_workers=workers
            )
        with create_progress() as progress:
            task_id = progress.add_task("", total=None)

            def on_polygon(completed: int, total: int, name: str, success: bool) -> None:
                mark = SYM_OK if success else SYM_ERR
                progress.update(
                    task_id, completed=completed, total=total, description=f"{mark} {name}"
                )

            return processor.process(
                input_path=input_path,
                output_path=output_path,
                max_workers=workers,
                progress_callback=on_polygon,
            )
    except KeyboardInterrupt:
        if not quiet:
            stats = processor.stats
            print_cancelled(processed=stats.processed_count, cancelled=stats.cancelled_count)
        raise typer.Exit(code=130) from None


def _report_dry_run(
    input_path: Path,
    polygons: list[Polygon],
    settings: SkeletonizerSettings,
    output: Path | None,
    quiet: bool,
    verbose: bool,
) -> None:
    """Normalize every polygon and report what a real run would do.

    Args:
        input_path: Path to polygon document
        polygons: Polygons read from the document
        settings: Skeletonizer settings
        output: Requested output path, if any
        quiet: Suppress output
        verbose: List degenerate polygons
    """
    usable: list[tuple[int, int]] = []
    degenerate: list[str] = []
    for polygon in polygons:
        outer, holes = prepare_contours(polygon.outer, polygon.holes, settings.geometry)
        if len(outer) < 3:
            degenerate.append(polygon.name)
        else:
            usable.append((len(outer), len(holes)))

    if quiet:
        return

    print_step("Analyzing (dry run)")
    fmt = settings.processing.output_format
    report = {
        "Polygons to process": str(len(usable)),
        "Degenerate polygons": str(len(degenerate)),
        "Normalized vertices": str(sum(points for points, _ in usable)),
        "Holes": str(sum(holes for _, holes in usable)),
        "Faces": "yes" if settings.faces.enabled else "no",
        "Output": f"{output or ResultWriter.get_output_path(input_path, fmt)} ({fmt.value})",
    }
    console.print()
    for label, value in report.items():
        console.print(f"  {label:<22}{value}", markup=False, highlight=False)

    if verbose and degenerate:
        console.print("\n[bold]Degenerate[/bold]")
        print_errors([(name, "fewer than 3 distinct points") for name in degenerate], limit=20)

    console.print(f"\n[bold green]{SYM_OK} Dry run complete[/bold green], no files written")


def _format_file_size(path: Path) -> str:
    """Human-readable size of a file, or "unknown" if it cannot be read."""
    try:
        size = path.stat().st_size
    except OSError:
        return "unknown"
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    if size >= 1024:
        return f"{size / 1024:.0f} KB"
    return f"{size} B"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
