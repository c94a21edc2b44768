import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from topograph._errors import TopographError
from topograph._graph import (
    CycleDetected,
    DuplicatePolicy,
    GraphStore,
    SeedOrder,
    SortResult,
    TopoSortEngine,
    emit_order,
)
from topograph._report import build_sort_report, export_report

from .config import ConfigError, LabelType, TopographConfig, get_config

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console(soft_wrap=True)

FilenamesArg = Annotated[
    list[str] | None,
    typer.Argument(help="Input file name, relative to the input directory", show_default=False),
]
InputDirOpt = Annotated[
    Path | None,
    typer.Option("--input-dir", help="Directory holding input files [default: input]"),
]
DuplicatesOpt = Annotated[
    DuplicatePolicy | None,
    typer.Option("--duplicates", help="How to treat repeated vertex labels [default: keep-first]"),
]
SeedOrderOpt = Annotated[
    SeedOrder | None,
    typer.Option("--seed-order", help="Queue order of the initial in-degree 0 vertices [default: insertion]"),
]
LabelTypeOpt = Annotated[
    LabelType | None,
    typer.Option("--label-type", help="Parse vertex labels as strings or integers [default: str]"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Build a directed graph from an adjacency list and sort it topologically."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error: {escape(message)}[/red]")
    return typer.Exit(code=1)


def _load_config() -> TopographConfig:
    try:
        return get_config()
    except ConfigError as e:
        raise _fail(str(e)) from e


def _load_graph(
    command: str,
    filenames: list[str] | None,
    config: TopographConfig,
    *,
    input_dir: Path | None,
    duplicates: DuplicatePolicy | None,
    label_type: LabelType | None,
) -> GraphStore:
    """Read the single input file named on the command line into a GraphStore.

    Exits with code 1 on a wrong argument count, an unreadable file or
    malformed input.
    """
    if not filenames or len(filenames) != 1:
        err_console.print(f"usage: topograph {command} FILENAME")
        raise typer.Exit(code=1)

    input_path = (input_dir or config.input_dir) / filenames[0]
    logger.debug(f"Reading graph from {input_path}")

    err_console.print("[cyan]Building graph...[/cyan]")
    try:
        with input_path.open() as f:
            graph = GraphStore.from_lines(
                f,
                parse_label=(label_type or config.label_type).parser,
                duplicates=duplicates or config.duplicates,
            )
    except (OSError, UnicodeDecodeError):
        err_console.print("[red]Wrong or nonexisting input file[/red]")
        raise typer.Exit(code=1) from None
    except TopographError as e:
        raise _fail(str(e)) from e

    return graph


def _sort(graph: GraphStore, seed_order: SeedOrder) -> SortResult:
    engine = TopoSortEngine(graph, seed_order=seed_order)
    try:
        in_degrees = engine.compute_in_degrees()
    except TopographError as e:
        raise _fail(str(e)) from e
    return engine.topological_sort(in_degrees)


@app.command()
def sort(  # noqa: PLR0913
    filenames: FilenamesArg = None,
    *,
    input_dir: InputDirOpt = None,
    duplicates: DuplicatesOpt = None,
    seed_order: SeedOrderOpt = None,
    label_type: LabelTypeOpt = None,
    display_threshold: Annotated[
        int | None,
        typer.Option("--display-threshold", help="Dump the graph only below this many vertices [default: 20]"),
    ] = None,
    order_threshold: Annotated[
        int | None,
        typer.Option("--order-threshold", help="Print the order only below this many vertices [default: 1000]"),
    ] = None,
) -> None:
    """Display a graph and print its topological order, or report a cycle."""
    config = _load_config()
    graph = _load_graph(
        "sort",
        filenames,
        config,
        input_dir=input_dir,
        duplicates=duplicates,
        label_type=label_type,
    )

    err_console.print()
    err_console.print("[cyan]Displaying graph...[/cyan]")
    display_limit = config.display_threshold if display_threshold is None else display_threshold
    if graph.size() < display_limit:
        graph.display(out_console.file)
    else:
        err_console.print(f"[dim]{graph.size()} vertices, not displaying[/dim]")

    err_console.print()
    err_console.print("[cyan]Topologically sorting using in-degree method...[/cyan]")
    result = _sort(graph, seed_order or config.seed_order)

    if isinstance(result, CycleDetected):
        out_console.print("Cycle detected, cannot topologically sort...", markup=False, highlight=False)
        if result.unresolved:
            unresolved = " ".join(str(label) for label in result.unresolved)
            err_console.print(f"[yellow]Vertices on or behind a cycle:[/yellow] {escape(unresolved)}")
        return

    order_limit = config.order_threshold if order_threshold is None else order_threshold
    if graph.size() < order_limit:
        emit_order(out_console.file, result)
    else:
        out_console.print("Graph is too big. I refuse to print", markup=False, highlight=False)


@app.command()
def show(
    filenames: FilenamesArg = None,
    *,
    input_dir: InputDirOpt = None,
    duplicates: DuplicatesOpt = None,
    label_type: LabelTypeOpt = None,
) -> None:
    """Dump a graph and summarize its structure."""
    config = _load_config()
    graph = _load_graph(
        "show",
        filenames,
        config,
        input_dir=input_dir,
        duplicates=duplicates,
        label_type=label_type,
    )

    graph.display(out_console.file)

    targets = {target for vertex in graph.for_each_vertex() for target in vertex.adjacency}
    sources = [label for label in graph.labels() if label not in targets]
    sinks = [vertex.label for vertex in graph.for_each_vertex() if not vertex.adjacency]
    undefined = sorted(str(target) for target in targets if target not in graph)

    table = Table(show_header=False, box=None)
    table.add_column("Property", style="bold")
    table.add_column("Value", justify="right", style="yellow")
    table.add_row("Vertices", str(graph.size()))
    table.add_row("Edges", str(graph.edge_count()))
    table.add_row("Sources", str(len(sources)))
    table.add_row("Sinks", str(len(sinks)))
    if undefined:
        table.add_row("Undefined targets", f"[red]{escape(' '.join(undefined))}[/red]")

    err_console.print()
    err_console.print(Panel(table, title=f"[bold]{escape(filenames[0])}[/bold]", border_style="cyan"))  # type: ignore[index]


@app.command()
def export(  # noqa: PLR0913
    filenames: FilenamesArg = None,
    *,
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Path to output report (.json or .toml)"),
    ],
    input_dir: InputDirOpt = None,
    duplicates: DuplicatesOpt = None,
    seed_order: SeedOrderOpt = None,
    label_type: LabelTypeOpt = None,
) -> None:
    """Sort a graph and write the outcome as a JSON or TOML report."""
    config = _load_config()
    graph = _load_graph(
        "export",
        filenames,
        config,
        input_dir=input_dir,
        duplicates=duplicates,
        label_type=label_type,
    )

    err_console.print("[cyan]Topologically sorting using in-degree method...[/cyan]")
    result = _sort(graph, seed_order or config.seed_order)
    report = build_sort_report(graph, result, source=filenames[0])  # type: ignore[index]

    err_console.print(f"[cyan]Exporting report to:[/cyan] {output}")
    try:
        export_report(report, output)
    except ValueError as e:
        raise _fail(str(e)) from e

    err_console.print()
    if report.has_cycle:
        err_console.print("[yellow]⚠ Cycle detected, report has no order[/yellow]")
    else:
        err_console.print("[green]✓ Report exported[/green]")
    err_console.print()


def main() -> None:
    app()
