"""Main CLI application entry point for the award graph pipeline.

Commands:
- run: load the award export into Neo4j and print the proximity summary
- reset: delete every node and relationship (recovery after a failed run)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..config.loader import get_config
from ..config.schemas import PipelineConfig
from ..exceptions import AwardGraphError
from ..pipeline import PipelineResult, build_store, reset_graph, run_pipeline
from ..queries.connectivity import ConnectivityQueries, NeighborhoodGraph
from ..utils.logging_config import setup_logging
from .errors import handle_error


app = typer.Typer(
    name="award-graph",
    help="Award graph pipeline CLI",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


@dataclass
class CommandContext:
    """Shared state for CLI commands."""

    config: PipelineConfig
    console: Console


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Award graph pipeline CLI."""
    try:
        config = get_config()
    except AwardGraphError as e:
        handle_error(e, console=console)
        return

    setup_logging(config.logging, level="DEBUG" if verbose else None)
    ctx.obj = CommandContext(config=config, console=console)


def _summary_table(result: PipelineResult) -> Table:
    table = Table(title=f"Run {result.run_id}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for key, value in result.summary().items():
        if key != "run_id":
            table.add_row(key.replace("_", " "), str(value))
    return table


def _proximity_table(result: PipelineResult) -> Table:
    table = Table(title="Institutional proximity")
    table.add_column("#", justify="right")
    table.add_column("Organization", style="cyan")
    table.add_column("Mean distance", justify="right")
    table.add_column("Neighbors", justify="right")
    for i, row in enumerate(result.top_proximity, 1):
        table.add_row(str(i), row.name, f"{row.mean_distance:.2f}", str(row.neighbor_count))
    return table


def _write_neighborhood(graph: NeighborhoodGraph, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(graph.to_dict(), indent=2, default=str), encoding="utf-8")


@app.command()
def run(
    ctx: typer.Context,
    reset: bool = typer.Option(False, "--reset", help="Delete the whole graph before loading"),
    csv_path: Path | None = typer.Option(None, "--csv", help="Award export to load"),
    person: str | None = typer.Option(
        None, "--person", "-p", help="Also extract this person's neighborhood"
    ),
    hops: int | None = typer.Option(None, "--hops", min=1, help="Neighborhood hop bound"),
    output: Path = typer.Option(
        Path("neighborhood.json"), "--output", "-o", help="Where to write the neighborhood JSON"
    ),
) -> None:
    """Load the award export into Neo4j and rank institutional proximity."""
    context: CommandContext = ctx.obj

    try:
        with build_store(context.config) as store:
            store.verify()
            result = run_pipeline(context.config, store, reset=reset, csv_path=csv_path)

            context.console.print(_summary_table(result))
            if result.top_proximity:
                context.console.print(_proximity_table(result))
            else:
                context.console.print(
                    f"[yellow]No organization has at least "
                    f"{context.config.analysis.min_neighbors} neighbors[/yellow]"
                )

            if person:
                graph = ConnectivityQueries(store, context.config.analysis).person_neighborhood(
                    person, hops
                )
                if graph.is_empty:
                    context.console.print(f"[yellow]No person named {person!r}[/yellow]")
                else:
                    _write_neighborhood(graph, output)
                    context.console.print(
                        f"[green]✓ Neighborhood of {person}: {len(graph.nodes)} nodes, "
                        f"{len(graph.links)} links -> {output}[/green]"
                    )
    except AwardGraphError as e:
        handle_error(e, console=context.console)


@app.command()
def reset(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete every node and relationship in the configured database."""
    context: CommandContext = ctx.obj

    if not yes:
        typer.confirm(
            f"Delete the whole graph in database '{context.config.neo4j.database}'?", abort=True
        )

    try:
        with build_store(context.config) as store:
            removed = reset_graph(store)
    except AwardGraphError as e:
        handle_error(e, console=context.console)
        return

    context.console.print(f"[green]✓ Graph reset: {removed} nodes deleted[/green]")


if __name__ == "__main__":
    app()
