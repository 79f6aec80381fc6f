"""
Teamate Command Line Interface

Provides CLI commands for running matching passes, scoring single pairs and
managing the participants held in the vector store.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

app = typer.Typer(
    name="teamate",
    help="Optimal one-to-one cohort matching CLI",
    add_completion=False,
)
console = Console()

CONFIDENCE_COLORS = {"high": "green", "medium": "yellow", "low": "red"}


def _build_retriever(input_file: Optional[Path]):
    """Retriever over a JSON file of participants, or over the configured store."""
    from teamate.data.retrieval import VectorStoreRetriever
    from teamate.data.vector_store import InMemoryVectorStore, get_vector_store, load_records_from_json
    from teamate.utils.config import get_settings

    settings = get_settings()

    if input_file is not None:
        if not input_file.exists():
            console.print(f"[red]Error: File not found: {input_file}[/red]")
            raise typer.Exit(1)
        try:
            store = InMemoryVectorStore(load_records_from_json(input_file))
        except ValueError as e:
            console.print(f"[red]Error reading {input_file}: {escape(str(e))}[/red]")
            raise typer.Exit(1)
    else:
        store = get_vector_store()

    return VectorStoreRetriever(store, expected_dimension=settings.vector_store.expected_dimension)


def _weight_overrides(frq_weight: Optional[float], quant_weight: Optional[float]) -> dict:
    """A single given weight implies the other as its complement."""
    if frq_weight is not None and quant_weight is None:
        quant_weight = round(1.0 - frq_weight, 10)
    elif quant_weight is not None and frq_weight is None:
        frq_weight = round(1.0 - quant_weight, 10)

    overrides = {}
    if frq_weight is not None:
        overrides["frq_weight"] = frq_weight
        overrides["quant_weight"] = quant_weight
    return overrides


@app.command()
def version():
    """Show application version."""
    from teamate import __app_name__, __version__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def info():
    """Show configuration."""
    from teamate.utils.config import get_settings
    from teamate.utils.constants import APP_DISPLAY_NAME

    settings = get_settings()

    table = Table(title=f"{APP_DISPLAY_NAME} Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Vector Store", settings.vector_store.provider)
    table.add_row("Collection", settings.vector_store.collection_name)
    table.add_row("Store Location", settings.vector_store.host or str(settings.vector_store.persist_directory))
    table.add_row("FRQ Weight", str(settings.matching.frq_weight))
    table.add_row("Quant Weight", str(settings.matching.quant_weight))
    table.add_row("Assignment Strategy", settings.matching.strategy)
    table.add_row("Log Level", settings.logging.level)

    console.print(table)


@app.command()
def run(
    input_file: Optional[Path] = typer.Option(
        None, "--input", "-i", help="JSON file of pre-embedded participants (default: vector store)"
    ),
    frq_weight: Optional[float] = typer.Option(None, "--frq-weight", help="Weight of embedding similarity"),
    quant_weight: Optional[float] = typer.Option(None, "--quant-weight", help="Weight of structured answers"),
    strategy: Optional[str] = typer.Option(None, "--strategy", "-s", help="Assignment strategy (scipy/hungarian)"),
    csv_path: Optional[Path] = typer.Option(None, "--csv", help="Export matches to CSV"),
    json_path: Optional[Path] = typer.Option(None, "--json", help="Export the full result to JSON"),
    top_n: int = typer.Option(10, "--top", "-n", help="Number of matches to show"),
):
    """Run a full matching pass."""
    from teamate.core.matching import (
        AssignmentSolver,
        MatchingError,
        MatchingPipeline,
        get_assignment_strategy,
    )
    from teamate.reporting import export_matches_csv, export_result_json, generate_summary_report
    from teamate.utils.config import get_settings

    settings = get_settings()

    try:
        solver = AssignmentSolver(get_assignment_strategy(strategy or settings.matching.strategy))
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    retriever = _build_retriever(input_file)
    console.print("[yellow]Running matching...[/yellow]")

    try:
        with retriever:
            pipeline = MatchingPipeline(retriever, config=settings.matching.to_config(), solver=solver)
            result = pipeline.run_matching(_weight_overrides(frq_weight, quant_weight) or None)
    except MatchingError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not result.matches:
        console.print("[yellow]No matches were produced.[/yellow]")
    else:
        shown = result.matches[:top_n]
        table = Table(title=f"Top {len(shown)} of {len(result.matches)} Matches")
        table.add_column("Rank", style="dim", width=4)
        table.add_column("Seeker", style="cyan")
        table.add_column("Provider", style="cyan")
        table.add_column("Final", justify="right")
        table.add_column("FRQ", justify="right")
        table.add_column("Quant", justify="right")
        table.add_column("Confidence", justify="center")

        for match in shown:
            color = CONFIDENCE_COLORS[match.confidence.value]
            table.add_row(
                str(match.rank),
                escape(f"{match.left_name} ({match.left_id})"),
                escape(f"{match.right_name} ({match.right_id})"),
                f"{match.scores.final:.4f}",
                f"{match.scores.frq:.4f}",
                f"{match.scores.quant:.4f}",
                f"[{color}]{match.confidence.value.upper()}[/{color}]",
            )

        console.print(table)

    console.print(escape(generate_summary_report(result)))

    if csv_path:
        export_matches_csv(result.matches, csv_path)
        console.print(f"[green]✓ Matches exported to {csv_path}[/green]")
    if json_path:
        export_result_json(result, json_path)
        console.print(f"[green]✓ Result exported to {json_path}[/green]")


@app.command()
def score(
    id_a: str = typer.Argument(..., help="First participant ID"),
    id_b: str = typer.Argument(..., help="Second participant ID"),
    input_file: Optional[Path] = typer.Option(
        None, "--input", "-i", help="JSON file of pre-embedded participants (default: vector store)"
    ),
):
    """Compute the match score of two participants."""
    from teamate.core.matching import MatchingError, SinglePairScorer
    from teamate.utils.config import get_settings

    settings = get_settings()
    retriever = _build_retriever(input_file)

    try:
        with retriever:
            result = SinglePairScorer(retriever, config=settings.matching.to_config()).compute_match_score(id_a, id_b)
    except MatchingError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    color = CONFIDENCE_COLORS[result.confidence.value]
    console.print(f"\n[bold]Match score {escape(id_a)} <-> {escape(id_b)}[/bold]")
    console.print(f"  FRQ Score:   {result.frq_score:.4f}")
    console.print(f"  Quant Score: {result.quant_score:.4f}")
    console.print(f"  Final Score: {result.final_score:.4f} ([bold]{result.final_percentage}%[/bold])")
    console.print(f"  Confidence:  [{color}]{result.confidence.value.upper()}[/{color}]")


@app.command()
def ingest(
    path: Path = typer.Argument(..., help="JSON file of pre-embedded participants"),
):
    """Add or replace participants in the vector store."""
    from teamate.data.retrieval import RecordParseError, VectorStoreRetriever, parse_participant
    from teamate.data.vector_store import get_vector_store, load_records_from_json
    from teamate.utils.config import get_settings

    settings = get_settings()
    expected_dimension = settings.vector_store.expected_dimension

    if not path.exists():
        console.print(f"[red]Error: File not found: {path}[/red]")
        raise typer.Exit(1)

    try:
        records = load_records_from_json(path)
    except ValueError as e:
        console.print(f"[red]Error reading {path}: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    participants = []
    for record in records:
        try:
            participants.append(parse_participant(record, expected_dimension))
        except RecordParseError as e:
            console.print(f"[dim]  Skipping {escape(record.id)}: {escape(str(e))}[/dim]")

    if not participants:
        console.print("[yellow]No valid participants to ingest.[/yellow]")
        raise typer.Exit(1)

    with VectorStoreRetriever(get_vector_store(), expected_dimension=expected_dimension) as retriever:
        count = retriever.ingest(participants)

    console.print(f"[green]✓ Ingested {count} of {len(records)} participants[/green]")


@app.command()
def delete(
    ids: list[str] = typer.Argument(..., help="Participant IDs to delete"),
):
    """Delete participants from the vector store."""
    from teamate.data.retrieval import VectorStoreRetriever
    from teamate.data.vector_store import get_vector_store

    with VectorStoreRetriever(get_vector_store()) as retriever:
        retriever.delete(ids)

    console.print(f"[green]✓ Deleted {len(ids)} participant(s)[/green]")


if __name__ == "__main__":
    app()
