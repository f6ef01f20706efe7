"""CLI interface for family-connect."""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import Settings, load_settings
from .errors import FamilyConnectError, InvalidRelationError
from .graph import FamilyGraph
from .logging import configure_logging
from .models import ConnectionEdge
from .relations import parse_relation

app = typer.Typer(
    name="family-connect",
    help="Infer family relationships from known connections",
    add_completion=False,
)
console = Console()


def get_settings() -> Settings:
    """Load settings from the environment and any .env file."""
    from dotenv import load_dotenv

    load_dotenv()
    return load_settings()


@app.callback()
def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, json_output=settings.log_json)


def _load(file_path: Path, strict: bool | None = None) -> FamilyGraph:
    from .loader import load_family

    try:
        return load_family(file_path, strict=strict)
    except FamilyConnectError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _edge_table(title: str, edges: list[ConnectionEdge]) -> Table:
    table = Table(title=title)
    table.add_column("From")
    table.add_column("Relation")
    table.add_column("To")
    table.add_column("Level", justify="right")

    for edge in edges:
        table.add_row(
            edge.source.name,
            f"{edge.label} ({edge.kind.value})",
            edge.target.name,
            str(edge.level),
        )
    return table


@app.command()
def relation(
    file_path: Path = typer.Argument(..., help="Family document (JSON)"),
    person1: str = typer.Argument(..., help="Id of the first person"),
    person2: str = typer.Argument(..., help="Id of the second person"),
):
    """Show how the first person is related to the second."""
    graph = _load(file_path)

    try:
        p1 = graph.get_person_by_id(person1)
        p2 = graph.get_person_by_id(person2)
        connection = graph.get_connection(p1, p2)
    except FamilyConnectError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if connection is None:
        console.print(f"[yellow]{p1.name} and {p2.name} are not related[/yellow]")
        return

    console.print(
        f"[bold]{p1.name}[/bold] is the [green]{connection.label}[/green] of "
        f"[bold]{p2.name}[/bold] (level {connection.level})"
    )


@app.command()
def chain(
    file_path: Path = typer.Argument(..., help="Family document (JSON)"),
    person1: str = typer.Argument(..., help="Id of the first person"),
    person2: str = typer.Argument(..., help="Id of the second person"),
):
    """Show the shortest chain of direct relations between two people."""
    graph = _load(file_path)

    try:
        p1 = graph.get_person_by_id(person1)
        p2 = graph.get_person_by_id(person2)
        edges = graph.get_shortest_relation_chain(p1, p2)
        aggregate = graph.get_aggregate_connection(p1, p2)
    except FamilyConnectError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not edges:
        console.print(f"[yellow]{p1.name} and {p2.name} are not related[/yellow]")
        return

    console.print(_edge_table("Relation Chain", edges))
    if aggregate is not None:
        console.print(f"Aggregate: [green]{aggregate.label}[/green] (level {aggregate.level})")


@app.command()
def relatives(
    file_path: Path = typer.Argument(..., help="Family document (JSON)"),
    person: str = typer.Argument(..., help="Id of the person"),
    level: int = typer.Option(None, "--level", "-l", help="Only this many generations above"),
    relation_name: str = typer.Option(None, "--relation", "-r", help="Only relatives of this relation"),
):
    """List everyone a person is related to."""
    graph = _load(file_path)

    try:
        subject = graph.get_person_by_id(person)
        if relation_name:
            found = graph.get_persons_by_relation(subject, parse_relation(relation_name), level)
            table = Table(title=f"{relation_name.lower()} of {subject.name}")
            table.add_column("ID", style="dim")
            table.add_column("Name")
            table.add_column("Age", justify="right")
            for p in found:
                table.add_row(p.id, p.name, str(p.age))
            console.print(table)
            return

        if level is not None:
            edges = graph.get_members_at_generation(subject, level)
        else:
            edges = graph.get_all_connections_for_person(subject)
    except FamilyConnectError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(_edge_table(f"Relatives of {subject.name}", edges))
    console.print(f"[dim]Showing {len(edges)} relatives[/dim]")


@app.command()
def validate(
    file_path: Path = typer.Argument(..., help="Family document (JSON)"),
):
    """Check every relation in a family document."""
    from .loader import build_family, read_document

    try:
        document = read_document(file_path)
        graph = build_family(document, strict=True)
    except InvalidRelationError as e:
        console.print(f"[red]Invalid relation: {escape(str(e.claim))}[/red]")
        if e.validator:
            console.print(f"[dim]Rejected by {e.validator}[/dim]")
        raise typer.Exit(1)
    except FamilyConnectError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[green]Valid: {len(graph)} persons, {len(document.relations)} relations[/green]"
    )


@app.command()
def expand(
    file_path: Path = typer.Argument(..., help="Family document (JSON)"),
    output: Path = typer.Option(..., "--output", "-o", help="Output file"),
):
    """Store every inferred relation as a direct one and write the result."""
    from .loader import dump_family

    graph = _load(file_path)
    for person in graph.get_all_persons():
        graph.get_all_connections_for_person(person, memoize=True)

    document = dump_family(graph)
    with open(output, "w") as f:
        json.dump(document, f, indent=2)

    console.print(f"[green]Wrote {len(document['relations'])} relations to {output}[/green]")


if __name__ == "__main__":
    app()
