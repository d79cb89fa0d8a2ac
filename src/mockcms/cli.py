"""CLI for inspecting fixtures through the repository's query engine."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from mockcms.config import load_config
from mockcms.errors import StoreError
from mockcms.fixtures import FixtureError, repository_from_fixture
from mockcms.repository import Repository

app = typer.Typer(
    name="mockcms",
    help="In-memory content repository for testing content-backend clients.",
)

console = Console()

FixtureArg = Annotated[
    Path,
    typer.Argument(
        help="YAML or JSON fixture to seed the repository with.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from mockcms import __version__

        console.print(f"mockcms {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log repository activity."),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to a .mockcms.toml file."),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """mockcms - fake content backend."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )
    ctx.obj = load_config(config)


def _open(ctx: typer.Context, fixture: Path) -> Repository:
    try:
        return repository_from_fixture(fixture, config=ctx.obj)
    except FixtureError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc


@app.command(name="types")
def types_cmd(ctx: typer.Context, fixture: FixtureArg) -> None:
    """List registered types and their capability flags."""
    repository = _open(ctx, fixture)
    table = Table(title="Types")
    for column in ("name", "versioned", "channel", "group", "hierarchical", "state"):
        table.add_column(column)
    for t in repository.list_types():
        table.add_row(
            t.name,
            str(t.versioned),
            str(t.channel_specific),
            str(t.publishing_group_specific),
            str(t.hierarchical),
            str(t.has_published_state),
        )
    console.print(table)


@app.command(name="list")
def list_cmd(
    ctx: typer.Context,
    fixture: FixtureArg,
    type_name: Annotated[
        str | None,
        typer.Option("--type", "-t", help="Restrict to one type."),
    ] = None,
    keyword: Annotated[str | None, typer.Option("--keyword", "-k")] = None,
    only_published: Annotated[bool, typer.Option("--only-published")] = False,
    size: Annotated[int | None, typer.Option("--size", "-n", min=1)] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print raw JSON.")] = False,
) -> None:
    """List content with the same filters the /all route accepts."""
    repository = _open(ctx, fixture)
    try:
        page = repository.list(
            type_name,
            {"keyword": keyword, "onlyPublished": only_published, "size": size},
        )
    except StoreError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc

    if as_json:
        typer.echo(json.dumps(page.model_dump(mode="json", by_alias=True, exclude_none=True), indent=2))
        return
    table = Table(title=f"Content ({type_name or 'all types'})")
    table.add_column("id")
    table.add_column("type")
    table.add_column("seq", justify="right")
    table.add_column("name")
    for item in page.items:
        attrs = item.content.get("attributes")
        name = attrs.get("name", "") if isinstance(attrs, dict) else ""
        table.add_row(item.id, item.type, str(item.sequence_number), str(name))
    console.print(table)
    if page.next_cursor is not None:
        console.print(f"next cursor: {page.next_cursor}")


@app.command(name="search")
def search_cmd(
    ctx: typer.Context,
    fixture: FixtureArg,
    query: Annotated[str, typer.Argument(help="Search terms.")] = "",
    prefix: Annotated[
        bool,
        typer.Option("--prefix", help="Require every term to prefix a word."),
    ] = False,
    types: Annotated[
        list[str] | None,
        typer.Option("--type", "-t", help="Restrict to these types."),
    ] = None,
) -> None:
    """Search content names and text."""
    repository = _open(ctx, fixture)
    result = repository.search(
        {"q": query, "behavior": "prefix" if prefix else "any", "types": types or None}
    )
    table = Table(title=f"{result.total} hit(s)")
    table.add_column("id")
    table.add_column("type")
    table.add_column("title", no_wrap=True)
    for hit in result.hits:
        table.add_row(hit.id, hit.type, hit.title)
    console.print(table)


@app.command(name="slugs")
def slugs_cmd(
    ctx: typer.Context,
    fixture: FixtureArg,
    channel: Annotated[str | None, typer.Option("--channel")] = None,
    value: Annotated[str | None, typer.Option("--value")] = None,
) -> None:
    """List slugs, optionally filtered by channel and value."""
    repository = _open(ctx, fixture)
    table = Table(title="Slugs")
    table.add_column("channel")
    table.add_column("path", no_wrap=True)
    for column in ("valueType", "value", "publishTime"):
        table.add_column(column)
    for slug in repository.search_slugs(channel=channel, value=value):
        table.add_row(
            slug.channel or "",
            slug.path,
            slug.value_type,
            slug.value,
            slug.publish_time.isoformat(),
        )
    console.print(table)
