import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from filehunt._channel import StreamHostChannel
from filehunt._enums import AppKind, FileKind, SizeComparison
from filehunt._models import FileNode, Node
from filehunt._path import format_path, parse_path, recycle_bin_path, resolve
from filehunt._scoring import EvaluationResult
from filehunt._search import DateFilter, SearchFilters, SizeFilter, SortKey, SortSpec
from filehunt._session import Session
from filehunt._store import TomlSessionStore, seed_snapshot

from .config import ConfigError, get_config

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)

StoreOption = Annotated[
    Path | None,
    typer.Option("--store", help="Session snapshot file (defaults to [tool.filehunt].store)"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Filehunt: find-the-file exercise on a simulated file system."""
    log_level = logging.DEBUG if verbose else logging.INFO

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


@contextmanager
def _open_session(store: Path | None) -> Iterator[Session]:
    """Load the session from its snapshot file, reporting to the configured target."""
    try:
        config = get_config()
    except ConfigError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    store_path = store or config.store_path
    logger.debug(f"Using session snapshot {store_path}")

    if config.report is None:
        yield Session(TomlSessionStore(store_path), StreamHostChannel(sys.stdout), target_origin=config.target_origin)
        return

    config.report.parent.mkdir(parents=True, exist_ok=True)
    with config.report.open("a", encoding="utf-8") as report:
        yield Session(TomlSessionStore(store_path), StreamHostChannel(report), target_origin=config.target_origin)


def _node_table(nodes: list[Node], title: str) -> Table:
    table = Table(show_header=True, header_style="bold cyan", title=title)
    table.add_column("Name", style="bold")
    table.add_column("Type")
    table.add_column("Size", justify="right", style="yellow")
    table.add_column("Modified", style="dim")

    for node in nodes:
        if isinstance(node, FileNode):
            table.add_row(
                escape(node.name),
                node.kind.value,
                f"{node.size_kb} KB",
                node.modified_at.strftime("%Y-%m-%d"),
            )
        else:
            table.add_row(escape(node.name), node.type, "", "")
    return table


def _print_evaluation(result: EvaluationResult) -> None:
    lines = [f"[bold]{result.score}[/bold] / {result.max_score}", "", escape(result.feedback), ""]
    for outcome in result.criteria:
        colour = "green" if outcome.passed else "red"
        lines.append(f"[{colour}]{escape(outcome.line)}[/{colour}]")
    err_console.print(Panel("\n".join(lines), title="[bold]Evaluation[/bold]", border_style="cyan"))


def _build_filters(
    kind: FileKind | None,
    larger_than: int | None,
    smaller_than: int | None,
    since: datetime | None,
) -> SearchFilters:
    if larger_than is not None and smaller_than is not None:
        msg = "Use either --gt or --lt, not both"
        raise typer.BadParameter(msg)

    size = None
    if larger_than is not None:
        size = SizeFilter(comparison=SizeComparison.GT, value=larger_than)
    elif smaller_than is not None:
        size = SizeFilter(comparison=SizeComparison.LT, value=smaller_than)

    return SearchFilters(
        type=kind,
        size=size,
        date=DateFilter(since=since) if since is not None else None,
    )


@app.command()
def init(
    *,
    store: StoreOption = None,
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing session")] = False,
) -> None:
    """Create a fresh session from the seed file system."""
    store_path = store or get_config().store_path
    if store_path.exists() and not force:
        err_console.print(f"[yellow]Session already exists at {store_path} (use --force to overwrite)[/yellow]")
        raise typer.Exit(code=1)

    TomlSessionStore(store_path).save(seed_snapshot())
    err_console.print(f"[green]✓ New session written to {store_path}[/green]")


@app.command()
def ls(  # noqa: PLR0913
    path: Annotated[str, typer.Argument(help="Folder path, e.g. 'This PC/Documents'")] = "This PC",
    *,
    query: Annotated[str, typer.Option("-q", "--query", help="Filter by name")] = "",
    kind: Annotated[FileKind | None, typer.Option("--type", help="Filter by file type")] = None,
    larger_than: Annotated[int | None, typer.Option("--gt", help="Only files larger than this (KB)")] = None,
    smaller_than: Annotated[int | None, typer.Option("--lt", help="Only files smaller than this (KB)")] = None,
    since: Annotated[datetime | None, typer.Option("--since", help="Only files modified since this date")] = None,
    sort: Annotated[SortKey, typer.Option("--sort", help="Sort key")] = SortKey.NAME,
    descending: Annotated[bool, typer.Option("--desc", help="Sort descending")] = False,
    store: StoreOption = None,
) -> None:
    """Navigate to a folder and list it, optionally searching within it."""
    tree_path = parse_path(path)
    filters = _build_filters(kind, larger_than, smaller_than, since)

    with _open_session(store) as session:
        nodes = session.navigate(tree_path)
        if query or not filters.is_empty:
            nodes = session.search_folder(tree_path, query, filters, SortSpec(key=sort, descending=descending))
        elif sort != SortKey.NAME or descending:
            nodes = session.search_folder(tree_path, sort=SortSpec(key=sort, descending=descending))

        err_console.print(_node_table(nodes, escape(format_path(tree_path))))
        if session.hint:
            err_console.print(f"[yellow]{escape(session.hint)}[/yellow]")


@app.command()
def find(
    query: Annotated[str, typer.Argument(help="Text to look for in file and folder names")],
    *,
    store: StoreOption = None,
) -> None:
    """Search the whole file system by name."""
    with _open_session(store) as session:
        hits = session.global_search(query)

    if not hits:
        err_console.print(f'No results found for "{escape(query)}"')
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Path")
    table.add_column("Type")
    for hit in hits:
        kind = hit.node.kind.value if isinstance(hit.node, FileNode) else hit.node.type
        table.add_row(escape(format_path(hit.path)), kind)
    err_console.print(table)


@app.command("open")
def open_(
    path: Annotated[str, typer.Argument(help="Path of the file or folder to open")],
    *,
    store: StoreOption = None,
) -> None:
    """Open a file or folder."""
    tree_path = parse_path(path)
    with _open_session(store) as session:
        if resolve(session.tree, tree_path) is None:
            err_console.print(f"[red]✗ Nothing at {escape(path)}[/red]")
            raise typer.Exit(code=1)
        result = session.open(tree_path)

    if result is not None:
        _print_evaluation(result)
    else:
        err_console.print(f"[green]✓ Opened {escape(path)}[/green]")


@app.command("app")
def app_(
    name: Annotated[AppKind, typer.Argument(help="Application to launch")],
    *,
    store: StoreOption = None,
) -> None:
    """Launch an application."""
    with _open_session(store) as session:
        path = (session.tree.name,) if name == AppKind.FILE_EXPLORER else None
        session.open_app(name, path)
    err_console.print(f"[green]✓ Launched {name.value}[/green]")


@app.command()
def mkdir(
    parent: Annotated[str, typer.Argument(help="Folder to create the new folder in")],
    name: Annotated[str, typer.Argument(help="Name of the new folder")],
    *,
    store: StoreOption = None,
) -> None:
    """Create a folder."""
    with _open_session(store) as session:
        created = session.create_folder(parse_path(parent), name)
    if not created:
        err_console.print(f"[yellow]Nothing created: '{escape(name)}' exists or the parent is missing[/yellow]")
        return
    err_console.print(f"[green]✓ Created {escape(name)}[/green]")


@app.command()
def rename(
    path: Annotated[str, typer.Argument(help="Path of the node to rename")],
    new_name: Annotated[str, typer.Argument(help="New name")],
    *,
    store: StoreOption = None,
) -> None:
    """Rename a file or folder."""
    with _open_session(store) as session:
        renamed = session.rename(parse_path(path), new_name)
    if not renamed:
        err_console.print(f"[yellow]Nothing renamed at {escape(path)}[/yellow]")
        return
    err_console.print(f"[green]✓ Renamed to {escape(new_name)}[/green]")


@app.command()
def rm(
    path: Annotated[str, typer.Argument(help="Path of the node to delete")],
    *,
    permanent: Annotated[bool, typer.Option("--permanent", help="Delete permanently (no effect)")] = False,
    store: StoreOption = None,
) -> None:
    """Move a file or folder to the Recycle Bin."""
    with _open_session(store) as session:
        if permanent:
            session.delete_permanently(parse_path(path))
            err_console.print("[dim]Permanent deletion is not available in the simulator.[/dim]")
            return
        deleted = session.delete(parse_path(path))
    if not deleted:
        err_console.print(f"[yellow]Nothing deleted at {escape(path)}[/yellow]")
        return
    err_console.print(f"[green]✓ Moved {escape(path)} to the Recycle Bin[/green]")


@app.command()
def restore(
    name: Annotated[str, typer.Argument(help="Name of the node in the Recycle Bin")],
    *,
    store: StoreOption = None,
) -> None:
    """Restore a node from the Recycle Bin to where it was deleted from."""
    with _open_session(store) as session:
        restored = session.restore((*recycle_bin_path(session.tree), name))
    if not restored:
        err_console.print(f"[yellow]Could not restore {escape(name)}[/yellow]")
        return
    err_console.print(f"[green]✓ Restored {escape(name)}[/green]")


@app.command()
def score(
    *,
    store: StoreOption = None,
) -> None:
    """Show the live score."""
    with _open_session(store) as session:
        live = session.live_score
        actions = len(session.log.entries)
    err_console.print(f"[cyan]Live score:[/cyan] [bold]{live}[/bold] / 10 [dim]({actions} actions)[/dim]")


@app.command()
def evaluate(
    *,
    store: StoreOption = None,
) -> None:
    """Finalize the session and report the result to the host."""
    with _open_session(store) as session:
        result = session.evaluate()
    _print_evaluation(result)


@app.command()
def reset(
    *,
    store: StoreOption = None,
) -> None:
    """Discard the action log and start over from the seed file system."""
    with _open_session(store) as session:
        session.reset(seed_snapshot())
    err_console.print("[green]✓ Session reset[/green]")
