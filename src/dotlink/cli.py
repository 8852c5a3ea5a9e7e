"""Command-line interface for dotlink."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, NoReturn, Sequence

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .__about__ import __version__
from .config import load_settings
from .errors import DotlinkError, ExternalToolError
from .logging import setup_logging
from .manager import DotlinkManager
from .models import (
    CommandResult,
    LinkAction,
    LinkResult,
    LinkState,
    StatusEntry,
    SubtreeAction,
    SubtreeResult,
    UnlinkAction,
    UnlinkResult,
)

app = typer.Typer(
    help="Keep dotfiles in a git repository and symlink them into your home directory.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

ACTION_STYLES = {
    LinkAction.LINKED: "green",
    LinkAction.FORCED: "yellow",
    LinkAction.EXISTS: "blue",
    LinkAction.FAILED: "red",
    UnlinkAction.REMOVED: "green",
    UnlinkAction.SKIPPED: "blue",
    UnlinkAction.FAILED: "red",
    SubtreeAction.PULLED: "green",
    SubtreeAction.ADDED: "green",
    SubtreeAction.SKIPPED: "blue",
}

STATE_STYLES = {
    LinkState.LINKED: "green",
    LinkState.ABSENT: "yellow",
    LinkState.OCCUPIED: "red",
}


@dataclass
class CliState:
    config: Path | None = None


def _load_manager(config: Path | None) -> DotlinkManager:
    return DotlinkManager(load_settings(config))


def _handle_error(exc: Exception) -> NoReturn:
    if isinstance(exc, PermissionError):
        err_console.print(f"[red]✗ Permission denied:[/red] {escape(str(exc))}", soft_wrap=True)
        raise typer.Exit(code=1)
    if isinstance(exc, ExternalToolError):
        err_console.print(f"[red]✗ {escape(str(exc))}[/red]", soft_wrap=True)
        if exc.stderr:
            err_console.print(escape(_indent(exc.stderr)), highlight=False, soft_wrap=True)
        raise typer.Exit(code=1)
    if isinstance(exc, DotlinkError):
        err_console.print(f"[red]✗ {escape(str(exc))}[/red]", soft_wrap=True)
        raise typer.Exit(code=1)
    raise exc


def _indent(text: str, prefix: str = "    ") -> str:
    return "\n".join(prefix + line for line in text.splitlines())


def _styled(value: str, style: str) -> str:
    return f"[{style}]{value}[/{style}]"


def _format_entry_results(results: Sequence[LinkResult | UnlinkResult]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Entry")
    table.add_column("Home path", overflow="fold")
    table.add_column("Action")
    table.add_column("Details", overflow="fold")

    for result in results:
        table.add_row(
            escape(result.name),
            escape(str(result.target)),
            _styled(result.action.value, ACTION_STYLES[result.action]),
            escape(result.details or ""),
        )

    console.print(table)


def _exit_on_failures(results: Sequence[LinkResult | UnlinkResult]) -> None:
    failed = [result for result in results if result.action in (LinkAction.FAILED, UnlinkAction.FAILED)]
    if failed:
        names = ", ".join(result.name for result in failed)
        err_console.print(f"[red]✗ {len(failed)} entries failed: {escape(names)}[/red]", soft_wrap=True)
        raise typer.Exit(code=1)


def _format_status(entries: Iterable[StatusEntry]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Entry")
    table.add_column("State")
    table.add_column("Details", overflow="fold")

    for entry in entries:
        table.add_row(
            escape(entry.name),
            _styled(entry.state.value, STATE_STYLES[entry.state]),
            escape(entry.details or ""),
        )

    console.print(table)


def _format_command(result: CommandResult) -> None:
    if result.output:
        console.print(escape(_indent(result.output)), highlight=False, soft_wrap=True)


def _format_subtree_result(result: SubtreeResult) -> None:
    style = ACTION_STYLES[result.action]
    prefix = escape(result.entry.prefix.as_posix())
    if result.action is SubtreeAction.SKIPPED:
        console.print(f"{_styled(result.action.value, style)} {prefix} (no remote configured)")
        return
    console.print(f"{_styled(result.action.value, style)} {prefix} from {escape(result.entry.url or '')}")
    if result.command is not None:
        _format_command(result.command)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"dotlink {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to dotlink.toml"),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Keep dotfiles in a git repository and symlink them into your home directory."""

    setup_logging(debug=verbose)
    ctx.obj = CliState(config=config)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command()
def clone(
    ctx: typer.Context,
    url: str = typer.Argument("", help="Remote repository to clone", show_default=False),
) -> None:
    """Clone a dotfiles repository into the managed location."""

    try:
        manager = _load_manager(ctx.obj.config)
        path = manager.clone(url)
        console.print(f"[green]Cloned into '{escape(str(path))}'.[/green]")
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)


@app.command()
def update(
    ctx: typer.Context,
    subtrees: bool = typer.Option(False, "--subtrees", "-s", help="Also pull subtrees listed in the manifest"),
) -> None:
    """Fetch the remote and rebase, optionally refreshing subtrees."""

    try:
        manager = _load_manager(ctx.obj.config)
        manifest = manager.load_subtrees() if subtrees else None
        _format_command(manager.update())
        if manifest is not None:
            for result in manager.sync_subtrees(manifest):
                _format_subtree_result(result)
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)


@app.command()
def link(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Replace existing files and directories"),
    pretend: bool = typer.Option(False, "--pretend", "-p", help="Report what would happen without changing anything"),
) -> None:
    """Symlink repository entries into the home directory."""

    try:
        manager = _load_manager(ctx.obj.config)
        if pretend:
            logger.info("Pretend mode: no files will be changed")
        results = manager.link(force=force, pretend=pretend)
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)

    _format_entry_results(results)
    _exit_on_failures(results)


@app.command()
def unlink(
    ctx: typer.Context,
    pretend: bool = typer.Option(False, "--pretend", "-p", help="Report what would happen without changing anything"),
) -> None:
    """Remove home directory symlinks that point into the repository."""

    try:
        manager = _load_manager(ctx.obj.config)
        if pretend:
            logger.info("Pretend mode: no files will be changed")
        results = manager.unlink(pretend=pretend)
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)

    _format_entry_results(results)
    _exit_on_failures(results)


@app.command("import")
def import_(
    ctx: typer.Context,
    name: str = typer.Argument("", help="File in the home directory to move into the repository", show_default=False),
) -> None:
    """Move a home directory file into the repository and link it back."""

    try:
        manager = _load_manager(ctx.obj.config)
        result = manager.import_entry(name)
        console.print(
            f"[green]imported[/green] {escape(result.name)} -> {escape(str(result.source))}",
            highlight=False,
        )
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)


@app.command()
def status(ctx: typer.Context) -> None:
    """Show how each repository entry relates to the home directory."""

    try:
        manager = _load_manager(ctx.obj.config)
        _format_status(manager.status())
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)


def run() -> None:
    """Entry point used for console_script bindings."""

    app()
