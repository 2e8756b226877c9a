"""Main CLI application for Crossplug."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from crossplug import __version__
from crossplug.adapters.dispatcher import adapt as adapt_plugin
from crossplug.config.parser import (
    ConfigError,
    load_install_record,
    load_json,
    load_project_defaults,
    save_install_record,
)
from crossplug.config.schemas import PlacementContext
from crossplug.core.uninstall import uninstall as uninstall_record
from crossplug.hooks.stop import run_stop_hook
from crossplug.utils.discovery import list_plugin_files
from crossplug.utils.safe_access import PathTraversalError, SafeFileNotFoundError

# Create the main Typer app
app = typer.Typer(
    name="crossplug",
    help="Adapt Claude Code plugins into Cursor workspaces",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)

# Set up logger for the crossplug package
logger = logging.getLogger("crossplug")

DEFAULT_MARKETPLACE = "local"
PLUGIN_MANIFEST = Path(".claude-plugin") / "plugin.json"


def setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2=DEBUG, 3+=DEBUG with source locations
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logger.setLevel(level)

    # Only add handler if not already configured
    if not logger.handlers:
        handler = RichHandler(
            console=error_console,
            show_time=verbosity >= 2,
            show_path=verbosity >= 3,
            rich_tracebacks=True,
        )
        handler.setLevel(level)
        logger.addHandler(handler)
    else:
        for h in logger.handlers:
            h.setLevel(level)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def plugin_name_for(plugin_dir: Path) -> str:
    """Name from .claude-plugin/plugin.json, falling back to the directory name."""
    manifest = plugin_dir / PLUGIN_MANIFEST
    if manifest.is_file():
        try:
            name = load_json(manifest).get("name")
        except ConfigError as e:
            logger.warning("Ignoring plugin manifest: %s", e)
        else:
            if isinstance(name, str) and name:
                return name
    return plugin_dir.name


@app.callback()
def callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v info, -vv debug, -vvv trace)",
        ),
    ] = 0,
) -> None:
    """Crossplug - adapt Claude Code plugins into Cursor workspaces."""
    setup_logging(verbose)


@app.command()
def version() -> None:
    """Show the Crossplug version."""
    console.print(f"crossplug {__version__}")


@app.command()
def adapt(
    plugin_dir: Annotated[
        Path,
        typer.Argument(help="Claude Code plugin directory"),
    ],
    marketplace: Annotated[
        str | None,
        typer.Option(
            "--marketplace",
            "-m",
            help="Marketplace name used in output paths",
        ),
    ] = None,
    plugin: Annotated[
        str | None,
        typer.Option(
            "--plugin",
            "-n",
            help="Plugin name (defaults to plugin.json name or directory name)",
        ),
    ] = None,
    agent: Annotated[
        str | None,
        typer.Option(
            "--agent",
            "-a",
            help="Output flavour: cursor (.mdc rules) or markdown (.md)",
        ),
    ] = None,
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Project directory (defaults to current directory)",
        ),
    ] = None,
    record: Annotated[
        Path | None,
        typer.Option(
            "--record",
            help="Write an install record for later uninstall",
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print the result as JSON",
        ),
    ] = False,
) -> None:
    """Adapt a Claude Code plugin into the project's .cursor directory.

    Skills, commands, instruction documents, and hooks are translated;
    agents are skipped with a warning.
    """
    project_root = Path.cwd() if path is None else path.resolve()
    plugin_dir = plugin_dir.resolve()

    if not plugin_dir.is_dir():
        print_error(f"Plugin directory does not exist: {plugin_dir}")
        raise typer.Exit(1)
    if not project_root.is_dir():
        print_error(f"Directory does not exist: {project_root}")
        raise typer.Exit(1)

    try:
        defaults = load_project_defaults(project_root)
        context = PlacementContext(
            project_root=project_root,
            marketplace_name=marketplace or defaults.marketplace or DEFAULT_MARKETPLACE,
            plugin_name=plugin or plugin_name_for(plugin_dir),
            agent=agent or defaults.agent,
            plugin_root=plugin_dir,
        )
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except ValidationError as e:
        print_error(f"Invalid placement: {e}")
        raise typer.Exit(1) from e

    try:
        result = adapt_plugin(list_plugin_files(plugin_dir), context)
    except (PathTraversalError, SafeFileNotFoundError) as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    install_record = result.to_record(context)
    if record is not None:
        save_install_record(record, install_record)

    if as_json:
        payload = install_record.to_dict()
        payload["warnings"] = result.warnings
        payload["skipped"] = result.skipped
        typer.echo(json.dumps(payload, indent=2))
        return

    if result.files:
        table = Table(title=f"{context.marketplace_name}/{context.plugin_name}")
        table.add_column("Created", style="cyan")
        for rel_path in result.files:
            table.add_row(rel_path)
        console.print(table)

    for warning in result.warnings:
        print_warning(warning)

    hook_count = sum(len(entries) for entries in result.hooks.values())
    print_success(f"Adapted {len(result.files)} file(s), {hook_count} hook(s)")
    if record is not None:
        console.print(f"  Record: {record}")


@app.command()
def uninstall(
    record: Annotated[
        Path,
        typer.Argument(help="Install record written by 'crossplug adapt --record'"),
    ],
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Project directory (defaults to current directory)",
        ),
    ] = None,
) -> None:
    """Remove the files and hooks a recorded adaptation created."""
    project_root = Path.cwd() if path is None else path.resolve()

    try:
        install_record = load_install_record(record)
        result = uninstall_record(install_record, project_root)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except PathTraversalError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    for rel_path in result.missing:
        print_warning(f"Already removed: {rel_path}")
    if result.hooks_changed:
        console.print("  Updated .cursor/hooks.json")

    print_success(
        f"Uninstalled {install_record.marketplace}/{install_record.plugin} "
        f"({len(result.removed)} file(s) removed)"
    )


@app.command("stop-hook")
def stop_hook(
    command: Annotated[
        list[str],
        typer.Argument(help="Claude Code stop hook command (after --)"),
    ],
) -> None:
    """Run a Claude Code stop hook and translate its output for Cursor.

    Example: crossplug stop-hook -- .cursor/hooks/crossplug/m/p/hooks/check.sh
    """
    stdin = None if sys.stdin.isatty() else sys.stdin.read()

    try:
        output = run_stop_hook(command, stdin=stdin)
    except OSError as e:
        print_error(f"Cannot run stop hook: {e}")
        raise typer.Exit(1) from e

    if output.stdout:
        typer.echo(output.stdout)
    raise typer.Exit(output.exit_code)


if __name__ == "__main__":
    app()
