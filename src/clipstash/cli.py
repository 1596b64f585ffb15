# region Docstring
"""
clipstash.cli
Command line entry point.
Overview:
- No command: open the interactive history browser. The committed entry is written
    to the clipboard and echoed to stdout.
- setup / db: choose the database location and persist it in config.json.
- install / uninstall / start / stop / status: manage the monitor daemon as a user
    service.
- clear: delete history (everything, one entry, or entries older than N days).
- daemon (hidden): run the monitor in the foreground; this is what the service runs.
Design notes:
- ClipstashError is the command boundary: it is printed as a one line red
    diagnostic and the process exits with status 1.
"""
# endregion
# region Imports
import functools
import logging
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from clipstash import __version__, clipboard
from clipstash.browser import run_browser
from clipstash.config import (
    DB_PATH_ENV_VAR,
    BrowserSettings,
    ConfigManager,
    LogSettings,
    MonitorSettings,
    UserConfig,
    expand_db_path,
    get_settings,
)
from clipstash.config.base import AppEnv
from clipstash.errors import (
    ClipboardError,
    ClipstashError,
    ConfigError,
    ConfigNotFoundError,
    StoreNotInitializedError,
)
from clipstash.logger import setup_logging
from clipstash.monitor import serve
from clipstash.service import DaemonService
from clipstash.store import HistoryStore

# endregion

logger = logging.getLogger("clipstash").getChild("cli")

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="clipstash",
    help="Clipboard history manager: a background monitor plus a terminal browser.",
    add_completion=False,
)

# region Helpers


def handle_errors(func):
    """Turn a ClipstashError raised by a command into a diagnostic and exit status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ClipstashError as e:
            logger.error(f"{func.__name__} failed: {e}")
            err_console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=1)

    return wrapper


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"clipstash {__version__}")
        raise typer.Exit()


def _require_config(manager: ConfigManager) -> Path:
    if not manager.is_configured():
        raise ConfigNotFoundError()
    return manager.db_path()


def _open_existing_store(db_path: Path) -> HistoryStore:
    try:
        return HistoryStore.open(db_path, create=False)
    except StoreNotInitializedError as e:
        raise StoreNotInitializedError(
            f"{e.message}. Make sure the daemon is running or run 'clipstash setup'.",
            e.original_error,
        )


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size // 1024} KB"
    return f"{size / (1024 * 1024):.1f} MB"


# endregion
# region Browser


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """Browse clipboard history (default when no command is given)."""
    is_daemon = ctx.invoked_subcommand == "daemon"
    setup_logging(get_settings(LogSettings), console=is_daemon, archive=is_daemon)
    if ctx.invoked_subcommand is None:
        browse()


@handle_errors
def browse() -> None:
    db_path = _require_config(ConfigManager())
    with _open_existing_store(db_path) as store:
        selection = run_browser(store, get_settings(BrowserSettings), db_path)

    if selection is None:
        return
    try:
        clipboard.write_text(selection)
    except ClipboardError as e:
        err_console.print(f"[bold red]Error:[/bold red] Could not copy the selection: {e}")
        raise typer.Exit(code=1)
    typer.echo(selection)


# endregion
# region Configuration commands


@app.command(name="setup", help="Choose the database location and install the daemon.")
@handle_errors
def setup():
    console.print("\n[bold cyan]clipstash setup[/bold cyan]\n")
    manager = ConfigManager()
    default_path = AppEnv.default_db_path()

    if typer.confirm(f"Use the default database location ({default_path})?", default=True):
        db_path = default_path
    else:
        raw = typer.prompt("Absolute path for the database file")
        db_path = Path(raw).expanduser()
        if not db_path.is_absolute():
            raise ConfigError(f"Database path must be absolute, got {raw!r}")

    HistoryStore.open(db_path, create=True).close()
    manager.save(UserConfig(db_path=str(db_path), version=__version__))
    console.print(f"[green]✓[/green] Database configured at {db_path}")

    service = DaemonService()
    if service.supported and typer.confirm(
        "Install the clipboard monitoring daemon?", default=False
    ):
        path = service.install()
        console.print(f"[green]✓[/green] Daemon installed ({path})")

    console.print("\n[bold green]Setup complete.[/bold green]")
    console.print("Next steps:")
    console.print("  1. Run 'clipstash start' to start the daemon")
    console.print("  2. Run 'clipstash' to browse your history\n")


@app.command(name="db", help="Switch the database location (absolute, ~/ or home-relative).")
@handle_errors
def db(path: str = typer.Argument(..., help="New database file location.")):
    db_path = expand_db_path(path)
    HistoryStore.open(db_path, create=True).close()
    ConfigManager().save(UserConfig(db_path=str(db_path), version=__version__))
    console.print(f"[green]✓[/green] Database path switched to: {db_path}")

    if DB_PATH_ENV_VAR in os.environ:
        console.print(
            f"[yellow]Note:[/yellow] {DB_PATH_ENV_VAR} is set and still takes precedence."
        )

    service = DaemonService()
    if service.supported and service.is_installed():
        service.restart()
        console.print("[green]✓[/green] Daemon restarted")


# endregion
# region Service commands


@app.command(name="install", help="Install the monitor daemon as a user service.")
@handle_errors
def install():
    path = DaemonService().install()
    console.print(f"[green]✓[/green] Daemon installed ({path})")
    console.print("It starts automatically at login; run 'clipstash start' to start it now.")


@app.command(name="uninstall", help="Stop the monitor daemon and remove its user service.")
@handle_errors
def uninstall():
    service = DaemonService()
    if service.uninstall():
        console.print(f"[green]✓[/green] Daemon uninstalled ({service.unit_path})")
    else:
        console.print("[yellow]Daemon is not installed.[/yellow]")
    console.print("Clipboard history is kept; use 'clipstash clear --all' to delete it.")


@app.command(name="start", help="Start the monitor daemon.")
@handle_errors
def start():
    DaemonService().start()
    console.print("[green]✓[/green] Daemon started")


@app.command(name="stop", help="Stop the monitor daemon.")
@handle_errors
def stop():
    DaemonService().stop()
    console.print("[green]✓[/green] Daemon stopped")


@app.command(name="status", help="Show daemon state and database statistics.")
@handle_errors
def status():
    db_path = _require_config(ConfigManager())
    service = DaemonService()

    console.print("\n[bold]Clipboard History Status[/bold]\n")
    if not service.supported:
        daemon_state = "[yellow]unsupported platform[/yellow]"
    elif not service.is_installed():
        daemon_state = "[red]✗ Not installed[/red]"
    elif service.is_running():
        daemon_state = "[green]✓ Running[/green]"
    else:
        daemon_state = "[red]✗ Stopped[/red]"
    console.print(f"Daemon:          {daemon_state}")

    if db_path.is_file():
        with HistoryStore.open(db_path, create=False) as store:
            console.print(f"Entries:         {store.count()}")
            console.print(f"Database size:   {_format_size(store.size_bytes())}")
    else:
        console.print("Entries:         [yellow]database not created yet[/yellow]")
    console.print(f"Database path:   {db_path}\n")


# endregion
# region Maintenance commands


@app.command(name="clear", help="Delete history entries (default: older than 30 days).")
@handle_errors
def clear(
    all_: bool = typer.Option(False, "--all", help="Delete every entry."),
    entry_id: Optional[int] = typer.Option(None, "--id", help="Delete one entry by id."),
    days: int = typer.Option(30, "--days", min=0, help="Age threshold in days."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
):
    if all_ and entry_id is not None:
        raise ConfigError("--all and --id cannot be combined")

    db_path = _require_config(ConfigManager())
    with _open_existing_store(db_path) as store:
        if all_:
            if not yes and not typer.confirm(
                "Delete ALL clipboard history? This cannot be undone.", default=False
            ):
                console.print("Clear cancelled.")
                return
            count = store.delete_all()
            console.print(f"[green]✓[/green] Deleted {count} clipboard entries")
        elif entry_id is not None:
            count = store.delete_by_id(entry_id)
            if count == 0:
                console.print(f"[yellow]No entry with id {entry_id}[/yellow]")
            else:
                console.print(f"[green]✓[/green] Deleted entry {entry_id}")
        else:
            count = store.delete_older_than(days)
            console.print(
                f"[green]✓[/green] Deleted {count} entries older than {days} days"
            )


@app.command(name="daemon", hidden=True, help="Run the clipboard monitor in the foreground.")
@handle_errors
def daemon():
    db_path = _require_config(ConfigManager())
    store = HistoryStore.open(db_path, create=True)
    try:
        code = serve(store, get_settings(MonitorSettings))
    finally:
        store.close()
    raise typer.Exit(code=code)


# endregion


def main() -> None:
    app()


if __name__ == "__main__":
    main()
