# mountains/mtn.py
# Mountains - A terminal-based training log
# Copyright (C) 2024 Zach McKinnon
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
'''
Mountains CLI
Opens the full-screen training log, or runs one-shot store commands
(status, sync, show, delete) against the same local store.
'''
import curses
import logging
from datetime import date, datetime
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

import mountains.config.config_manager as cf
from mountains.app_state import AppState
from mountains.utils import log_utils
from mountains.utils.db import StoreManager, is_initialized, resolve_db_path
from mountains.utils.error_handler import MountainsError, SchemaError, StoreIOError
from mountains.utils.markdown_backup import MarkdownBackup, daily_log_to_markdown

app = typer.Typer(
    help="⛰  Mountains: log weight, miles, vert, food and sokay by day.")

console = Console()
logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Core Initialization System
# -------------------------------------------------------------------


def _parse_day(value: Optional[str]) -> date:
    if not value:
        return date.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {value!r}")


def open_store(console_logging: bool = True) -> StoreManager:
    """
    Load .env and logging, then bootstrap the local store.
    Bootstrap failures are fatal: the app never runs without a store.
    """
    cf.load_env()
    log_utils.setup_logging(cf.get_log_level(), console=console_logging)
    backup = MarkdownBackup(cf.BASE_DIR) if cf.is_markdown_backup_enabled() else None
    if not is_initialized(resolve_db_path(cf.BASE_DIR)):
        logger.info(f"No store yet; creating one in {cf.BASE_DIR}")
    try:
        return StoreManager.open(cf.BASE_DIR, backup=backup)
    except (StoreIOError, SchemaError) as e:
        logger.error(f"Store bootstrap failed: {e}", exc_info=True)
        console.print(f"[red]Could not open the local store: {e}[/red]")
        raise typer.Exit(1)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """Run without a command to open the full-screen log."""
    if ctx.invoked_subcommand is None:
        ui()


@app.command("ui")
def ui():
    """
    Launch the full-screen Mountains TUI.
    - Bootstraps the local store before the first frame.
    - Starts the one-time upgrade to a remote replica in the background
      when TURSO_DATABASE_URL and TURSO_AUTH_TOKEN are set.
    """
    from mountains.ui import main as ui_main

    manager = open_store(console_logging=False)
    try:
        state = AppState(manager.load_all())
    except MountainsError as e:
        manager.shutdown(final_sync=False)
        console.print(f"[red]Could not load your logs: {e}[/red]")
        raise typer.Exit(1)

    manager.start()
    creds = cf.get_remote_credentials()
    if creds:
        manager.start_replica_upgrade(*creds)
    else:
        logger.info("No remote credentials; running local-only")

    try:
        curses.wrapper(ui_main, manager, state)
    except KeyboardInterrupt:
        manager.shutdown(final_sync=True)
    except Exception as e:
        logger.error(f"Error in TUI main: {e}", exc_info=True)
        console.print(f"[red]TUI failed: {e}[/red]")
        manager.shutdown(final_sync=True)
        raise typer.Exit(1)


@app.command("status")
def status():
    """Show where the store lives and whether it is a remote replica."""
    manager = open_store()
    try:
        table = Table(show_header=False, box=None)
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Store", str(manager.db_path))
        table.add_row("Days logged", str(manager.count()))
        table.add_row("Remote replica", "yes" if manager.is_replica else "no")
        table.add_row("Credentials", "set" if cf.get_remote_credentials() else "not set")
        table.add_row("Sync interval", f"{cf.get_sync_interval()}s")
        console.print(table)
    finally:
        manager.shutdown(final_sync=False)


def connect_remote(manager: StoreManager) -> bool:
    """
    Run the replica upgrade inline when credentials are set, so one-shot
    commands write through the replica like the TUI does.
    Returns True when the store ends up Connected.
    """
    creds = cf.get_remote_credentials()
    if not creds:
        return False
    manager.start_replica_upgrade(*creds)
    return manager.get_connection_state().is_connected


@app.command("sync")
def sync():
    """Connect to the remote database (upgrading the store if needed) and sync once."""
    manager = open_store()
    try:
        if not cf.get_remote_credentials():
            console.print(
                f"[yellow]Set {cf.TURSO_URL_ENV} and {cf.TURSO_TOKEN_ENV} to sync.[/yellow]")
            raise typer.Exit(1)
        if not connect_remote(manager):
            state = manager.get_connection_state()
            console.print(f"[red]{manager.get_sync_status().label}: {state.message}[/red]")
            raise typer.Exit(1)
        try:
            manager.sync_now()
        except MountainsError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
        console.print(f"[green]{manager.get_sync_status().label}[/green] "
                      f"({manager.count()} days)")
    finally:
        manager.shutdown(final_sync=False)


@app.command("show")
def show(
    day: Annotated[Optional[str], typer.Argument(help="YYYY-MM-DD, default today")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the record as JSON.")] = False,
):
    """Print one day's log."""
    target = _parse_day(day)
    manager = open_store()
    try:
        log = manager.load(target)
    finally:
        manager.shutdown(final_sync=False)
    if log is None or log.is_empty():
        console.print(f"[yellow]Nothing logged on {target:%m/%d/%Y}.[/yellow]")
        return
    if as_json:
        console.print_json(data=log.to_dict())
        return
    console.print(Markdown(daily_log_to_markdown(log)))


@app.command("delete")
def delete(
    day: Annotated[str, typer.Argument(help="YYYY-MM-DD")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation.")] = False,
):
    """Delete a day and all its food and sokay entries."""
    target = _parse_day(day)
    if not yes and not typer.confirm(f"Delete everything logged on {target:%m/%d/%Y}?",
                                     default=False):
        console.print("[yellow]Aborted[/yellow]")
        raise typer.Exit(0)
    manager = open_store()
    try:
        connect_remote(manager)
        removed = manager.delete_now(target)
    except MountainsError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        manager.shutdown(final_sync=True)
    if removed:
        console.print(f"[green]✓ Deleted {target:%m/%d/%Y}[/green] "
                      f"({manager.get_sync_status().label})")
    else:
        console.print(f"[yellow]Nothing logged on {target:%m/%d/%Y}.[/yellow]")


if __name__ == "__main__":
    app()
