"""Command-line entry point for the development packages installer."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Iterable, Optional

from rich import box
from rich.table import Table

from . import configure_logging, console, logger
from .executor import CommandExecutor
from .menu import SelectionMenu
from .model import AbortedOnFailure, Completed, PrivilegeMismatch
from .orchestrator import InstallOrchestrator
from .privilege import current_is_root
from .prompts import Prompter
from .registry import build_registry, describe
from .settings import SETTINGS_FILE, apply_overrides, load_settings, save_settings
from .system import check_disk_space, check_operating_system, is_linux

EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Pick development packages from a menu and install them")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging verbosity (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help=f"Settings file (default: {SETTINGS_FILE})",
    )
    parser.add_argument(
        "--init-settings",
        action="store_true",
        help="Write the effective settings to the settings file and exit",
    )
    parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Accept the default answer to every question",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log commands instead of running them",
    )
    parser.add_argument(
        "--exit-delay",
        type=float,
        default=None,
        help="Seconds to wait after the final message",
    )
    parser.add_argument(
        "--skip-os-check",
        action="store_true",
        help="Do not check the Linux distribution before starting",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the available packages and exit",
    )
    return parser


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def end_of_program(message: str, delay: float = 0.0) -> None:
    console.print(f"\n{message}\nEnd of program, closing soon...")
    if delay > 0:
        time.sleep(delay)


def print_registry(actions) -> None:
    table = Table(box=box.ROUNDED)
    table.add_column("#", style="yellow bold", justify="right")
    table.add_column("Package", style="cyan bold")
    table.add_column("Runs as", style="magenta")
    table.add_column("Handler", style="dim")
    for row in describe(actions):
        handler = row['handler'] + (f" ({', '.join(row['params'])})" if row['params'] else "")
        table.add_row(str(row['key']), row['name'], row['privilege'], handler)
    console.print(table)


def run_installer(args: argparse.Namespace) -> int:
    settings = apply_overrides(load_settings(args.settings), args)

    if args.init_settings:
        target = args.settings or SETTINGS_FILE
        if not save_settings(settings, target):
            console.print(f"[red]Could not write settings to {target}[/red]")
            return 1
        console.print(f"[green]✓ Settings written to {target}[/green]")
        return 0

    actions = build_registry()
    if args.list:
        print_registry(actions)
        return 0

    prompter = Prompter(settings.assume_yes)
    if not args.skip_os_check:
        if not is_linux():
            console.print(f"[red]This installer is designed for Linux/Ubuntu systems only. Current OS: {sys.platform}[/red]")
            return 1
        if not check_operating_system(prompter.confirm):
            end_of_program("Installation aborted by user.", settings.exit_delay)
            return 0

    is_root = current_is_root()
    logger.debug("Session is %s", "root" if is_root else "a regular user")

    console.clear()
    selection = SelectionMenu(is_root=is_root).open(actions)
    if selection.is_cancelled or selection.is_empty:
        end_of_program("No package selected", settings.exit_delay)
        return 0
    if not selection.satisfiable:
        console.print("[yellow]⚠️  The selection cannot be installed in a single run under this session.[/yellow]")

    check_disk_space()

    orchestrator = InstallOrchestrator(
        CommandExecutor(dry_run=settings.dry_run),
        settings=settings,
        prompter=prompter,
        is_root=is_root,
    )
    outcome = orchestrator.run(selection.actions)

    if isinstance(outcome, Completed):
        end_of_program(f"Installations completed ({outcome.count} package(s))", settings.exit_delay)
    elif isinstance(outcome, AbortedOnFailure):
        console.print(f"[red]Error: The command '{outcome.command}' failed with code {outcome.exit_code}[/red]")
        end_of_program("Installation aborted due to an error.", settings.exit_delay)
    elif isinstance(outcome, PrivilegeMismatch):
        end_of_program("Installation aborted: privilege mismatch.", settings.exit_delay)
    return outcome.exit_code


def main(argv: Optional[Iterable[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        code = run_installer(args)
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Installation terminated by user[/yellow]\n")
        raise SystemExit(EXIT_INTERRUPTED)
    if code:
        raise SystemExit(code)
