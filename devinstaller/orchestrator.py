"""Sequential installation of a confirmed selection."""

from __future__ import annotations

import os
import shlex
import tempfile
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from rich.console import Console

from devinstaller_lib.download import FetchError, fetch_file, fetch_text

from . import console as default_console
from . import logger
from .errors import DownloadError, FileOperationError, InstallerError
from .executor import CommandExecutor
from .model import (
    AbortedOnFailure,
    Completed,
    InstallRun,
    PackageAction,
    PrivilegeMismatch,
)
from .privilege import current_is_root, first_unsatisfiable, is_mixed
from .prompts import Prompter
from .settings import Settings

ProgressCallback = Callable[[str, int, int], None]
RunOutcome = Union[Completed, AbortedOnFailure, PrivilegeMismatch]

INDEX_REFRESH_COMMAND = "apt-get update"


class InstallContext:
    """What a recipe can do: run commands, ask questions, touch files.

    One context lives for exactly one :class:`InstallRun`; the package index
    flag and remembered answers are kept on that run.
    """

    def __init__(
        self,
        run: InstallRun,
        executor: CommandExecutor,
        prompter: Prompter,
        settings: Settings,
        workdir: Path,
        console: Optional[Console] = None,
    ):
        self.run = run
        self.executor = executor
        self.prompter = prompter
        self.settings = settings
        self.workdir = Path(workdir)
        self.console = console or default_console

    @property
    def dry_run(self) -> bool:
        return self.executor.dry_run

    @property
    def home(self) -> Path:
        return Path(os.environ.get('HOME') or Path.home())

    # --- commands ---

    def execute(self, command: str) -> str:
        return self.executor.execute(command)

    def succeeds(self, command: str) -> bool:
        return self.executor.succeeds(command)

    def package_installed(self, package: str) -> bool:
        return self.succeeds(f"dpkg -s {shlex.quote(package)} > /dev/null 2>&1")

    def apt_install(self, *packages: str) -> None:
        self.execute("apt-get install -y " + " ".join(shlex.quote(p) for p in packages))

    def refresh_index(self, force: bool = False) -> None:
        """Refresh the package index once per run, or again when forced."""
        if self.run.index_refreshed and not force:
            logger.debug("Package index already refreshed in this run")
            return
        self.console.print("[dim]Refreshing package index...[/dim]")
        self.execute(INDEX_REFRESH_COMMAND)
        self.run.index_refreshed = True

    # --- files and downloads ---

    def download(self, url: str, dest: Union[str, Path]) -> Path:
        dest = Path(dest)
        if self.dry_run:
            logger.info("[dry-run] download %s -> %s", url, dest)
            return dest
        try:
            return fetch_file(url, dest)
        except FetchError as exc:
            raise DownloadError(url, exc.reason) from exc
        except OSError as exc:
            raise FileOperationError(dest, str(exc)) from exc

    def fetch_text(self, url: str) -> str:
        if self.dry_run:
            logger.info("[dry-run] fetch %s", url)
            return ""
        try:
            return fetch_text(url)
        except FetchError as exc:
            raise DownloadError(url, exc.reason) from exc

    def write_file(self, path: Union[str, Path], content: str, mode: int = 0o644) -> None:
        path = Path(path)
        if self.dry_run:
            logger.info("[dry-run] write %s", path)
            return
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding='utf-8')
            path.chmod(mode)
        except OSError as exc:
            raise FileOperationError(path, str(exc)) from exc

    def replace_in_file(self, path: Union[str, Path], replacements: Sequence[tuple]) -> bool:
        """Apply literal replacements; returns False when the file is missing."""
        path = Path(path)
        if not path.exists():
            return False
        try:
            content = path.read_text(encoding='utf-8')
        except OSError as exc:
            raise FileOperationError(path, str(exc)) from exc
        for old, new in replacements:
            content = content.replace(old, new)
        if self.dry_run:
            logger.info("[dry-run] rewrite %s", path)
            return True
        try:
            path.write_text(content, encoding='utf-8')
        except OSError as exc:
            raise FileOperationError(path, str(exc)) from exc
        return True

    # --- conversation ---

    def confirm(self, question: str, default: bool = True) -> bool:
        return self.prompter.confirm(question, default=default)

    def ask(self, question: str, default: str = "", choices=None) -> str:
        return self.prompter.ask(question, default=default, choices=choices)

    def remembered(self, key: str, question: str, default: str = "") -> str:
        """Ask once per run; later callers get the first answer."""
        if key not in self.run.answers:
            self.run.answers[key] = self.ask(question, default=default)
        return self.run.answers[key]

    def notice(self, message: str, style: str = "cyan") -> None:
        self.console.print(f"[{style}]{message}[/{style}]")

    def check_message(self, target: str) -> None:
        self.console.print(f"Checking for : {target}...")

    def already_installed(self, target: str) -> None:
        logger.info("%s already present; skipping", target)
        self.console.print(f"[yellow]ℹ️  {target} is already installed![/yellow]")


class InstallOrchestrator:
    """Run confirmed actions strictly in order, stopping at the first failure."""

    def __init__(
        self,
        executor: CommandExecutor,
        settings: Optional[Settings] = None,
        prompter: Optional[Prompter] = None,
        is_root: Optional[bool] = None,
        progress_callback: Optional[ProgressCallback] = None,
        console: Optional[Console] = None,
    ):
        self.executor = executor
        self.settings = settings or Settings()
        self.console = console or default_console
        self.prompter = prompter or Prompter(self.settings.assume_yes, console=self.console)
        self.is_root = is_root
        self.progress_callback = progress_callback
        self.last_run: Optional[InstallRun] = None

    def emit(self, message: str, completed: int, total: int) -> None:
        if self.progress_callback:
            self.progress_callback(message, completed, total)
            return
        self.console.print(f"[cyan][{completed}/{total}] {message}[/cyan]")

    def check_privileges(self, actions: Sequence[PackageAction]) -> Optional[PrivilegeMismatch]:
        """Reject the run before any command if the session cannot do it all."""
        is_root = current_is_root() if self.is_root is None else self.is_root
        offender = first_unsatisfiable(actions, is_root)
        if offender is None:
            return None
        self.console.print(
            f"[red]❌ {offender.name} must be installed as {offender.privilege.label}; "
            f"this session is {'root' if is_root else 'a regular user'}.[/red]"
        )
        if is_mixed(actions):
            self.console.print(
                "[yellow]The selection mixes root and user packages. "
                "Run the installer once with sudo and once as your user.[/yellow]"
            )
        return PrivilegeMismatch(offender, is_root)

    def run(self, selection: Sequence[PackageAction]) -> RunOutcome:
        actions = list(selection)
        mismatch = self.check_privileges(actions)
        if mismatch is not None:
            return mismatch

        run = InstallRun(actions)
        self.last_run = run
        self.console.print("\n[bold]Installing selected packages...[/bold]")

        with tempfile.TemporaryDirectory(prefix="devinstaller-") as workdir:
            ctx = InstallContext(run, self.executor, self.prompter, self.settings, Path(workdir), self.console)
            for action in actions:
                self.console.print(f"\n[bold magenta]=== Installing {action.name} ===[/bold magenta]")
                try:
                    self.perform(ctx, action)
                except InstallerError as exc:
                    run.fail(exc)
                    logger.error("%s failed: %s", action.name, exc)
                    return AbortedOnFailure(run.completed, action, exc.exit_code, exc.command)
                run.mark_completed()
                self.emit(f"{action.name} done", run.completed, run.total)

        return Completed(run.completed)

    def perform(self, ctx: InstallContext, action: PackageAction) -> None:
        recipe = action.recipe
        if recipe.probe is not None:
            ctx.check_message(action.target)
            if recipe.probe(ctx, *action.params):
                ctx.already_installed(action.target)
                if recipe.when_present is not None:
                    recipe.when_present(ctx, *action.params)
                return

        if not ctx.confirm(f"Install {action.name}?"):
            ctx.notice(f"Skipping {action.name}", style="dim")
            return

        if action.needs_index:
            ctx.refresh_index()
        recipe.install(ctx, *action.params)
