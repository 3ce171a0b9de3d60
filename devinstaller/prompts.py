"""Line-mode questions asked while installing."""

from __future__ import annotations

from typing import Optional, Sequence

from rich.console import Console
from rich.prompt import Confirm, Prompt

from . import console as default_console


class Prompter:
    """Ask yes/no and free-text questions, or take the defaults unattended."""

    def __init__(self, assume_yes: bool = False, console: Optional[Console] = None):
        self.assume_yes = assume_yes
        self.console = console or default_console

    def confirm(self, question: str, default: bool = True) -> bool:
        if self.assume_yes:
            return default
        return Confirm.ask(question, default=default, console=self.console)

    def ask(self, question: str, default: str = "", choices: Optional[Sequence[str]] = None) -> str:
        if self.assume_yes:
            return default
        answer = Prompt.ask(
            question,
            default=default,
            choices=list(choices) if choices else None,
            show_default=bool(default),
            console=self.console,
        )
        return (answer or "").strip()
