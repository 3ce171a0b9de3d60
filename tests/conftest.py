import io
import shlex

import pytest
from rich.console import Console

from devinstaller.executor import CommandExecutor, CommandResult
from devinstaller.model import Handler, PackageAction, Privilege, Recipe
from devinstaller.prompts import Prompter


class FakeExecutor(CommandExecutor):
    """Records commands; fails the ones matching ``failures``."""

    def __init__(self, failures=None, present=()):
        super().__init__()
        self.commands = []
        self.failures = dict(failures or {})
        self.present = set(present)

    def run(self, command):
        self.commands.append(command)
        for needle, code in self.failures.items():
            if needle in command:
                return CommandResult(command, code, ['boom'])
        if command.startswith('dpkg -s'):
            package = shlex.split(command)[2]
            return CommandResult(command, 0 if package in self.present else 1, [])
        return CommandResult(command, 0, [])

    def mutating(self):
        return [cmd for cmd in self.commands if not cmd.startswith('dpkg -s')]


class ScriptedPrompter(Prompter):
    def __init__(self, confirms=None, answers=None):
        super().__init__(assume_yes=False)
        self.confirms = list(confirms or [])
        self.answers = list(answers or [])
        self.questions = []

    def confirm(self, question, default=True):
        self.questions.append(question)
        return self.confirms.pop(0) if self.confirms else default

    def ask(self, question, default="", choices=None):
        self.questions.append(question)
        return self.answers.pop(0) if self.answers else default


def quiet_console():
    return Console(file=io.StringIO(), width=100, force_terminal=False)


def make_action(key, name, privilege=Privilege.USER, install=None, probe=None, needs_index=False, params=()):
    if install is None:
        def install(ctx, *args):
            ctx.execute(f"install {name}")
    recipe = Recipe(install, probe=probe, needs_index=needs_index)
    return PackageAction(key, name, privilege, Handler.APT_PACKAGE, recipe, tuple(params))


@pytest.fixture
def fake_executor():
    return FakeExecutor()


@pytest.fixture
def console():
    return quiet_console()
