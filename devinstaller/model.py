"""Core data models for the installer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import InstallerError


class Privilege(Enum):
    """Session tier an action has to run under."""

    ROOT = "root"
    USER = "user"

    @property
    def label(self) -> str:
        return "root" if self is Privilege.ROOT else "a regular user"


class Handler(Enum):
    """Closed set of install routines the registry may point at."""

    APT_PACKAGE = "apt_package"
    GIT = "git"
    COMPOSER = "composer"
    PHP = "php"
    PHP_MODULES = "php_modules"
    PHPSTORM = "phpstorm"
    VIRTUALBOX = "virtualbox"
    VAGRANT = "vagrant"
    DOCKER = "docker"
    NVM = "nvm"
    PNPM = "pnpm"
    VSCODE = "vscode"


@dataclass(frozen=True)
class Recipe:
    """Install routine plus its optional presence probe.

    ``install``, ``probe`` and ``when_present`` receive the run context
    followed by the action parameters. ``probe`` returns True when the target
    already exists; ``when_present`` then runs instead of ``install``.
    """

    install: Callable[..., Any]
    probe: Optional[Callable[..., bool]] = None
    when_present: Optional[Callable[..., Any]] = None
    needs_index: bool = False
    target: Optional[str] = None


@dataclass(frozen=True)
class PackageAction:
    """One selectable entry of the registry."""

    key: int
    name: str
    privilege: Privilege
    handler: Handler
    recipe: Recipe
    params: Tuple[str, ...] = ()

    @property
    def needs_index(self) -> bool:
        return self.recipe.needs_index

    @property
    def target(self) -> str:
        if self.params:
            return self.params[0]
        return self.recipe.target or self.name


class SelectionStatus(Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of the selection menu.

    A confirmed result may be empty ("nothing to do"); that is never the
    same thing as a cancelled one.
    """

    status: SelectionStatus
    actions: Tuple[PackageAction, ...] = ()
    satisfiable: bool = True

    @classmethod
    def cancelled(cls) -> "SelectionResult":
        return cls(SelectionStatus.CANCELLED)

    @classmethod
    def confirmed(cls, actions, satisfiable: bool = True) -> "SelectionResult":
        return cls(SelectionStatus.CONFIRMED, tuple(actions), satisfiable)

    @property
    def is_cancelled(self) -> bool:
        return self.status is SelectionStatus.CANCELLED

    @property
    def is_empty(self) -> bool:
        return not self.actions


@dataclass
class InstallRun:
    """Mutable state of one pass over a confirmed selection."""

    actions: List[PackageAction]
    completed: int = 0
    index_refreshed: bool = False
    error: Optional[InstallerError] = None
    answers: Dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.actions)

    @property
    def failed(self) -> bool:
        return self.error is not None

    def mark_completed(self) -> None:
        if self.failed:
            raise RuntimeError("install run already failed; no further actions may complete")
        if self.completed >= self.total:
            raise RuntimeError("completed count cannot exceed the number of actions")
        self.completed += 1

    def fail(self, error: InstallerError) -> None:
        self.error = error


@dataclass(frozen=True)
class Completed:
    count: int

    @property
    def exit_code(self) -> int:
        return 0


@dataclass(frozen=True)
class AbortedOnFailure:
    count: int
    action: PackageAction
    exit_code: int
    command: str


@dataclass(frozen=True)
class PrivilegeMismatch:
    action: PackageAction
    current_is_root: bool

    @property
    def exit_code(self) -> int:
        return 1
