"""Interactive multi-select package menu."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO, Optional, Sequence, Set, Tuple

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from . import console as default_console
from . import logger
from .model import PackageAction, Privilege, SelectionResult
from .privilege import current_is_root, selection_is_satisfiable
from .terminal import Key, KeyPress, raw_mode, read_key

TITLE = "=== Development Packages Installer ==="
HINT = "↑/↓: Navigation | SPACE: Selection | ENTER: Confirm | a: All | q: Quit"

SELECT_ALL_KEYS = ('a', 'A')
QUIT_KEYS = ('q', 'Q')
UP_KEYS = (Key.UP, 'k', 'K')
DOWN_KEYS = (Key.DOWN, 'j', 'J')


@dataclass
class MenuState:
    """Cursor position and checked entries of an open menu."""

    actions: Tuple[PackageAction, ...]
    cursor: int = 0
    selected: Set[int] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.actions = tuple(self.actions)
        if not self.actions:
            raise ValueError("menu needs at least one entry")

    @property
    def count(self) -> int:
        return len(self.actions)

    def move_up(self) -> None:
        self.cursor = (self.cursor - 1 + self.count) % self.count

    def move_down(self) -> None:
        self.cursor = (self.cursor + 1) % self.count

    def toggle(self) -> None:
        if self.cursor in self.selected:
            self.selected.discard(self.cursor)
        else:
            self.selected.add(self.cursor)

    def select_all(self) -> None:
        self.selected = set(range(self.count))

    def is_selected(self, index: int) -> bool:
        return index in self.selected

    def selected_actions(self) -> Tuple[PackageAction, ...]:
        """Checked entries in registry order."""
        return tuple(action for index, action in enumerate(self.actions) if index in self.selected)


class SelectionMenu:
    """Full-screen checkbox list driven by single key presses."""

    def __init__(
        self,
        console: Optional[Console] = None,
        stream: Optional[IO[str]] = None,
        is_root: Optional[bool] = None,
    ):
        self.console = console or default_console
        self.stream = stream
        self.is_root = is_root
        self.renders = 0

    def open(self, actions: Sequence[PackageAction]) -> SelectionResult:
        if not actions:
            return SelectionResult.confirmed(())

        state = MenuState(tuple(actions))
        with raw_mode(self.stream) as stream:
            self.render(state)
            while True:
                key = read_key(stream)
                changed, result = self.handle_key(state, key)
                if result is not None:
                    return result
                if changed:
                    self.render(state)

    def handle_key(self, state: MenuState, key: KeyPress) -> Tuple[bool, Optional[SelectionResult]]:
        """Apply one key press.

        Returns ``(changed, result)``: ``changed`` when the screen needs a
        redraw, ``result`` once the interaction is over.
        """
        if key in UP_KEYS:
            state.move_up()
            return True, None
        if key in DOWN_KEYS:
            state.move_down()
            return True, None
        if key is Key.SPACE:
            state.toggle()
            return True, None
        if key in SELECT_ALL_KEYS:
            state.select_all()
            return True, self._confirm(state)
        if key is Key.ENTER:
            return False, self._confirm(state)
        if key in QUIT_KEYS or key is Key.EOF:
            return False, SelectionResult.cancelled()
        logger.debug("Ignoring key %r", key)
        return False, None

    def _confirm(self, state: MenuState) -> SelectionResult:
        chosen = state.selected_actions()
        is_root = current_is_root() if self.is_root is None else self.is_root
        return SelectionResult.confirmed(chosen, selection_is_satisfiable(chosen, is_root))

    def build_table(self, state: MenuState) -> Table:
        table = Table(box=box.SIMPLE, show_header=False, pad_edge=False)
        table.add_column("cursor", width=1)
        table.add_column("selected", width=3)
        table.add_column("name", style="cyan")
        table.add_column("tier", style="dim")

        for index, action in enumerate(state.actions):
            cursor = ">" if index == state.cursor else " "
            mark = Text("[✓]", style="green") if state.is_selected(index) else Text("[ ]")
            tier = "root" if action.privilege is Privilege.ROOT else "user"
            style = "reverse" if index == state.cursor else None
            table.add_row(cursor, mark, action.name, tier, style=style)
        return table

    def render(self, state: MenuState) -> None:
        self.console.clear()
        self.console.print(Text(TITLE, style="bold"))
        self.console.print(Text(HINT, style="dim"))
        self.console.print(self.build_table(state))
        self.renders += 1
