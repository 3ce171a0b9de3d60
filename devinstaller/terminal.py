"""Keyboard input helpers for the interactive menu."""

from __future__ import annotations

import contextlib
import io
import sys
from enum import Enum
from typing import IO, Iterator, Optional, Union

try:
    import termios
    import tty

    TERMIOS_AVAILABLE = True
except ImportError:
    termios = None  # type: ignore
    tty = None  # type: ignore
    TERMIOS_AVAILABLE = False

ESC = '\x1b'


class Key(Enum):
    UP = "up"
    DOWN = "down"
    ENTER = "enter"
    SPACE = "space"
    IGNORED = "ignored"
    EOF = "eof"


KeyPress = Union[Key, str]

_ARROWS = {
    '[A': Key.UP,
    '[B': Key.DOWN,
}


def _terminal_fd(stream: IO[str]) -> Optional[int]:
    if not TERMIOS_AVAILABLE:
        return None
    try:
        if not stream.isatty():
            return None
        return stream.fileno()
    except (AttributeError, ValueError, io.UnsupportedOperation):
        return None


@contextlib.contextmanager
def raw_mode(stream: Optional[IO[str]] = None) -> Iterator[IO[str]]:
    """Switch ``stream`` to unbuffered, unechoed input for the ``with`` body.

    The previous terminal attributes are restored on every exit path. Streams
    that are not terminals (pipes, test doubles) pass through untouched.
    """
    stream = stream if stream is not None else sys.stdin
    fd = _terminal_fd(stream)
    if fd is None:
        yield stream
        return

    old_settings = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd, termios.TCSADRAIN)
        yield stream
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def read_key(stream: IO[str]) -> KeyPress:
    """Read one key press from ``stream``.

    An escape introducer always consumes exactly two follow bytes; sequences
    other than up/down come back as :attr:`Key.IGNORED`. Any other byte is
    returned as the literal character.
    """
    ch = stream.read(1)
    if ch == '':
        return Key.EOF
    if ch == ESC:
        seq = stream.read(2)
        return _ARROWS.get(seq, Key.IGNORED)
    if ch in ('\r', '\n'):
        return Key.ENTER
    if ch == ' ':
        return Key.SPACE
    return ch
