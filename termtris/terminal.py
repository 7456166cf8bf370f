"""
Terminal input adapter: raw mode and keyboard decoding.

Bytes read from the terminal are decoded into Key values here and mapped to
engine Actions. The engine itself never sees raw bytes or escape sequences.

Key bindings:
  - w / Up arrow     : rotate clockwise
  - a / Left arrow   : move left
  - d / Right arrow  : move right
  - s / Down arrow   : hard drop
  - z / Ctrl-C       : quit
"""

from __future__ import annotations

import contextlib
import enum
import functools
import os
import select
import sys
import termios
import tty
from typing import Callable, Iterator, TextIO, Union

from termtris.game.tetris import Action


class Key(enum.Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    CTRL_C = "ctrl-c"


# A decoded keypress: a special Key, or the plain character that was typed.
KeyPress = Union[Key, str]

_LETTER_KEYS: dict[bytes, Key] = {
    b"w": Key.UP,
    b"a": Key.LEFT,
    b"s": Key.DOWN,
    b"d": Key.RIGHT,
    b"\x03": Key.CTRL_C,
}

_ARROW_SEQUENCES: dict[bytes, Key] = {
    b"[A": Key.UP,
    b"[B": Key.DOWN,
    b"[C": Key.RIGHT,
    b"[D": Key.LEFT,
}

KEY_MAP: dict[KeyPress, Action] = {
    Key.LEFT: Action.LEFT,
    Key.RIGHT: Action.RIGHT,
    Key.UP: Action.ROTATE_CW,
    Key.DOWN: Action.HARD_DROP,
    Key.CTRL_C: Action.QUIT,
    "z": Action.QUIT,
}

ESCAPE = b"\x1b"
CSI = b"["

# Seconds to wait for the rest of an escape sequence before treating Esc as a lone key.
ESCAPE_TIMEOUT = 0.05


def decode_key(
    read: Callable[[int], bytes],
    pending: Callable[[], bool] | None = None,
) -> KeyPress | None:
    """Read one keypress and decode it.

    Escape sequences are read one byte at a time. ``pending`` is asked before
    each follow-up byte; when it reports nothing waiting, the Esc is taken as
    a lone keypress instead of blocking for more input.

    Args:
        read: Callable returning up to ``n`` bytes from the terminal, such as
            ``functools.partial(os.read, fd)`` or ``BytesIO.read``.
        pending: Callable telling whether another byte is ready. None means
            the input is already buffered and can always be read.

    Returns:
        A Key for bindings and arrows, the typed character for any other
        printable input, or None for a lone Esc, an unrecognised escape
        sequence or a byte that isn't valid UTF-8.

    Raises:
        EOFError: If the input is exhausted.
    """
    byte = read(1)
    if not byte:
        raise EOFError("terminal input closed")

    if byte in _LETTER_KEYS:
        return _LETTER_KEYS[byte]

    if byte == ESCAPE:
        if pending is not None and not pending():
            return None
        if read(1) != CSI:
            return None
        if pending is not None and not pending():
            return None
        return _ARROW_SEQUENCES.get(CSI + read(1))

    try:
        return byte.decode("utf-8")
    except UnicodeDecodeError:
        return None


def key_to_action(key: KeyPress | None) -> Action | None:
    """Map a decoded key to an engine action, or None if it is unbound."""
    if key is None:
        return None
    return KEY_MAP.get(key)


def read_actions(fd: int) -> Iterator[Action]:
    """Yield actions for every bound key read from ``fd`` until EOF."""
    read = functools.partial(os.read, fd)

    def pending() -> bool:
        ready, _, _ = select.select([fd], [], [], ESCAPE_TIMEOUT)
        return bool(ready)

    while True:
        try:
            key = decode_key(read, pending)
        except EOFError:
            return
        action = key_to_action(key)
        if action is not None:
            yield action


@contextlib.contextmanager
def raw_mode(stream: TextIO = sys.stdin) -> Iterator[int]:
    """Put the terminal behind ``stream`` into raw mode for the block.

    The previous terminal attributes are restored on exit, whatever the
    reason for leaving the block.

    Yields:
        The file descriptor of ``stream``.

    Raises:
        RuntimeError: If ``stream`` is not a terminal.
    """
    if not stream.isatty():
        raise RuntimeError("termtris needs an interactive terminal on stdin")
    fd = stream.fileno()
    saved = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        yield fd
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
