from __future__ import annotations

import termios
import tty
from contextlib import contextmanager, ExitStack
from enum import Enum
from typing import BinaryIO, Iterator

from brailleview.base import BrailleViewError

ESC = b"\x1b"
CTRL_C = b"\x03"

CLEAR_SCREEN = b"\x1b[2J"
CURSOR_HOME = b"\x1b[H"

ENTER_ALTERNATE_SCREEN = b"\x1b[?1049h"
LEAVE_ALTERNATE_SCREEN = b"\x1b[?1049l"
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"


class TerminalError(BrailleViewError):
    pass


class Key(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ESCAPE = "escape"


_ARROWS = {
    ord("A"): Key.UP,
    ord("B"): Key.DOWN,
    ord("C"): Key.RIGHT,
    ord("D"): Key.LEFT,
}


def parse_keys(chunk: bytes) -> list[Key]:
    """Decode a chunk of raw terminal input into the keys the viewer understands.

    Arrows come as `ESC [ X` (or `ESC O X` in application cursor mode). An ESC
    that doesn't start one of those, ending the chunk or followed by another ESC,
    is the escape key itself; followed by any other byte it's an Alt combination. Ctrl-C is reported as escape too, since raw mode stops it
    from raising SIGINT. Anything else, including other escape sequences such as
    function keys or modified arrows, is dropped.
    """
    keys = []
    i = 0
    while i < len(chunk):
        byte = chunk[i : i + 1]
        if byte == CTRL_C:
            keys.append(Key.ESCAPE)
            i += 1
        elif byte != ESC:
            i += 1
        elif chunk[i + 1 : i + 2] == b"O" and i + 2 < len(chunk):
            if (key := _ARROWS.get(chunk[i + 2])) is not None:
                keys.append(key)
            i += 3
        elif chunk[i + 1 : i + 2] == b"[":
            # CSI: parameter and intermediate bytes up to a final byte in 0x40-0x7E
            end = i + 2
            while end < len(chunk) and not 0x40 <= chunk[end] <= 0x7E:
                end += 1
            if end == i + 2 and end < len(chunk) and (key := _ARROWS.get(chunk[end])) is not None:
                keys.append(key)
            i = end + 1
        elif i + 1 == len(chunk) or chunk[i + 1 : i + 2] in (ESC, b"O"):
            keys.append(Key.ESCAPE)
            i += 1
        else:
            # Alt + key
            i += 2
    return keys


@contextmanager
def raw_mode(fd: int) -> Iterator[None]:
    """Put the terminal behind `fd` in raw mode, restoring its previous mode on exit.

    Raises:
        TerminalError: if `fd` isn't a terminal or its mode can't be changed.
    """
    try:
        old_settings = termios.tcgetattr(fd)
        tty.setraw(fd)
    except (termios.error, OSError) as e:
        raise TerminalError(f"failed to enter raw mode: {e}") from e
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


@contextmanager
def alternate_screen(stream: BinaryIO) -> Iterator[BinaryIO]:
    """Switch to the alternate screen buffer with the cursor hidden until exit."""
    stream.write(ENTER_ALTERNATE_SCREEN + HIDE_CURSOR)
    stream.flush()
    try:
        yield stream
    finally:
        stream.write(SHOW_CURSOR + LEAVE_ALTERNATE_SCREEN)
        stream.flush()


@contextmanager
def terminal_session(fd: int, stream: BinaryIO) -> Iterator[BinaryIO]:
    """Raw mode plus the alternate screen, unwound in reverse order on any exit."""
    with ExitStack() as stack:
        stack.enter_context(raw_mode(fd))
        yield stack.enter_context(alternate_screen(stream))
