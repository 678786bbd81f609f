from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterator, BinaryIO, TYPE_CHECKING

from brailleview.base import (
    BRAILLE_COLS,
    BRAILLE_ROWS,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    RESIZE_STEP,
)
from brailleview.canvas import Canvas
from brailleview.image import dither_to_size
from brailleview.terminal import CLEAR_SCREEN, CURSOR_HOME, Key, parse_keys

if TYPE_CHECKING:
    from PIL.Image import Image


@dataclass(frozen=True)
class Viewport:
    """Requested size of the rendered image, in dots."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT

    def __post_init__(self) -> None:
        if self.width < BRAILLE_COLS or self.width % BRAILLE_COLS:
            raise ValueError(f"width must be a positive multiple of {BRAILLE_COLS}, got {self.width}")
        if self.height < BRAILLE_ROWS or self.height % BRAILLE_ROWS:
            raise ValueError(
                f"height must be a positive multiple of {BRAILLE_ROWS}, got {self.height}"
            )

    @classmethod
    def fitting(cls, width: int, height: int) -> Viewport:
        """Returns the smallest viewport of at least one cell covering width x height dots."""
        cols = max(-(-width // BRAILLE_COLS), 1)
        rows = max(-(-height // BRAILLE_ROWS), 1)
        return cls(cols * BRAILLE_COLS, rows * BRAILLE_ROWS)

    @property
    def cols(self) -> int:
        return self.width // BRAILLE_COLS

    @property
    def rows(self) -> int:
        return self.height // BRAILLE_ROWS

    def resized(self, key: Key) -> Viewport:
        """Returns the viewport after an arrow key press; shrinking stops at RESIZE_STEP."""
        if key == Key.UP:
            return Viewport(self.width, max(self.height - RESIZE_STEP, RESIZE_STEP))
        elif key == Key.DOWN:
            return Viewport(self.width, self.height + RESIZE_STEP)
        elif key == Key.LEFT:
            return Viewport(max(self.width - RESIZE_STEP, RESIZE_STEP), self.height)
        elif key == Key.RIGHT:
            return Viewport(self.width + RESIZE_STEP, self.height)
        return self


def render_frame(image: "Image", viewport: Viewport, invert: bool = False) -> bytes:
    """Render a full frame: clear the screen, draw the glyph rows, then a status line."""
    canvas = Canvas.from_image(dither_to_size(image, viewport.width, viewport.height))
    if invert:
        canvas.invert()

    frame = bytearray(CLEAR_SCREEN + CURSOR_HOME)
    for row_bytes in canvas.iter_row_bytes():
        frame += row_bytes
    status = f"({viewport.width}x{viewport.height})  arrows resize, esc quits\r\n"
    frame += status.encode()
    return bytes(frame)


async def _await_resize(viewport: Viewport, keys: AsyncIterator[bytes]) -> Viewport | None:
    """Wait for input that changes the viewport. Returns None on escape or end of input."""
    while True:
        chunk = await anext(keys, None)
        # A closed or hung up stdin keeps reading as empty
        if not chunk:
            return None

        new_viewport = viewport
        for key in parse_keys(chunk):
            if key == Key.ESCAPE:
                return None
            new_viewport = new_viewport.resized(key)

        # Keys that didn't change anything (e.g. Up at the minimum height) don't redraw
        if new_viewport != viewport:
            return new_viewport


async def run_viewer(
    image: "Image",
    viewport: Viewport,
    output: BinaryIO,
    keys: AsyncIterator[bytes],
    invert: bool = False,
) -> Viewport:
    """Draw the image, then redraw it on every resize until escape is pressed.

    Args:
        image: The grayscale source image, resized and dithered anew for each frame.
        viewport: The initial size of the rendered image, in dots.
        output: Binary stream to write frames to, usually the terminal's stdout.
        keys: Chunks of raw terminal input.
        invert: Whether to swap set and unset dots.

    Returns:
        The viewport at the time the viewer was closed.
    """
    while True:
        output.write(render_frame(image, viewport, invert=invert))
        output.flush()

        new_viewport = await _await_resize(viewport, keys)
        if new_viewport is None:
            return viewport
        viewport = new_viewport
