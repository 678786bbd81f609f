from __future__ import annotations

from typing import Iterator, TYPE_CHECKING

from bitarray import bitarray

from brailleview.base import BRAILLE_COLS, BRAILLE_ROWS
from brailleview.pattern import Pattern

if TYPE_CHECKING:
    from PIL.Image import Image


class Canvas:
    """A monochrome grid of dots, rendered as one braille glyph per 2x4 block.

    Dots are stored row-major in a bitarray, with (0, 0) at the top left.
    """

    __slots__ = ("width_chars", "height_chars", "_canvas", "width", "height")

    def __init__(self, width_dots: int, height_dots: int) -> None:
        # Partial cells are padded out to whole ones
        self.width_chars = (width_dots + BRAILLE_COLS - 1) // BRAILLE_COLS
        self.height_chars = (height_dots + BRAILLE_ROWS - 1) // BRAILLE_ROWS

        self.width = self.width_chars * BRAILLE_COLS
        self.height = self.height_chars * BRAILLE_ROWS

        self._canvas = bitarray(self.width * self.height)
        self._canvas.setall(0)

    @classmethod
    def from_image(cls, image: "Image") -> Canvas:
        """Creates a canvas from an image, with a dot for every non-zero pixel.

        The image is converted to black and white first (without dithering, so an
        already dithered image is kept as is). Its size should be a multiple of the
        cell size; any remainder is left blank.
        """
        from PIL.Image import Dither

        bw = image.convert("1", dither=Dither.NONE).convert("L")
        canvas = cls(bw.width, bw.height)
        pixels = bw.tobytes()
        for y in range(bw.height):
            row = pixels[y * bw.width : (y + 1) * bw.width]
            start = y * canvas.width
            canvas._canvas[start : start + bw.width] = bitarray([px != 0 for px in row])
        return canvas

    def set_cell(self, x: int, y: int) -> Canvas:
        """Sets the cell at the given coordinates to be filled."""
        self._canvas[y * self.width + x] = 1
        return self

    def clear_cell(self, x: int, y: int) -> Canvas:
        """Sets the cell at the given coordinates to be empty."""
        self._canvas[y * self.width + x] = 0
        return self

    def invert(self) -> Canvas:
        """Inverts the entire canvas."""
        self._canvas.invert()
        return self

    def get_pattern(self, col: int, row: int) -> Pattern:
        """Returns the braille pattern for the 2x4 block at character position (col, row)."""
        left = col * BRAILLE_COLS
        top = row * BRAILLE_ROWS
        return Pattern.from_dots(
            (x, y)
            for y in range(BRAILLE_ROWS)
            for x in range(BRAILLE_COLS)
            if self._canvas[(top + y) * self.width + left + x]
        )

    def iter_row_bytes(self) -> Iterator[bytes]:
        """Yields each row of glyphs as UTF-8, terminated with CR LF for raw terminals."""
        glyphs_len = Pattern.UTF8_LEN * self.width_chars
        row_bytes = bytearray(glyphs_len + 2)
        row_bytes[glyphs_len:] = b"\r\n"
        view = memoryview(row_bytes)
        for row in range(self.height_chars):
            for col in range(self.width_chars):
                start = col * Pattern.UTF8_LEN
                self.get_pattern(col, row).encode_utf8(view[start : start + Pattern.UTF8_LEN])
            yield bytes(row_bytes)

    def get_str(self) -> str:
        return "\n".join(
            "".join(self.get_pattern(col, row).as_char() for col in range(self.width_chars))
            for row in range(self.height_chars)
        )

    def __str__(self) -> str:
        """Return the canvas as a string, joining chars and newlines to form rows."""
        return self.get_str()

    def __repr__(self) -> str:
        return f"Canvas({self.width}, {self.height})"
