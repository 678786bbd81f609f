from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable, Tuple

from brailleview.base import BRAILLE_RANGE_START, dot_mask


@dataclass(frozen=True)
class Pattern:
    """A single braille glyph, stored as the offset of its codepoint from U+2800.

    Each of the 8 bits of the offset is one dot of the 2x4 cell (see
    `brailleview.base.coords_dot_bit`), so every value in 0..255 is a valid glyph.

    Examples:
        >>> str(Pattern.empty().with_dot(1, 0).with_dot(1, 1))
        '⠘'
    """

    offset: int = 0

    UTF8_LEN: ClassVar[int] = 3

    def __post_init__(self) -> None:
        if not isinstance(self.offset, int):
            raise TypeError(f"Pattern offset must be an int, got {self.offset!r}")
        if not 0 <= self.offset <= 0xFF:
            raise ValueError(f"Pattern offset must be in 0..255, got {self.offset}")

    @classmethod
    def empty(cls) -> Pattern:
        return cls(0)

    @classmethod
    def from_dots(cls, dots: Iterable[Tuple[int, int]]) -> Pattern:
        """Returns a pattern with the dots at the given (x, y) coordinates set."""
        pattern = cls.empty()
        for x, y in dots:
            pattern = pattern.with_dot(x, y)
        return pattern

    def with_dot(self, x: int, y: int, on: bool = True) -> Pattern:
        """Returns this pattern with the dot at (x, y) set if `on`, otherwise unchanged.

        Raises:
            KeyError: if (x, y) is outside the 2x4 cell.
        """
        mask = dot_mask(x, y)
        if not on:
            return self
        return Pattern(self.offset | mask)

    @property
    def codepoint(self) -> int:
        return BRAILLE_RANGE_START + self.offset

    def as_char(self) -> str:
        return chr(self.codepoint)

    def encode_utf8(self, buf: bytearray | memoryview) -> str:
        """Write the glyph's UTF-8 encoding into `buf` and return it as text.

        The whole braille block sits in the three-byte range of UTF-8, and the
        first byte is always 0xE2, so the offset only touches the low bits of the
        last two bytes.

        Args:
            buf: A writable buffer of exactly `Pattern.UTF8_LEN` bytes.

        Returns:
            The written glyph.

        Raises:
            ValueError: if the buffer isn't exactly 3 bytes long.
        """
        if len(buf) != self.UTF8_LEN:
            raise ValueError(f"Buffer must be {self.UTF8_LEN} bytes long, got {len(buf)}")

        buf[0] = 0xE0 | (self.codepoint >> 12)
        buf[1] = 0x80 | ((self.codepoint >> 6) & 0x3F)
        buf[2] = 0x80 | (self.codepoint & 0x3F)
        return self.as_char()

    def __str__(self) -> str:
        return self.as_char()
