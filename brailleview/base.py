from typing import Final

BRAILLE_COLS: Final[int] = 2
BRAILLE_ROWS: Final[int] = 4

BRAILLE_RANGE_START: Final[int] = 0x2800

MAX_IMAGE_WIDTH: Final[int] = 512
MAX_IMAGE_HEIGHT: Final[int] = 64

DEFAULT_WIDTH: Final[int] = 80 * BRAILLE_COLS
DEFAULT_HEIGHT: Final[int] = 48 * BRAILLE_ROWS

RESIZE_STEP: Final[int] = 4

# Dots 1-6 fill the left then right column top to bottom, dots 7 and 8 were
# added later underneath.
coords_dot_bit: Final[dict[tuple[int, int], int]] = {
    (0, 0): 0,  # ⠁
    (0, 1): 1,  # ⠂
    (0, 2): 2,  # ⠄
    (1, 0): 3,  # ⠈
    (1, 1): 4,  # ⠐
    (1, 2): 5,  # ⠠
    (0, 3): 6,  # ⡀
    (1, 3): 7,  # ⢀
}


class BrailleViewError(Exception):
    pass


def dot_bit(x: int, y: int) -> int:
    """Return the bit index of the dot at column x, row y of a braille cell.

    Raises:
        KeyError: if (x, y) is not inside the 2x4 cell.
    """
    return coords_dot_bit[(x, y)]


def dot_mask(x: int, y: int) -> int:
    return 1 << coords_dot_bit[(x, y)]
