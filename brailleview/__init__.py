from brailleview.base import (
    BRAILLE_COLS,
    BRAILLE_RANGE_START,
    BRAILLE_ROWS,
    BrailleViewError,
    coords_dot_bit,
    dot_bit,
    dot_mask,
)
from brailleview.pattern import Pattern
from brailleview.canvas import Canvas
