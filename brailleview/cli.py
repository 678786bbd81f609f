import argparse
import asyncio
import sys
import textwrap
from contextlib import aclosing
from functools import partial
from pathlib import Path

from asynkets import async_getch

from brailleview.base import BrailleViewError
from brailleview.image import load_image, prepare_image
from brailleview.terminal import terminal_session
from brailleview.viewer import run_viewer, Viewport


async def _view(image, viewport: Viewport, output, invert: bool) -> Viewport:
    async with aclosing(async_getch()) as keys:
        return await run_viewer(
            image=image,
            viewport=viewport,
            output=output,
            keys=keys,
            invert=invert,
        )


def view_image() -> None:
    parser = argparse.ArgumentParser(
        prog="brailleview",
        description="Display an image as braille text, resizable with the arrow keys.",
        usage=textwrap.dedent(
            """
            Show an image as braille in the terminal's alternate screen.
            Arrow keys resize the image: up/down change the height, left/right the width.
            Press escape to quit.

              Examples:

                Display an image:
                $ brailleview input.png

                # Start at 120x160 dots (60x40 characters) with black and white swapped:
                $ brailleview input.png -s 120 160 -i
            """.strip()
        ),
        add_help=True,
    )
    parser.add_argument(
        "input",
        type=Path,
        help="The input image.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Output logs verbosely",
    )
    parser.add_argument(
        "-s",
        "--size",
        type=int,
        nargs=2,
        default=None,
        help="initial size of the output image in dots, rounded up to whole characters",
    )
    parser.add_argument(
        "-i",
        "--invert",
        action="store_true",
        default=False,
        help="Invert the image's black and white dots.",
    )

    args = parser.parse_args()
    log = partial(print, file=sys.stderr) if args.verbose else lambda message: None

    viewport = Viewport.fitting(*args.size) if args.size else Viewport()

    try:
        log(f"Loading image {args.input}")
        image = prepare_image(load_image(args.input))
        log(f"Prepared {image.width}x{image.height} grayscale image")

        with terminal_session(sys.stdin.fileno(), sys.stdout.buffer) as output:
            viewport = asyncio.run(_view(image, viewport, output, args.invert))
    except (BrailleViewError, OSError) as e:
        print(f"brailleview: {e}", file=sys.stderr)
        sys.exit(1)

    log(f"Closed at {viewport.width}x{viewport.height}")


if __name__ == "__main__":
    view_image()
