from pathlib import Path

from brailleview.base import BrailleViewError, MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH

try:
    from PIL.Image import DecompressionBombError, Dither, Image, open as image_open, Resampling
except ImportError:
    raise ImportError(
        "Image display requires the Pillow library. Please install it with 'pip install Pillow'."
    )

FILTER = Resampling.LANCZOS


class ImageLoadError(BrailleViewError):
    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"failed to load image {str(path)!r}: {reason}")
        self.path = path


def load_image(path: str | Path) -> Image:
    """Open and fully decode an image file.

    Pillow opens files lazily, so the pixel data is loaded here to surface decode
    errors at startup rather than on the first frame.

    Raises:
        ImageLoadError: if the file can't be read, isn't an image Pillow understands,
            or is over Pillow's decompression bomb limit.
    """
    try:
        image = image_open(path)
        image.load()
    except (OSError, DecompressionBombError) as e:
        raise ImageLoadError(path, str(e) or type(e).__name__) from e
    return image


def cap_size(
    image: Image,
    max_width: int = MAX_IMAGE_WIDTH,
    max_height: int = MAX_IMAGE_HEIGHT,
) -> Image:
    """Shrink an image so neither dimension exceeds its cap.

    Each dimension is clamped on its own, so the aspect ratio isn't kept; the
    viewer stretches the image to the viewport on every frame anyway.
    """
    if image.width <= max_width and image.height <= max_height:
        return image
    size = (min(image.width, max_width), min(image.height, max_height))
    return image.resize(size, resample=FILTER)


def prepare_image(image: Image) -> Image:
    """Convert a freshly loaded image to grayscale and cap its size."""
    # Palette images would be resized with nearest neighbour, so convert first
    return cap_size(image.convert("L"))


def dither_to_size(image: Image, width: int, height: int) -> Image:
    """Resize an image to exactly (width, height) and dither it to black and white."""
    # PIL.Image.resize() creates a new image, so the source is left alone
    resized = image.resize((width, height), resample=FILTER)
    return resized.convert("1", dither=Dither.FLOYDSTEINBERG)
