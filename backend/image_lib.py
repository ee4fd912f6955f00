""" Image processing backend. Currently implemented using Pillow (PIL) for image objects and codecs, and NumPy for pixel math. """



#                                           === Backend ===

import io
from typing import Any, Tuple, TypeAlias

import numpy as np
from numpy.typing import NDArray
from PIL import Image as _PIL
from PIL.Image import Image as PILImage

ImageObject: TypeAlias = PILImage


def close_image(image: object) -> None:
    close = getattr(image, "close", None)
    if callable(close):
        close()


def decode_image(data: bytes) -> ImageObject:
# Decodes encoded image bytes (PNG etc.) into a fully loaded RGBA image.
# Raises OSError for any malformed data; Pillow also signals corrupt chunks with SyntaxError and oversized headers with DecompressionBombError.
    try:
        with _PIL.open(io.BytesIO(data)) as image:
            image.load()
            return ensure_rgba(image) if image.mode != "RGBA" else image.copy()
    except OSError:
        raise
    except Exception as error:
        raise OSError(f"cannot decode image: {error}") from error


def encode_png(image: ImageObject) -> bytes:
# Serializes an image to PNG bytes.
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def ensure_rgba(image: ImageObject) -> ImageObject:
# Palette, grayscale and RGB inputs are converted so every pixel carries 4 channels.
    if image.mode == "RGBA":
        return image
    return image.convert("RGBA")


def from_array_u8(data: Any, mode: str) -> ImageObject:
# Creates an image from a uint8 numpy array (H x W x channels).
    image = _PIL.fromarray(np.ascontiguousarray(data, dtype=np.uint8))
    return image if image.mode == mode else image.convert(mode)


def to_array_u8(image: ImageObject) -> NDArray[np.uint8]:
# Returns a writable uint8 copy of the pixel data: H x W x channels.
    return np.array(image, dtype=np.uint8)


def get_size(image: ImageObject) -> Tuple[int, int]:
# Returns the image size as (width, height)
    return image.size


def is_empty(image: ImageObject) -> bool:
# Zero-area images are valid input; NumPy conversion is skipped for them.
    width, height = get_size(image)
    return width == 0 or height == 0


def new_image_rgba(size: Tuple[int, int], fill: Tuple[int, int, int, int] = (0, 0, 0, 0)) -> ImageObject:
    return _PIL.new("RGBA", size, fill)


def save_image(image: Any, path: str) -> None:
    image.save(path, format="PNG")
