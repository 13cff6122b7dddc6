"""
Dominant Color Imaging Utilities
Handles image decoding and the conversion of decoded images into the
16-bit RGBA pixel buffers the clustering engine consumes.
"""
import base64
import binascii
import io
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

# 8-bit channel value v maps to v * 257 in the 16-bit convention
CHANNEL_SCALE = 257


class ImageDecodeError(ValueError):
    """Raised when image bytes cannot be decoded into pixels."""


# 16-bit grayscale modes Pillow would clip to 8 bits on convert("RGBA")
WIDE_GRAY_MODES = ("I;16", "I;16L", "I;16B", "I;16N", "I")


def to_rgba16(image: Union[Image.Image, np.ndarray], max_size: Optional[int] = None) -> np.ndarray:
    """
    Convert a decoded image into an (H, W, 4) uint16 RGBA buffer.

    When max_size is given the source is shrunk with nearest-neighbor
    sampling before it is widened, so memory follows the sample size
    rather than the source resolution.

    Args:
        image: PIL image in any mode, an (H, W, 3|4) uint8 array, or an
            (H, W, 4) uint16 array already in 16-bit-per-channel form
        max_size: Optional maximum edge length of the result

    Returns:
        RGBA pixel buffer with channels in 0-65535

    Raises:
        ValueError: If the array shape or dtype is not supported
    """
    if isinstance(image, Image.Image):
        return _pil_to_rgba16(image, max_size)

    if not isinstance(image, np.ndarray):
        raise ValueError(f"Unsupported pixel source: {type(image).__name__}")

    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(f"Expected (H, W, 3) or (H, W, 4) pixels, got shape {image.shape}")

    if image.dtype == np.uint16:
        if image.shape[2] != 4:
            raise ValueError("16-bit pixel buffers must carry an alpha channel")
        return image if max_size is None else thumbnail_nearest(image, max_size)

    if image.dtype != np.uint8:
        raise ValueError(f"Unsupported pixel dtype: {image.dtype}")

    if max_size is not None:
        image = thumbnail_nearest(image, max_size)

    rgba = np.empty(image.shape[:2] + (4,), dtype=np.uint16)
    rgba[..., :3] = image[..., :3].astype(np.uint16) * CHANNEL_SCALE
    if image.shape[2] == 4:
        rgba[..., 3] = image[..., 3].astype(np.uint16) * CHANNEL_SCALE
    else:
        rgba[..., 3] = 255 * CHANNEL_SCALE
    return rgba


def _pil_to_rgba16(image: Image.Image, max_size: Optional[int]) -> np.ndarray:
    width, height = image.size
    if width == 0 or height == 0:
        return np.zeros((height, width, 4), dtype=np.uint16)

    if max_size is not None:
        size = thumbnail_size(width, height, max_size)
        if size != (width, height):
            image = image.resize(size, Image.Resampling.NEAREST)

    if image.mode in WIDE_GRAY_MODES:
        gray = np.clip(np.asarray(image), 0, 65535).astype(np.uint16)
        rgba = np.empty(gray.shape + (4,), dtype=np.uint16)
        rgba[..., :3] = gray[..., None]
        rgba[..., 3] = 65535
        return rgba

    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return to_rgba16(np.asarray(image, dtype=np.uint8))


def thumbnail_size(width: int, height: int, max_size: int) -> Tuple[int, int]:
    """
    Compute the aspect-preserving size that fits inside max_size x max_size.

    Returns the original size when it already fits.
    """
    if width <= max_size and height <= max_size:
        return width, height

    new_width, new_height = width, height
    if width > max_size:
        new_height = max(1, height * max_size // width)
        new_width = max_size
    if new_height > max_size:
        new_width = max(1, new_width * max_size // new_height)
        new_height = max_size
    return new_width, new_height


def thumbnail_nearest(pixels: np.ndarray, max_size: int) -> np.ndarray:
    """
    Shrink a pixel buffer with nearest-neighbor sampling so that neither
    dimension exceeds max_size.

    Args:
        pixels: (H, W, C) pixel buffer
        max_size: Maximum edge length of the result

    Returns:
        The input buffer itself if it already fits, otherwise a resampled copy
    """
    height, width = pixels.shape[:2]
    if width == 0 or height == 0:
        return pixels
    new_width, new_height = thumbnail_size(width, height, max_size)
    if (new_width, new_height) == (width, height):
        return pixels

    # Sample the source pixel under the center of each destination pixel
    ys = ((np.arange(new_height) + 0.5) * height / new_height).astype(np.int64)
    xs = ((np.arange(new_width) + 0.5) * width / new_width).astype(np.int64)
    ys = np.minimum(ys, height - 1)
    xs = np.minimum(xs, width - 1)
    return pixels[ys[:, None], xs[None, :]]


def decode_image_bytes(data: bytes) -> Image.Image:
    """
    Decode encoded image bytes with Pillow.

    Raises:
        ImageDecodeError: If the bytes are not a supported image
    """
    if not data:
        raise ImageDecodeError("Empty image data")
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, EOFError, ValueError) as e:
        raise ImageDecodeError(f"Failed to decode image: {e}") from e
    return image


def load_image(path: Union[str, Path]) -> Image.Image:
    """Open and decode an image file from disk."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise ImageDecodeError(f"Failed to read image file {path}: {e}") from e
    return decode_image_bytes(data)


def decode_base64_image(b64_data: str) -> Image.Image:
    """Decode base64 image data (optionally a data URL) to a PIL image."""
    # Remove data URL prefix if present
    if b64_data.startswith("data:") and "," in b64_data:
        b64_data = b64_data.split(",", 1)[1]

    try:
        img_bytes = base64.b64decode(b64_data)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 image data: {e}") from e

    return decode_image_bytes(img_bytes)

