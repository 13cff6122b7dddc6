"""
Dominant color extraction.

The package exposes the estimator used by the HTTP service:

    from_image_path(path) -> "rrggbb"
    from_base64_image(data) -> "rrggbb"
    from_image(pil_image_or_array) -> RGBA

The hex helpers return an empty string when the image cannot be decoded or has no
opaque pixels.
"""

from dominantcolor.services.colors.dominant import (
    NO_COLOR,
    RGBA,
    DominantColorConfig,
    Estimate,
    estimate,
    from_base64_image,
    from_image,
    from_image_path,
    new,
    new_default,
    rgba_to_hex,
)
from dominantcolor.services.imaging import ImageDecodeError

__version__ = "1.0.0"

__all__ = [
    "NO_COLOR",
    "RGBA",
    "DominantColorConfig",
    "Estimate",
    "ImageDecodeError",
    "estimate",
    "from_base64_image",
    "from_image",
    "from_image_path",
    "new",
    "new_default",
    "rgba_to_hex",
]
