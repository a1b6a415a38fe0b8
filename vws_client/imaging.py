"""JPEG encoding for callers that hold pixel data rather than encoded bytes."""

import io
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from .exceptions import InvalidImageError


def encode_jpeg(image: Union[Image.Image, str, Path], quality: int = 95) -> bytes:
    """
    Encode an image as JPEG bytes suitable for target upload.

    Args:
        image: Pillow image or path to an image file
        quality: JPEG quality (1-95)

    Returns:
        JPEG-encoded bytes

    Raises:
        InvalidImageError: If the file cannot be read as an image
    """
    if not isinstance(image, Image.Image):
        try:
            with Image.open(image) as opened:
                opened.load()
                image = opened.copy()
        except (OSError, UnidentifiedImageError) as e:
            raise InvalidImageError(f"Cannot read image {image}: {e}") from e

    # JPEG has no alpha channel or palette
    if image.mode not in ("RGB", "L"):
        image = image.convert("RGB")

    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()
