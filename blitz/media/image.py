"""Basic image upscale with Pillow (plain resampling, not AI enhancement)."""

import io
import logging

from PIL import Image

logger = logging.getLogger("blitz.media.image")

# Telegram rejects photos whose width + height exceed 10000 px
MAX_PHOTO_SIDE_SUM = 10000


def upscale(image_bytes: bytes, factor: int = 2, quality: int = 92) -> bytes:
    """Resize an image by ``factor`` using Lanczos resampling.

    Returns JPEG bytes. Raises ``PIL.UnidentifiedImageError`` for data
    that is not an image and ``ValueError`` when the result would be too
    big to send as a Telegram photo.
    """
    if factor < 1:
        raise ValueError("Upscale factor must be at least 1")

    with Image.open(io.BytesIO(image_bytes)) as img:
        width, height = img.size
        new_size = (width * factor, height * factor)
        if sum(new_size) > MAX_PHOTO_SIDE_SUM:
            raise ValueError(f"Image too large to upscale ({width}x{height})")

        resized = img.convert("RGB").resize(new_size, Image.Resampling.LANCZOS)

    out = io.BytesIO()
    resized.save(out, format="JPEG", quality=quality)
    logger.info(f"Upscaled image {width}x{height} -> {new_size[0]}x{new_size[1]}")
    return out.getvalue()
