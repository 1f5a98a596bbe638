"""Pillow-backed image codec.

Re-encodes caller images to JPEG for upload and checks that generated
payloads decode as images.
"""

from __future__ import annotations

import logging
from io import BytesIO

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY = 80


class ImageDecodeError(ValueError):
    """Raised when bytes cannot be decoded as an image."""


class ImagePixelLimitError(ImageDecodeError):
    """Raised when an image exceeds Pillow's decompression-bomb pixel limit."""


def decode_image(data: bytes) -> Image.Image:
    """Decode image bytes into a fully loaded PIL image.

    Args:
        data: Encoded image bytes (any format Pillow understands).

    Returns:
        Loaded PIL image.

    Raises:
        ImageDecodeError: If the bytes are empty, truncated, or not an image.
        ImagePixelLimitError: If the pixel count trips Pillow's decompression-bomb check.
    """
    if not data:
        raise ImageDecodeError("Image data is empty")
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except Image.DecompressionBombError as e:
        raise ImagePixelLimitError(f"Image has too many pixels: {e}") from e
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise ImageDecodeError(f"Cannot decode image: {e}") from e
    return img


def encode_jpeg(data: bytes, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """Re-encode arbitrary image bytes as JPEG.

    Alpha and palette images are flattened to RGB since JPEG carries
    neither.

    Args:
        data: Encoded source image bytes.
        quality: JPEG quality (1-95). 80 matches a 0.8 compression quality.

    Returns:
        JPEG bytes.

    Raises:
        ImageDecodeError: If the source bytes are not a decodable image.
    """
    img = decode_image(data)
    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    buf = BytesIO()
    img.save(buf, "JPEG", quality=quality)
    encoded = buf.getvalue()
    logger.debug("Re-encoded %s image %s to JPEG (%d bytes)", img.mode, img.size, len(encoded))
    return encoded


def is_decodable(data: bytes) -> bool:
    """Whether the bytes decode as an image."""
    try:
        decode_image(data)
    except ImageDecodeError:
        return False
    return True


def guess_extension(data: bytes, default: str = ".png") -> str:
    """File extension for image bytes based on the decoded format."""
    try:
        fmt = decode_image(data).format
    except ImageDecodeError:
        return default
    if not fmt:
        return default
    return ".jpg" if fmt == "JPEG" else f".{fmt.lower()}"
