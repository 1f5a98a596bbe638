"""Image encode/decode helpers built on Pillow."""

from nanobanana.core.imaging.codec import (
    DEFAULT_JPEG_QUALITY,
    ImageDecodeError,
    ImagePixelLimitError,
    decode_image,
    encode_jpeg,
    guess_extension,
    is_decodable,
)

__all__ = [
    "DEFAULT_JPEG_QUALITY",
    "ImageDecodeError",
    "ImagePixelLimitError",
    "decode_image",
    "encode_jpeg",
    "guess_extension",
    "is_decodable",
]
