"""Fingerprinting utilities for cache keys.

Provides stable request hashing for deterministic cache keys.
"""

import hashlib

# Domain separators so that (prompt, no image) and (prompt, empty image)
# hash differently and prompt bytes can never bleed into image bytes.
_NO_IMAGE_MARKER = b"\x00none"
_IMAGE_MARKER = b"\x00image\x00"


def compute_fingerprint(prompt: str, input_image: bytes | None = None) -> str:
    """
    Compute a stable fingerprint for a generation request.

    Hashes the UTF-8 prompt bytes followed by the raw input image bytes
    (when present) with SHA-256.

    Args:
        prompt: Prompt text exactly as submitted
        input_image: Raw input image bytes, or None for text-only requests

    Returns:
        SHA256 hex digest (64 chars)

    Example:
        >>> compute_fingerprint("a banana in space")
        '5d0c...'
    """
    digest = hashlib.sha256()
    digest.update(prompt.encode("utf-8"))
    if input_image is None:
        digest.update(_NO_IMAGE_MARKER)
    else:
        digest.update(_IMAGE_MARKER)
        digest.update(input_image)
    return digest.hexdigest()
