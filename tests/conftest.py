"""Shared pytest fixtures for nanobanana tests."""

from __future__ import annotations

import base64
from collections.abc import Callable
from io import BytesIO
import json

from PIL import Image
import pytest


def _encode(color: tuple[int, ...], mode: str, fmt: str, size: tuple[int, int]) -> bytes:
    buf = BytesIO()
    Image.new(mode, size, color).save(buf, fmt)
    return buf.getvalue()


# ============================================================================
# Image Fixtures
# ============================================================================


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    """Factory for small solid-color PNG images."""

    def _make(color: tuple[int, int, int] = (255, 200, 0), size: tuple[int, int] = (8, 8)) -> bytes:
        return _encode(color, "RGB", "PNG", size)

    return _make


@pytest.fixture
def png_bytes(make_png: Callable[..., bytes]) -> bytes:
    """Provide an 8x8 yellow PNG."""
    return make_png()


@pytest.fixture
def rgba_png_bytes() -> bytes:
    """Provide an 8x8 semi-transparent RGBA PNG."""
    return _encode((10, 20, 30, 128), "RGBA", "PNG", (8, 8))


@pytest.fixture
def jpeg_bytes() -> bytes:
    """Provide an 8x8 JPEG."""
    return _encode((0, 128, 255), "RGB", "JPEG", (8, 8))


# ============================================================================
# Wire Fixtures
# ============================================================================


@pytest.fixture
def gemini_image_body() -> Callable[..., bytes]:
    """Factory for a 200 generateContent body carrying one inline image."""

    def _make(image: bytes, *, text: str | None = "Here is your image") -> bytes:
        parts: list[dict] = []
        if text is not None:
            parts.append({"text": text})
        parts.append(
            {"inlineData": {"mimeType": "image/png", "data": base64.b64encode(image).decode()}}
        )
        body = {"candidates": [{"content": {"parts": parts}, "finishReason": "STOP"}]}
        return json.dumps(body).encode()

    return _make


@pytest.fixture
def gemini_error_body() -> Callable[[str], bytes]:
    """Factory for a provider error envelope."""

    def _make(message: str) -> bytes:
        return json.dumps({"error": {"code": 0, "message": message, "status": "ERROR"}}).encode()

    return _make
