"""Utility functions for HTTP client operations."""

from __future__ import annotations

from urllib.parse import urljoin


def join_url(base_url: str, path: str) -> str:
    """Join base URL with path in a predictable way.

    Ensures base URL ends with '/' and strips leading '/' from path.

    Args:
        base_url: Base URL (e.g. "https://api.example.com/v1beta")
        path: Request path (e.g. "/models/x:generateContent")

    Returns:
        Joined URL (e.g. "https://api.example.com/v1beta/models/x:generateContent")
    """
    base = base_url if base_url.endswith("/") else base_url + "/"
    return urljoin(base, path.lstrip("/"))


def safe_snippet(content: bytes, limit: int) -> str:
    """Extract safe text snippet from response content for logging.

    Truncates content and decodes as UTF-8 with replacement for invalid bytes.

    Args:
        content: Response body bytes
        limit: Maximum number of bytes to include

    Returns:
        Truncated, decoded text snippet
    """
    if not content:
        return ""
    return content[:limit].decode("utf-8", errors="replace")
