"""Models for the image cache.

Provides cache key, entry, limits, and write-outcome models.
"""

from pydantic import BaseModel, ConfigDict, Field

from nanobanana.core.caching.fingerprint import compute_fingerprint

DEFAULT_MEMORY_COUNT_LIMIT = 50
DEFAULT_MEMORY_COST_LIMIT_BYTES = 100 * 1024 * 1024


class CacheKey(BaseModel):
    """
    Stable identifier for a cached generation.

    Derived from the prompt and, when present, the input image bytes.
    """

    model_config = ConfigDict(frozen=True)

    fingerprint: str = Field(
        min_length=64, max_length=64, description="SHA256 hex digest of the request material"
    )

    @classmethod
    def for_request(cls, prompt: str, input_image: bytes | None = None) -> "CacheKey":
        """Build the key for a (prompt, input image) pair."""
        return cls(fingerprint=compute_fingerprint(prompt, input_image))

    def __str__(self) -> str:
        return self.fingerprint[:12]


class CacheEntry(BaseModel):
    """A cached generated image."""

    model_config = ConfigDict(frozen=True)

    key: CacheKey
    image_bytes: bytes = Field(repr=False)
    stored_at: float = Field(description="Unix timestamp (seconds)")

    @property
    def cost(self) -> int:
        """Memory cost of the entry in bytes."""
        return len(self.image_bytes)


class CacheLimits(BaseModel):
    """Bounds for the in-memory tier."""

    model_config = ConfigDict(frozen=True)

    count_limit: int = Field(default=DEFAULT_MEMORY_COUNT_LIMIT, ge=0)
    cost_limit_bytes: int = Field(default=DEFAULT_MEMORY_COST_LIMIT_BYTES, ge=0)


class CacheWriteResult(BaseModel):
    """
    Outcome of a best-effort cache store.

    Stores never raise; a failed disk write is reported here and logged.
    """

    key: CacheKey
    memory_stored: bool = False
    disk_stored: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True when both tiers accepted the entry."""
        return self.memory_stored and self.disk_stored and self.error is None
