"""Image generation: validation, rate limiting, orchestration, sessions."""

from nanobanana.core.generation.models import (
    BatchProgress,
    CancellationToken,
    GeneratedImage,
    GenerationRequest,
)
from nanobanana.core.generation.orchestrator import ImageClient, ImageGenerator
from nanobanana.core.generation.rate_limiter import DEFAULT_MIN_INTERVAL_SECONDS, RateLimiter
from nanobanana.core.generation.session import GenerationSession
from nanobanana.core.generation.validation import (
    encode_input_image,
    validate_prompt,
    validate_request,
)

__all__ = [
    "BatchProgress",
    "CancellationToken",
    "DEFAULT_MIN_INTERVAL_SECONDS",
    "GeneratedImage",
    "GenerationRequest",
    "GenerationSession",
    "ImageClient",
    "ImageGenerator",
    "RateLimiter",
    "encode_input_image",
    "validate_prompt",
    "validate_request",
]
