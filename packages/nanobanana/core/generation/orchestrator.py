"""Image generation orchestrator.

Coordinates validation, cache lookup, rate limiting, the provider call,
response parsing and cache population for single requests, and builds the
batch and iterative-edit workflows on top of single-request generation.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Protocol

import httpx

from nanobanana.core.api.gemini import GeminiImageClient
from nanobanana.core.caching import Cache, ImageCache, NullImageCache
from nanobanana.core.config.models import AppConfig, ValidationConfig
from nanobanana.core.errors import (
    GenerationCancelledError,
    GenerationError,
    InvalidRequestError,
    error_summary,
)
from nanobanana.core.generation.models import BatchProgress, CancellationToken
from nanobanana.core.generation.rate_limiter import RateLimiter
from nanobanana.core.generation.validation import validate_request
from nanobanana.core.utils.logging import log_performance

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[BatchProgress], None]
ResultCallback = Callable[[int, bytes], None]


class ImageClient(Protocol):
    """Provider client used for cache misses."""

    async def generate_content(self, prompt: str, encoded_image: bytes | None = None) -> bytes:
        ...

    async def aclose(self) -> None:
        ...


class ImageGenerator:
    """Public entry point for image generation.

    At most one provider call is in flight per generator; cache hits
    bypass both the in-flight lock and the rate limiter.

    Args:
        client: Provider client.
        cache: Image cache (ImageCache, or NullImageCache to disable).
        rate_limiter: Spacing for outbound calls.
        validation: Prompt and image limits.
    """

    def __init__(
        self,
        client: ImageClient,
        cache: Cache | None = None,
        rate_limiter: RateLimiter | None = None,
        validation: ValidationConfig | None = None,
    ) -> None:
        self._client = client
        self._cache: Cache = cache if cache is not None else NullImageCache()
        self._rate_limiter = rate_limiter or RateLimiter()
        self._validation = validation or ValidationConfig()
        self._in_flight = asyncio.Lock()

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ImageGenerator:
        """Build a generator with a Gemini client and configured cache.

        Raises:
            InvalidAPIKeyError: If no API key is configured.
        """
        client = GeminiImageClient.from_config(config.api, transport=transport)

        cache: Cache
        if config.cache.enabled:
            cache = ImageCache.at(config.cache.directory, config.cache.limits())
        else:
            cache = NullImageCache()

        return cls(
            client,
            cache=cache,
            rate_limiter=RateLimiter(config.rate_limit.min_interval_seconds),
            validation=config.validation,
        )

    @property
    def cache(self) -> Cache:
        return self._cache

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ImageGenerator:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @log_performance
    async def generate(self, prompt: str, input_image: bytes | None = None) -> bytes:
        """Generate (or fetch from cache) one image.

        Args:
            prompt: Prompt text (non-blank, length-limited).
            input_image: Optional raw image bytes to edit.

        Returns:
            Generated image bytes.

        Raises:
            GenerationError: Validation, provider, or parse failure.
        """
        # PIL re-encoding is CPU-bound
        request = await asyncio.to_thread(validate_request, prompt, input_image, self._validation)

        cached = await self._cache.lookup(request.prompt, request.input_image)
        if cached is not None:
            logger.info("Cache hit for prompt %r", _preview(prompt))
            return cached

        async with self._in_flight:
            # A queued duplicate may have been filled while waiting
            cached = await self._cache.lookup(request.prompt, request.input_image)
            if cached is not None:
                logger.info("Cache hit for prompt %r", _preview(prompt))
                return cached

            await self._rate_limiter.acquire()
            logger.info("Generating image for prompt %r", _preview(prompt))
            image_bytes = await self._client.generate_content(
                request.prompt, request.encoded_image
            )
            await self._cache.store(request.prompt, request.input_image, image_bytes)

        return image_bytes

    async def batch_generate(
        self,
        prompts: Sequence[str],
        input_images: Sequence[bytes | None] | None = None,
        *,
        on_progress: ProgressCallback | None = None,
        on_result: ResultCallback | None = None,
        cancel_token: CancellationToken | None = None,
        max_concurrency: int = 1,
    ) -> list[bytes]:
        """Generate one image per prompt, skipping failures.

        prompts[i] is paired with input_images[i] when present. Failed items
        are logged and omitted; the returned list keeps input order.

        Args:
            prompts: Prompts in order.
            input_images: Optional per-prompt input images.
            on_progress: Called after each item with updated counters.
            on_result: Called with (index, image) for each successful item.
            cancel_token: Checked before each item starts.
            max_concurrency: Items allowed to run at once. Provider calls
                stay serialized and rate-limited regardless.

        Raises:
            InvalidRequestError: prompts is empty.
            GenerationCancelledError: cancel_token was cancelled; carries
                the images completed so far.
        """
        if not prompts:
            raise InvalidRequestError("Batch has no prompts")
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")

        images = list(input_images or [])
        progress = BatchProgress(total=len(prompts))
        results: list[bytes | None] = [None] * len(prompts)
        semaphore = asyncio.Semaphore(max_concurrency)

        async def run_item(index: int) -> None:
            async with semaphore:
                if cancel_token is not None and cancel_token.cancelled:
                    return
                prompt = prompts[index]
                image = images[index] if index < len(images) else None
                try:
                    generated = await self.generate(prompt, image)
                    results[index] = generated
                    progress.succeeded += 1
                    if on_result is not None:
                        on_result(index, generated)
                except GenerationError as e:
                    progress.failed += 1
                    logger.warning(
                        "Batch item %d/%d failed, skipping: %s",
                        index + 1,
                        progress.total,
                        e,
                        extra=error_summary(e),
                    )
                progress.completed += 1
                if on_progress is not None:
                    on_progress(progress.model_copy())

        if max_concurrency == 1:
            for index in range(len(prompts)):
                if cancel_token is not None and cancel_token.cancelled:
                    break
                await run_item(index)
        else:
            await asyncio.gather(*(run_item(i) for i in range(len(prompts))))

        completed = [image for image in results if image is not None]
        cancelled = cancel_token is not None and cancel_token.cancelled
        if cancelled and progress.completed < progress.total:
            logger.info(
                "Batch cancelled after %d/%d items", progress.completed, progress.total
            )
            raise GenerationCancelledError(completed)

        logger.info(
            "Batch finished: %d succeeded, %d failed", progress.succeeded, progress.failed
        )
        return completed

    async def iterative_edit(
        self,
        initial_prompt: str,
        edit_prompts: Sequence[str],
        input_image: bytes | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> list[bytes]:
        """Run a chained edit: each step edits the previous step's output.

        Returns:
            One image per step (initial first).

        Raises:
            GenerationError: The first failing step's error; later steps
                are not attempted.
            GenerationCancelledError: cancel_token was cancelled between steps.
        """
        results: list[bytes] = []
        current_image = input_image

        for step, prompt in enumerate([initial_prompt, *edit_prompts]):
            if cancel_token is not None and cancel_token.cancelled:
                logger.info("Iterative edit cancelled before step %d", step)
                raise GenerationCancelledError(results)
            try:
                current_image = await self.generate(prompt, current_image)
            except GenerationError as e:
                logger.error(
                    "Iterative edit aborted at step %d: %s", step, e, extra=error_summary(e)
                )
                raise
            results.append(current_image)

        return results

    async def cache_lookup(self, prompt: str, input_image: bytes | None = None) -> bytes | None:
        return await self._cache.lookup(prompt, input_image)

    async def cache_size(self) -> int:
        return await self._cache.size()

    async def clear_cache(self) -> None:
        await self._cache.clear()
        logger.info("Image cache cleared")


def _preview(prompt: str, limit: int = 60) -> str:
    return prompt if len(prompt) <= limit else prompt[: limit - 3] + "..."
