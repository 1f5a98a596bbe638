"""Tests for ImageGenerator.

The provider client is an AsyncMock; the cache runs on FakeFileSystem.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from collections.abc import Callable
from unittest.mock import AsyncMock

import httpx
from PIL import Image
import pytest

from nanobanana.core.caching import ImageCache, NullImageCache
from nanobanana.core.config import AppConfig
from nanobanana.core.errors import (
    GenerationCancelledError,
    InvalidAPIKeyError,
    InvalidRequestError,
    NoImageGeneratedError,
    PromptTooLongError,
)
from nanobanana.core.generation import (
    BatchProgress,
    CancellationToken,
    ImageGenerator,
    RateLimiter,
)
from nanobanana.core.io import FakeFileSystem


@pytest.fixture
def image_for(make_png) -> Callable[[str], bytes]:
    """Deterministic, distinct PNG per prompt."""

    def _image(prompt: str) -> bytes:
        digest = hashlib.sha256(prompt.encode()).digest()
        return make_png((digest[0], digest[1], digest[2]))

    return _image


@pytest.fixture
def client(image_for) -> AsyncMock:
    """Provider client returning a PNG per prompt; 'b', 'step1' and 'fail*' raise."""
    mock = AsyncMock()

    def generate_content(prompt: str, encoded_image: bytes | None = None) -> bytes:
        if prompt.startswith("fail") or prompt == "b" or prompt == "step1":
            raise NoImageGeneratedError(f"simulated failure for {prompt!r}")
        return image_for(prompt)

    mock.generate_content.side_effect = generate_content
    return mock


@pytest.fixture
def cache() -> ImageCache:
    return ImageCache(FakeFileSystem(), "/cache")


@pytest.fixture
def generator(client: AsyncMock, cache: ImageCache) -> ImageGenerator:
    return ImageGenerator(client, cache=cache, rate_limiter=RateLimiter(0.0))


def _prompts(client: AsyncMock) -> list[str]:
    return [call.args[0] for call in client.generate_content.await_args_list]


class TestGenerate:
    async def test_returns_generated_bytes(self, generator, client, image_for):
        image = await generator.generate("a banana")

        assert image == image_for("a banana")
        client.generate_content.assert_awaited_once_with("a banana", None)

    async def test_second_identical_call_is_cache_hit(self, generator, client):
        """Test a repeated request issues zero additional network calls."""
        first = await generator.generate("a banana")
        second = await generator.generate("a banana")

        assert first == second
        assert client.generate_content.await_count == 1

    async def test_cache_hit_skips_rate_limiter(self, client, cache):
        limiter = RateLimiter(0.0)
        limiter.acquire = AsyncMock(wraps=limiter.acquire)
        generator = ImageGenerator(client, cache=cache, rate_limiter=limiter)

        await generator.generate("a banana")
        await generator.generate("a banana")

        assert limiter.acquire.await_count == 1

    async def test_result_stored_in_cache(self, generator, image_for):
        await generator.generate("a banana")

        assert await generator.cache_lookup("a banana") == image_for("a banana")

    async def test_input_image_sent_as_jpeg(self, generator, client, png_bytes):
        await generator.generate("make it blue", png_bytes)

        prompt, encoded = client.generate_content.await_args.args
        assert prompt == "make it blue"
        assert encoded[:2] == b"\xff\xd8"

    async def test_cache_keyed_on_raw_input_image(self, generator, png_bytes, image_for):
        await generator.generate("make it blue", png_bytes)

        assert await generator.cache_lookup("make it blue", png_bytes) == image_for("make it blue")
        assert await generator.cache_lookup("make it blue") is None

    async def test_validation_error_skips_network(self, generator, client):
        with pytest.raises(PromptTooLongError):
            await generator.generate("x" * 2001)
        with pytest.raises(InvalidRequestError):
            await generator.generate("   ")

        client.generate_content.assert_not_awaited()

    async def test_provider_error_propagates_and_is_not_cached(self, generator, client):
        with pytest.raises(NoImageGeneratedError):
            await generator.generate("fail please")

        assert await generator.cache_lookup("fail please") is None

    async def test_disk_failure_does_not_fail_generate(self, client, image_for):
        fs = FakeFileSystem()
        fs.fail_writes = True
        generator = ImageGenerator(
            client, cache=ImageCache(fs, "/cache"), rate_limiter=RateLimiter(0.0)
        )

        assert await generator.generate("a banana") == image_for("a banana")

    async def test_disk_failure_logged_once(self, client, caplog):
        fs = FakeFileSystem()
        fs.fail_writes = True
        generator = ImageGenerator(
            client, cache=ImageCache(fs, "/cache"), rate_limiter=RateLimiter(0.0)
        )

        with caplog.at_level(logging.WARNING):
            await generator.generate("a banana")

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1

    async def test_misses_are_rate_limited(self, client, cache):
        generator = ImageGenerator(client, cache=cache, rate_limiter=RateLimiter(0.05))

        loop = asyncio.get_running_loop()
        start = loop.time()
        for prompt in ("one", "two", "three"):
            await generator.generate(prompt)
        elapsed = loop.time() - start

        assert elapsed >= 2 * 0.05 - 0.005

    async def test_one_call_in_flight(self, cache, image_for):
        """Test concurrent misses never overlap at the provider."""
        state = {"active": 0, "peak": 0}

        async def slow_generate(prompt: str, encoded_image: bytes | None = None) -> bytes:
            state["active"] += 1
            state["peak"] = max(state["peak"], state["active"])
            await asyncio.sleep(0.01)
            state["active"] -= 1
            return image_for(prompt)

        client = AsyncMock()
        client.generate_content.side_effect = slow_generate
        generator = ImageGenerator(client, cache=cache, rate_limiter=RateLimiter(0.0))

        await asyncio.gather(*(generator.generate(f"p{i}") for i in range(5)))

        assert state["peak"] == 1

    async def test_queued_duplicates_share_one_call(self, cache, image_for):
        """Test identical concurrent misses reach the provider once."""

        async def slow_generate(prompt: str, encoded_image: bytes | None = None) -> bytes:
            await asyncio.sleep(0.01)
            return image_for(prompt)

        client = AsyncMock()
        client.generate_content.side_effect = slow_generate
        generator = ImageGenerator(client, cache=cache, rate_limiter=RateLimiter(0.0))

        images = await generator.batch_generate(["same"] * 3, max_concurrency=3)

        assert images == [image_for("same")] * 3
        assert client.generate_content.await_count == 1


class TestBatchGenerate:
    async def test_failing_item_skipped_order_kept(self, generator, image_for):
        images = await generator.batch_generate(["a", "b", "c"])

        assert images == [image_for("a"), image_for("c")]

    async def test_progress_reported_per_item(self, generator):
        updates: list[BatchProgress] = []

        await generator.batch_generate(["a", "b", "c"], on_progress=updates.append)

        assert [u.completed for u in updates] == [1, 2, 3]
        assert updates[-1].succeeded == 2
        assert updates[-1].failed == 1
        assert updates[-1].fraction == 1.0

    async def test_input_images_paired_by_index(self, generator, client, png_bytes):
        await generator.batch_generate(["x", "y"], [png_bytes])

        calls = client.generate_content.await_args_list
        assert calls[0].args[1] is not None
        assert calls[1].args[1] is None

    async def test_empty_batch_rejected(self, generator):
        with pytest.raises(InvalidRequestError):
            await generator.batch_generate([])

    async def test_on_result_receives_index(self, generator, image_for):
        seen: list[tuple[int, bytes]] = []

        await generator.batch_generate(
            ["a", "b", "c"], on_result=lambda i, img: seen.append((i, img))
        )

        assert seen == [(0, image_for("a")), (2, image_for("c"))]

    async def test_bounded_concurrency_keeps_order(self, generator, client, image_for):
        prompts = [f"p{i}" for i in range(6)] + ["fail-x"]

        images = await generator.batch_generate(prompts, max_concurrency=3)

        assert images == [image_for(f"p{i}") for i in range(6)]
        assert client.generate_content.await_count == 7

    async def test_oversized_input_image_skipped(
        self, generator, client, png_bytes, image_for, monkeypatch
    ):
        """Test an image over the decoder pixel limit fails only its own item."""
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 16)

        images = await generator.batch_generate(["a", "c", "d"], [None, png_bytes, None])

        assert images == [image_for("a"), image_for("d")]
        assert _prompts(client) == ["a", "d"]

    async def test_invalid_concurrency(self, generator):
        with pytest.raises(ValueError):
            await generator.batch_generate(["a"], max_concurrency=0)

    async def test_cancel_before_start(self, generator, client):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(GenerationCancelledError) as exc_info:
            await generator.batch_generate(["a", "c"], cancel_token=token)

        assert exc_info.value.partial_results == []
        client.generate_content.assert_not_awaited()

    async def test_cancel_mid_batch_returns_partial(self, generator, image_for):
        token = CancellationToken()

        def on_progress(progress: BatchProgress) -> None:
            if progress.completed == 1:
                token.cancel()

        with pytest.raises(GenerationCancelledError) as exc_info:
            await generator.batch_generate(
                ["a", "c", "d"], on_progress=on_progress, cancel_token=token
            )

        assert exc_info.value.partial_results == [image_for("a")]


class TestIterativeEdit:
    async def test_chains_previous_output(self, generator, client, image_for):
        images = await generator.iterative_edit("base", ["blue", "bigger"])

        assert images == [image_for("base"), image_for("blue"), image_for("bigger")]
        assert _prompts(client) == ["base", "blue", "bigger"]
        calls = client.generate_content.await_args_list
        assert calls[0].args[1] is None
        assert calls[1].args[1][:2] == b"\xff\xd8"

    async def test_chain_uses_previous_image_as_input(self, generator, image_for):
        await generator.iterative_edit("base", ["blue"])

        assert await generator.cache_lookup("blue", image_for("base")) == image_for("blue")

    async def test_starts_from_input_image(self, generator, client, png_bytes):
        await generator.iterative_edit("base", [], png_bytes)

        assert client.generate_content.await_args.args[1] is not None

    async def test_failure_aborts_chain(self, generator, client):
        with pytest.raises(NoImageGeneratedError):
            await generator.iterative_edit("base", ["step1", "step2"])

        assert _prompts(client) == ["base", "step1"]

    async def test_cancel_between_steps(self, generator, client, image_for):
        token = CancellationToken()
        original = client.generate_content.side_effect

        def cancel_after_first(prompt: str, encoded_image: bytes | None = None) -> bytes:
            token.cancel()
            return original(prompt, encoded_image)

        client.generate_content.side_effect = cancel_after_first

        with pytest.raises(GenerationCancelledError) as exc_info:
            await generator.iterative_edit("base", ["blue"], cancel_token=token)

        assert exc_info.value.partial_results == [image_for("base")]
        assert _prompts(client) == ["base"]


class TestCacheFacade:
    async def test_clear_cache(self, generator):
        await generator.generate("a")
        await generator.generate("c")
        assert await generator.cache_size() > 0

        await generator.clear_cache()

        assert await generator.cache_lookup("a") is None
        assert await generator.cache_size() == 0

    async def test_defaults_to_null_cache(self, client):
        generator = ImageGenerator(client, rate_limiter=RateLimiter(0.0))

        await generator.generate("a")
        await generator.generate("a")

        assert isinstance(generator.cache, NullImageCache)
        assert client.generate_content.await_count == 2


class TestFromConfig:
    async def test_wires_gemini_client(self, tmp_path, png_bytes, gemini_image_body):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, content=gemini_image_body(png_bytes))

        config = AppConfig.model_validate(
            {
                "api": {"api_key": "k"},
                "cache": {"directory": str(tmp_path / "images")},
                "rate_limit": {"min_interval_seconds": 0},
            }
        )
        async with ImageGenerator.from_config(
            config, transport=httpx.MockTransport(handler)
        ) as generator:
            assert await generator.generate("a banana") == png_bytes
            assert await generator.generate("a banana") == png_bytes

        assert len(requests) == 1
        assert requests[0].headers["x-goog-api-key"] == "k"

    def test_cache_disabled_uses_null_cache(self):
        config = AppConfig.model_validate({"api": {"api_key": "k"}, "cache": {"enabled": False}})

        generator = ImageGenerator.from_config(config)

        assert isinstance(generator.cache, NullImageCache)

    def test_missing_key_rejected(self):
        with pytest.raises(InvalidAPIKeyError):
            ImageGenerator.from_config(AppConfig())
