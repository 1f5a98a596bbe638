"""Caller-facing generation session.

Wraps an ImageGenerator with the state a front end needs: a
most-recent-first history of generated images, batch progress counters,
a busy flag, and the display message for the last failure. Session
methods report failures through ``last_error`` instead of raising.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID, uuid4

from nanobanana.core.errors import GenerationCancelledError, GenerationError, user_message_for
from nanobanana.core.generation.models import BatchProgress, CancellationToken, GeneratedImage
from nanobanana.core.generation.orchestrator import ImageGenerator
from nanobanana.core.utils.logging import get_logger

EDIT_LABEL_PREFIX = "Edit: "


class GenerationSession:
    """History and progress tracking around an ImageGenerator."""

    def __init__(self, generator: ImageGenerator, *, session_id: str | None = None) -> None:
        self.generator = generator
        self.session_id = session_id or str(uuid4())
        self.progress = BatchProgress()
        self.last_error: str | None = None
        self._history: list[GeneratedImage] = []
        self._busy = False
        self._cancel_token: CancellationToken | None = None
        self._log = get_logger(__name__, session_id=self.session_id)

        self._log.debug("Generation session started")

    @property
    def history(self) -> list[GeneratedImage]:
        """Generated images, most recent first."""
        return list(self._history)

    @property
    def is_busy(self) -> bool:
        return self._busy

    def get(self, image_id: UUID) -> GeneratedImage | None:
        return next((item for item in self._history if item.id == image_id), None)

    def delete(self, image_id: UUID) -> bool:
        """Remove an image from history. Returns False if it was not present."""
        for index, item in enumerate(self._history):
            if item.id == image_id:
                del self._history[index]
                return True
        return False

    def clear_history(self) -> None:
        self._history.clear()

    def cancel(self) -> None:
        """Cancel the running batch or edit chain before its next step."""
        if self._cancel_token is not None:
            self._cancel_token.cancel()

    async def generate(
        self, prompt: str, input_image: bytes | None = None
    ) -> GeneratedImage | None:
        """Generate one image and record it. Returns None on failure."""
        self._begin()
        try:
            image_bytes = await self.generator.generate(prompt, input_image)
        except GenerationError as e:
            self._fail(e)
            return None
        finally:
            self._busy = False

        return self._record(image_bytes, prompt, input_image)

    async def batch_generate(
        self,
        prompts: Sequence[str],
        input_images: Sequence[bytes | None] | None = None,
        *,
        max_concurrency: int = 1,
    ) -> list[GeneratedImage]:
        """Generate a batch, recording each success as it completes."""
        self._begin()
        self.progress = BatchProgress(total=len(prompts))
        self._cancel_token = CancellationToken()
        images = list(input_images or [])
        recorded: list[GeneratedImage] = []

        def on_result(index: int, image_bytes: bytes) -> None:
            source = images[index] if index < len(images) else None
            recorded.append(self._record(image_bytes, prompts[index], source))

        def on_progress(progress: BatchProgress) -> None:
            self.progress = progress

        try:
            await self.generator.batch_generate(
                prompts,
                images,
                on_progress=on_progress,
                on_result=on_result,
                cancel_token=self._cancel_token,
                max_concurrency=max_concurrency,
            )
        except GenerationError as e:
            self._fail(e)
        finally:
            self._busy = False
            self._cancel_token = None

        return recorded

    async def iterative_edit(
        self,
        initial_prompt: str,
        edit_prompts: Sequence[str],
        input_image: bytes | None = None,
    ) -> list[GeneratedImage]:
        """Run an edit chain and record every step.

        The first step is labelled with the initial prompt; later steps are
        labelled "Edit: <prompt>" and linked to the previous image.
        """
        self._begin()
        self._cancel_token = CancellationToken()
        try:
            results = await self.generator.iterative_edit(
                initial_prompt, edit_prompts, input_image, cancel_token=self._cancel_token
            )
        except GenerationCancelledError as e:
            self._fail(e)
            results = e.partial_results
        except GenerationError as e:
            self._fail(e)
            return []
        finally:
            self._busy = False
            self._cancel_token = None

        recorded: list[GeneratedImage] = []
        source = input_image
        for step, image_bytes in enumerate(results):
            label = initial_prompt if step == 0 else EDIT_LABEL_PREFIX + edit_prompts[step - 1]
            recorded.append(self._record(image_bytes, label, source))
            source = image_bytes
        return recorded

    def _begin(self) -> None:
        self._busy = True
        self.last_error = None

    def _fail(self, error: GenerationError) -> None:
        self.last_error = user_message_for(error)
        self._log.warning("Generation failed (%s): %s", error.kind.value, self.last_error)

    def _record(self, image_bytes: bytes, prompt: str, source: bytes | None) -> GeneratedImage:
        item = GeneratedImage(image_bytes=image_bytes, prompt=prompt, source_input_image=source)
        self._history.insert(0, item)
        return item
