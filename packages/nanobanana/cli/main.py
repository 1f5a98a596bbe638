"""Command-line interface for nanobanana."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
import sys

from rich.console import Console
from rich.markup import escape

from nanobanana.core.caching import ImageCache, ImageCacheSync
from nanobanana.core.config.loader import load_app_config
from nanobanana.core.config.models import AppConfig
from nanobanana.core.errors import GenerationError, user_message_for
from nanobanana.core.generation import BatchProgress, ImageGenerator
from nanobanana.core.imaging import guess_extension
from nanobanana.core.utils.logging import configure_logging

console = Console()
logger = logging.getLogger(__name__)


def _open_generator(config: AppConfig) -> ImageGenerator:
    return ImageGenerator.from_config(config)


def _read_image(path: str | None) -> bytes | None:
    if path is None:
        return None
    return Path(path).expanduser().read_bytes()


def _write_image(data: bytes, path: Path) -> Path:
    if not path.suffix:
        path = path.with_suffix(guess_extension(data))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def _write_series(images: list[bytes], out_dir: Path, stem: str) -> list[Path]:
    return [
        _write_image(data, out_dir / f"{stem}_{index:03d}") for index, data in enumerate(images, 1)
    ]


def _format_bytes(size: int) -> str:
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"


async def run_generate_async(args: argparse.Namespace, config: AppConfig) -> int:
    """Generate a single image.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    input_image = _read_image(args.image)

    async with _open_generator(config) as generator:
        try:
            image = await generator.generate(args.prompt, input_image)
        except GenerationError as e:
            logger.debug("Generation failed", exc_info=True)
            console.print(f"[red]ERROR: {escape(user_message_for(e))}[/red]")
            return 1

    path = _write_image(image, Path(args.out))
    console.print(f"[green]✅ Image saved:[/green] {path}")
    return 0


async def run_batch_async(args: argparse.Namespace, config: AppConfig) -> int:
    """Generate one image per prompt; failed prompts are skipped."""
    prompts: list[str] = list(args.prompt or [])
    if args.prompts_file:
        lines = Path(args.prompts_file).read_text(encoding="utf-8").splitlines()
        prompts.extend(line for line in lines if line.strip())

    input_images = [_read_image(p) for p in args.image or []]

    def on_progress(progress: BatchProgress) -> None:
        console.print(
            f"[{progress.completed}/{progress.total}] "
            f"succeeded={progress.succeeded} failed={progress.failed}"
        )

    async with _open_generator(config) as generator:
        try:
            images = await generator.batch_generate(
                prompts,
                input_images,
                on_progress=on_progress,
                max_concurrency=args.concurrency,
            )
        except GenerationError as e:
            console.print(f"[red]ERROR: {escape(user_message_for(e))}[/red]")
            return 1

    paths = _write_series(images, Path(args.out_dir), "batch")
    console.print(f"[green]✅ {len(paths)}/{len(prompts)} images saved to[/green] {args.out_dir}")
    return 0 if paths else 1


async def run_edit_async(args: argparse.Namespace, config: AppConfig) -> int:
    """Run an iterative edit chain; the first failing step aborts."""
    input_image = _read_image(args.image)

    async with _open_generator(config) as generator:
        try:
            images = await generator.iterative_edit(args.prompt, args.edit or [], input_image)
        except GenerationError as e:
            console.print(f"[red]ERROR: {escape(user_message_for(e))}[/red]")
            return 1

    paths = _write_series(images, Path(args.out_dir), "step")
    for path in paths:
        console.print(f"[green]✅ Step saved:[/green] {path}")
    return 0


def run_cache(args: argparse.Namespace, config: AppConfig) -> int:
    """Inspect or clear the image cache."""
    cache = ImageCacheSync(ImageCache.at(config.cache.directory, config.cache.limits()))

    if args.cache_cmd == "size":
        size = cache.size()
        console.print(f"Cache size: {_format_bytes(size)} ({size} bytes)")
    elif args.cache_cmd == "clear":
        cache.clear()
        console.print(f"[green]✅ Cache cleared:[/green] {config.cache.directory}")
    return 0


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="nanobanana",
        description="nanobanana - Gemini image generation and editing",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to app config (.json/.yaml, default: nanobanana.yaml if present)",
    )
    p.add_argument("--log-level", default=None, help="Override the configured log level")
    sub = p.add_subparsers(dest="cmd", required=True)

    gen = sub.add_parser("generate", help="Generate one image")
    gen.add_argument("--prompt", required=True, help="Prompt text")
    gen.add_argument("--image", help="Optional input image to edit")
    gen.add_argument(
        "--out",
        default="generated",
        help="Output path (extension added from image format when omitted)",
    )

    batch = sub.add_parser("batch", help="Generate one image per prompt")
    batch.add_argument("--prompt", action="append", help="Prompt text (repeatable)")
    batch.add_argument("--prompts-file", help="File with one prompt per line")
    batch.add_argument(
        "--image", action="append", help="Input image paired with the Nth prompt (repeatable)"
    )
    batch.add_argument("--out-dir", default="generated", help="Output directory")
    batch.add_argument("--concurrency", type=_positive_int, default=1, help="Items run at once")

    edit = sub.add_parser("edit", help="Iteratively edit an image")
    edit.add_argument("--prompt", required=True, help="Initial prompt")
    edit.add_argument("--edit", action="append", help="Edit instruction (repeatable)")
    edit.add_argument("--image", help="Optional starting image")
    edit.add_argument("--out-dir", default="generated", help="Output directory")

    cache = sub.add_parser("cache", help="Image cache maintenance")
    cache_sub = cache.add_subparsers(dest="cache_cmd", required=True)
    cache_sub.add_parser("size", help="Show on-disk cache size")
    cache_sub.add_parser("clear", help="Delete all cached images")

    return p


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    try:
        config = load_app_config(args.config)
    except (OSError, ValueError) as e:
        console.print(f"[red]ERROR: Could not load config: {escape(str(e))}[/red]")
        return 1

    configure_logging(
        level=args.log_level or config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )

    if args.cmd == "cache":
        return run_cache(args, config)

    handlers = {
        "generate": run_generate_async,
        "batch": run_batch_async,
        "edit": run_edit_async,
    }
    try:
        return asyncio.run(handlers[args.cmd](args, config))
    except GenerationError as e:
        # Raised while building the client, e.g. a missing API key
        console.print(f"[red]ERROR: {escape(user_message_for(e))}[/red]")
        return 1
    except OSError as e:
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
