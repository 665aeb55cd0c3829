#!/usr/bin/env python3
"""
WebReady image processor commands

Reads images → Generates resized WebP/AVIF derivatives + markup → Writes a ZIP
Batch mode supports multiple concurrency strategies: serial, multithread,
multiprocess, asyncio
"""

import argparse
import time
from pathlib import Path
from typing import List, Optional

from .core import (
    ImageUpload,
    MissingInputError,
    RawRequestParams,
    get_logger,
)
from .core.config import resolve_config
from .core.factories import PipelineFactory
from .core.logging_config import set_debug_logging
from .core.models import ArchiveResult
from .processors import PROCESSORS
from .processors.common import log_configuration


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Options shared by the single-image and batch commands."""
    parser.add_argument(
        "--widths", default=None, help='Target widths, e.g. "480,768,1200"'
    )
    parser.add_argument(
        "--formats", default=None, help='Output formats: "webp", "avif" or "webp,avif"'
    )
    parser.add_argument(
        "--quality-webp", default=None, help="WebP quality 1-100 (default: 82)"
    )
    parser.add_argument(
        "--quality-avif", default=None, help="AVIF quality 1-100 (default: 55)"
    )
    parser.add_argument(
        "--output", "-o", default=None, help="Archive path or directory (default: cwd)"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject malformed options instead of falling back to defaults",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")


def add_single_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("image", help="Image file to process")
    add_config_arguments(parser)
    parser.add_argument("--basename", default=None, help="Base name for output files")
    parser.add_argument("--sizes", default=None, help="Value for the sizes attribute")


def add_batch_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("images", nargs="+", help="Image files to process")
    add_config_arguments(parser)
    parser.add_argument(
        "--processor",
        type=str,
        default="serial",
        choices=list(PROCESSORS),
        help="Processing strategy to use (default: serial)",
    )


def params_from_args(args: argparse.Namespace) -> RawRequestParams:
    return RawRequestParams(
        widths=args.widths,
        formats=args.formats,
        quality_webp=args.quality_webp,
        quality_avif=args.quality_avif,
        basename=getattr(args, "basename", None),
        sizes=getattr(args, "sizes", None),
    )


def read_upload(path: str) -> ImageUpload:
    """Load an image file from disk as an upload."""
    file_path = Path(path)
    if not file_path.is_file():
        raise MissingInputError(f"Image file not found: {path}")
    return ImageUpload(file_name=file_path.name, data=file_path.read_bytes())


def write_archive(result: ArchiveResult, output: Optional[str]) -> Path:
    """Write the archive to `output` (a file or directory)."""
    target = Path(output) if output else Path.cwd()
    if target.is_dir():
        target = target / result.file_name
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(result.data)
    return target


def run_single(args: argparse.Namespace) -> Path:
    """Process one image file and write `<basename>-assets.zip`."""
    set_debug_logging(args.debug)
    logger = get_logger("webready.cli")

    service = PipelineFactory.create_service()
    upload = read_upload(args.image)
    result = service.process_single(upload, params_from_args(args), strict=args.strict)

    path = write_archive(result, args.output)
    logger.info(f"Wrote {len(result.entries)} entries to {path}")
    return path


def run_batch(args: argparse.Namespace) -> Path:
    """Process several image files and write `webready-batch.zip`."""
    set_debug_logging(args.debug)
    logger = get_logger("webready.cli")
    start_time = time.time()

    service = PipelineFactory.create_service(processor=args.processor)
    uploads: List[ImageUpload] = [read_upload(path) for path in args.images]
    params = params_from_args(args)

    processor_name, _ = PROCESSORS[args.processor]
    log_configuration(
        resolve_config(params, service.settings.resolver_defaults),
        processor_name,
        len(uploads),
    )

    result = service.process_batch(uploads, params, strict=args.strict)

    for name, reason in result.skipped:
        logger.warning(f"Skipped {name}: {reason}")

    path = write_archive(result, args.output)
    logger.info(
        f"Wrote {len(result.entries)} entries to {path} "
        f"in {time.time() - start_time:.1f}s"
    )
    return path
