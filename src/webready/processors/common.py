"""Common functions shared across all processor implementations."""

import time
from typing import Optional, Tuple

from ..core import (
    ImageResult,
    ImageUpload,
    RequestConfig,
    get_logger,
)
from ..core.config import default_sizes_attr, derive_base_name
from ..core.exceptions import ImageProcessingError
from ..core.markup import compose_markup
from ..core.observability import LogContext
from ..core.protocols import CodecProtocol
from ..core.services import DerivativeGenerator, probe_source


def _names(upload: ImageUpload) -> Tuple[str, str]:
    base_name = upload.base_name or derive_base_name(None, upload.file_name)
    return upload.file_name or base_name, base_name


def process_single_image(
    codec: CodecProtocol,
    upload: ImageUpload,
    config: RequestConfig,
    generator: Optional[DerivativeGenerator] = None,
) -> ImageResult:
    """Process one batch image: Probe → Generate → Compose markup.

    Per-image failures (unreadable metadata, no feasible width, codec
    failure) are returned as an unsuccessful result, never raised.
    """
    logger = get_logger("webready.processor")
    source_name, base_name = _names(upload)
    result = ImageResult(source_name=source_name, base_name=base_name)
    start_time = time.time()

    try:
        logger.debug(f"[{source_name}] Probing image metadata.")
        image = probe_source(upload, codec)

        image_config = config.model_copy(update={"base_name": base_name})
        generator = generator or DerivativeGenerator(codec)
        generated = generator.generate(
            image,
            image_config,
            LogContext(component="batch").with_metadata(source=source_name),
        )

        # Batch markup always derives sizes from this image's own widths.
        image_config = image_config.model_copy(
            update={"sizes_attr": default_sizes_attr(generated.feasible_widths)}
        )
        result.markup = compose_markup(
            generated.outputs, generated.feasible_widths, image_config
        )
        result.outputs = generated.outputs
        result.feasible_widths = generated.feasible_widths
        result.success = True
        logger.debug(
            f"[{source_name}] Produced {len(generated.outputs)} derivative(s)."
        )

    except ImageProcessingError as e:
        result.success = False
        result.error = str(e)
        result.error_type = type(e).__name__
        logger.error(f"[{source_name}] Skipped due to {type(e).__name__}: {e}")

    result.processing_time = time.time() - start_time
    return result


def failed_result(upload: ImageUpload, error: BaseException) -> ImageResult:
    """Result recorded when a worker raised instead of returning."""
    source_name, base_name = _names(upload)
    return ImageResult(
        source_name=source_name,
        base_name=base_name,
        success=False,
        error=str(error) or type(error).__name__,
        error_type=type(error).__name__,
    )


def log_configuration(config: RequestConfig, processor_name: str, image_count: int):
    """Log the resolved request configuration."""
    logger = get_logger("webready.processor")
    logger.info("=" * 80)
    logger.info(f"{processor_name.upper()} WEBREADY BATCH")
    logger.info("=" * 80)
    logger.info(f"  Images:        {image_count}")
    logger.info(f"  Widths:        {', '.join(str(w) for w in config.widths)}")
    logger.info(f"  Formats:       {', '.join(config.formats)}")
    logger.info(
        f"  Quality:       webp={config.quality_webp} avif={config.quality_avif}"
    )
    logger.info("=" * 80)
