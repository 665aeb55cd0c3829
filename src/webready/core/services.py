"""Derivative generation and batch orchestration services."""

import time
from typing import List, Optional, Sequence, Set

from .config import derive_base_name
from .error_handling import BatchOperationContextManager
from .exceptions import (
    AllWidthsExceedOriginalError,
    EncodingFailureError,
    NoImagesProcessableError,
    UnreadableMetadataError,
)
from .markup import render_batch_document, render_image_block
from .models import (
    BatchResult,
    DerivativeOutput,
    GenerationResult,
    ImageUpload,
    RequestConfig,
    SourceImage,
)
from .observability import LogContext, MetricsCollector, PerformanceMetrics
from .protocols import CodecProtocol, LoggerProtocol, ProcessBatchFunction


def output_name(base_name: str, width: int, fmt: str) -> str:
    return f"{base_name}-{width}.{fmt}"


def feasible_widths(widths: Sequence[int], intrinsic_width: int) -> List[int]:
    """Requested widths that do not exceed the original, ascending."""
    return sorted(w for w in set(widths) if w <= intrinsic_width)


def probe_source(upload: ImageUpload, codec: CodecProtocol) -> SourceImage:
    """Probe an upload's dimensions and wrap it as a SourceImage."""
    try:
        dimensions = codec.probe(upload.data)
    except UnreadableMetadataError:
        raise
    except Exception as exc:
        raise UnreadableMetadataError(
            f"Could not read image metadata (unsupported/corrupt file?): {exc}"
        ) from exc

    if not dimensions.width or dimensions.width <= 0:
        raise UnreadableMetadataError("Could not determine image width from metadata.")

    return SourceImage(
        data=upload.data,
        intrinsic_width=dimensions.width,
        intrinsic_height=dimensions.height,
        original_name=upload.file_name,
    )


class DerivativeGenerator:
    """Produces every (width, format) derivative for one image."""

    def __init__(
        self,
        codec: CodecProtocol,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self._codec = codec
        self._logger = logger
        self._metrics_collector = metrics_collector

    def generate(
        self,
        image: SourceImage,
        config: RequestConfig,
        context: Optional[LogContext] = None,
    ) -> GenerationResult:
        """
        Encode `image` at each feasible width in each requested format.

        All-or-nothing: if any encode fails, no outputs are returned.

        Raises:
            AllWidthsExceedOriginalError: every requested width would upscale.
            EncodingFailureError: the codec failed for some (width, format).
        """
        context = (context or LogContext(component="derivative_generator"))
        context = context.with_operation("generate").with_metadata(
            base_name=config.base_name, original_width=image.intrinsic_width
        )

        widths = feasible_widths(config.widths, image.intrinsic_width)
        if not widths:
            self._log("warning", "No feasible widths", context)
            raise AllWidthsExceedOriginalError(image.intrinsic_width)

        start_time = time.time()
        outputs: List[DerivativeOutput] = []
        error_message = None

        try:
            for width in widths:
                for fmt in config.encode_formats():
                    data = self._codec.resize_encode(
                        image.data, width, fmt, config.quality_for(fmt)
                    )
                    outputs.append(
                        DerivativeOutput(
                            file_name=output_name(config.base_name, width, fmt),
                            format=fmt,
                            width=width,
                            data=data,
                        )
                    )
                    self._log("debug", f"Encoded {fmt} at {width}px", context)
        except Exception as exc:
            error_message = str(exc)
            if isinstance(exc, EncodingFailureError):
                raise
            raise EncodingFailureError(f"Image processing failed: {exc}") from exc
        finally:
            self._record(start_time, error_message, outputs, image)

        self._log("info", f"Generated {len(outputs)} derivative(s)", context)
        return GenerationResult(outputs=outputs, feasible_widths=widths)

    def _log(self, level: str, message: str, context: LogContext) -> None:
        if self._logger is not None:
            getattr(self._logger, level)(message, context)

    def _record(
        self,
        start_time: float,
        error_message: Optional[str],
        outputs: List[DerivativeOutput],
        image: SourceImage,
    ) -> None:
        if self._metrics_collector is None:
            return
        self._metrics_collector.record_metric(
            PerformanceMetrics(
                operation="generate",
                start_time=start_time,
                end_time=time.time(),
                success=error_message is None,
                error_message=error_message,
                metadata={
                    "image": image.original_name,
                    "outputs": len(outputs) if error_message is None else 0,
                    "output_bytes": sum(len(o.data) for o in outputs)
                    if error_message is None
                    else 0,
                },
            )
        )


def assign_base_names(uploads: Sequence[ImageUpload]) -> List[ImageUpload]:
    """
    Give every upload in a batch a distinct base name.

    Repeated stems get ``-2``, ``-3`` ... suffixes so archive entries
    never overwrite each other.
    """
    used: Set[str] = set()
    named: List[ImageUpload] = []
    for upload in uploads:
        base = upload.base_name or derive_base_name(None, upload.file_name)
        candidate, count = base, 1
        while candidate in used:
            count += 1
            candidate = f"{base}-{count}"
        used.add(candidate)
        named.append(upload.model_copy(update={"base_name": candidate}))
    return named


class BatchOrchestrator:
    """Runs the per-image pipeline over a batch and aggregates the results."""

    def __init__(
        self,
        codec: CodecProtocol,
        process_batch_fn: ProcessBatchFunction,
        logger: LoggerProtocol,
    ):
        self._codec = codec
        self._process_batch_fn = process_batch_fn
        self._logger = logger

    def run_batch(
        self, uploads: Sequence[ImageUpload], config: RequestConfig
    ) -> BatchResult:
        """
        Process every upload independently under one configuration.

        Images that fail are skipped with a reason; the batch succeeds as
        long as one image produced output.

        Raises:
            NoImagesProcessableError: no image produced any output.
        """
        named = assign_base_names(uploads)
        results = self._process_batch_fn(named, config, self._codec)

        batch = BatchResult()
        blocks: List[str] = []

        with BatchOperationContextManager(
            operation_name=f"Batch of {len(named)} image(s)", logger=self._logger
        ) as batch_manager:
            for result in results:
                if result.success and result.markup is not None:
                    batch.outputs.extend(result.outputs)
                    batch.markup.append((result.base_name, result.markup))
                    blocks.append(
                        render_image_block(
                            result.base_name,
                            result.markup,
                            result.feasible_widths,
                            config.formats,
                        )
                    )
                else:
                    reason = result.error or "Unknown error"
                    batch.skipped.append((result.source_name, reason))
                    batch_manager.add_error(reason, item_identifier=result.source_name)

        if not batch.markup:
            raise NoImagesProcessableError("No images could be processed.")

        batch.document = render_batch_document(
            blocks, batch.image_count, config, batch.skipped
        )
        self._logger.info(
            f"Batch produced {len(batch.outputs)} output(s) from "
            f"{batch.image_count} image(s); {len(batch.skipped)} skipped"
        )
        return batch
