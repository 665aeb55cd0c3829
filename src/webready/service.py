"""Single-image and batch request surfaces.

Both surfaces take already-parsed uploads plus raw form fields and hand
back a finished ZIP archive. Transport concerns (HTTP, multipart parsing,
rate limiting) live outside this package.
"""

from typing import List, Optional, Sequence

from .core.archive import archive_entries, build_archive
from .core.config import ServiceSettings, resolve_config
from .core.exceptions import (
    MissingInputError,
    UploadLimitError,
    batch_error_handler,
)
from .core.markup import compose_markup, render_snippet_document
from .core.models import ArchiveResult, ImageUpload, RawRequestParams
from .core.observability import (
    LogContext,
    MetricsCollector,
    new_correlation_id,
    timed_operation,
)
from .core.protocols import CodecProtocol, LoggerProtocol, ProcessBatchFunction
from .core.services import BatchOrchestrator, DerivativeGenerator, probe_source
from .processors import get_processor

SNIPPET_DOCUMENT = "snippet.html"
BATCH_DOCUMENT = "snippets.html"
BATCH_ARCHIVE = "webready-batch.zip"


class WebReadyService:
    """Entry point for single-image and batch derivative requests."""

    def __init__(
        self,
        codec: CodecProtocol,
        logger: LoggerProtocol,
        settings: Optional[ServiceSettings] = None,
        process_batch_fn: Optional[ProcessBatchFunction] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self._codec = codec
        self._logger = logger
        self._settings = settings or ServiceSettings()
        self._metrics_collector = metrics_collector

        if process_batch_fn is None:
            _, process_batch_fn = get_processor(self._settings.processor)

        self._generator = DerivativeGenerator(codec, logger, metrics_collector)
        self._orchestrator = BatchOrchestrator(codec, process_batch_fn, logger)
        self._build_archive = timed_operation("build_archive", metrics_collector)(
            build_archive
        )

    @property
    def settings(self) -> ServiceSettings:
        return self._settings

    def _check_size(self, upload: ImageUpload) -> None:
        limit = self._settings.max_file_size
        if len(upload.data) > limit:
            raise UploadLimitError(
                f"File too large: {upload.file_name or 'image'} exceeds "
                f"{limit // (1024 * 1024)}MB."
            )

    def process_single(
        self,
        upload: Optional[ImageUpload],
        params: Optional[RawRequestParams] = None,
        strict: bool = False,
    ) -> ArchiveResult:
        """
        Generate derivatives for one image and package them.

        Any per-image failure aborts the request.

        Raises:
            MissingInputError: no image (or an empty one) was supplied.
            UploadLimitError: the image exceeds the size limit.
            ConfigurationError: strict mode rejected a parameter.
            UnreadableMetadataError, AllWidthsExceedOriginalError,
            EncodingFailureError: the image could not be processed.
        """
        if upload is None or not upload.data:
            raise MissingInputError('Missing file: an image is required.')
        self._check_size(upload)

        context = LogContext(
            correlation_id=new_correlation_id("single"),
            component="webready_service",
        ).with_metadata(file=upload.file_name or "<unnamed>")

        config = resolve_config(
            params, self._settings.resolver_defaults, upload.file_name, strict
        )
        self._logger.info("Processing single image", context.with_operation("resolve"))

        image = probe_source(upload, self._codec)
        generated = self._generator.generate(image, config, context)
        bundle = compose_markup(generated.outputs, generated.feasible_widths, config)
        document = render_snippet_document(bundle, generated.feasible_widths, config)

        entries = archive_entries(generated.outputs, SNIPPET_DOCUMENT, document)
        data = self._build_archive(entries)
        self._logger.info(
            f"Archive ready with {len(entries)} entries",
            context.with_operation("archive"),
        )

        return ArchiveResult(
            file_name=f"{config.base_name}-assets.zip",
            data=data,
            entries=[name for name, _ in entries],
        )

    def process_batch(
        self,
        uploads: Optional[Sequence[ImageUpload]],
        params: Optional[RawRequestParams] = None,
        strict: bool = False,
    ) -> ArchiveResult:
        """
        Generate derivatives for several images under one configuration.

        ``basename`` and ``sizes`` are ignored: every image is named after
        its own file and gets a ``sizes`` value derived from its own widths.

        Raises:
            MissingInputError: no files were supplied.
            UploadLimitError: too many files, or one file is too large.
            NoImagesProcessableError: every image was skipped.
        """
        uploads: List[ImageUpload] = list(uploads or [])
        if not uploads:
            raise MissingInputError("No files provided.")
        if len(uploads) > self._settings.max_files:
            raise UploadLimitError(
                f"Too many files. Maximum is {self._settings.max_files} files per batch."
            )
        for upload in uploads:
            self._check_size(upload)

        params = (params or RawRequestParams()).model_copy(
            update={"basename": None, "sizes": None}
        )
        config = resolve_config(params, self._settings.resolver_defaults, None, strict)

        with batch_error_handler():
            batch = self._orchestrator.run_batch(uploads, config)

        entries = archive_entries(batch.outputs, BATCH_DOCUMENT, batch.document)
        data = self._build_archive(entries)

        return ArchiveResult(
            file_name=BATCH_ARCHIVE,
            data=data,
            entries=[name for name, _ in entries],
            skipped=batch.skipped,
        )
