"""Core utilities and shared components for WebReady."""

from .logging_config import (
    configure_multiprocessing_logging,
    get_logger,
    setup_logger,
)
from .exceptions import (
    WebReadyError,
    MissingInputError,
    UploadLimitError,
    ConfigurationError,
    ImageProcessingError,
    UnreadableMetadataError,
    AllWidthsExceedOriginalError,
    EncodingFailureError,
    NoImagesProcessableError,
    with_error_handling,
    batch_error_handler,
)
from .models import (
    ArchiveResult,
    BatchResult,
    DerivativeOutput,
    GenerationResult,
    ImageResult,
    ImageUpload,
    MarkupBundle,
    RawRequestParams,
    RequestConfig,
    ResolverDefaults,
    SourceImage,
)
from .config import ServiceSettings, resolve_config
from .markup import compose_markup
from .services import BatchOrchestrator, DerivativeGenerator, probe_source

__all__ = [
    "ArchiveResult",
    "BatchResult",
    "DerivativeOutput",
    "GenerationResult",
    "ImageResult",
    "ImageUpload",
    "MarkupBundle",
    "RawRequestParams",
    "RequestConfig",
    "ResolverDefaults",
    "SourceImage",
    "ServiceSettings",
    "resolve_config",
    "compose_markup",
    "BatchOrchestrator",
    "DerivativeGenerator",
    "probe_source",
    "setup_logger",
    "get_logger",
    "configure_multiprocessing_logging",
    "WebReadyError",
    "MissingInputError",
    "UploadLimitError",
    "ConfigurationError",
    "ImageProcessingError",
    "UnreadableMetadataError",
    "AllWidthsExceedOriginalError",
    "EncodingFailureError",
    "NoImagesProcessableError",
    "with_error_handling",
    "batch_error_handler",
]
