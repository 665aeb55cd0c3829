"""Custom exceptions and error handling utilities for WebReady."""

from __future__ import annotations

from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, TypeVar

from .logging_config import get_logger


class WebReadyError(Exception):
    """Base exception for all WebReady errors."""


class MissingInputError(WebReadyError):
    """Error raised when a request carries no usable image."""


class UploadLimitError(WebReadyError):
    """Error raised when a request exceeds the file size or count limits."""


class ConfigurationError(WebReadyError):
    """Error raised for invalid configuration options."""


class ImageProcessingError(WebReadyError):
    """Error raised when processing a single image fails."""


class UnreadableMetadataError(ImageProcessingError):
    """Error raised when an image's dimensions cannot be determined."""


class AllWidthsExceedOriginalError(ImageProcessingError):
    """Error raised when every requested width would upscale the image."""

    def __init__(self, original_width: int):
        self.original_width = original_width
        super().__init__(
            f"All requested widths exceed original width ({original_width}px)."
        )


class EncodingFailureError(ImageProcessingError):
    """Error raised when the codec fails to produce a derivative."""


class NoImagesProcessableError(WebReadyError):
    """Error raised when no image in a batch produced any output."""


F = TypeVar("F", bound=Callable[..., Any])


def with_error_handling(func: F) -> F:
    """Wrap a function with standardized error handling."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:  # type: ignore[override]
        logger = get_logger("webready.processor")
        try:
            return func(*args, **kwargs)
        except WebReadyError:
            logger.error("Pipeline error", exc_info=True)
            raise
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Unhandled error in {func.__name__}: {exc}", exc_info=True)
            raise ImageProcessingError(str(exc)) from exc

    return wrapper  # type: ignore[return-value]


@contextmanager
def batch_error_handler() -> Any:
    """Context manager to wrap batch operations with error handling."""
    try:
        yield
    except WebReadyError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise ImageProcessingError(str(exc)) from exc
